"""
Crudforge - CRUD dashboard code generators

Emits schema, actions, form, table, wiring and page files for a Next.js +
Prisma dashboard from a model descriptor, and verifies them afterwards.
"""

__version__ = "0.1.0"

from crudforge.spec import FieldDescriptor, FieldType, ResourceDescriptor, EnhancedResource
from crudforge.generator import generate_resource, ResourceGenerator
from crudforge.verify import verify_resource

__all__ = [
    "FieldDescriptor",
    "FieldType",
    "ResourceDescriptor",
    "EnhancedResource",
    "generate_resource",
    "ResourceGenerator",
    "verify_resource",
]
