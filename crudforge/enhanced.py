"""
Crudforge Enhanced - Form-oriented resource generator

Builds a resource folder around a defineResource() config: paginated
server actions, create/update schemas, list columns with badges, optional
bulk actions, and a Prisma model snippet to paste into schema.prisma.
"""

from __future__ import annotations

import json
import logging

from crudforge.config import Settings
from crudforge.generator import GeneratedFile, GenerationResult, write_files
from crudforge.naming import quote
from crudforge.render import render_template
from crudforge.spec import EnhancedResource, FormFieldDefinition, FormFieldKind

logger = logging.getLogger(__name__)

ENHANCED_FILES = {
    "schema.ts": "enhanced/schema.ts.j2",
    "actions.ts": "enhanced/actions.ts.j2",
    "index.ts": "enhanced/index.ts.j2",
    "prisma-model.txt": "enhanced/prisma-model.txt.j2",
}

TEXT_KINDS = (
    FormFieldKind.TEXT,
    FormFieldKind.EMAIL,
    FormFieldKind.PASSWORD,
    FormFieldKind.TEXTAREA,
    FormFieldKind.SELECT,
)


# ═══════════════════════════════════════════════════════════════════════════
# FIELD CONVERSIONS
# ═══════════════════════════════════════════════════════════════════════════


def form_field_to_zod(field: FormFieldDefinition) -> str:
    """Convert a form field to its Zod validator"""
    base_map = {
        FormFieldKind.EMAIL: "z.string().email()",
        FormFieldKind.NUMBER: "z.coerce.number()",
        FormFieldKind.DATE: "z.coerce.date()",
        FormFieldKind.TOGGLE: "z.boolean()",
        FormFieldKind.CHECKBOX: "z.boolean()",
        FormFieldKind.FILE_UPLOAD: "z.array(z.string())",
        FormFieldKind.RICH_EDITOR: "z.string().min(1)",
        FormFieldKind.REPEATER: "z.array(z.any())",
    }
    schema = base_map.get(field.type, "z.string()")

    if field.is_boolean:
        return schema
    if not field.required:
        return schema + ".optional()"
    if field.type in TEXT_KINDS:
        schema += f".min(1, {quote(f'{field.label} is required')})"
    return schema


def form_field_to_prisma(field: FormFieldDefinition) -> str:
    """Convert a form field to a Prisma model line"""
    if field.is_boolean:
        return f"{field.name} Boolean @default(false)"
    if field.type == FormFieldKind.FILE_UPLOAD:
        return f"{field.name} String[]"

    type_map = {
        FormFieldKind.NUMBER: "Int",
        FormFieldKind.DATE: "DateTime",
        FormFieldKind.REPEATER: "Json",
    }
    optional = "" if field.required else "?"
    return f"{field.name} {type_map.get(field.type, 'String')}{optional}"


def form_field_value(field: FormFieldDefinition) -> str:
    """Expression reading a field out of submitted FormData"""
    get = f"data.get({quote(field.name)})"
    if field.is_boolean:
        return f"{get} === 'true'"
    if field.type == FormFieldKind.FILE_UPLOAD:
        return f"data.getAll({quote(field.name)}) as string[]"
    if field.type == FormFieldKind.REPEATER:
        return f"JSON.parse(({get} as string) || '[]')"
    if field.type in (FormFieldKind.NUMBER, FormFieldKind.DATE):
        return f"{get} || undefined"
    return f"{get} as string"


def form_field_config(field: FormFieldDefinition) -> str:
    """Form field entry for the defineResource() form section"""
    config: dict = {
        "name": field.name,
        "type": field.type.value,
        "label": field.label,
        "required": field.required,
    }
    if field.placeholder:
        config["placeholder"] = field.placeholder
    if field.helper_text:
        config["helperText"] = field.helper_text
    if field.type == FormFieldKind.SELECT:
        config["options"] = [{"label": opt, "value": opt} for opt in field.options or []]
    return json.dumps(config, indent=2)


# ═══════════════════════════════════════════════════════════════════════════
# ENHANCED GENERATOR
# ═══════════════════════════════════════════════════════════════════════════


def render_enhanced(resource: EnhancedResource, settings: Settings | None = None) -> list[GeneratedFile]:
    """Render the enhanced resource files in memory."""
    settings = settings or Settings()
    route = resource.plural_lower
    context = {
        "name": resource.name,
        "lower": resource.lower,
        "route": route,
        "plural_name": resource.plural_name,
        "fields": resource.fields,
        "bulk": resource.enable_bulk_actions,
        "roles": settings.roles,
        "zod": form_field_to_zod,
        "prisma": form_field_to_prisma,
        "form_value": form_field_value,
        "form_field": form_field_config,
    }
    return [
        GeneratedFile(
            path=f"{settings.resources_dir}/{route}/{filename}",
            content=render_template(template, context),
            kind=template,
        )
        for filename, template in ENHANCED_FILES.items()
    ]


def create_enhanced_resource(resource: EnhancedResource, settings: Settings) -> GenerationResult:
    """Write the enhanced resource, never clobbering existing files."""
    result = GenerationResult()
    for field in resource.fields:
        if field.type == FormFieldKind.SELECT and not field.options:
            logger.warning("Select field %s has no options", field.name)
    write_files(settings.root, render_enhanced(resource, settings), result)
    return result
