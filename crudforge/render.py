"""
Crudforge Render - Template-based emission of resource source files

Each template kind is a pure function of a resource name and its fields:
the same descriptor always renders byte-identical text.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from crudforge.naming import camel_case, plural, quote, title_case
from crudforge.spec import (
    FieldDescriptor,
    FieldType,
    ResourceDescriptor,
    field_to_prisma,
    field_to_typescript,
    field_to_zod,
)

TEMPLATES_DIR = Path(__file__).parent / "templates"
DEFAULT_ROLES = ("ADMIN", "EDITOR", "VIEWER")


# ═══════════════════════════════════════════════════════════════════════════
# FIELD HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def renders_text_input(field: FieldDescriptor) -> bool:
    """True when the form renders this field as a controlled <Input>."""
    return field.type not in (FieldType.BOOLEAN, FieldType.DATETIME)


def form_default(field: FieldDescriptor) -> str:
    """Initial value used in the form's defaultValues block."""
    if field.type == FieldType.BOOLEAN:
        return field.default_value or "false"
    if field.type in (FieldType.INT, FieldType.FLOAT):
        return field.default_value if field.has_default and field.default_value else "0"
    if field.type == FieldType.DATETIME:
        return "new Date()"
    if field.has_default and field.default_value and field.type == FieldType.STRING:
        return quote(field.default_value)
    return "''"


def search_key(fields: list[FieldDescriptor]) -> str:
    for field in fields:
        if field.type == FieldType.STRING and not field.is_relation:
            return field.name
    return "id"


# ═══════════════════════════════════════════════════════════════════════════
# JINJA ENVIRONMENT SETUP
# ═══════════════════════════════════════════════════════════════════════════


def create_jinja_env(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    """Create Jinja2 environment with custom filters and globals."""

    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )

    # String transformation filters
    env.filters["camel_case"] = camel_case
    env.filters["title_case"] = title_case

    # Type conversion filters
    env.filters["ts_type"] = field_to_typescript
    env.filters["zod_schema"] = field_to_zod
    env.filters["prisma_type"] = field_to_prisma
    env.filters["form_default"] = form_default

    env.filters["quote"] = quote
    env.filters["jsx_string"] = lambda x: "{" + quote(x) + "}"

    return env


_env: Environment | None = None


def get_env() -> Environment:
    global _env
    if _env is None:
        _env = create_jinja_env()
    return _env


def render_template(template_path: str, context: dict[str, Any]) -> str:
    """Render a packaged Jinja2 template."""
    return get_env().get_template(template_path).render(**context)


# ═══════════════════════════════════════════════════════════════════════════
# MODEL TEMPLATES
# ═══════════════════════════════════════════════════════════════════════════


class ModelTemplates:
    """
    Source templates for one generated resource.

    Every method takes the model name and its ordered fields and returns
    the file text. Relation fields surface as their <name>Id scalar.
    """

    def _context(
        self,
        name: str,
        fields: list[FieldDescriptor] | None = None,
        roles: list[str] | tuple[str, ...] = DEFAULT_ROLES,
    ) -> dict[str, Any]:
        fields = list(fields or [])
        lower = name.lower()
        return {
            "name": name,
            "lower": lower,
            "route": plural(lower),
            "param": f"{lower}Id",
            "plural_name": plural(name),
            "fields": fields,
            "roles": list(roles),
            "search_key": search_key(fields),
            "renders_text_input": renders_text_input,
        }

    def schema(self, name: str, fields: list[FieldDescriptor]) -> str:
        return render_template("model/schema.ts.j2", self._context(name, fields))

    def actions(self, name: str, fields: list[FieldDescriptor] | None = None) -> str:
        return render_template("model/actions.ts.j2", self._context(name, fields))

    def components(self, name: str, fields: list[FieldDescriptor]) -> str:
        return render_template("model/components.tsx.j2", self._context(name, fields))

    def routes(self, name: str, fields: list[FieldDescriptor]) -> str:
        return render_template("model/routes.tsx.j2", self._context(name, fields))

    def index(
        self,
        name: str,
        fields: list[FieldDescriptor],
        roles: list[str] | tuple[str, ...] = DEFAULT_ROLES,
    ) -> str:
        return render_template("model/index.ts.j2", self._context(name, fields, roles))

    def page(self, name: str, fields: list[FieldDescriptor] | None = None) -> str:
        return render_template("model/page.tsx.j2", self._context(name, fields))

    def page_components(self, name: str, fields: list[FieldDescriptor] | None = None) -> str:
        return render_template("model/page_components.tsx.j2", self._context(name, fields))

    def new_page(self, name: str, fields: list[FieldDescriptor] | None = None) -> str:
        return render_template("model/new_page.tsx.j2", self._context(name, fields))

    def edit_page(self, name: str, fields: list[FieldDescriptor] | None = None) -> str:
        return render_template("model/edit_page.tsx.j2", self._context(name, fields))

    def prisma_model(self, name: str, fields: list[FieldDescriptor]) -> str:
        return render_template("model/prisma_model.j2", self._context(name, fields))

    def render_all(
        self,
        resource: ResourceDescriptor,
        roles: list[str] | tuple[str, ...] = DEFAULT_ROLES,
    ) -> dict[str, str]:
        """Render every kind for a resource, keyed by kind name."""
        name, fields = resource.name, resource.fields
        return {
            "schema": self.schema(name, fields),
            "actions": self.actions(name, fields),
            "components": self.components(name, fields),
            "routes": self.routes(name, fields),
            "index": self.index(name, fields, roles),
            "page": self.page(name, fields),
            "page_components": self.page_components(name, fields),
            "new_page": self.new_page(name, fields),
            "edit_page": self.edit_page(name, fields),
        }


templates = ModelTemplates()
