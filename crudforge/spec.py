"""
Crudforge Spec Models - Pydantic models for resource descriptors

Describes the models an operator asks the generators for. Pydantic handles
validation, defaults, aliases and YAML round-tripping; the type conversion
functions at the bottom turn a field into Zod, Prisma and TypeScript text.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from crudforge.errors import DescriptorError
from crudforge.naming import plural, quote, title_case


# ═══════════════════════════════════════════════════════════════════════════
# ENUMS
# ═══════════════════════════════════════════════════════════════════════════


class FieldType(str, Enum):
    STRING = "String"
    INT = "Int"
    FLOAT = "Float"
    BOOLEAN = "Boolean"
    DATETIME = "DateTime"
    JSON = "Json"
    BIGINT = "BigInt"
    DECIMAL = "Decimal"
    RELATION = "Relation"


class OnDeleteAction(str, Enum):
    CASCADE = "CASCADE"
    SET_NULL = "SET_NULL"
    RESTRICT = "RESTRICT"


class FormFieldKind(str, Enum):
    """Field kinds offered by the enhanced resource generator"""

    TEXT = "text"
    EMAIL = "email"
    PASSWORD = "password"
    NUMBER = "number"
    TEXTAREA = "textarea"
    RICH_EDITOR = "rich-editor"
    SELECT = "select"
    TOGGLE = "toggle"
    CHECKBOX = "checkbox"
    DATE = "date"
    FILE_UPLOAD = "file-upload"
    REPEATER = "repeater"


MODEL_NAME_PATTERN = re.compile(r"^[A-Z][a-zA-Z]*$")
FIELD_NAME_PATTERN = re.compile(r"^[a-z][a-zA-Z]*$")
AUDIT_FIELDS = ("id", "createdAt", "updatedAt")


def validate_default(value: str, field_type: FieldType) -> str | None:
    """
    Check that a default value parses for its field type.

    Returns:
        An error message, or None when the value is acceptable.
    """
    if field_type == FieldType.INT or field_type == FieldType.BIGINT:
        try:
            int(value)
        except ValueError:
            return "Must be an integer"
    elif field_type in (FieldType.FLOAT, FieldType.DECIMAL):
        try:
            float(value)
        except ValueError:
            return "Must be a number"
    elif field_type == FieldType.BOOLEAN:
        if value.lower() not in ("true", "false"):
            return "Must be true or false"
    elif field_type == FieldType.DATETIME:
        if value != "now()":
            try:
                datetime.fromisoformat(value)
            except ValueError:
                return "Must be a valid date"
    return None


# ═══════════════════════════════════════════════════════════════════════════
# FIELD DESCRIPTOR
# ═══════════════════════════════════════════════════════════════════════════


class FieldDescriptor(BaseModel):
    """One persisted attribute of a resource"""

    name: str
    type: FieldType = FieldType.STRING
    is_required: bool = Field(True, alias="isRequired")
    is_unique: bool = Field(False, alias="isUnique")
    has_default: bool = Field(False, alias="hasDefault")
    default_value: str | None = Field(None, alias="defaultValue")
    is_relation: bool = Field(False, alias="isRelation")
    relation_model: str | None = Field(None, alias="relationModel")
    relation_field: str | None = Field(None, alias="relationField")
    relation_on_delete: OnDeleteAction = Field(OnDeleteAction.RESTRICT, alias="relationOnDelete")

    model_config = {"populate_by_name": True}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError(f"Field name {v!r} is not a valid identifier")
        return v

    @field_validator("default_value", mode="before")
    @classmethod
    def stringify_default(cls, v: Any) -> Any:
        # YAML and Python callers hand over real booleans and numbers
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @field_validator("relation_on_delete", mode="before")
    @classmethod
    def default_on_delete(cls, v: Any) -> Any:
        return OnDeleteAction.RESTRICT if v is None else v

    @model_validator(mode="after")
    def check_consistency(self) -> "FieldDescriptor":
        if self.type == FieldType.RELATION:
            self.is_relation = True
        elif self.is_relation:
            self.type = FieldType.RELATION

        if self.has_default and self.default_value is None:
            raise ValueError(f"Field {self.name!r} has a default but no default value")
        if self.default_value is not None and not self.has_default:
            self.has_default = True
        if self.is_relation and not self.relation_model:
            raise ValueError(f"Relation field {self.name!r} needs a related model")
        if self.has_default and self.default_value is not None and not self.is_relation:
            error = validate_default(self.default_value, self.type)
            if error:
                raise ValueError(f"Default {self.default_value!r} for {self.name!r}: {error}")
            if self.type == FieldType.BOOLEAN:
                self.default_value = self.default_value.lower()
        return self

    @property
    def fk_name(self) -> str:
        """Scalar column name; relations store a <name>Id foreign key."""
        return f"{self.name}Id" if self.is_relation else self.name

    @property
    def label(self) -> str:
        return title_case(self.name)


# ═══════════════════════════════════════════════════════════════════════════
# RESOURCE DESCRIPTOR
# ═══════════════════════════════════════════════════════════════════════════


class ResourceDescriptor(BaseModel):
    """A model plus the fields the generators emit for it"""

    name: str
    fields: list[FieldDescriptor] = []
    create_dashboard: bool = Field(True, alias="createDashboard")

    model_config = {"populate_by_name": True}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.isidentifier():
            raise ValueError(f"Model name {v!r} is not a valid identifier")
        return v

    @model_validator(mode="after")
    def check_unique_fields(self) -> "ResourceDescriptor":
        seen: set[str] = set()
        for field in self.fields:
            if field.name in seen:
                raise ValueError(f"Duplicate field name {field.name!r}")
            if field.name in AUDIT_FIELDS:
                raise ValueError(f"Field name {field.name!r} is reserved")
            seen.add(field.name)
        return self

    @property
    def lower(self) -> str:
        """Datastore table key."""
        return self.name.lower()

    @property
    def route(self) -> str:
        """Dashboard route segment, e.g. 'widgets'."""
        return plural(self.lower)

    @property
    def param(self) -> str:
        """Edit page route parameter, e.g. 'widgetId'."""
        return f"{self.lower}Id"

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "ResourceDescriptor":
        """Parse YAML content into a ResourceDescriptor"""
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise DescriptorError(f"Invalid YAML in resource descriptor: {e}") from e
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise DescriptorError(f"Invalid resource descriptor: {e}", data) from e

    @classmethod
    def from_file(cls, path: str | Path) -> "ResourceDescriptor":
        """Load a descriptor from a YAML file"""
        return cls.from_yaml(Path(path).read_text(encoding="utf-8"))

    def to_yaml(self) -> str:
        """Export descriptor to YAML"""
        return yaml.dump(
            self.model_dump(mode="json", by_alias=True, exclude_none=True),
            default_flow_style=False,
            sort_keys=False,
        )


# ═══════════════════════════════════════════════════════════════════════════
# ENHANCED RESOURCE (form-oriented definitions)
# ═══════════════════════════════════════════════════════════════════════════


class FormFieldDefinition(BaseModel):
    """Form field for the enhanced resource generator"""

    name: str
    type: FormFieldKind = FormFieldKind.TEXT
    label: str | None = None
    required: bool = False
    options: list[str] | None = None
    placeholder: str | None = None
    helper_text: str | None = Field(None, alias="helperText")

    model_config = {"populate_by_name": True}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError(f"Field name {v!r} is not a valid identifier")
        return v

    def model_post_init(self, __context: Any) -> None:
        if not self.label:
            self.label = self.name[:1].upper() + self.name[1:]

    @property
    def is_boolean(self) -> bool:
        return self.type in (FormFieldKind.TOGGLE, FormFieldKind.CHECKBOX)


class EnhancedResource(BaseModel):
    """Resource definition for the enhanced generator"""

    name: str
    plural_name: str | None = Field(None, alias="pluralName")
    fields: list[FormFieldDefinition] = []
    enable_bulk_actions: bool = Field(True, alias="enableBulkActions")
    enable_file_upload: bool = Field(False, alias="enableFileUpload")
    enable_rich_editor: bool = Field(False, alias="enableRichEditor")
    enable_dates: bool = Field(False, alias="enableDates")

    model_config = {"populate_by_name": True}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.isidentifier():
            raise ValueError(f"Resource name {v!r} is not a valid identifier")
        return v

    @field_validator("plural_name")
    @classmethod
    def validate_plural_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = re.sub(r"\s+", "", v)
        if v and not v.isidentifier():
            raise ValueError(f"Plural name {v!r} is not a valid identifier")
        return v or None

    def model_post_init(self, __context: Any) -> None:
        """Derive plural name if not provided"""
        if not self.plural_name:
            self.plural_name = self.name + "s"

    @property
    def lower(self) -> str:
        return self.name.lower()

    @property
    def plural_lower(self) -> str:
        return (self.plural_name or "").lower()

    @classmethod
    def from_file(cls, path: str | Path) -> "EnhancedResource":
        try:
            data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise DescriptorError(f"Invalid YAML in {path}: {e}") from e
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise DescriptorError(f"Invalid resource definition: {e}", data) from e


# ═══════════════════════════════════════════════════════════════════════════
# COMMAND-LINE FIELD SPECS
# ═══════════════════════════════════════════════════════════════════════════


def parse_field_spec(spec: str) -> FieldDescriptor:
    """
    Parse a --field flag value into a FieldDescriptor.

    Format: name:Type[:required|:optional][:unique][:relation=Model[.field]]
    [:on-delete=ACTION][:default=value]. default= must come last because the
    value may itself contain colons.
    """
    name, _, rest = spec.partition(":")
    if not name:
        raise DescriptorError(f"Field spec {spec!r} has no name", spec)

    tokens = rest.split(":") if rest else []
    data: dict[str, Any] = {"name": name.strip()}

    if tokens:
        type_token = tokens.pop(0).strip()
        try:
            data["type"] = FieldType(type_token)
        except ValueError:
            raise DescriptorError(
                f"Unknown field type {type_token!r} in {spec!r}", type_token
            ) from None

    while tokens:
        token = tokens.pop(0).strip()
        key, sep, value = token.partition("=")
        if token == "required":
            data["is_required"] = True
        elif token == "optional":
            data["is_required"] = False
        elif token == "unique":
            data["is_unique"] = True
        elif sep and key == "default":
            data["has_default"] = True
            data["default_value"] = ":".join([value, *tokens])
            tokens = []
        elif sep and key == "relation":
            model, _, inverse = value.partition(".")
            data["is_relation"] = True
            data["relation_model"] = model
            data["relation_field"] = inverse or None
        elif sep and key == "on-delete":
            try:
                data["relation_on_delete"] = OnDeleteAction(value.upper().replace("-", "_"))
            except ValueError:
                raise DescriptorError(f"Unknown on-delete action {value!r}", value) from None
        else:
            raise DescriptorError(f"Unknown field option {token!r} in {spec!r}", token)

    try:
        return FieldDescriptor.model_validate(data)
    except ValidationError as e:
        raise DescriptorError(f"Invalid field {spec!r}: {e}", spec) from e


# ═══════════════════════════════════════════════════════════════════════════
# TYPE CONVERSIONS
# ═══════════════════════════════════════════════════════════════════════════


def field_to_typescript(field: FieldDescriptor) -> str:
    """Convert field type to TypeScript type"""
    type_map = {
        FieldType.STRING: "string",
        FieldType.INT: "number",
        FieldType.FLOAT: "number",
        FieldType.BOOLEAN: "boolean",
        FieldType.DATETIME: "Date",
        FieldType.JSON: "unknown",
        FieldType.BIGINT: "bigint",
        FieldType.DECIMAL: "string",
        FieldType.RELATION: "string",
    }
    return type_map.get(field.type, "unknown")


def field_to_zod(field: FieldDescriptor) -> str:
    """Convert field to Zod schema string"""
    base_map = {
        FieldType.STRING: "z.string()",
        FieldType.INT: "z.number().int()",
        FieldType.FLOAT: "z.number()",
        FieldType.BOOLEAN: "z.boolean()",
        FieldType.DATETIME: "z.date()",
        FieldType.JSON: "z.any()",
        FieldType.BIGINT: "z.bigint()",
        FieldType.DECIMAL: "z.string()",
        FieldType.RELATION: "z.string()",
    }
    schema = base_map.get(field.type, "z.string()")

    if not field.is_required:
        schema += ".optional()"

    if field.has_default and field.default_value is not None:
        value = field.default_value
        if field.type in (FieldType.STRING, FieldType.DECIMAL):
            value = quote(value)
        elif field.type == FieldType.DATETIME:
            value = "() => new Date()" if value == "now()" else f"new Date({quote(value)})"
        elif field.type == FieldType.BIGINT:
            value = f"{value}n"
        schema += f".default({value})"

    return schema


def field_to_prisma(field: FieldDescriptor) -> str:
    """Convert field to its Prisma model line(s), without indentation"""
    type_map = {
        FieldType.STRING: "String",
        FieldType.INT: "Int",
        FieldType.FLOAT: "Float",
        FieldType.BOOLEAN: "Boolean",
        FieldType.DATETIME: "DateTime",
        FieldType.JSON: "Json",
        FieldType.BIGINT: "BigInt",
        FieldType.DECIMAL: "Decimal",
    }
    optional = "" if field.is_required else "?"

    if field.is_relation:
        fk = field.fk_name
        unique = " @unique" if field.is_unique else ""
        return (
            f"{fk} String{optional}{unique}\n"
            f"{field.name} {field.relation_model}{optional} @relation(fields: [{fk}], "
            f"references: [id], onDelete: {field.relation_on_delete.value})"
        )

    attrs = []
    if field.is_unique:
        attrs.append("@unique")
    if field.has_default and field.default_value is not None:
        value = field.default_value
        if field.type in (FieldType.STRING, FieldType.JSON):
            value = quote(value, '"')
        elif field.type == FieldType.DATETIME and value != "now()":
            value = quote(value, '"')
        attrs.append(f"@default({value})")

    attr_str = " " + " ".join(attrs) if attrs else ""
    return f"{field.name} {type_map.get(field.type, 'String')}{optional}{attr_str}"
