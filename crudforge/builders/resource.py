"""
Resource builder - derives JSON schema, UI schema, table columns and API
endpoints from a single resource definition
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from crudforge.builders.form import SnapshotModel
from crudforge.builders.panel import Role
from crudforge.builders.table import ColumnType, TableColumn
from crudforge.naming import title_case


class FieldValidation(BaseModel):
    min: float | None = None
    max: float | None = None
    min_length: int | None = Field(None, alias="minLength")
    max_length: int | None = Field(None, alias="maxLength")
    pattern: str | None = None
    options: list[str] | None = None

    model_config = {"populate_by_name": True}


class FieldUi(BaseModel):
    component: Literal["input", "textarea", "select", "toggle", "date"] | None = None
    placeholder: str | None = None
    hint: str | None = None
    width: Literal["full", "half", "third"] | None = None
    group: str | None = None


class ResourceField(BaseModel):
    type: Literal["string", "number", "boolean", "date", "enum"] = "string"
    label: str | None = None
    description: str | None = None
    required: bool = False
    default: Any = None
    validation: FieldValidation | None = None
    ui: FieldUi | None = None


class RoleAccess(BaseModel):
    create: list[Role] | None = None
    read: list[Role] | None = None
    update: list[Role] | None = None
    delete: list[Role] | None = None


class FieldGroup(BaseModel):
    name: str
    fields: list[str]


class DisplayOptions(BaseModel):
    list_fields: list[str] | None = Field(None, alias="listFields")
    search_fields: list[str] | None = Field(None, alias="searchFields")
    filter_fields: list[str] | None = Field(None, alias="filterFields")
    sort_fields: list[str] | None = Field(None, alias="sortFields")
    default_sort: str | None = Field(None, alias="defaultSort")
    default_sort_dir: Literal["asc", "desc"] | None = Field(None, alias="defaultSortDir")
    page_size: int | None = Field(None, alias="pageSize")
    groups: list[FieldGroup] | None = None

    model_config = {"populate_by_name": True}


class ApiEndpoints(BaseModel):
    list_: str | None = Field(None, alias="list")
    create: str | None = None
    update: str | None = None
    delete: str | None = None

    model_config = {"populate_by_name": True}


class ApiOptions(BaseModel):
    base_path: str | None = Field(None, alias="basePath")
    endpoints: ApiEndpoints | None = None

    model_config = {"populate_by_name": True}


class ResourceDefinition(BaseModel):
    """Declarative description of a dashboard resource"""

    name: str
    description: str | None = None
    fields: dict[str, ResourceField] = {}
    roles: RoleAccess | None = None
    display: DisplayOptions | None = None
    api: ApiOptions | None = None


class BuiltResource(SnapshotModel):
    name: str
    description: str | None = None
    json_schema: dict[str, Any]
    ui_schema: dict[str, Any]
    columns: list[TableColumn]
    endpoints: dict[str, str]
    roles: RoleAccess | None = None
    display: DisplayOptions | None = None


COLUMN_TYPES = {
    "string": ColumnType.TEXT,
    "number": ColumnType.NUMBER,
    "boolean": ColumnType.BOOLEAN,
    "date": ColumnType.DATE,
    "enum": ColumnType.TEXT,
}


class ResourceBuilder:
    def __init__(self, definition: ResourceDefinition | dict):
        if isinstance(definition, dict):
            definition = ResourceDefinition.model_validate(definition)
        self.definition = definition

    def _label(self, name: str) -> str:
        return self.definition.fields[name].label or title_case(name)

    def _field_to_json_schema(self, name: str, field: ResourceField) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "type": "string" if field.type in ("enum", "date") else field.type,
            "title": self._label(name),
        }
        if field.type == "date":
            schema["format"] = "date-time"
        if field.description:
            schema["description"] = field.description
        if field.default is not None:
            schema["default"] = field.default

        v = field.validation
        if v:
            if v.min is not None:
                schema["minimum"] = v.min
            if v.max is not None:
                schema["maximum"] = v.max
            if v.min_length is not None:
                schema["minLength"] = v.min_length
            if v.max_length is not None:
                schema["maxLength"] = v.max_length
            if v.pattern:
                schema["pattern"] = v.pattern
            if v.options:
                schema["enum"] = list(v.options)
        return schema

    def json_schema(self) -> dict[str, Any]:
        properties = {
            name: self._field_to_json_schema(name, field)
            for name, field in self.definition.fields.items()
        }
        required = [name for name, field in self.definition.fields.items() if field.required]
        return {"type": "object", "required": required, "properties": properties}

    def _control(self, name: str) -> dict[str, Any]:
        control: dict[str, Any] = {"type": "Control", "scope": f"#/properties/{name}"}
        ui = self.definition.fields[name].ui
        options: dict[str, Any] = {}
        if ui and ui.component == "textarea":
            options["multi"] = True
        if ui and ui.placeholder:
            options["placeholder"] = ui.placeholder
        if options:
            control["options"] = options
        return control

    def ui_schema(self) -> dict[str, Any]:
        """Grouped layout when display groups exist, flat otherwise."""
        display = self.definition.display
        if display and display.groups:
            elements = [
                {
                    "type": "Group",
                    "label": group.name,
                    "elements": [self._control(name) for name in group.fields],
                }
                for group in display.groups
            ]
        else:
            elements = [self._control(name) for name in self.definition.fields]
        return {"type": "VerticalLayout", "elements": elements}

    def table_columns(self) -> list[TableColumn]:
        display = self.definition.display
        names = (display.list_fields if display and display.list_fields else None) or list(self.definition.fields)
        return [
            TableColumn(
                key=name,
                label=self._label(name),
                type=COLUMN_TYPES[self.definition.fields[name].type],
                sortable=bool(display and display.sort_fields and name in display.sort_fields),
                searchable=bool(display and display.search_fields and name in display.search_fields),
                filterable=bool(display and display.filter_fields and name in display.filter_fields),
            )
            for name in names
        ]

    def endpoints(self) -> dict[str, str]:
        api = self.definition.api or ApiOptions()
        base = api.base_path or f"/api/{self.definition.name.lower()}"
        custom = api.endpoints or ApiEndpoints()
        return {
            "list": custom.list_ or base,
            "create": custom.create or base,
            "update": custom.update or f"{base}/{{id}}",
            "delete": custom.delete or f"{base}/{{id}}",
        }

    def build(self) -> BuiltResource:
        return BuiltResource(
            name=self.definition.name,
            description=self.definition.description,
            json_schema=self.json_schema(),
            ui_schema=self.ui_schema(),
            columns=self.table_columns(),
            endpoints=self.endpoints(),
            roles=self.definition.roles.model_copy(deep=True) if self.definition.roles else None,
            display=self.definition.display.model_copy(deep=True) if self.definition.display else None,
        )
