"""
Form builder - fluent assembly of form sections and fields
"""

from __future__ import annotations

import copy
from enum import Enum
from types import SimpleNamespace
from typing import Any, Literal

from pydantic import BaseModel, Field

Width = Literal["full", "1/2", "1/3", "2/3", "1/4", "3/4"]
Operator = Literal["=", "!=", ">", "<", ">=", "<=", "contains", "startsWith", "endsWith"]


class FormInputType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    EMAIL = "email"
    PASSWORD = "password"
    SELECT = "select"
    MULTISELECT = "multiselect"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    FILE_UPLOAD = "file-upload"
    RICH_EDITOR = "rich-editor"
    CODE = "code"
    COLOR = "color"
    TOGGLE = "toggle"
    REPEATER = "repeater"
    BELONGS_TO = "belongs-to"


class SnapshotModel(BaseModel):
    """Immutable config returned from build()."""

    model_config = {"frozen": True, "populate_by_name": True, "arbitrary_types_allowed": True}


class Option(SnapshotModel):
    label: str
    value: Any


class Condition(SnapshotModel):
    field: str
    value: Any
    operator: Operator = "="


class FormField(SnapshotModel):
    name: str
    label: str
    type: FormInputType = FormInputType.TEXT
    placeholder: str | None = None
    helper_text: str | None = Field(None, alias="helperText")
    required: bool = False
    disabled: bool = False
    hidden: bool = False
    validation: Any = None
    options: list[Option] | None = None
    default_value: Any = Field(None, alias="defaultValue")
    width: Width | None = None
    conditions: list[Condition] | None = None


class FormSection(SnapshotModel):
    title: str | None = None
    description: str | None = None
    fields: list[FormField] = []
    columns: int | None = None
    collapsed: bool = False
    collapsible: bool = False
    conditions: list[Condition] | None = None


class FormButton(SnapshotModel):
    label: str | None = None
    redirect: str | None = None


class FormActions(SnapshotModel):
    submit: FormButton | None = None
    cancel: FormButton | None = None


class FormConfig(SnapshotModel):
    title: str | None = None
    description: str | None = None
    sections: list[FormSection] = []
    actions: FormActions | None = None
    validation_schema: Any = Field(None, alias="validationSchema")


class FormBuilder:
    def __init__(self) -> None:
        self._config: dict[str, Any] = {"sections": []}

    def title(self, title: str) -> "FormBuilder":
        self._config["title"] = title
        return self

    def description(self, description: str) -> "FormBuilder":
        self._config["description"] = description
        return self

    def section(self, section: FormSection | dict) -> "FormBuilder":
        self._config["sections"].append(section)
        return self

    def actions(self, actions: FormActions | dict) -> "FormBuilder":
        self._config["actions"] = actions
        return self

    def validation(self, schema: Any) -> "FormBuilder":
        self._config["validation_schema"] = schema
        return self

    def build(self) -> FormConfig:
        """Snapshot the current state; later setter calls do not affect it."""
        return FormConfig.model_validate(copy.deepcopy(self._config))


def create_form() -> FormBuilder:
    return FormBuilder()


# Helper functions for common field types


def _field(name: str, label: str, type: FormInputType, **config: Any) -> FormField:
    return FormField.model_validate({"name": name, "label": label, "type": type, **config})


def text_field(name: str, label: str, **config: Any) -> FormField:
    return _field(name, label, FormInputType.TEXT, **config)


def email_field(name: str, label: str, **config: Any) -> FormField:
    return _field(name, label, FormInputType.EMAIL, **config)


def password_field(name: str, label: str, **config: Any) -> FormField:
    config.setdefault("validation", {"min_length": 6})
    return _field(name, label, FormInputType.PASSWORD, **config)


def select_field(name: str, label: str, options: list[Option | dict], **config: Any) -> FormField:
    return _field(name, label, FormInputType.SELECT, options=options, **config)


def rich_editor_field(name: str, label: str, **config: Any) -> FormField:
    return _field(name, label, FormInputType.RICH_EDITOR, **config)


def file_upload_field(name: str, label: str, **config: Any) -> FormField:
    return _field(name, label, FormInputType.FILE_UPLOAD, **config)


def date_field(name: str, label: str, **config: Any) -> FormField:
    return _field(name, label, FormInputType.DATE, **config)


def toggle_field(name: str, label: str, **config: Any) -> FormField:
    return _field(name, label, FormInputType.TOGGLE, **config)


fields = SimpleNamespace(
    text=text_field,
    email=email_field,
    password=password_field,
    select=select_field,
    rich_editor=rich_editor_field,
    file_upload=file_upload_field,
    date=date_field,
    toggle=toggle_field,
)
