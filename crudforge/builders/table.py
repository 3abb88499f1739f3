"""
Table builder - column, filter and action configuration for list views

Also holds the cell rendering policy shared by every column type.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from types import SimpleNamespace
from typing import Any, Literal

from pydantic import Field

from crudforge.builders.form import Option, SnapshotModel

DEFAULT_BADGE_COLOR = "default"


class ColumnType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    IMAGE = "image"
    BADGE = "badge"
    ICON = "icon"
    ACTIONS = "actions"
    CUSTOM = "custom"


class BadgeStyle(SnapshotModel):
    color: dict[str, str] = {}
    label: dict[str, str] = {}
    value_label: dict[str, str] = Field({}, alias="valueLabel")


class ColumnAction(SnapshotModel):
    label: str
    on_click: Callable[[Any], Any] = Field(..., alias="onClick")
    icon: str | None = None
    visible: Callable[[Any], bool] | None = None
    disabled: Callable[[Any], bool] | None = None


class TableColumn(SnapshotModel):
    key: str
    label: str
    type: ColumnType = ColumnType.TEXT
    sortable: bool = False
    searchable: bool = False
    filterable: bool = False
    hidden: bool = False
    width: str | None = None
    align: Literal["left", "center", "right"] | None = None
    format: Callable[[Any, Any], Any] | None = None
    badge: BadgeStyle | None = None
    actions: list[ColumnAction] | None = None


class TableFilter(SnapshotModel):
    key: str
    label: str
    type: Literal["select", "multiselect", "date", "daterange", "text", "number"]
    options: list[Option] | None = None


class TableAction(SnapshotModel):
    label: str
    on_click: Callable[[list[str]], Any] = Field(..., alias="onClick")
    icon: str | None = None
    color: Literal["primary", "secondary", "success", "warning", "danger"] | None = None
    visible: Callable[[list[str]], bool] | None = None
    disabled: Callable[[list[str]], bool] | None = None


class SortOrder(SnapshotModel):
    key: str
    direction: Literal["asc", "desc"] = "asc"


class Pagination(SnapshotModel):
    enabled: bool = True
    per_page: int = Field(10, alias="perPage")
    per_page_options: list[int] | None = Field(None, alias="perPageOptions")


class Selection(SnapshotModel):
    enabled: bool = True
    preserve_selected: bool = Field(False, alias="preserveSelected")


class EmptyState(SnapshotModel):
    icon: str | None = None
    title: str | None = None
    description: str | None = None
    action: dict[str, Any] | None = None


class TableConfig(SnapshotModel):
    title: str | None = None
    description: str | None = None
    columns: list[TableColumn] = []
    filters: list[TableFilter] | None = None
    actions: list[TableAction] | None = None
    bulk_actions: list[TableAction] | None = Field(None, alias="bulkActions")
    default_sort: SortOrder | None = Field(None, alias="defaultSort")
    pagination: Pagination | None = None
    selection: Selection | None = None
    refresh_interval: int | None = Field(None, alias="refreshInterval")
    empty_state: EmptyState | None = Field(None, alias="emptyState")


class TableBuilder:
    def __init__(self) -> None:
        self._config: dict[str, Any] = {"columns": []}

    def title(self, title: str) -> "TableBuilder":
        self._config["title"] = title
        return self

    def description(self, description: str) -> "TableBuilder":
        self._config["description"] = description
        return self

    def columns(self, columns: list[TableColumn | dict]) -> "TableBuilder":
        self._config["columns"] = list(columns)
        return self

    def filters(self, filters: list[TableFilter | dict]) -> "TableBuilder":
        self._config["filters"] = list(filters)
        return self

    def actions(self, actions: list[TableAction | dict]) -> "TableBuilder":
        self._config["actions"] = list(actions)
        return self

    def bulk_actions(self, actions: list[TableAction | dict]) -> "TableBuilder":
        self._config["bulk_actions"] = list(actions)
        return self

    def default_sort(self, key: str, direction: Literal["asc", "desc"] = "asc") -> "TableBuilder":
        self._config["default_sort"] = {"key": key, "direction": direction}
        return self

    def pagination(self, config: Pagination | dict) -> "TableBuilder":
        self._config["pagination"] = config
        return self

    def selection(self, config: Selection | dict) -> "TableBuilder":
        self._config["selection"] = config
        return self

    def refresh_interval(self, interval: int) -> "TableBuilder":
        self._config["refresh_interval"] = interval
        return self

    def empty_state(self, config: EmptyState | dict) -> "TableBuilder":
        self._config["empty_state"] = config
        return self

    def build(self) -> TableConfig:
        return TableConfig.model_validate(copy.deepcopy(self._config))


def create_table() -> TableBuilder:
    return TableBuilder()


# Helper functions for common column types


def _column(key: str, label: str, type: ColumnType, defaults: dict[str, Any], config: dict[str, Any]) -> TableColumn:
    return TableColumn.model_validate({"key": key, "label": label, "type": type, **defaults, **config})


def text_column(key: str, label: str, **config: Any) -> TableColumn:
    return _column(key, label, ColumnType.TEXT, {}, config)


def number_column(key: str, label: str, **config: Any) -> TableColumn:
    return _column(key, label, ColumnType.NUMBER, {"align": "right"}, config)


def boolean_column(key: str, label: str, **config: Any) -> TableColumn:
    return _column(key, label, ColumnType.BOOLEAN, {"align": "center"}, config)


def date_column(key: str, label: str, **config: Any) -> TableColumn:
    return _column(key, label, ColumnType.DATE, {}, config)


def badge_column(key: str, label: str, badge: BadgeStyle | dict, **config: Any) -> TableColumn:
    return _column(key, label, ColumnType.BADGE, {"badge": badge, "align": "center"}, config)


def actions_column(key: str, actions: list[ColumnAction | dict], **config: Any) -> TableColumn:
    defaults = {"actions": actions, "align": "right", "width": "1%"}
    return _column(key, "", ColumnType.ACTIONS, defaults, config)


columns = SimpleNamespace(
    text=text_column,
    number=number_column,
    boolean=boolean_column,
    date=date_column,
    badge=badge_column,
    actions=actions_column,
)


# ═══════════════════════════════════════════════════════════════════════════
# CELL RENDERING
# ═══════════════════════════════════════════════════════════════════════════


@dataclass
class ActionControl:
    """One clickable control in an actions cell."""

    action: ColumnAction
    row: Any
    disabled: bool = False

    @property
    def label(self) -> str:
        return self.action.label

    def click(self) -> Any:
        # Callback errors reach the caller unchanged
        return self.action.on_click(self.row)


@dataclass
class RenderedCell:
    text: str = ""
    color: str | None = None
    controls: list[ActionControl] = field(default_factory=list)


def _cell_value(row: Any, key: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(key)
    return getattr(row, key, None)


def _lookup(mapping: dict[str, str], value: Any) -> str | None:
    if isinstance(value, bool):
        key = "true" if value else "false"
    else:
        key = str(value)
    return mapping.get(key)


def _as_date(value: Any) -> date | None:
    if isinstance(value, (date, datetime)):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def format_value(column: TableColumn, value: Any) -> str:
    """Default stringification when a column has no format function."""
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if column.key == "price" and isinstance(value, (int, float)):
        return f"${value:.2f}"
    if column.type in (ColumnType.DATE, ColumnType.DATETIME) or isinstance(value, date):
        parsed = _as_date(value)
        if parsed is not None:
            return f"{parsed.month}/{parsed.day}/{parsed.year}"
    return str(value)


def render_cell(column: TableColumn, row: Any) -> RenderedCell:
    """
    Render one cell of a row.

    Badges fall back to the raw value with the default style when the
    value is missing from the color or label maps. Action cells hold one
    control per action whose visible() predicate passes.
    """
    if column.type == ColumnType.ACTIONS:
        controls = []
        for action in column.actions or []:
            if action.visible is not None and not action.visible(row):
                continue
            disabled = bool(action.disabled(row)) if action.disabled is not None else False
            controls.append(ActionControl(action=action, row=row, disabled=disabled))
        return RenderedCell(controls=controls)

    value = _cell_value(row, column.key)

    if column.type == ColumnType.BADGE:
        badge = column.badge or BadgeStyle()
        label = _lookup(badge.label, value) or _lookup(badge.value_label, value)
        color = _lookup(badge.color, value) or DEFAULT_BADGE_COLOR
        return RenderedCell(text=label if label is not None else str(value), color=color)

    if column.format is not None:
        return RenderedCell(text=str(column.format(value, row)))

    return RenderedCell(text=format_value(column, value))
