"""
Widget builder - dashboard cards for stats, charts and lists
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from enum import Enum
from types import SimpleNamespace
from typing import Any, Literal

from pydantic import Field

from crudforge.builders.form import Option, SnapshotModel, Width


class WidgetType(str, Enum):
    STATS = "stats"
    CHART = "chart"
    LIST = "list"
    TABLE = "table"
    CALENDAR = "calendar"
    MAP = "map"
    CUSTOM = "custom"


class Trend(SnapshotModel):
    value: float
    direction: Literal["up", "down"]
    label: str | None = None


class WidgetStats(SnapshotModel):
    value: float | int | str
    label: str
    description: str | None = None
    icon: str | None = None
    trend: Trend | None = None


class WidgetChart(SnapshotModel):
    type: Literal["line", "bar", "pie", "donut", "area"]
    data: Any
    options: Any = None


class ListItem(SnapshotModel):
    title: str
    subtitle: str | None = None
    value: str | int | float | None = None
    icon: str | None = None
    badge: dict[str, str] | None = None


class WidgetList(SnapshotModel):
    items: list[ListItem] = []


class WidgetContent(SnapshotModel):
    stats: WidgetStats | None = None
    chart: WidgetChart | None = None
    list_: WidgetList | None = Field(None, alias="list")
    table: Any = None
    custom: Any = None


class WidgetAction(SnapshotModel):
    label: str
    on_click: Callable[[], Any] = Field(..., alias="onClick")
    icon: str | None = None


class WidgetFilter(SnapshotModel):
    key: str
    label: str
    type: Literal["select", "date", "daterange"]
    options: list[Option] | None = None
    default_value: Any = Field(None, alias="defaultValue")


class WidgetConfig(SnapshotModel):
    type: WidgetType = WidgetType.CUSTOM
    title: str | None = None
    description: str | None = None
    width: Width | None = None
    height: str | None = None
    loading: bool = False
    error: str | None = None
    refresh: int | None = None
    content: WidgetContent | None = None
    actions: list[WidgetAction] | None = None
    filters: list[WidgetFilter] | None = None


class WidgetBuilder:
    def __init__(self) -> None:
        self._config: dict[str, Any] = {"type": WidgetType.CUSTOM}

    def type(self, type: WidgetType | str) -> "WidgetBuilder":
        self._config["type"] = type
        return self

    def title(self, title: str) -> "WidgetBuilder":
        self._config["title"] = title
        return self

    def description(self, description: str) -> "WidgetBuilder":
        self._config["description"] = description
        return self

    def width(self, width: Width) -> "WidgetBuilder":
        self._config["width"] = width
        return self

    def height(self, height: str) -> "WidgetBuilder":
        self._config["height"] = height
        return self

    def loading(self, loading: bool) -> "WidgetBuilder":
        self._config["loading"] = loading
        return self

    def error(self, error: str) -> "WidgetBuilder":
        self._config["error"] = error
        return self

    def refresh(self, interval: int) -> "WidgetBuilder":
        self._config["refresh"] = interval
        return self

    def content(self, content: WidgetContent | dict) -> "WidgetBuilder":
        self._config["content"] = content
        return self

    def actions(self, actions: list[WidgetAction | dict]) -> "WidgetBuilder":
        self._config["actions"] = list(actions)
        return self

    def filters(self, filters: list[WidgetFilter | dict]) -> "WidgetBuilder":
        self._config["filters"] = list(filters)
        return self

    def build(self) -> WidgetConfig:
        return WidgetConfig.model_validate(copy.deepcopy(self._config))


def create_widget() -> WidgetBuilder:
    return WidgetBuilder()


# Helper functions for common widget types


def stats_widget(stats: WidgetStats | dict, **config: Any) -> WidgetConfig:
    return WidgetConfig.model_validate({**config, "type": WidgetType.STATS, "content": {"stats": stats}})


def chart_widget(chart: WidgetChart | dict, **config: Any) -> WidgetConfig:
    return WidgetConfig.model_validate({**config, "type": WidgetType.CHART, "content": {"chart": chart}})


def list_widget(items: WidgetList | dict, **config: Any) -> WidgetConfig:
    return WidgetConfig.model_validate({**config, "type": WidgetType.LIST, "content": {"list": items}})


def custom_widget(content: Any, **config: Any) -> WidgetConfig:
    return WidgetConfig.model_validate({**config, "type": WidgetType.CUSTOM, "content": {"custom": content}})


widgets = SimpleNamespace(
    stats=stats_widget,
    chart=chart_widget,
    list=list_widget,
    custom=custom_widget,
)
