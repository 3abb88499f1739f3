"""
Panel builder - dashboard title, navigation tree, auth guard and theme
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any

from pydantic import Field

from crudforge.builders.form import SnapshotModel


class Role(str, Enum):
    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"


class NavigationItem(SnapshotModel):
    title: str
    path: str
    icon: str | None = None
    roles: list[Role] | None = None
    children: list[NavigationItem] | None = None

    def visible_to(self, role: Role | str) -> bool:
        """Items without a role list are shown to everyone."""
        return self.roles is None or Role(role) in self.roles


class AuthConfig(SnapshotModel):
    guard: str | None = None
    roles: list[str] | None = None
    permissions: list[str] | None = None


class ThemeConfig(SnapshotModel):
    primary_color: str | None = Field(None, alias="primaryColor")
    dark_mode: bool = Field(False, alias="darkMode")
    brand_logo: str | None = Field(None, alias="brandLogo")
    brand_name: str | None = Field(None, alias="brandName")


class PanelConfig(SnapshotModel):
    title: str = "Dashboard"
    description: str | None = None
    navigation: list[NavigationItem] | None = None
    auth: AuthConfig | None = None
    theme: ThemeConfig | None = None

    def navigation_for(self, role: Role | str) -> list[NavigationItem]:
        return [item for item in self.navigation or [] if item.visible_to(role)]


class PanelBuilder:
    def __init__(self) -> None:
        self._config: dict[str, Any] = {"title": "Dashboard"}

    def title(self, title: str) -> "PanelBuilder":
        self._config["title"] = title
        return self

    def description(self, description: str) -> "PanelBuilder":
        self._config["description"] = description
        return self

    def navigation(self, items: list[NavigationItem | dict]) -> "PanelBuilder":
        self._config["navigation"] = list(items)
        return self

    def auth(self, config: AuthConfig | dict) -> "PanelBuilder":
        self._config["auth"] = config
        return self

    def theme(self, config: ThemeConfig | dict) -> "PanelBuilder":
        self._config["theme"] = config
        return self

    def build(self) -> PanelConfig:
        return PanelConfig.model_validate(copy.deepcopy(self._config))


def create_panel() -> PanelBuilder:
    return PanelBuilder()
