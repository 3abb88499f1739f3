"""
Crudforge Settings - Project layout and external command configuration

Defaults match a Next.js dashboard checkout. A crudforge.yaml at the
project root may override any of them.
"""

from __future__ import annotations

import shlex
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from crudforge.errors import DescriptorError

SETTINGS_FILE = "crudforge.yaml"


class Settings(BaseModel):
    """Generator settings"""

    root: Path = Field(default_factory=Path.cwd)
    resources_dir: str = Field("src/resources", alias="resourcesDir")
    pages_dir: str = Field("src/app/dashboard", alias="pagesDir")
    prisma_schema: str = Field("prisma/schema.prisma", alias="prismaSchema")
    update_schema: bool = Field(True, alias="updateSchema")
    push_command: str = Field("npx prisma db push", alias="pushCommand")
    generate_command: str = Field("npx prisma generate", alias="generateCommand")
    roles: list[str] = ["ADMIN", "EDITOR", "VIEWER"]
    max_fields: int = Field(20, ge=1, alias="maxFields")

    model_config = {"populate_by_name": True}

    @property
    def resources_path(self) -> Path:
        return self.root / self.resources_dir

    @property
    def pages_path(self) -> Path:
        return self.root / self.pages_dir

    @property
    def prisma_schema_path(self) -> Path:
        return self.root / self.prisma_schema

    def push_argv(self) -> list[str]:
        return shlex.split(self.push_command)

    def generate_argv(self) -> list[str]:
        return shlex.split(self.generate_command)

    @classmethod
    def load(cls, root: Path | None = None) -> "Settings":
        """
        Load settings for a project root.

        Reads crudforge.yaml from the root when present. The root argument
        always wins over a root set inside the file.
        """
        root = (root or Path.cwd()).resolve()
        data: dict = {}

        settings_file = root / SETTINGS_FILE
        if settings_file.exists():
            try:
                data = yaml.safe_load(settings_file.read_text(encoding="utf-8")) or {}
            except yaml.YAMLError as e:
                raise DescriptorError(f"Invalid YAML in {settings_file}: {e}") from e
            if not isinstance(data, dict):
                raise DescriptorError(f"{settings_file} must contain a mapping", data)

        data["root"] = root
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise DescriptorError(f"Invalid {SETTINGS_FILE}: {e}") from e
