"""Shared fixtures for crudforge tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from crudforge.config import Settings
from crudforge.spec import FieldDescriptor, FieldType, OnDeleteAction, ResourceDescriptor

SCHEMA_HEADER = """\
generator client {
  provider = "prisma-client-js"
}

datasource db {
  provider = "postgresql"
  url      = env("DATABASE_URL")
}

model User {
  id    String @id @default(cuid())
  email String @unique
}
"""


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """An empty dashboard checkout with a Prisma schema."""
    root = tmp_path / "app"
    (root / "prisma").mkdir(parents=True)
    (root / "prisma" / "schema.prisma").write_text(SCHEMA_HEADER, encoding="utf-8")
    return root


@pytest.fixture
def settings(project: Path) -> Settings:
    return Settings.load(project)


@pytest.fixture
def widget() -> ResourceDescriptor:
    """Widget with one required string field."""
    return ResourceDescriptor(
        name="Widget",
        fields=[FieldDescriptor(name="label", type=FieldType.STRING)],
    )


@pytest.fixture
def gadget() -> ResourceDescriptor:
    """Gadget covering defaults, optional fields and a relation."""
    return ResourceDescriptor(
        name="Gadget",
        fields=[
            FieldDescriptor(name="title", type=FieldType.STRING, is_unique=True),
            FieldDescriptor(name="price", type=FieldType.FLOAT, default_value="0"),
            FieldDescriptor(name="featured", type=FieldType.BOOLEAN, default_value="false"),
            FieldDescriptor(name="releasedAt", type=FieldType.DATETIME, is_required=False),
            FieldDescriptor(
                name="owner",
                type=FieldType.RELATION,
                relation_model="User",
                relation_field="gadgets",
                relation_on_delete=OnDeleteAction.CASCADE,
            ),
        ],
    )
