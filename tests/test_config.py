"""Tests for crudforge.config settings."""

from pathlib import Path

import pytest

from crudforge.config import Settings
from crudforge.errors import DescriptorError


class TestSettings:
    """Tests for Settings.load."""

    def test_defaults(self, project: Path) -> None:
        settings = Settings.load(project)
        assert settings.root == project.resolve()
        assert settings.resources_path == settings.root / "src/resources"
        assert settings.pages_path == settings.root / "src/app/dashboard"
        assert settings.prisma_schema_path.is_file()
        assert settings.push_argv() == ["npx", "prisma", "db", "push"]
        assert settings.generate_argv() == ["npx", "prisma", "generate"]
        assert settings.roles == ["ADMIN", "EDITOR", "VIEWER"]
        assert settings.max_fields == 20

    def test_settings_file(self, project: Path) -> None:
        (project / "crudforge.yaml").write_text(
            "resourcesDir: lib/resources\n"
            "pushCommand: pnpm prisma db push --skip-generate\n"
            "roles: [ADMIN]\n"
            "root: /somewhere/else\n",
            encoding="utf-8",
        )
        settings = Settings.load(project)
        assert settings.resources_dir == "lib/resources"
        assert settings.push_argv() == ["pnpm", "prisma", "db", "push", "--skip-generate"]
        assert settings.roles == ["ADMIN"]
        assert settings.root == project.resolve()

    def test_empty_settings_file(self, project: Path) -> None:
        (project / "crudforge.yaml").write_text("", encoding="utf-8")
        assert Settings.load(project).update_schema is True

    def test_not_a_mapping(self, project: Path) -> None:
        (project / "crudforge.yaml").write_text("- one\n- two\n", encoding="utf-8")
        with pytest.raises(DescriptorError, match="mapping"):
            Settings.load(project)

    def test_invalid_value(self, project: Path) -> None:
        (project / "crudforge.yaml").write_text("maxFields: 0\n", encoding="utf-8")
        with pytest.raises(DescriptorError, match="crudforge.yaml"):
            Settings.load(project)

    def test_malformed_yaml(self, project: Path) -> None:
        (project / "crudforge.yaml").write_text("roles: [ADMIN\n", encoding="utf-8")
        with pytest.raises(DescriptorError, match="Invalid YAML"):
            Settings.load(project)
