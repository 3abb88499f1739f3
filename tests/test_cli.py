"""Tests for the crudforge command line."""

import subprocess
from pathlib import Path
from unittest import mock

import pytest
from typer.testing import CliRunner

from crudforge import __version__
from crudforge.cli import app

runner = CliRunner()


def invoke(project: Path, *args: str, input: str | None = None):
    return runner.invoke(app, ["--root", str(project), *args], input=input)


def ok(stdout: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess([], 0, stdout=stdout, stderr="")


class TestVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert f"crudforge v{__version__}" in result.output


class TestCreateModel:
    """Tests for create-model."""

    def test_from_flags(self, project: Path) -> None:
        result = invoke(project, "create-model", "--name", "Widget", "--field", "label:String", "--field", "price:Float:default=0")
        assert result.exit_code == 0, result.output
        schema = (project / "src/resources/widget/schema.ts").read_text(encoding="utf-8")
        assert "  label: z.string(),\n" in schema
        assert "  price: z.number().default(0),\n" in schema
        assert (project / "src/app/dashboard/widgets/page.tsx").is_file()
        assert "model Widget {" in (project / "prisma/schema.prisma").read_text(encoding="utf-8")

    def test_no_dashboard_no_schema(self, project: Path) -> None:
        before = (project / "prisma/schema.prisma").read_text(encoding="utf-8")
        result = invoke(project, "create-model", "--name", "Widget", "--no-dashboard", "--no-schema")
        assert result.exit_code == 0, result.output
        assert not (project / "src/app").exists()
        assert (project / "prisma/schema.prisma").read_text(encoding="utf-8") == before

    def test_from_spec_file(self, project: Path, tmp_path: Path) -> None:
        spec = tmp_path / "gadget.yaml"
        spec.write_text(
            "name: Gadget\n"
            "fields:\n"
            "  - name: owner\n"
            "    type: Relation\n"
            "    relationModel: User\n"
            "    relationOnDelete: CASCADE\n",
            encoding="utf-8",
        )
        result = invoke(project, "create-model", "--spec", str(spec))
        assert result.exit_code == 0, result.output
        prisma = (project / "prisma/schema.prisma").read_text(encoding="utf-8")
        assert "  ownerId String\n" in prisma
        assert "  owner User @relation(fields: [ownerId], references: [id], onDelete: CASCADE)\n" in prisma

    def test_interactive(self, project: Path) -> None:
        answers = "Widget\n\n1\nlabel\n\n\n\n\n\n"
        result = invoke(project, "create-model", input=answers)
        assert result.exit_code == 0, result.output
        assert (project / "src/resources/widget/index.ts").is_file()

    def test_invalid_model_name(self, project: Path) -> None:
        result = invoke(project, "create-model", "--name", "widget")
        assert result.exit_code == 1
        assert "Error" in result.output
        assert not (project / "src").exists()

    def test_invalid_field(self, project: Path) -> None:
        result = invoke(project, "create-model", "--name", "Widget", "--field", "count:Int:default=lots")
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_too_many_fields(self, project: Path) -> None:
        (project / "crudforge.yaml").write_text("maxFields: 1\n", encoding="utf-8")
        result = invoke(project, "create-model", "--name", "Widget", "-f", "a", "-f", "b")
        assert result.exit_code == 1
        assert "Maximum 1 fields allowed" in result.output

    def test_rerun_skips_existing(self, project: Path) -> None:
        invoke(project, "create-model", "--name", "Widget")
        result = invoke(project, "create-model", "--name", "Widget")
        assert result.exit_code == 0, result.output
        assert "Skipped" in result.output

    def test_push(self, project: Path) -> None:
        with mock.patch("crudforge.generator.subprocess.run", return_value=ok()) as run:
            result = invoke(project, "create-model", "--name", "Widget", "--push")
        assert result.exit_code == 0, result.output
        assert run.call_count == 2
        assert "Schema pushed" in result.output

    def test_push_failure(self, project: Path) -> None:
        failed = subprocess.CompletedProcess([], 1, stdout="", stderr="P1001: cannot reach database")
        with mock.patch("crudforge.generator.subprocess.run", return_value=failed):
            result = invoke(project, "create-model", "--name", "Widget", "--push")
        assert result.exit_code == 1
        assert "Command failed (1)" in result.output
        # Files written before the push stay in place
        assert (project / "src/resources/widget/schema.ts").is_file()

    def test_missing_prisma_schema(self, project: Path) -> None:
        (project / "prisma/schema.prisma").unlink()
        result = invoke(project, "create-model", "--name", "Widget")
        assert result.exit_code == 1
        assert "Error" in result.output


class TestCreateResource:
    """Tests for create-resource."""

    def test_from_spec_file(self, project: Path, tmp_path: Path) -> None:
        spec = tmp_path / "post.yaml"
        spec.write_text(
            "name: Post\n"
            "enableBulkActions: false\n"
            "fields:\n"
            "  - name: title\n"
            "    required: true\n"
            "  - name: status\n"
            "    type: select\n",
            encoding="utf-8",
        )
        result = invoke(project, "create-resource", "--spec", str(spec))
        assert result.exit_code == 0, result.output
        assert (project / "src/resources/posts/prisma-model.txt").is_file()
        assert "bulkDelete" not in (project / "src/resources/posts/actions.ts").read_text(encoding="utf-8")
        assert "prisma-model.txt" in result.output


class TestCreatePage:
    """Tests for create-page."""

    def test_create_page(self, project: Path) -> None:
        result = invoke(project, "create-page", "--name", "widget", "--route", "widgets", "--title", "Widgets")
        assert result.exit_code == 0, result.output
        assert (project / "src/app/dashboard/widgets/[widgetId]/page.tsx").is_file()
        assert "/dashboard/widgets" in result.output

    def test_route_outside_dashboard(self, project: Path) -> None:
        result = invoke(project, "create-page", "--name", "x", "--route", "../../../escaped", "--title", "X")
        assert result.exit_code == 1
        assert not (project / "escaped").exists()
        assert not (project.parent / "escaped").exists()

    def test_missing_option(self, project: Path) -> None:
        result = invoke(project, "create-page", "--name", "widget")
        assert result.exit_code != 0


class TestVerify:
    """Tests for the verify command."""

    def test_clean(self, project: Path) -> None:
        invoke(project, "create-model", "--name", "Widget", "-f", "label")
        result = invoke(project, "verify", "Widget")
        assert result.exit_code == 0, result.output
        assert "All checks passed!" in result.output

    def test_clean_without_dashboard(self, project: Path) -> None:
        invoke(project, "create-model", "--name", "Widget", "-f", "label", "--no-dashboard")
        result = invoke(project, "verify", "Widget")
        assert result.exit_code == 0, result.output
        assert "All checks passed!" in result.output

    @pytest.mark.parametrize("args,answers", [(["--fix"], None), ([], "\n")])
    def test_fix(self, project: Path, args: list, answers: str | None) -> None:
        invoke(project, "create-model", "--name", "Widget", "-f", "label")
        routes = project / "src/resources/widget/routes.tsx"
        routes.write_text("export const nothing = []\n", encoding="utf-8")

        result = invoke(project, "verify", "Widget", *args, input=answers)
        assert result.exit_code == 0, result.output
        assert "Missing column definitions" in result.output
        assert "export const columns" in routes.read_text(encoding="utf-8")

    def test_declined_fix(self, project: Path) -> None:
        invoke(project, "create-model", "--name", "Widget", "-f", "label")
        routes = project / "src/resources/widget/routes.tsx"
        routes.write_text("export const nothing = []\n", encoding="utf-8")

        result = invoke(project, "verify", "Widget", "--no-fix")
        assert result.exit_code == 1
        assert routes.read_text(encoding="utf-8") == "export const nothing = []\n"

    def test_unknown_model(self, project: Path) -> None:
        result = invoke(project, "verify", "Nothing")
        assert result.exit_code == 1
        assert "File not found or cannot be read" in result.output


class TestPushModel:
    """Tests for push-model."""

    def test_all(self, project: Path) -> None:
        with mock.patch("crudforge.generator.subprocess.run", return_value=ok("pushed\n")) as run:
            result = invoke(project, "push-model", "--all")
        assert result.exit_code == 0, result.output
        assert run.call_args_list[0].args[0][-1] == "--accept-data-loss"
        assert "Models pushed successfully!" in result.output

    def test_interactive_selection(self, project: Path) -> None:
        invoke(project, "create-model", "--name", "Widget")
        with mock.patch("crudforge.generator.subprocess.run", return_value=ok()):
            result = invoke(project, "push-model", input="2\n")
        assert result.exit_code == 0, result.output
        assert "  - Widget" in result.output
        assert "  - User" not in result.output

    def test_unknown_model(self, project: Path) -> None:
        with mock.patch("crudforge.generator.subprocess.run") as run:
            result = invoke(project, "push-model", "--model", "Nope")
        assert result.exit_code == 1
        assert "Unknown model(s): Nope" in result.output
        run.assert_not_called()

    def test_no_models(self, project: Path) -> None:
        (project / "prisma/schema.prisma").write_text("generator client {\n}\n", encoding="utf-8")
        result = invoke(project, "push-model", "--all")
        assert result.exit_code == 1
        assert "No models found" in result.output
