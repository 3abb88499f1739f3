"""Tests for crudforge.verify conformance checks."""

from pathlib import Path

import pytest

from crudforge.config import Settings
from crudforge.generator import ResourceGenerator
from crudforge.spec import FieldDescriptor, FieldType, ResourceDescriptor
from crudforge.verify import UNREADABLE, extract_fields_from_schema, verify_resource


def _file(settings: Settings, relative: str) -> Path:
    return settings.root / relative


class TestExtractFields:
    """Tests for recovering fields from schema.ts."""

    def test_round_trip(self, gadget: ResourceDescriptor) -> None:
        from crudforge.render import templates

        fields = extract_fields_from_schema(templates.schema(gadget.name, gadget.fields))
        assert [f.name for f in fields] == ["title", "price", "featured", "releasedAt", "ownerId"]
        title, price, featured, released, owner = fields
        assert price.type == FieldType.FLOAT
        assert price.default_value == "0"
        assert featured.type == FieldType.BOOLEAN
        assert featured.default_value == "false"
        assert released.type == FieldType.DATETIME
        assert released.is_required is False
        assert owner.type == FieldType.STRING

    def test_defaults(self) -> None:
        text = (
            "export const WidgetSchema = z.object({\n"
            "  id: z.string().optional(),\n"
            "  count: z.number().int().optional().default(5),\n"
            "  status: z.string().default('draft'),\n"
            "  startsAt: z.date().default(new Date('2024-01-01')),\n"
            "  seenAt: z.date().default(() => new Date()),\n"
            "})\n"
        )
        count, status, starts, seen = extract_fields_from_schema(text)
        assert (count.type, count.is_required, count.default_value) == (FieldType.INT, False, "5")
        assert status.default_value == "draft"
        assert starts.default_value == "2024-01-01"
        assert seen.default_value == "now()"

    def test_unparseable_default_dropped(self) -> None:
        fields = extract_fields_from_schema("  count: z.number().int().default(someConstant),\n")
        assert fields[0].has_default is False

    def test_escaped_string_default(self) -> None:
        text = "  note: z.string().default('line one\\nit\\'s'),\n  big: z.bigint().default(5n),\n"
        note, big = extract_fields_from_schema(text)
        assert note.default_value == "line one\nit's"
        assert (big.type, big.default_value) == (FieldType.BIGINT, "5")


class TestVerify:
    """Tests for verify_resource."""

    def test_fresh_bundle_is_clean(self, settings: Settings, widget: ResourceDescriptor) -> None:
        ResourceGenerator(settings).generate(widget)
        report = verify_resource("Widget", settings)
        assert report.issues == []
        assert report.has_errors is False

    def test_fresh_gadget_is_clean(self, settings: Settings, gadget: ResourceDescriptor) -> None:
        ResourceGenerator(settings).generate(gadget)
        assert verify_resource("Gadget", settings).issues == []

    def test_boolean_only_resource_is_clean(self, settings: Settings) -> None:
        """No text inputs means no controlled-input check."""
        resource = ResourceDescriptor(name="Flag", fields=[FieldDescriptor(name="enabled", type=FieldType.BOOLEAN)])
        ResourceGenerator(settings).generate(resource)
        assert verify_resource("Flag", settings).issues == []

    def test_missing_schema_stops(self, settings: Settings) -> None:
        report = verify_resource("Widget", settings)
        assert len(report.issues) == 1
        assert report.issues[0].file == "src/resources/widget/schema.ts"
        assert report.issues[0].problems == [UNREADABLE]
        assert report.fixable == []

    def test_broken_component_fixed(self, settings: Settings, widget: ResourceDescriptor) -> None:
        ResourceGenerator(settings).generate(widget)
        components = _file(settings, "src/resources/widget/components.tsx")
        original = components.read_text(encoding="utf-8")
        components.write_text(original.replace("value={field.value || ''}", "value={field.value}"), encoding="utf-8")

        report = verify_resource("Widget", settings)
        assert [i.file for i in report.issues] == ["src/resources/widget/components.tsx"]
        assert report.issues[0].problems == ["Missing controlled input handling"]

        assert report.apply_fixes() == ["src/resources/widget/components.tsx"]
        assert components.read_text(encoding="utf-8") == original
        assert verify_resource("Widget", settings).issues == []

    def test_wrong_database_client(self, settings: Settings, widget: ResourceDescriptor) -> None:
        ResourceGenerator(settings).generate(widget)
        actions = _file(settings, "src/resources/widget/actions.ts")
        actions.write_text(actions.read_text(encoding="utf-8").replace("db.", "prisma."), encoding="utf-8")

        problems = verify_resource("Widget", settings).issues[0].problems
        assert problems == ["Using incorrect database client"]

    def test_missing_audit_fields(self, settings: Settings, widget: ResourceDescriptor) -> None:
        ResourceGenerator(settings).generate(widget)
        schema = _file(settings, "src/resources/widget/schema.ts")
        schema.write_text(
            "export const WidgetSchema = z.object({\n  label: z.string(),\n})\n", encoding="utf-8"
        )

        report = verify_resource("Widget", settings)
        assert report.issues[0].problems == ["Missing standard fields (id, createdAt, updatedAt)"]
        report.apply_fixes()
        assert "  createdAt: z.date().optional(),\n" in schema.read_text(encoding="utf-8")
        assert "  label: z.string(),\n" in schema.read_text(encoding="utf-8")

    def test_page_without_session(self, settings: Settings, widget: ResourceDescriptor) -> None:
        ResourceGenerator(settings).generate(widget)
        page = _file(settings, "src/app/dashboard/widgets/new/page.tsx")
        page.write_text("export default function Page() { return null }\n", encoding="utf-8")

        issue = verify_resource("Widget", settings).issues[0]
        assert issue.file == "src/app/dashboard/widgets/new/page.tsx"
        assert issue.problems == ["Missing authentication", "Missing action prop in DashboardShell"]

    def test_missing_file_has_no_fix(self, settings: Settings, widget: ResourceDescriptor) -> None:
        ResourceGenerator(settings).generate(widget)
        _file(settings, "src/resources/widget/routes.tsx").unlink()

        report = verify_resource("Widget", settings)
        assert len(report.issues) == 1
        assert report.issues[0].problems == [UNREADABLE]
        assert report.issues[0].fix is None

    def test_resource_without_dashboard_is_clean(self, settings: Settings) -> None:
        """No page directory means the page checks are skipped."""
        ResourceGenerator(settings).generate(ResourceDescriptor(name="Widget", create_dashboard=False))
        assert verify_resource("Widget", settings).issues == []

    @pytest.mark.parametrize("check_pages,expected", [(True, 1), (False, 0)])
    def test_missing_page_reported(
        self, settings: Settings, widget: ResourceDescriptor, check_pages: bool, expected: int
    ) -> None:
        ResourceGenerator(settings).generate(widget)
        _file(settings, "src/app/dashboard/widgets/new/page.tsx").unlink()
        report = verify_resource("Widget", settings, check_pages=check_pages)
        assert len(report.issues) == expected
