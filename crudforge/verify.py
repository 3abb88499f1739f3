"""
Crudforge Verify - Heuristic conformance check for generated resources

Re-reads each generated file and checks for substrings the templates are
known to emit. Failing files carry a fix that re-renders the template and
overwrites the file. Missing files are reported without a fix.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from crudforge.config import Settings
from crudforge.generator import ResourceLayout
from crudforge.render import ModelTemplates, renders_text_input, templates
from crudforge.spec import AUDIT_FIELDS, FieldDescriptor, FieldType

logger = logging.getLogger(__name__)

AUDIT_DECLARATIONS = (
    "id: z.string().optional()",
    "createdAt: z.date().optional()",
    "updatedAt: z.date().optional()",
)
UNREADABLE = "File not found or cannot be read"


@dataclass
class Issue:
    """Problems found in one file."""

    file: str
    problems: list[str]
    fix: Callable[[], None] | None = None


@dataclass
class VerificationReport:
    name: str
    issues: list[Issue] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return len(self.issues) > 0

    @property
    def fixable(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.fix is not None]

    def apply_fixes(self) -> list[str]:
        """Run every available fix; returns the files rewritten."""
        fixed = []
        for issue in self.fixable:
            issue.fix()
            logger.info("regenerated %s", issue.file)
            fixed.append(issue.file)
        return fixed


# ═══════════════════════════════════════════════════════════════════════════
# FIELD RECOVERY
# ═══════════════════════════════════════════════════════════════════════════


FIELD_LINE = re.compile(r"^\s*(\w+):\s*(z\..+?),?\s*$", re.MULTILINE)
DEFAULT_CALL = re.compile(r"\.default\((.*)\)")

ZOD_TYPES = (
    ("z.number().int()", FieldType.INT),
    ("z.number()", FieldType.FLOAT),
    ("z.boolean()", FieldType.BOOLEAN),
    ("z.date()", FieldType.DATETIME),
    ("z.any()", FieldType.JSON),
    ("z.bigint()", FieldType.BIGINT),
)


ESCAPES = {"n": "\n", "r": "\r", "t": "\t"}


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"`":
        return re.sub(r"\\(.)", lambda m: ESCAPES.get(m.group(1), m.group(1)), value[1:-1])
    return value


def _parse_default(raw: str, field_type: FieldType) -> str:
    raw = raw.strip()
    if field_type == FieldType.DATETIME:
        if raw == "() => new Date()":
            return "now()"
        match = re.fullmatch(r"new Date\((.*)\)", raw)
        return _unquote(match.group(1)) if match else raw
    if field_type == FieldType.BIGINT:
        return raw.removesuffix("n")
    return _unquote(raw)


def extract_fields_from_schema(schema_text: str) -> list[FieldDescriptor]:
    """
    Recover operator fields from a generated schema.ts.

    Relation fields come back as their <name>Id string column; that is all
    the regenerated form and table need.
    """
    fields: list[FieldDescriptor] = []
    seen: set[str] = set()

    for name, expr in FIELD_LINE.findall(schema_text):
        if name in AUDIT_FIELDS or name in seen:
            continue
        seen.add(name)

        field_type = FieldType.STRING
        for prefix, candidate in ZOD_TYPES:
            if expr.startswith(prefix):
                field_type = candidate
                break

        data: dict = {
            "name": name,
            "type": field_type,
            "is_required": ".optional()" not in expr,
        }
        default = DEFAULT_CALL.search(expr)
        if default:
            data["has_default"] = True
            data["default_value"] = _parse_default(default.group(1), field_type)

        try:
            fields.append(FieldDescriptor.model_validate(data))
        except ValidationError:
            logger.warning("Ignoring unparseable default for field %s", name)
            data.pop("has_default", None)
            data.pop("default_value", None)
            fields.append(FieldDescriptor.model_validate(data))

    return fields


# ═══════════════════════════════════════════════════════════════════════════
# VERIFICATION
# ═══════════════════════════════════════════════════════════════════════════


def _read(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def _rewriter(path: Path, render: Callable[[], str]) -> Callable[[], None]:
    def fix() -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render(), encoding="utf-8")

    return fix


class Verifier:
    """Checks the generated bundle for one model."""

    def __init__(self, settings: Settings | None = None, model_templates: ModelTemplates | None = None):
        self.settings = settings or Settings()
        self.templates = model_templates or templates

    def verify(self, name: str, check_pages: bool = True) -> VerificationReport:
        report = VerificationReport(name=name)
        layout = ResourceLayout.for_settings(name, self.settings)
        root = self.settings.root
        t = self.templates

        schema_rel = layout.resource_file("schema")
        schema_text = _read(root / schema_rel)
        if schema_text is None:
            # Nothing else can be regenerated without the field list
            report.issues.append(Issue(schema_rel, [UNREADABLE]))
            return report

        fields = extract_fields_from_schema(schema_text)
        logger.debug("recovered %d fields from %s", len(fields), schema_rel)

        if not all(decl in schema_text for decl in AUDIT_DECLARATIONS):
            report.issues.append(
                Issue(
                    schema_rel,
                    ["Missing standard fields (id, createdAt, updatedAt)"],
                    _rewriter(root / schema_rel, lambda: t.schema(name, fields)),
                )
            )

        def components_problems(text: str) -> list[str]:
            problems = []
            if any(renders_text_input(f) for f in fields) and "value={field.value || ''}" not in text:
                problems.append("Missing controlled input handling")
            if "handleSubmit = async (values:" not in text:
                problems.append("Incorrect form submission handling")
            if "defaultValues: {" not in text:
                problems.append("Missing default values")
            return problems

        def actions_problems(text: str) -> list[str]:
            problems = []
            if "try {" not in text:
                problems.append("Missing error handling")
            if "revalidatePath" not in text:
                problems.append("Missing path revalidation")
            if "prisma." in text and "db." not in text:
                problems.append("Using incorrect database client")
            return problems

        def routes_problems(text: str) -> list[str]:
            problems = []
            if "export const columns" not in text:
                problems.append("Missing column definitions")
            if "actions.remove(" not in text:
                problems.append("Missing delete action")
            return problems

        def index_problems(text: str) -> list[str]:
            problems = []
            if "navigation: {" not in text:
                problems.append("Missing navigation entry")
            if f"{name}Schema" not in text:
                problems.append("Missing schema export")
            return problems

        def page_problems(text: str) -> list[str]:
            problems = []
            if "getServerSession" not in text:
                problems.append("Missing authentication")
            if "action={" not in text:
                problems.append("Missing action prop in DashboardShell")
            return problems

        def list_problems(text: str) -> list[str]:
            if f"export function {name}List" not in text:
                return ["Missing list component"]
            return []

        checks: list[tuple[str, Callable[[str], list[str]], Callable[[], str]]] = [
            (layout.resource_file("components"), components_problems, lambda: t.components(name, fields)),
            (layout.resource_file("actions"), actions_problems, lambda: t.actions(name, fields)),
            (layout.resource_file("routes"), routes_problems, lambda: t.routes(name, fields)),
            (
                layout.resource_file("index"),
                index_problems,
                lambda: t.index(name, fields, self.settings.roles),
            ),
        ]
        if check_pages and not (root / layout.page_dir).is_dir():
            logger.info("no dashboard pages at %s, skipping page checks", layout.page_dir)
            check_pages = False
        if check_pages:
            pages = layout.page_files
            checks += [
                (pages["page"], page_problems, lambda: t.page(name, fields)),
                (pages["page_components"], list_problems, lambda: t.page_components(name, fields)),
                (pages["new_page"], page_problems, lambda: t.new_page(name, fields)),
                (pages["edit_page"], page_problems, lambda: t.edit_page(name, fields)),
            ]

        for relative, check, render in checks:
            text = _read(root / relative)
            if text is None:
                report.issues.append(Issue(relative, [UNREADABLE]))
                continue
            problems = check(text)
            if problems:
                report.issues.append(Issue(relative, problems, _rewriter(root / relative, render)))

        return report


def verify_resource(name: str, settings: Settings | None = None, check_pages: bool = True) -> VerificationReport:
    """Verify the generated files for a model."""
    return Verifier(settings).verify(name, check_pages)
