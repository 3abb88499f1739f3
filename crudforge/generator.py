"""
Crudforge Generator - Writes resource bundles into a dashboard checkout

File names and directories are a pure function of the resource name.
Existing files are never overwritten; each skipped file becomes a warning.
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from crudforge.config import Settings
from crudforge.errors import CommandError, SchemaUpdateError
from crudforge.naming import plural
from crudforge.render import ModelTemplates, templates
from crudforge.spec import ResourceDescriptor

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# GENERATED FILE TRACKING
# ═══════════════════════════════════════════════════════════════════════════


@dataclass
class GeneratedFile:
    """Represents a generated file."""

    path: str  # Relative path from project root
    content: str
    kind: str | None = None  # Template kind that produced it


@dataclass
class GenerationResult:
    """Result of a generator run."""

    files: list[GeneratedFile] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return len(self.errors) == 0


def write_files(root: Path, files: list[GeneratedFile], result: GenerationResult) -> None:
    """Write files under root, skipping any that already exist."""
    for generated in files:
        full_path = root / generated.path
        if full_path.exists():
            message = f"File {generated.path} already exists, skipping..."
            logger.warning(message)
            result.warnings.append(message)
            result.skipped.append(generated.path)
            continue

        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(generated.content, encoding="utf-8")
        logger.debug("wrote %s", generated.path)
        result.files.append(generated)


# ═══════════════════════════════════════════════════════════════════════════
# LAYOUT
# ═══════════════════════════════════════════════════════════════════════════


RESOURCE_FILES = {
    "schema": "schema.ts",
    "actions": "actions.ts",
    "components": "components.tsx",
    "routes": "routes.tsx",
    "index": "index.ts",
}


@dataclass(frozen=True)
class ResourceLayout:
    """Where the files for one model live, relative to the project root."""

    name: str
    resources_dir: str = "src/resources"
    pages_dir: str = "src/app/dashboard"

    @classmethod
    def for_settings(cls, name: str, settings: Settings) -> "ResourceLayout":
        return cls(name, settings.resources_dir, settings.pages_dir)

    @property
    def lower(self) -> str:
        return self.name.lower()

    @property
    def route(self) -> str:
        return plural(self.lower)

    @property
    def resource_dir(self) -> str:
        return f"{self.resources_dir}/{self.lower}"

    @property
    def page_dir(self) -> str:
        return f"{self.pages_dir}/{self.route}"

    def resource_file(self, kind: str) -> str:
        return f"{self.resource_dir}/{RESOURCE_FILES[kind]}"

    @property
    def page_files(self) -> dict[str, str]:
        """Page template kind -> relative path."""
        return {
            "page": f"{self.page_dir}/page.tsx",
            "page_components": f"{self.page_dir}/components.tsx",
            "new_page": f"{self.page_dir}/new/page.tsx",
            "edit_page": f"{self.page_dir}/[{self.lower}Id]/page.tsx",
        }

    def paths(self, include_pages: bool = True) -> dict[str, str]:
        """Every template kind mapped to its relative path."""
        mapping = {kind: self.resource_file(kind) for kind in RESOURCE_FILES}
        if include_pages:
            mapping.update(self.page_files)
        return mapping


# ═══════════════════════════════════════════════════════════════════════════
# RESOURCE GENERATOR
# ═══════════════════════════════════════════════════════════════════════════


class ResourceGenerator:
    """
    Generates the resource bundle for a model.

    Renders every template for the descriptor, writes the files that do not
    exist yet, and optionally appends the Prisma model block.
    """

    def __init__(self, settings: Settings | None = None, model_templates: ModelTemplates | None = None):
        self.settings = settings or Settings()
        self.templates = model_templates or templates

    def layout(self, name: str) -> ResourceLayout:
        return ResourceLayout.for_settings(name, self.settings)

    def render(self, resource: ResourceDescriptor) -> list[GeneratedFile]:
        """Render the bundle in memory without touching the filesystem."""
        layout = self.layout(resource.name)
        rendered = self.templates.render_all(resource, self.settings.roles)
        return [
            GeneratedFile(path=path, content=rendered[kind], kind=kind)
            for kind, path in layout.paths(resource.create_dashboard).items()
        ]

    def generate(self, resource: ResourceDescriptor, update_schema: bool | None = None) -> GenerationResult:
        """
        Write the bundle for a resource.

        Args:
            resource: Model descriptor
            update_schema: Append the Prisma model; defaults to the setting

        Returns:
            GenerationResult with written files and skip warnings
        """
        result = GenerationResult()
        logger.info("generating resource %s", resource.name)
        write_files(self.settings.root, self.render(resource), result)

        if update_schema is None:
            update_schema = self.settings.update_schema
        if update_schema:
            block = self.templates.prisma_model(resource.name, resource.fields)
            if not update_prisma_schema(self.settings.prisma_schema_path, resource.name, block):
                result.warnings.append(f"Model {resource.name} already exists in schema.prisma")

        return result


# ═══════════════════════════════════════════════════════════════════════════
# PRISMA SCHEMA
# ═══════════════════════════════════════════════════════════════════════════


MODEL_PATTERN = re.compile(r"model\s+(\w+)\s*{")


def list_prisma_models(schema_text: str) -> list[str]:
    """Model names declared in a Prisma schema, in file order."""
    return MODEL_PATTERN.findall(schema_text)


def update_prisma_schema(schema_path: Path, name: str, block: str) -> bool:
    """
    Append a model block to schema.prisma.

    Returns:
        False when the model is already declared, True when appended.

    Raises:
        SchemaUpdateError: the schema file is missing or unreadable.
    """
    try:
        current = schema_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaUpdateError(f"Cannot read Prisma schema {schema_path}: {e}") from e

    if re.search(rf"model\s+{re.escape(name)}\s*{{", current):
        logger.warning("Model %s already exists in %s, skipping", name, schema_path.name)
        return False

    separator = "" if current.endswith("\n") or not current else "\n"
    try:
        with schema_path.open("a", encoding="utf-8") as f:
            f.write(f"{separator}\n{block}")
    except OSError as e:
        raise SchemaUpdateError(f"Cannot update Prisma schema {schema_path}: {e}") from e

    logger.info("added model %s to %s", name, schema_path)
    return True


# ═══════════════════════════════════════════════════════════════════════════
# CHILD PROCESSES
# ═══════════════════════════════════════════════════════════════════════════


def run_command(argv: list[str], cwd: Path) -> str:
    """Run a command to completion; non-zero exit raises CommandError."""
    logger.info("running %s", " ".join(argv))
    try:
        proc = subprocess.run(argv, cwd=cwd, capture_output=True, text=True, check=False)
    except OSError as e:
        raise CommandError(argv, 127, str(e)) from e

    output = (proc.stdout or "") + (proc.stderr or "")
    if proc.returncode != 0:
        raise CommandError(argv, proc.returncode, output)
    return output


def push_schema(settings: Settings, models: list[str] | None = None) -> str:
    """
    Push the Prisma schema and regenerate the client.

    Files already written are left in place when either command fails.
    """
    argv = settings.push_argv()
    if models:
        argv = [*argv, "--accept-data-loss"]
        logger.info("pushing models %s", ", ".join(models))
    output = run_command(argv, settings.root)
    output += run_command(settings.generate_argv(), settings.root)
    return output


# ═══════════════════════════════════════════════════════════════════════════
# PUBLIC API
# ═══════════════════════════════════════════════════════════════════════════


def generate_resource(
    resource: ResourceDescriptor | str | Path,
    settings: Settings | None = None,
    update_schema: bool | None = None,
) -> GenerationResult:
    """
    Generate a resource bundle from a descriptor.

    Args:
        resource: ResourceDescriptor object, YAML string, or path to YAML file
        settings: Project settings; defaults to the current directory
        update_schema: Override settings.update_schema

    Returns:
        GenerationResult with generated files and warnings
    """
    if isinstance(resource, (str, Path)):
        path = Path(resource)
        if isinstance(resource, Path) or "\n" not in resource:
            resource = ResourceDescriptor.from_file(path)
        else:
            resource = ResourceDescriptor.from_yaml(str(resource))

    return ResourceGenerator(settings).generate(resource, update_schema)
