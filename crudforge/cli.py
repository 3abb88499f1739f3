"""
Crudforge CLI - Command-line interface for the dashboard generators

Usage:
    crudforge create-model [--name Widget --field label:String ...]
    crudforge create-resource [--spec resource.yaml]
    crudforge create-page --name widget --route widgets --title Widgets
    crudforge verify <ModelName>
    crudforge push-model [--model Widget]
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from crudforge import __version__
from crudforge.config import Settings
from crudforge.enhanced import create_enhanced_resource
from crudforge.errors import CommandError, DescriptorError
from crudforge.generator import GenerationResult, ResourceGenerator, list_prisma_models, push_schema
from crudforge.log import configure_logging
from crudforge.pages import PageDescriptor, create_page as write_pages
from crudforge.prompts import PromptSession
from crudforge.spec import (
    MODEL_NAME_PATTERN,
    EnhancedResource,
    ResourceDescriptor,
    parse_field_spec,
)
from crudforge.verify import verify_resource

app = typer.Typer(
    name="crudforge",
    help="Generate CRUD dashboard resources for a Next.js + Prisma project",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


@app.callback()
def main_options(
    ctx: typer.Context,
    root: Path = typer.Option(
        None,
        "--root", "-C",
        help="Project root (defaults to the current directory)",
        file_okay=False,
        resolve_path=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Crudforge dashboard generators."""
    configure_logging(verbose)
    ctx.obj = root


def _settings(ctx: typer.Context) -> Settings:
    return Settings.load(ctx.obj)


def _fail(e: Exception) -> None:
    err_console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
    if isinstance(e, CommandError) and e.output:
        err_console.print(e.output, markup=False, highlight=False)
    raise typer.Exit(1)


@app.command("create-model")
def create_model(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Model name, e.g. Widget"),
    fields: Optional[List[str]] = typer.Option(
        None,
        "--field", "-f",
        help="Field as name:Type[:optional][:unique][:default=v][:relation=Model[.field]]",
    ),
    spec_file: Optional[Path] = typer.Option(
        None,
        "--spec", "-s",
        help="YAML resource descriptor",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    dashboard: bool = typer.Option(True, "--dashboard/--no-dashboard", help="Emit dashboard pages"),
    update_schema: Optional[bool] = typer.Option(
        None, "--schema/--no-schema", help="Append the model to prisma/schema.prisma"
    ),
    push: bool = typer.Option(False, "--push", help="Push the schema to the database afterwards"),
) -> None:
    """Generate the resource files and dashboard pages for a model."""
    try:
        settings = _settings(ctx)

        if spec_file is not None:
            resource = ResourceDescriptor.from_file(spec_file)
        elif name is not None:
            if not MODEL_NAME_PATTERN.match(name):
                raise DescriptorError(
                    f"Model name {name!r} must start with uppercase and contain only letters", name
                )
            parsed = [parse_field_spec(f) for f in fields or []]
            if len(parsed) > settings.max_fields:
                raise DescriptorError(f"Maximum {settings.max_fields} fields allowed", len(parsed))
            resource = ResourceDescriptor(name=name, fields=parsed, create_dashboard=dashboard)
        else:
            resource = PromptSession(console, max_fields=settings.max_fields).resource()

        result = ResourceGenerator(settings).generate(resource, update_schema)
        _show_result(result, f"Model {resource.name}")

        if push:
            rprint("\n[yellow]Pushing schema to the database...[/yellow]")
            push_schema(settings, [resource.name])
            rprint("[green]✓[/green] Schema pushed")
        else:
            _show_next_steps(
                [
                    "Review the generated files",
                    "Push your model to the database: crudforge push-model",
                    "Customize the generated components as needed",
                ]
            )

    except Exception as e:
        _fail(e)


@app.command("create-resource")
def create_resource(
    ctx: typer.Context,
    spec_file: Optional[Path] = typer.Option(
        None,
        "--spec", "-s",
        help="YAML enhanced resource definition",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
) -> None:
    """Generate a form-oriented resource with bulk actions."""
    try:
        settings = _settings(ctx)
        if spec_file is not None:
            resource = EnhancedResource.from_file(spec_file)
        else:
            resource = PromptSession(console, max_fields=settings.max_fields).enhanced_resource()

        result = create_enhanced_resource(resource, settings)
        _show_result(result, f"Resource {resource.name}")

        steps = [
            "Add the Prisma model from prisma-model.txt to your schema.prisma file",
            "Push your model to the database: crudforge push-model",
            f"Create pages: crudforge create-page --name {resource.lower} "
            f"--route {resource.plural_lower} --title {resource.plural_name}",
        ]
        _show_next_steps(steps)

        if resource.enable_bulk_actions:
            rprint("\n[cyan]Bulk actions:[/cyan] delete selected rows, export to CSV")
        if resource.enable_file_upload:
            rprint("[cyan]File upload:[/cyan] configure cloud storage before production use")
        if resource.enable_rich_editor:
            rprint("[cyan]Rich editor:[/cyan] rich-editor fields render with the editor component")

    except Exception as e:
        _fail(e)


@app.command("create-page")
def create_page(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", "-n", help="Resource name, e.g. widget"),
    route: str = typer.Option(..., "--route", "-r", help="Route under /dashboard, e.g. widgets"),
    title: str = typer.Option(..., "--title", "-t", help="Page title"),
    description: str = typer.Option("", "--description", "-d", help="Page description"),
) -> None:
    """Generate list, new, edit, loading and error pages for a route."""
    try:
        settings = _settings(ctx)
        page = PageDescriptor.parse(name=name, route=route, title=title, description=description)
        result = write_pages(page, settings)
        rprint(f"Route: [cyan]/dashboard/{page.route}[/cyan]")
        _show_result(result, "Page")
    except Exception as e:
        _fail(e)


@app.command()
def verify(
    ctx: typer.Context,
    model_name: str = typer.Argument(..., help="Model name, e.g. Widget"),
    fix: Optional[bool] = typer.Option(
        None, "--fix/--no-fix", help="Fix issues without asking (default: ask)"
    ),
    pages: bool = typer.Option(True, "--pages/--no-pages", help="Also check dashboard pages"),
) -> None:
    """Check generated files for a model and optionally regenerate them."""
    try:
        settings = _settings(ctx)
        rprint(f"\n[cyan]Verifying {model_name} model...[/cyan]\n")
        report = verify_resource(model_name, settings, check_pages=pages)

        if not report.has_errors:
            rprint("[green]✓[/green] All checks passed!")
            return

        rprint("[yellow]Issues found:[/yellow]")
        for issue in report.issues:
            rprint(f"\n[dim]{escape(issue.file)}:[/dim]")
            for problem in issue.problems:
                rprint(f"[red]- {escape(problem)}[/red]")

        if not report.fixable:
            raise typer.Exit(1)

        if fix is None:
            fix = PromptSession(console).confirm_fix()
        if not fix:
            raise typer.Exit(1)

        rprint("\n[cyan]Fixing issues...[/cyan]")
        for path in report.apply_fixes():
            rprint(f"[green]✓[/green] Regenerated {escape(path)}")

        if len(report.fixable) < len(report.issues):
            rprint("[yellow]Some files are missing and could not be fixed[/yellow]")
            raise typer.Exit(1)

    except typer.Exit:
        raise
    except Exception as e:
        _fail(e)


@app.command("push-model")
def push_model(
    ctx: typer.Context,
    models: Optional[List[str]] = typer.Option(None, "--model", "-m", help="Model to push"),
    push_all: bool = typer.Option(False, "--all", help="Push every model in the schema"),
) -> None:
    """Push Prisma models to the database and regenerate the client."""
    try:
        settings = _settings(ctx)
        schema_path = settings.prisma_schema_path
        try:
            available = list_prisma_models(schema_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise DescriptorError(f"Cannot read {schema_path}: {e}", str(schema_path)) from e

        if not available:
            err_console.print("[red]No models found in schema.prisma[/red]")
            raise typer.Exit(1)

        if push_all:
            selected = available
        elif models:
            unknown = [m for m in models if m not in available]
            if unknown:
                raise DescriptorError(f"Unknown model(s): {', '.join(unknown)}", unknown)
            selected = list(models)
        else:
            selected = PromptSession(console).select_models(available)

        rprint("\n[yellow]Pushing selected models to database...[/yellow]")
        output = push_schema(settings, selected)
        if output.strip():
            console.print(output, markup=False, highlight=False)

        rprint("\n[green]✓[/green] Models pushed successfully!")
        for model in selected:
            rprint(f"  - {model}")

    except typer.Exit:
        raise
    except Exception as e:
        _fail(e)


@app.command()
def version() -> None:
    """Show crudforge version."""
    rprint(f"crudforge v{__version__}")


def _show_result(result: GenerationResult, label: str) -> None:
    """Show written and skipped files as a tree."""
    if result.files:
        rprint(f"[green]✓[/green] {label} created: {len(result.files)} files written")
        tree = Tree("[bold]Files[/bold]")
        for generated in result.files:
            tree.add(f"[dim]{escape(generated.path)}[/dim]")
        rprint(tree)
    else:
        rprint(f"[yellow]No files written for {label.lower()}[/yellow]")

    if result.skipped:
        table = Table(title="Skipped (already exist)")
        table.add_column("File", style="yellow")
        for path in result.skipped:
            table.add_row(escape(path))
        rprint(table)


def _show_next_steps(steps: list[str]) -> None:
    rprint("\n[cyan]Next steps:[/cyan]")
    for i, step in enumerate(steps, 1):
        rprint(f"  {i}. {step}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
