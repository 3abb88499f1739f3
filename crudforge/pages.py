"""
Crudforge Pages - Standalone dashboard page scaffolds

Emits list, new, edit, loading and error pages for a route that already
has (or will get) a resource module.
"""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, Field, ValidationError, field_validator

from crudforge.config import Settings
from crudforge.errors import DescriptorError
from crudforge.generator import GeneratedFile, GenerationResult, write_files
from crudforge.naming import pascal_case
from crudforge.render import render_template

logger = logging.getLogger(__name__)

PAGE_TEMPLATES = {
    "page.tsx": "page/page.tsx.j2",
    "new/page.tsx": "page/new.tsx.j2",
    "[{param}]/page.tsx": "page/detail.tsx.j2",
    "loading.tsx": "page/loading.tsx.j2",
    "error.tsx": "page/error.tsx.j2",
}


class PageDescriptor(BaseModel):
    """Input for the page scaffolds"""

    name: str = Field(..., min_length=1)
    route: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str = ""

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        name = pascal_case(v.strip())
        if not name.isidentifier():
            raise ValueError(f"Page name {v!r} is not a valid identifier")
        return name

    @field_validator("route")
    @classmethod
    def normalize_route(cls, v: str) -> str:
        route = v.strip().strip("/")
        if not route:
            raise ValueError("Route is required")
        if ".." in re.split(r"[/\\]", route):
            raise ValueError(f"Route {v!r} must stay under the dashboard")
        return route

    @property
    def lower(self) -> str:
        return self.name.lower()

    @property
    def param(self) -> str:
        return f"{self.lower}Id"

    @classmethod
    def parse(cls, **data: str | None) -> "PageDescriptor":
        try:
            return cls.model_validate({k: v for k, v in data.items() if v is not None})
        except ValidationError as e:
            raise DescriptorError(f"Invalid page: {e}", data) from e


def render_pages(page: PageDescriptor, pages_dir: str = "src/app/dashboard") -> list[GeneratedFile]:
    """Render the five page files for a route."""
    context = {
        "name": page.name,
        "lower": page.lower,
        "param": page.param,
        "route": page.route,
        "title": page.title,
        "description": page.description,
    }
    return [
        GeneratedFile(
            path=f"{pages_dir}/{page.route}/{relative.format(param=page.param)}",
            content=render_template(template, context),
            kind=template,
        )
        for relative, template in PAGE_TEMPLATES.items()
    ]


def create_page(page: PageDescriptor, settings: Settings) -> GenerationResult:
    """Write the page scaffolds, never clobbering existing files."""
    result = GenerationResult()
    logger.info("creating pages for /dashboard/%s", page.route)
    write_files(settings.root, render_pages(page, settings.pages_dir), result)
    return result
