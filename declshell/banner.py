"""Comment banner rendered at the top of every generated shell."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from jinja2 import Environment, FileSystemLoader

from .models import LibraryMetadata

BANNER_TEMPLATE = "banner.j2"


def create_environment(templates_dir: Path | None = None) -> Environment:
    """Template environment searching ``templates_dir`` before the bundled templates."""
    directories: List[str] = []
    if templates_dir:
        directories.append(str(templates_dir))
    default_dir = str(Path(__file__).with_name("templates"))
    if default_dir not in directories:
        directories.append(default_dir)
    loader = FileSystemLoader(directories)
    return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


def render_banner(
    library: LibraryMetadata,
    *,
    ignored: Iterable[str] = (),
    templates_dir: Path | None = None,
) -> str:
    template = create_environment(templates_dir).get_template(BANNER_TEMPLATE)
    return template.render(library=library, ignored=sorted(ignored)).rstrip("\n")


__all__ = ["BANNER_TEMPLATE", "create_environment", "render_banner"]
