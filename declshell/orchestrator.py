"""Pipeline orchestration for a shell synthesis run."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .assembler import DeclarationAssembler
from .banner import render_banner
from .config import ShellConfig
from .graph import TypeGraph
from .logging import get_logger
from .models import TypeDescriptor
from .provider import LoadedLibrary, MetadataProvider
from .writer import ShellWriter


@dataclass
class ShellResult:
    """Outcome of a synthesis run."""

    text: str
    type_count: int
    skipped: Tuple[str, ...]
    path: Optional[Path] = None


class Orchestrator:
    """Coordinates metadata loading, filtering and assembly."""

    def __init__(self, config: ShellConfig, provider: MetadataProvider | None = None) -> None:
        self.config = config
        self.provider = provider or MetadataProvider(config.search_paths)
        self.logger = get_logger("orchestrator")

    def run(self) -> ShellResult:
        """Synthesize the shell for the configured library.

        Raises ``UsageError`` when no library was configured and lets
        provider errors propagate: a run without the full type graph is
        never attempted.
        """
        library_path = self.config.require_library()
        self.logger.info("Starting shell synthesis for %s", library_path)
        loaded = self.provider.load(library_path)

        kept, skipped = filter_types(loaded.library.types, self.config.ignored)
        if skipped:
            self.logger.info("Ignoring %d types: %s", len(skipped), ", ".join(skipped))

        text = self.render(loaded, kept)
        result = ShellResult(text=text, type_count=len(kept), skipped=tuple(skipped))

        if self.config.output_path is not None:
            output_path = self.config.output_path
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(text, encoding="utf-8")
            result.path = output_path
            self.logger.info("Shell written to %s", output_path)
        return result

    def render(self, loaded: LoadedLibrary, types: List[TypeDescriptor]) -> str:
        graph: TypeGraph = loaded.graph(types)
        banner = None
        if self.config.emit_banner:
            banner = render_banner(
                loaded.library,
                ignored=self.config.ignored,
                templates_dir=self.config.templates_dir,
            )
        writer = ShellWriter(use_tabs=self.config.use_tabs, indent_size=self.config.indent_size)
        DeclarationAssembler(graph, self.config).assemble(loaded.library, writer, banner=banner)
        self.logger.debug("Rendered %d lines", len(writer.lines))
        return writer.text()


def filter_types(
    types: Tuple[TypeDescriptor, ...], ignored: frozenset[str] | set[str]
) -> Tuple[List[TypeDescriptor], List[str]]:
    """Drop non-public types, ignored namespaces and ignored top-level types.

    Types nested in a dropped type are dropped with it.
    """
    by_id = {descriptor.id: descriptor for descriptor in types}
    kept: List[TypeDescriptor] = []
    skipped: List[str] = []
    for descriptor in types:
        outermost = _outermost(descriptor, by_id)
        if not descriptor.is_public or not outermost.is_public or _is_ignored(outermost, ignored):
            skipped.append(descriptor.id)
        else:
            kept.append(descriptor)
    return kept, skipped


def _outermost(descriptor: TypeDescriptor, by_id: Dict[str, TypeDescriptor]) -> TypeDescriptor:
    while descriptor.enclosing_id is not None and descriptor.enclosing_id in by_id:
        descriptor = by_id[descriptor.enclosing_id]
    return descriptor


def _is_ignored(descriptor: TypeDescriptor, ignored: frozenset[str] | set[str]) -> bool:
    if descriptor.namespace and descriptor.namespace in ignored:
        return True
    if descriptor.id in ignored:
        return True
    return descriptor.name in ignored


__all__ = ["Orchestrator", "ShellResult", "filter_types"]
