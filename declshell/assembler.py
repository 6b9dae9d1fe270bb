"""Assembles type declarations into a complete, namespaced shell."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from .assembly_info import emit_assembly_info
from .config import ShellConfig
from .formatting import format_type_name, strip_arity, type_identity
from .graph import TypeGraph
from .interfaces import reduce_interfaces
from .logging import get_logger
from .members import MemberEmitter
from .models import LibraryMetadata, Method, TypeDescriptor, TypeKind, TypeReference
from .writer import ShellWriter

IMPLICIT_BASE_TYPES = frozenset({"System.Object", "System.ValueType", "System.Enum"})

DELEGATE_INVOKE = "Invoke"


class DeclarationAssembler:
    """Drives member emission for every type of a library snapshot."""

    def __init__(self, graph: TypeGraph, config: ShellConfig) -> None:
        self.graph = graph
        self.config = config
        self.logger = get_logger("assembler")
        self._emitters: Dict[TypeKind, Callable[[TypeDescriptor, ShellWriter], None]] = {
            TypeKind.CLASS: self._emit_class,
            TypeKind.STRUCT: self._emit_struct,
            TypeKind.INTERFACE: self._emit_interface,
            TypeKind.ENUM: self._emit_enum,
            TypeKind.DELEGATE: self._emit_delegate,
        }

    def assemble(
        self,
        library: LibraryMetadata,
        writer: Optional[ShellWriter] = None,
        *,
        banner: Optional[str] = None,
    ) -> ShellWriter:
        """Write the shell of ``library`` and return the writer holding it."""
        if writer is None:
            writer = ShellWriter(use_tabs=self.config.use_tabs, indent_size=self.config.indent_size)
        if banner:
            writer.line(banner)
        if not self.config.disable_assembly_info:
            emit_assembly_info(
                library,
                writer,
                copyright_notice=self.config.copyright_notice,
                graph=self.graph,
                aliases=self.config.keyword_aliases,
            )
        self.emit_types(writer)
        return writer

    def emit_types(self, writer: ShellWriter) -> None:
        """Emit every top-level type, opening a namespace block when it changes."""
        current_namespace: Optional[str] = None
        for descriptor in self.graph.top_level():
            if descriptor.namespace != current_namespace:
                if current_namespace:
                    writer.close_block()
                current_namespace = descriptor.namespace
                if current_namespace:
                    writer.open_block(f"namespace {current_namespace}")
            self.emit_type(descriptor, writer)
        if current_namespace:
            writer.close_block()

    def emit_type(self, descriptor: TypeDescriptor, writer: ShellWriter) -> None:
        self.logger.debug("Declaring %s %s", descriptor.kind.value, descriptor.full_name)
        self._emitters[descriptor.kind](descriptor, writer)

    # -- per-kind emitters ------------------------------------------------

    def _emit_class(self, descriptor: TypeDescriptor, writer: ShellWriter) -> None:
        if descriptor.is_static:
            modifiers = "static "
        elif descriptor.is_abstract:
            modifiers = "abstract "
        elif descriptor.is_sealed:
            modifiers = "sealed "
        else:
            modifiers = ""
        self._emit_composite(descriptor, writer, f"public {modifiers}class")

    def _emit_struct(self, descriptor: TypeDescriptor, writer: ShellWriter) -> None:
        self._emit_composite(descriptor, writer, "public struct")

    def _emit_interface(self, descriptor: TypeDescriptor, writer: ShellWriter) -> None:
        self._emit_composite(descriptor, writer, "public interface")

    def _emit_enum(self, descriptor: TypeDescriptor, writer: ShellWriter) -> None:
        with writer.block(f"public enum {descriptor.name}"):
            self._member_emitter(writer).emit_fields(descriptor)

    def _emit_delegate(self, descriptor: TypeDescriptor, writer: ShellWriter) -> None:
        invoke = _delegate_invoke(descriptor)
        emitter = self._member_emitter(writer)
        if invoke is None:
            self.logger.warning("Delegate %s has no Invoke method; declaring it as void()", descriptor.id)
            return_type = "void"
            parameters = ""
        else:
            return_type = format_type_name(invoke.return_type, aliases=self.config.keyword_aliases)
            parameters, _ = emitter.format_parameters(invoke.parameters)
        writer.line(f"public delegate {return_type} {self.declared_name(descriptor)}({parameters});")

    def _emit_composite(self, descriptor: TypeDescriptor, writer: ShellWriter, keyword: str) -> None:
        header = f"{keyword} {self.declared_name(descriptor)}{self.inheritance_clause(descriptor)}"
        with writer.block(header):
            for nested in self.graph.nested_types(descriptor.id):
                self.emit_type(nested, writer)
            self._member_emitter(writer).emit(descriptor)

    # -- headers ----------------------------------------------------------

    def declared_name(self, descriptor: TypeDescriptor) -> str:
        name = strip_arity(descriptor.name)
        if descriptor.generic_parameters:
            names = ",".join(
                format_type_name(parameter, aliases=False) for parameter in descriptor.generic_parameters
            )
            name += f"<{names}>"
        return name

    def inheritance_clause(self, descriptor: TypeDescriptor) -> str:
        parents: List[str] = []
        base = descriptor.base_type
        if base is not None and type_identity(base) not in IMPLICIT_BASE_TYPES:
            parents.append(self._name(base))
        parents.extend(self._name(interface) for interface in self.leaf_interfaces(descriptor))
        if not parents:
            return ""
        return " : " + ", ".join(parents)

    def leaf_interfaces(self, descriptor: TypeDescriptor) -> List[TypeReference]:
        """Public, non-redundant interfaces of ``descriptor``."""
        if descriptor.kind in (TypeKind.ENUM, TypeKind.DELEGATE):
            return []
        public = [interface for interface in descriptor.interfaces if self.graph.is_public(interface)]
        return reduce_interfaces(public, self.graph.is_assignable_from)

    def _member_emitter(self, writer: ShellWriter) -> MemberEmitter:
        return MemberEmitter(
            self.graph,
            writer,
            force_virtual=self.config.force_virtual,
            aliases=self.config.keyword_aliases,
        )

    def _name(self, ref: TypeReference) -> str:
        return format_type_name(ref, aliases=self.config.keyword_aliases)


def _delegate_invoke(descriptor: TypeDescriptor) -> Optional[Method]:
    methods = descriptor.members.methods
    for method in methods:
        if method.name == DELEGATE_INVOKE:
            return method
    return methods[0] if methods else None


__all__ = ["DeclarationAssembler", "IMPLICIT_BASE_TYPES"]
