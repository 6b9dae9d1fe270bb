"""Classification and stub emission for the members of one declared type."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from .defaults import default_return_statement, default_value, literal
from .formatting import escape_identifier, format_type_name, strip_arity
from .graph import ENUM_BACKING_FIELD, TypeGraph
from .logging import get_logger
from .models import (
    Constructor,
    Event,
    Field,
    Method,
    Parameter,
    ParameterDirection,
    Property,
    TypeDescriptor,
    TypeKind,
    TypeReference,
)
from .writer import ShellWriter

DEFAULT_INDEXER_NAME = "Item"

# Operator methods with a direct source spelling. Anything else keeps its
# metadata name.
OPERATOR_SYMBOLS: Dict[str, str] = {
    "op_Equality": "==",
    "op_Inequality": "!=",
}

CONVERSION_OPERATORS: Dict[str, str] = {
    "op_Implicit": "implicit",
    "op_Explicit": "explicit",
}

EVENT_WARNING_PRAGMA = "#pragma warning disable 67"


class MemberEmitter:
    """Writes constructors, fields, properties, events and methods of a type."""

    def __init__(
        self,
        graph: TypeGraph,
        writer: ShellWriter,
        *,
        force_virtual: bool = False,
        aliases: bool = True,
    ) -> None:
        self.graph = graph
        self.writer = writer
        self.force_virtual = force_virtual
        self.aliases = aliases
        self.logger = get_logger("members")

    def emit(self, descriptor: TypeDescriptor) -> None:
        self.emit_constructors(descriptor)
        self.emit_fields(descriptor)
        self.emit_properties(descriptor)
        self.emit_events(descriptor)
        self.emit_methods(descriptor)

    # -- constructors -----------------------------------------------------

    def emit_constructors(self, descriptor: TypeDescriptor) -> None:
        if descriptor.kind not in (TypeKind.CLASS, TypeKind.STRUCT) or descriptor.is_static:
            return
        name = strip_arity(descriptor.name)
        has_parameterless = False
        for constructor in descriptor.members.constructors:
            if not constructor.parameters:
                has_parameterless = True
                if descriptor.kind is TypeKind.STRUCT:
                    # structs always carry an implicit parameterless constructor
                    continue
            self._emit_constructor(descriptor, name, constructor)

        if descriptor.kind is TypeKind.CLASS and not has_parameterless:
            # subclasses need a parameterless base constructor to chain to
            self.writer.open_block(f"protected {name}()")
            self.writer.close_block()

    def _emit_constructor(
        self, descriptor: TypeDescriptor, name: str, constructor: Constructor
    ) -> None:
        parameters, out_parameters = self.format_parameters(constructor.parameters)
        header = f"public {name}({parameters})"
        if descriptor.kind is TypeKind.STRUCT:
            header += " : this()"
        self.writer.open_block(header)
        for assignment in self._out_assignments(out_parameters):
            self.writer.line(assignment)
        self.writer.close_block()

    # -- fields -----------------------------------------------------------

    def emit_fields(self, descriptor: TypeDescriptor) -> None:
        if descriptor.kind is TypeKind.ENUM:
            names = [
                field.name
                for field in descriptor.members.fields
                if field.name != ENUM_BACKING_FIELD
            ]
            for index, name in enumerate(names):
                suffix = "," if index < len(names) - 1 else ""
                self.writer.line(f"{name}{suffix}")
            return
        if descriptor.kind is TypeKind.INTERFACE:
            return
        for field in descriptor.members.fields:
            self.writer.line(self.field_declaration(field))

    def field_declaration(self, field: Field) -> str:
        modifiers = ["public"]
        if field.is_const:
            modifiers.append("const")
        elif field.is_static:
            modifiers.append("static")
        if field.is_readonly and not field.is_const:
            modifiers.append("readonly")
        text = f"{' '.join(modifiers)} {self._name(field.type)} {escape_identifier(field.name)}"
        if field.is_const:
            value = literal(field.constant_value, field.type, self.graph, aliases=self.aliases)
            text += f" = {value}"
        return text + ";"

    # -- properties -------------------------------------------------------

    def emit_properties(self, descriptor: TypeDescriptor) -> None:
        if descriptor.kind in (TypeKind.ENUM, TypeKind.DELEGATE):
            return
        is_interface = descriptor.kind is TypeKind.INTERFACE
        for prop in descriptor.members.properties:
            self._emit_property(prop, is_interface)

    def _emit_property(self, prop: Property, is_interface: bool) -> None:
        modifiers = "" if is_interface else "public "
        if prop.is_static and not is_interface:
            modifiers += "static "
        header = f"{modifiers}{self._name(prop.type)} {self._property_declarator(prop)}"

        if not (prop.can_read or prop.can_write):
            self.writer.line(header + ";")
            return

        self.writer.open_block(header)
        if prop.can_read:
            if is_interface:
                self.writer.line("get;")
            else:
                statement = default_return_statement(prop.type, self.graph, aliases=self.aliases)
                self.writer.line(f"get {{ {statement} }}")
        if prop.can_write:
            self.writer.line("set;" if is_interface else "set { }")
        self.writer.close_block()

    def _property_declarator(self, prop: Property) -> str:
        if not prop.index_parameters:
            return escape_identifier(prop.name)
        parameters, _ = self.format_parameters(prop.index_parameters)
        if prop.name == DEFAULT_INDEXER_NAME:
            return f"this[{parameters}]"
        return f"{prop.name}[{parameters}]"

    # -- events -----------------------------------------------------------

    def emit_events(self, descriptor: TypeDescriptor) -> None:
        if descriptor.kind in (TypeKind.ENUM, TypeKind.DELEGATE):
            return
        is_interface = descriptor.kind is TypeKind.INTERFACE
        for event in descriptor.members.events:
            self._emit_event(event, is_interface)

    def _emit_event(self, event: Event, is_interface: bool) -> None:
        if is_interface:
            self.writer.line(f"event {self._name(event.handler_type)} {event.name};")
            return

        self.writer.line(EVENT_WARNING_PRAGMA)
        modifiers = "public static " if event.is_static else "public "
        header = f"{modifiers}event {self._name(event.handler_type)} {event.name}"
        if event.has_explicit_accessors:
            self.writer.line(header + ";")
            return
        with self.writer.block(header):
            self.writer.line("add { }")
            self.writer.line("remove { }")

    # -- methods ----------------------------------------------------------

    def emit_methods(self, descriptor: TypeDescriptor) -> None:
        if descriptor.kind in (TypeKind.ENUM, TypeKind.DELEGATE):
            return
        is_interface = descriptor.kind is TypeKind.INTERFACE
        for method in descriptor.members.methods:
            if method.is_accessor:
                self.logger.debug(
                    "Skipping %s accessor %s on %s", method.accessor.value, method.name, descriptor.id
                )
                continue
            header = self.method_header(descriptor, method)
            if is_interface:
                self.writer.line(header + ";")
                continue
            _, out_parameters = self.format_parameters(method.parameters)
            self.writer.open_block(header)
            for assignment in self._out_assignments(out_parameters):
                self.writer.line(assignment)
            statement = default_return_statement(method.return_type, self.graph, aliases=self.aliases)
            if statement:
                self.writer.line(statement)
            self.writer.close_block()

    def method_header(self, descriptor: TypeDescriptor, method: Method) -> str:
        modifiers = "" if descriptor.kind is TypeKind.INTERFACE else self.method_modifiers(descriptor, method)
        return_type = self._name(method.return_type)
        parameters, _ = self.format_parameters(method.parameters)

        conversion = CONVERSION_OPERATORS.get(method.name)
        if conversion is not None:
            return f"{modifiers}{conversion} operator {return_type}({parameters})"

        symbol = OPERATOR_SYMBOLS.get(method.name)
        if symbol is not None:
            name = f"operator {symbol}"
        else:
            name = escape_identifier(method.name)
            if method.generic_parameters:
                name += f"<{','.join(method.generic_parameters)}>"
        return f"{modifiers}{return_type} {name}({parameters})"

    def method_modifiers(self, descriptor: TypeDescriptor, method: Method) -> str:
        """Visibility plus ``static`` / ``override`` / ``virtual`` as applicable."""
        if method.is_static:
            return "public static "
        if not (method.is_virtual or self.force_virtual):
            return "public "
        if not _declared_on(method.base_definition_type, descriptor):
            return "public override "
        if _can_be_inherited(descriptor):
            return "public virtual "
        return "public "

    # -- parameters -------------------------------------------------------

    def format_parameters(
        self, parameters: Sequence[Parameter]
    ) -> Tuple[str, List[Parameter]]:
        """Return the parameter list text and the ``out`` parameters in it."""
        rendered: List[str] = []
        out_parameters: List[Parameter] = []
        for parameter in parameters:
            prefix = ""
            if parameter.direction is ParameterDirection.INOUT:
                prefix = "ref "
            elif parameter.direction is ParameterDirection.OUT:
                prefix = "out "
                out_parameters.append(parameter)
            rendered.append(f"{prefix}{self._name(parameter.type)} {escape_identifier(parameter.name)}")
        return ", ".join(rendered), out_parameters

    def _out_assignments(self, out_parameters: Sequence[Parameter]) -> List[str]:
        return [
            f"{escape_identifier(parameter.name)} = "
            f"{default_value(parameter.type.element_type(), self.graph, aliases=self.aliases)};"
            for parameter in out_parameters
        ]

    def _name(self, ref: Optional[TypeReference]) -> str:
        return format_type_name(ref, aliases=self.aliases)


def _open_name(ref: TypeReference) -> str:
    return strip_arity(ref.element_type().name).replace("+", ".")


def _declared_on(base: Optional[TypeReference], descriptor: TypeDescriptor) -> bool:
    if base is None:
        return True
    return _open_name(base) == _open_name(descriptor.reference())


def _can_be_inherited(descriptor: TypeDescriptor) -> bool:
    return not descriptor.kind.is_value_kind and not descriptor.is_sealed


__all__ = [
    "CONVERSION_OPERATORS",
    "DEFAULT_INDEXER_NAME",
    "EVENT_WARNING_PRAGMA",
    "MemberEmitter",
    "OPERATOR_SYMBOLS",
]
