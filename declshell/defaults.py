"""Default-value and literal expressions for stub bodies and constants."""

from __future__ import annotations

import math
from typing import Any, Optional

from .formatting import format_type_name, type_identity
from .graph import TypeGraph
from .logging import get_logger
from .models import TypeCategory, TypeReference

_logger = get_logger("defaults")

_NATIVE_ZERO = {
    "System.IntPtr": "System.IntPtr.Zero",
    "System.UIntPtr": "System.UIntPtr.Zero",
}

_LITERAL_SUFFIXES = {
    "System.Single": "f",
    "System.Decimal": "m",
}


def default_value(
    ref: Optional[TypeReference],
    graph: Optional[TypeGraph] = None,
    *,
    aliases: bool = True,
) -> str:
    """Return an expression holding the default value of ``ref``.

    ``void`` has no value and yields an empty string.
    """
    if ref is None or ref.is_void:
        return ""
    ref = ref.element_type()
    category = ref.category

    if category is TypeCategory.BOOLEAN:
        return "false"
    if category is TypeCategory.CHAR:
        return "'\\0'"
    if category is TypeCategory.NATIVE_INT:
        return _NATIVE_ZERO.get(type_identity(ref), "0")
    if category is TypeCategory.PRIMITIVE:
        return "0"
    if category is TypeCategory.ENUM:
        return enum_member(ref, 0, graph, aliases=aliases)
    if ref.is_nullable:
        return f"new {format_type_name(ref, aliases=aliases)}()"
    if category is TypeCategory.VALUE_TYPE:
        return f"new {format_type_name(ref, aliases=aliases)}()"
    if category is TypeCategory.GENERIC_PARAMETER:
        return f"default({format_type_name(ref, aliases=aliases)})"
    return "null"


def default_return_statement(
    ref: Optional[TypeReference],
    graph: Optional[TypeGraph] = None,
    *,
    aliases: bool = True,
) -> str:
    if ref is None or ref.is_void:
        return ""
    return f"return {default_value(ref, graph, aliases=aliases)};"


def enum_member(
    ref: TypeReference,
    index: int,
    graph: Optional[TypeGraph] = None,
    *,
    aliases: bool = True,
) -> str:
    """Qualified name of the enum member at declared position ``index``."""
    type_name = format_type_name(ref, aliases=aliases)
    members = graph.enum_members(ref) if graph is not None else []
    if 0 <= index < len(members):
        return f"{type_name}.{members[index]}"
    _logger.debug("Enum %s has no member at position %d", type_name, index)
    if index == 0:
        return f"default({type_name})"
    return f"({type_name}){index}"


def literal(
    value: Any,
    ref: TypeReference,
    graph: Optional[TypeGraph] = None,
    *,
    aliases: bool = True,
) -> str:
    """Render a compile-time constant of type ``ref`` as source text."""
    if ref.category is TypeCategory.ENUM:
        if isinstance(value, str):
            return f"{format_type_name(ref, aliases=aliases)}.{value}"
        if isinstance(value, int) and not isinstance(value, bool):
            return enum_member(ref, value, graph, aliases=aliases)

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"

    identity = type_identity(ref)
    if ref.category is TypeCategory.CHAR or identity == "System.Char":
        return f"'{_escape(str(value), quote=chr(39))}'"
    if identity == "System.String" or isinstance(value, str):
        return f'"{_escape(str(value), quote=chr(34))}"'

    if isinstance(value, float):
        if math.isnan(value):
            return f"{identity}.NaN"
        if math.isinf(value):
            return f"{identity}.{'PositiveInfinity' if value > 0 else 'NegativeInfinity'}"
        text = repr(value)
    else:
        text = str(value)
    return text + _LITERAL_SUFFIXES.get(identity, "")


def _escape(text: str, *, quote: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace(quote, "\\" + quote)
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\0", "\\0")
    )
    return escaped


__all__ = ["default_return_statement", "default_value", "enum_member", "literal"]
