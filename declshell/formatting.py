"""Canonical textual names for type references."""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence

from .logging import get_logger
from .models import TypeReference

_logger = get_logger("formatting")

_ARITY = re.compile(r"`(\d+)")

KEYWORD_ALIASES: Dict[str, str] = {
    "System.Boolean": "bool",
    "System.Byte": "byte",
    "System.SByte": "sbyte",
    "System.Char": "char",
    "System.Decimal": "decimal",
    "System.Double": "double",
    "System.Single": "float",
    "System.Int16": "short",
    "System.UInt16": "ushort",
    "System.Int32": "int",
    "System.UInt32": "uint",
    "System.Int64": "long",
    "System.UInt64": "ulong",
    "System.Object": "object",
    "System.String": "string",
    "System.Void": "void",
}

CSHARP_KEYWORDS = frozenset(
    {
        "abstract", "as", "base", "bool", "break", "byte", "case", "catch",
        "char", "checked", "class", "const", "continue", "decimal", "default",
        "delegate", "do", "double", "else", "enum", "event", "explicit",
        "extern", "false", "finally", "fixed", "float", "for", "foreach",
        "goto", "if", "implicit", "in", "int", "interface", "internal", "is",
        "lock", "long", "namespace", "new", "null", "object", "operator",
        "out", "override", "params", "private", "protected", "public",
        "readonly", "ref", "return", "sbyte", "sealed", "short", "sizeof",
        "stackalloc", "static", "string", "struct", "switch", "this", "throw",
        "true", "try", "typeof", "uint", "ulong", "unchecked", "unsafe",
        "ushort", "using", "virtual", "void", "volatile", "while",
    }
)


def strip_arity(name: str) -> str:
    """Drop the generic arity suffix of every nested segment.

    ``List`1`` -> ``List``, ``Outer`1+Inner`2`` -> ``Outer+Inner``.
    """
    return _ARITY.sub("", name)


def escape_identifier(name: str) -> str:
    """Escape identifiers that collide with C# keywords."""
    if name in CSHARP_KEYWORDS:
        return f"@{name}"
    return name


def format_type_name(ref: Optional[TypeReference], *, aliases: bool = True) -> str:
    """Return the canonical source-level name of ``ref``.

    Nested separators become dots, by-ref markers are dropped, nullable value
    wrappers render with the ``?`` suffix and generic arguments are formatted
    recursively. With ``aliases`` the built-in ``System`` types use their C#
    keywords.
    """
    if ref is None or ref.is_void:
        return "void"

    if ref.is_nullable:
        if ref.generic_arguments:
            inner = format_type_name(ref.generic_arguments[0], aliases=aliases)
        else:
            _logger.debug("Nullable reference %s has no wrapped argument", ref.name)
            inner = _post_process(strip_arity(ref.name))
            if aliases:
                inner = _alias(inner)
        return f"{inner}?"

    if ref.generic_arguments:
        arguments = [format_type_name(argument, aliases=aliases) for argument in ref.generic_arguments]
        text = _attach_arguments(ref.name.rstrip("&"), arguments)
    else:
        if "`" in ref.name:
            _logger.debug("Generic reference %s carries no arguments", ref.name)
        text = strip_arity(ref.name)

    text = _post_process(text)
    if aliases and not ref.generic_arguments:
        return _alias(text)
    return text


def type_identity(ref: Optional[TypeReference]) -> str:
    """Alias-free formatted name used to compare type references."""
    return format_type_name(ref, aliases=False)


def _attach_arguments(name: str, arguments: Sequence[str]) -> str:
    """Give each nested segment the arguments its arity claims.

    ``List`1+Enumerator`` with ``(T,)`` -> ``List<T>.Enumerator``. Arguments
    left over once every arity is satisfied go on the last segment.
    """
    remaining = list(arguments)
    segments: List[str] = []
    for segment in name.split("+"):
        match = _ARITY.search(segment)
        if match is None:
            segments.append(segment)
            continue
        count = int(match.group(1))
        owned, remaining = remaining[:count], remaining[count:]
        text = segment[: match.start()]
        if owned:
            text += f"<{','.join(owned)}>"
        segments.append(text + segment[match.end():])
    if remaining:
        segments[-1] += f"<{','.join(remaining)}>"
    return ".".join(segments)


def _post_process(text: str) -> str:
    return text.replace("+", ".").strip("&")


def _alias(text: str) -> str:
    # System.Int32[] / System.Byte* keep their array or pointer suffix
    base = text.rstrip("[]*,")
    suffix = text[len(base):]
    return KEYWORD_ALIASES.get(base, base) + suffix


__all__ = [
    "CSHARP_KEYWORDS",
    "KEYWORD_ALIASES",
    "escape_identifier",
    "format_type_name",
    "strip_arity",
    "type_identity",
]
