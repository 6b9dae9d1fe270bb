"""Assembly-level attribute block of a generated shell.

Strong-name, security and debug attributes of the original library are never
carried forward. Code that must run against a strong-named library is compiled
against the real one before deployment.
"""

from __future__ import annotations

from typing import List, Optional

from .defaults import literal
from .formatting import format_type_name
from .graph import TypeGraph
from .models import AttributeArgument, LibraryMetadata, TypeCategory, TypeReference
from .writer import ShellWriter

COPYRIGHT_ATTRIBUTE = "System.Reflection.AssemblyCopyrightAttribute"
VERSION_ATTRIBUTE = "System.Reflection.AssemblyVersionAttribute"
DESCRIPTION_ATTRIBUTE = "System.Reflection.AssemblyDescriptionAttribute"

DESCRIPTION_DISCLAIMER = (
    "This file is a declaration shell of the original library. It only exposes "
    "the public API for use in a compile-time environment.  "
)

EXCLUDED_ATTRIBUTES = frozenset(
    {
        COPYRIGHT_ATTRIBUTE,
        VERSION_ATTRIBUTE,
        "System.Reflection.AssemblyKeyFileAttribute",
        "System.Reflection.AssemblyKeyNameAttribute",
        "System.Reflection.AssemblyDelaySignAttribute",
        "System.Reflection.AssemblySignatureKeyAttribute",
        "System.Diagnostics.DebuggableAttribute",
        "System.Runtime.CompilerServices.InternalsVisibleToAttribute",
    }
)

EXCLUDED_PREFIXES = ("System.Security.",)

_STRING = TypeReference(name="System.String")


def should_carry_attribute(type_name: str) -> bool:
    """Return False for attributes that must not reach the shell."""
    if type_name in EXCLUDED_ATTRIBUTES:
        return False
    return not type_name.startswith(EXCLUDED_PREFIXES)


def assembly_attribute_lines(
    library: LibraryMetadata,
    *,
    copyright_notice: str,
    graph: Optional[TypeGraph] = None,
    aliases: bool = True,
) -> List[str]:
    lines = [
        _attribute_line(COPYRIGHT_ATTRIBUTE, [literal(copyright_notice, _STRING)]),
        _attribute_line(VERSION_ATTRIBUTE, [literal(library.version, _STRING)]),
    ]
    has_description = False
    for attribute in library.attributes:
        if not should_carry_attribute(attribute.type_name):
            continue
        is_description = attribute.type_name == DESCRIPTION_ATTRIBUTE
        has_description = has_description or is_description
        arguments = [
            _argument_text(argument, is_description, graph, aliases)
            for argument in attribute.arguments
        ]
        arguments.extend(
            f"{name} = {_argument_text(argument, False, graph, aliases)}"
            for name, argument in attribute.named_arguments
        )
        lines.append(_attribute_line(attribute.type_name, arguments))

    if not has_description:
        lines.append(_attribute_line(DESCRIPTION_ATTRIBUTE, [literal(DESCRIPTION_DISCLAIMER, _STRING)]))
    return lines


def emit_assembly_info(
    library: LibraryMetadata,
    writer: ShellWriter,
    *,
    copyright_notice: str,
    graph: Optional[TypeGraph] = None,
    aliases: bool = True,
) -> None:
    for line in assembly_attribute_lines(
        library, copyright_notice=copyright_notice, graph=graph, aliases=aliases
    ):
        writer.line(line)


def _argument_text(
    argument: AttributeArgument,
    is_description: bool,
    graph: Optional[TypeGraph],
    aliases: bool,
) -> str:
    value = argument.value
    if is_description and argument.type.category is not TypeCategory.ENUM and isinstance(value, str):
        value = DESCRIPTION_DISCLAIMER + value
    if argument.type.category is TypeCategory.ENUM and isinstance(value, str) and "." in value:
        # already qualified by the provider
        return value
    return literal(value, argument.type, graph, aliases=aliases)


def _attribute_line(type_name: str, arguments: List[str]) -> str:
    name = format_type_name(TypeReference(name=type_name), aliases=False)
    if not arguments:
        return f"[assembly: {name}]"
    return f"[assembly: {name}({', '.join(arguments)})]"


__all__ = [
    "DESCRIPTION_DISCLAIMER",
    "EXCLUDED_ATTRIBUTES",
    "assembly_attribute_lines",
    "emit_assembly_info",
    "should_carry_attribute",
]
