from __future__ import annotations

from declshell.assembly_info import DESCRIPTION_DISCLAIMER, assembly_attribute_lines, should_carry_attribute
from declshell.models import AttributeArgument, AttributeDescriptor, LibraryMetadata, TypeCategory, TypeReference

STRING = TypeReference(name="System.String")
BOOL = TypeReference(name="System.Boolean", category=TypeCategory.BOOLEAN)


def _string_attribute(type_name: str, value: str) -> AttributeDescriptor:
    return AttributeDescriptor(type_name=type_name, arguments=(AttributeArgument(value, STRING),))


def test_strong_name_security_and_debug_attributes_are_excluded() -> None:
    assert not should_carry_attribute("System.Reflection.AssemblyKeyFileAttribute")
    assert not should_carry_attribute("System.Reflection.AssemblyDelaySignAttribute")
    assert not should_carry_attribute("System.Diagnostics.DebuggableAttribute")
    assert not should_carry_attribute("System.Runtime.CompilerServices.InternalsVisibleToAttribute")
    assert not should_carry_attribute("System.Security.AllowPartiallyTrustedCallersAttribute")
    assert not should_carry_attribute("System.Reflection.AssemblyVersionAttribute")
    assert should_carry_attribute("System.Reflection.AssemblyTitleAttribute")


def test_attribute_block_order_and_disclaimer_append() -> None:
    library = LibraryMetadata(
        name="Acme",
        version="3.1.0.0",
        attributes=(
            _string_attribute("System.Reflection.AssemblyCopyrightAttribute", "(c) Original"),
            _string_attribute("System.Reflection.AssemblyTitleAttribute", "Acme"),
            _string_attribute("System.Reflection.AssemblyKeyFileAttribute", "key.snk"),
            AttributeDescriptor(
                type_name="System.CLSCompliantAttribute",
                arguments=(AttributeArgument(True, BOOL),),
                named_arguments=(("Level", AttributeArgument(2, TypeReference(name="System.Int32"))),),
            ),
        ),
    )

    lines = assembly_attribute_lines(library, copyright_notice="(c) Shell")

    assert lines == [
        '[assembly: System.Reflection.AssemblyCopyrightAttribute("(c) Shell")]',
        '[assembly: System.Reflection.AssemblyVersionAttribute("3.1.0.0")]',
        '[assembly: System.Reflection.AssemblyTitleAttribute("Acme")]',
        "[assembly: System.CLSCompliantAttribute(true, Level = 2)]",
        f'[assembly: System.Reflection.AssemblyDescriptionAttribute("{DESCRIPTION_DISCLAIMER}")]',
    ]


def test_existing_description_is_prefixed_with_disclaimer() -> None:
    library = LibraryMetadata(
        name="Acme",
        attributes=(_string_attribute("System.Reflection.AssemblyDescriptionAttribute", "Widgets."),),
    )

    lines = assembly_attribute_lines(library, copyright_notice="(c) Shell")

    descriptions = [line for line in lines if "AssemblyDescriptionAttribute" in line]
    assert descriptions == [
        f'[assembly: System.Reflection.AssemblyDescriptionAttribute("{DESCRIPTION_DISCLAIMER}Widgets.")]'
    ]


def test_attributes_without_arguments_have_no_parentheses() -> None:
    library = LibraryMetadata(
        name="Acme",
        attributes=(AttributeDescriptor(type_name="System.Runtime.CompilerServices.ExtensionAttribute"),),
    )

    lines = assembly_attribute_lines(library, copyright_notice="x")

    assert "[assembly: System.Runtime.CompilerServices.ExtensionAttribute]" in lines
