"""Tests for declshell.interfaces and the subtype queries it relies on."""

from __future__ import annotations

import pytest

from declshell.graph import TypeGraph
from declshell.interfaces import reduce_interfaces
from declshell.models import TypeDescriptor, TypeKind, TypeReference


def _interface(type_id: str, *parents: str) -> TypeDescriptor:
    return TypeDescriptor(
        id=type_id,
        name=type_id.rsplit(".", 1)[-1],
        namespace="Acme",
        kind=TypeKind.INTERFACE,
        interfaces=tuple(TypeReference(name=parent) for parent in parents),
    )


BASE = TypeReference(name="Acme.IBase")
DERIVED = TypeReference(name="Acme.IDerived")
MORE = TypeReference(name="Acme.IMoreDerived")
OTHER = TypeReference(name="Acme.IOther")


@pytest.fixture
def graph() -> TypeGraph:
    return TypeGraph(
        [
            _interface("Acme.IBase"),
            _interface("Acme.IDerived", "Acme.IBase"),
            _interface("Acme.IMoreDerived", "Acme.IDerived", "Acme.IBase"),
            _interface("Acme.IOther"),
        ]
    )


def _names(refs) -> list[str]:
    return [ref.name for ref in refs]


def test_base_before_derived_keeps_only_derived(graph: TypeGraph) -> None:
    assert _names(reduce_interfaces([BASE, DERIVED], graph.is_assignable_from)) == ["Acme.IDerived"]


def test_derived_before_base_keeps_only_derived(graph: TypeGraph) -> None:
    assert _names(reduce_interfaces([DERIVED, BASE], graph.is_assignable_from)) == ["Acme.IDerived"]


def test_disjoint_interfaces_are_all_kept_in_order(graph: TypeGraph) -> None:
    reduced = reduce_interfaces([OTHER, BASE], graph.is_assignable_from)

    assert _names(reduced) == ["Acme.IOther", "Acme.IBase"]


def test_duplicates_collapse_to_one_entry(graph: TypeGraph) -> None:
    reduced = reduce_interfaces([OTHER, OTHER, OTHER], graph.is_assignable_from)

    assert _names(reduced) == ["Acme.IOther"]


def test_transitive_chain_keeps_the_leaf(graph: TypeGraph) -> None:
    reduced = reduce_interfaces([BASE, MORE, OTHER, DERIVED], graph.is_assignable_from)

    assert _names(reduced) == ["Acme.IMoreDerived", "Acme.IOther"]


def test_generic_interfaces_substitute_arguments() -> None:
    enumerable = TypeDescriptor(
        id="Acme.IEnumerable`1",
        name="IEnumerable`1",
        namespace="Acme",
        kind=TypeKind.INTERFACE,
        generic_parameters=(TypeReference(name="T"),),
    )
    collection = TypeDescriptor(
        id="Acme.ICollection`1",
        name="ICollection`1",
        namespace="Acme",
        kind=TypeKind.INTERFACE,
        generic_parameters=(TypeReference(name="T"),),
        interfaces=(TypeReference(name="Acme.IEnumerable`1", generic_arguments=(TypeReference(name="T"),)),),
    )
    graph = TypeGraph([enumerable, collection])
    string = TypeReference(name="System.String")
    enumerable_of_string = TypeReference(name="Acme.IEnumerable`1", generic_arguments=(string,))
    collection_of_string = TypeReference(name="Acme.ICollection`1", generic_arguments=(string,))
    collection_of_int = TypeReference(
        name="Acme.ICollection`1", generic_arguments=(TypeReference(name="System.Int32"),)
    )

    assert graph.is_assignable_from(enumerable_of_string, collection_of_string)
    assert not graph.is_assignable_from(enumerable_of_string, collection_of_int)
    reduced = reduce_interfaces([enumerable_of_string, collection_of_string], graph.is_assignable_from)
    assert reduced == [collection_of_string]


def test_unknown_interfaces_only_match_themselves() -> None:
    graph = TypeGraph([])
    disposable = TypeReference(name="System.IDisposable")

    assert graph.is_assignable_from(disposable, disposable)
    assert not graph.is_assignable_from(disposable, OTHER)
    assert _names(reduce_interfaces([disposable, OTHER], graph.is_assignable_from)) == [
        "System.IDisposable",
        "Acme.IOther",
    ]


def test_interfaces_nested_in_a_generic_type_stay_distinct() -> None:
    graph = TypeGraph([])
    t = TypeReference(name="T")
    first = TypeReference(name="Acme.Outer`1+IA", generic_arguments=(t,))
    second = TypeReference(name="Acme.Outer`1+IB", generic_arguments=(t,))

    assert not graph.is_assignable_from(first, second)
    assert reduce_interfaces([first, second], graph.is_assignable_from) == [first, second]
