"""Arena of type descriptors and the relations the engine queries on it."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from .formatting import type_identity
from .models import TypeDescriptor, TypeKind, TypeReference

ENUM_BACKING_FIELD = "value__"


class TypeGraph:
    """Descriptors addressed by stable ids.

    ``emitted`` descriptors belong to the library being shelled; ``external``
    ones come from referenced libraries and only answer subtype and enum
    queries.
    """

    def __init__(
        self,
        emitted: Iterable[TypeDescriptor],
        external: Iterable[TypeDescriptor] = (),
    ) -> None:
        self._emitted: Tuple[TypeDescriptor, ...] = tuple(emitted)
        self._by_id: Dict[str, TypeDescriptor] = {}
        for descriptor in external:
            self._by_id[descriptor.id] = descriptor
        for descriptor in self._emitted:
            self._by_id[descriptor.id] = descriptor

        self._nested: Dict[str, List[TypeDescriptor]] = defaultdict(list)
        for descriptor in self._emitted:
            if descriptor.enclosing_id is not None:
                self._nested[descriptor.enclosing_id].append(descriptor)

    def __len__(self) -> int:
        return len(self._emitted)

    @property
    def types(self) -> Tuple[TypeDescriptor, ...]:
        return self._emitted

    def get(self, type_id: str) -> Optional[TypeDescriptor]:
        return self._by_id.get(type_id)

    def resolve(self, ref: Optional[TypeReference]) -> Optional[TypeDescriptor]:
        """Return the descriptor ``ref`` points at, if the graph knows it."""
        if ref is None:
            return None
        return self.get(ref.element_type().name)

    def top_level(self) -> List[TypeDescriptor]:
        return [descriptor for descriptor in self._emitted if not descriptor.is_nested]

    def nested_types(self, type_id: str) -> Tuple[TypeDescriptor, ...]:
        return tuple(self._nested.get(type_id, ()))

    def enum_members(self, ref: TypeReference) -> List[str]:
        """Declared member names of an enum, without the implicit backing field."""
        descriptor = self.resolve(ref)
        if descriptor is None or descriptor.kind is not TypeKind.ENUM:
            return []
        return [
            field.name
            for field in descriptor.members.fields
            if field.name != ENUM_BACKING_FIELD
        ]

    def is_public(self, ref: TypeReference) -> bool:
        """Unknown types are assumed to be public."""
        descriptor = self.resolve(ref)
        return descriptor is None or descriptor.is_public

    def supertypes(self, ref: TypeReference) -> List[TypeReference]:
        """All transitive base types and interfaces of ``ref``.

        Generic parameters of the resolved descriptor are substituted with the
        arguments ``ref`` supplies.
        """
        found: List[TypeReference] = []
        seen: Set[str] = set()
        pending = [ref]
        while pending:
            current = pending.pop()
            descriptor = self.resolve(current)
            if descriptor is None:
                continue
            mapping = _generic_mapping(descriptor, current)
            parents = list(descriptor.interfaces)
            if descriptor.base_type is not None:
                parents.insert(0, descriptor.base_type)
            for parent in parents:
                bound = _substitute(parent, mapping)
                identity = type_identity(bound)
                if identity in seen:
                    continue
                seen.add(identity)
                found.append(bound)
                pending.append(bound)
        return found

    def is_assignable_from(self, target: TypeReference, source: TypeReference) -> bool:
        """True when ``source`` equals ``target`` or derives from it."""
        target_identity = type_identity(target)
        if target_identity == type_identity(source):
            return True
        return any(type_identity(parent) == target_identity for parent in self.supertypes(source))


def _generic_mapping(
    descriptor: TypeDescriptor, ref: TypeReference
) -> Mapping[str, TypeReference]:
    if not descriptor.generic_parameters or not ref.generic_arguments:
        return {}
    return {
        parameter.name: argument
        for parameter, argument in zip(descriptor.generic_parameters, ref.generic_arguments)
    }


def _substitute(ref: TypeReference, mapping: Mapping[str, TypeReference]) -> TypeReference:
    if not mapping:
        return ref
    if not ref.generic_arguments and ref.name in mapping:
        return mapping[ref.name]
    if not ref.generic_arguments:
        return ref
    return TypeReference(
        name=ref.name,
        generic_arguments=tuple(_substitute(argument, mapping) for argument in ref.generic_arguments),
        is_nullable=ref.is_nullable,
        category=ref.category,
        is_by_ref=ref.is_by_ref,
    )


__all__ = ["ENUM_BACKING_FIELD", "TypeGraph"]
