"""Reduction of an implements-list to its most-derived interfaces."""

from __future__ import annotations

from typing import Callable, List, Sequence

from .models import TypeReference

AssignabilityCheck = Callable[[TypeReference, TypeReference], bool]


def reduce_interfaces(
    interfaces: Sequence[TypeReference],
    is_assignable: AssignabilityCheck,
) -> List[TypeReference]:
    """Return only the leaf interfaces of ``interfaces``, in input order.

    ``is_assignable(target, source)`` answers whether ``source`` is ``target``
    or derives from it. A candidate is dropped when it is a supertype of (or
    equal to) an interface already kept, or one still pending later in the
    input, so a duplicated interface survives once at its last position.
    """
    reduced: List[TypeReference] = []
    for index, candidate in enumerate(interfaces):
        if any(is_assignable(candidate, kept) for kept in reduced):
            continue
        if any(is_assignable(candidate, later) for later in interfaces[index + 1 :]):
            continue
        reduced.append(candidate)
    return reduced


__all__ = ["AssignabilityCheck", "reduce_interfaces"]
