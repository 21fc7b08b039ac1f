"""Relationship descriptors.

Frozen dataclasses describing a named edge from a local entity type to an
"other" entity type. The hydrator only reads ``other_entity``, ``load`` and
``attach``; the two variants differ in what the accessor returned by
``attach`` produces, and the factory building the descriptor picks one.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeAlias, TypeVar, Union

from row_hydrate.mapping.protocol import EntityDefinition

L = TypeVar("L")
R = TypeVar("R")

Rows: TypeAlias = Union[Iterable[Any], AsyncIterable[Any]]
LoadResult: TypeAlias = Union[Rows, Awaitable[Rows]]


class Relationship(Protocol):
    """Capability set consumed by the hydrator."""

    other_entity: EntityDefinition[Any]

    def load(self, entities: list[Any]) -> LoadResult:
        ...

    def attach(self, related: list[Any]) -> Callable[[Any], Any]:
        ...


@dataclass(frozen=True)
class OneRelationship(Generic[L, R]):
    """Relationship yielding at most one related entity per local entity.

    Attributes:
        other_entity: Entity definition for related rows.
        load: Called once with every local entity; returns the related rows
              needed by all of them.
        attach: Called once with the mapped related entities; returns an
                accessor giving the related entity for a local entity, or None.
    """

    other_entity: EntityDefinition[R]
    load: Callable[[list[L]], LoadResult]
    attach: Callable[[list[R]], Callable[[L], R | None]]


@dataclass(frozen=True)
class ManyRelationship(Generic[L, R]):
    """Relationship yielding an ordered list of related entities per local entity.

    Attributes:
        other_entity: Entity definition for related rows.
        load: Called once with every local entity; returns the related rows
              needed by all of them.
        attach: Called once with the mapped related entities; returns an
                accessor giving the (possibly empty) list for a local entity.
    """

    other_entity: EntityDefinition[R]
    load: Callable[[list[L]], LoadResult]
    attach: Callable[[list[R]], Callable[[L], list[R]]]


# property name -> descriptor, or (descriptor, nested map) for the related
# entities' own relations
RelationsToLoad: TypeAlias = Mapping[
    str, Union[Relationship, tuple[Relationship, "RelationsToLoad"]]
]
