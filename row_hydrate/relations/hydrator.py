"""Relation hydrator.

Attaches related entities onto a list of entities with one batched load per
requested relationship. Relationships at the same level run concurrently;
nested relation maps recurse over the loaded entities, so depth is bounded by
the map the caller passes, not by the data.

Entities are mutated in place: each relationship key becomes an attribute
(or item, for mapping entities) holding ``None``/an entity for one-relations
and a list for many-relations.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import AsyncIterable, Iterable, Mapping
from typing import Any, TypeVar

from row_hydrate.core.exceptions import RelationDefinitionError, ShapeMismatchError
from row_hydrate.mapping.entity import map_many
from row_hydrate.relations.descriptor import Relationship, RelationsToLoad
from row_hydrate.relations.keys import set_field

logger = logging.getLogger(__name__)

E = TypeVar("E")


def _split(key: str, value: Any) -> tuple[Relationship, RelationsToLoad]:
    """Separate a map value into its descriptor and nested relation map."""
    if isinstance(value, (tuple, list)):
        if len(value) != 2 or not isinstance(value[1], Mapping):
            raise RelationDefinitionError(
                f"Relation '{key}' must be a relationship or a "
                f"(relationship, nested relations) pair"
            )
        relationship, nested = value
    else:
        relationship, nested = value, {}

    for attr in ("other_entity", "load", "attach"):
        if not hasattr(relationship, attr):
            raise RelationDefinitionError(
                f"Relation '{key}' is missing '{attr}': got {type(relationship).__name__}"
            )
    return relationship, nested


async def _resolve_rows(key: str, result: Any) -> Iterable[Any] | AsyncIterable[Any]:
    if inspect.isawaitable(result):
        result = await result
    if isinstance(result, (Mapping, str, bytes)) or not isinstance(
        result, (Iterable, AsyncIterable)
    ):
        raise ShapeMismatchError(
            f"load for relation '{key}'",
            f"expected an iterable of rows, got {type(result).__name__}",
        )
    return result


async def _hydrate_relation(
    entities: list[Any],
    key: str,
    relationship: Relationship,
    nested: RelationsToLoad,
) -> None:
    try:
        logger.debug("Loading relation '%s' for %d entities", key, len(entities))
        rows = await _resolve_rows(key, relationship.load(entities))
        loaded = await map_many(relationship.other_entity, rows)
        if nested:
            await hydrate(loaded, nested)

        accessor = relationship.attach(loaded)
        for entity in entities:
            set_field(entity, key, accessor(entity))
        logger.debug("Attached relation '%s' from %d related entities", key, len(loaded))
    except Exception as e:
        e.add_note(f"while hydrating relation '{key}'")
        raise


async def hydrate(entities: list[E], relations_to_load: RelationsToLoad) -> list[E]:
    """Load and attach every relationship in *relations_to_load* onto *entities*.

    Each relationship's ``load`` is called exactly once with the whole list.
    An empty list returns immediately without loading anything. The first
    failing relationship aborts the call; its error propagates unchanged
    apart from a note naming the relation.

    Args:
        entities: Already-mapped entities; mutated in place.
        relations_to_load: Property name -> relationship, or
            (relationship, nested relations).

    Returns:
        The same list, with relation properties set on each entity.
    """
    if not entities or not relations_to_load:
        return entities

    branches = [
        (key, *_split(key, value)) for key, value in relations_to_load.items()
    ]
    await asyncio.gather(
        *(
            _hydrate_relation(entities, key, relationship, nested)
            for key, relationship, nested in branches
        )
    )
    return entities


async def hydrate_one(entity: E, relations_to_load: RelationsToLoad) -> E:
    """Hydrate a single entity; see :func:`hydrate`."""
    return (await hydrate([entity], relations_to_load))[0]
