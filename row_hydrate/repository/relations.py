"""SQL-backed relationship factories.

``has_one`` and ``has_many`` declare an edge between two tables by key
columns. Each returns a function binding the relationship to an executor
(an AsyncEngine or an open transaction), so relationships can be declared at
import time and bound once a connection exists::

    book_author = has_one("author_id", authors, "id")
    books = await repo.get_all({"author": book_author(engine)})
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from row_hydrate.core.execution import AsyncExecutor
from row_hydrate.core.params import expand_in
from row_hydrate.mapping.table import TableDefinition, check_column
from row_hydrate.relations.descriptor import ManyRelationship, OneRelationship
from row_hydrate.relations.keys import distinct_keys, get_field, index_many, index_one

logger = logging.getLogger(__name__)


def _batched_load(
    executor: AsyncExecutor,
    local_field: str,
    other: TableDefinition,
    other_field: str,
) -> Callable[[list[Any]], Awaitable[list[dict[str, Any]]]]:
    """Build a load issuing one ``IN`` query over the distinct local keys."""

    async def load(local_entities: list[Any]) -> list[dict[str, Any]]:
        keys = distinct_keys(local_entities, local_field)
        if not keys:
            return []
        placeholders, params = expand_in("key", keys)
        logger.debug(
            "Batch loading %s by %s for %d keys", other.table_name, other_field, len(keys)
        )
        return await executor.fetch_all(
            f"SELECT * FROM {other.table_name} WHERE {other_field} IN ({placeholders})",
            params,
        )

    return load


def has_one(
    local_field: str,
    other: TableDefinition,
    other_field: str,
) -> Callable[[AsyncExecutor], OneRelationship[Any, Any]]:
    """Declare a relationship to at most one row of *other*.

    Covers both one-to-one (``book.id -> details.book_id``) and many-to-one
    (``book.author_id -> author.id``). When several related rows share a key,
    the last one fetched wins.

    Args:
        local_field: Key attribute on the local entities.
        other: Table of the related entities.
        other_field: Key column on *other* matched against ``local_field``.
    """
    check_column(other_field)

    def bind(executor: AsyncExecutor) -> OneRelationship[Any, Any]:
        def attach(related: list[Any]) -> Callable[[Any], Any]:
            by_key = index_one(related, other_field)
            return lambda entity: by_key.get(get_field(entity, local_field))

        return OneRelationship(
            other_entity=other,
            load=_batched_load(executor, local_field, other, other_field),
            attach=attach,
        )

    return bind


def has_many(
    local_field: str,
    other: TableDefinition,
    other_field: str,
) -> Callable[[AsyncExecutor], ManyRelationship[Any, Any]]:
    """Declare a one-to-many relationship to rows of *other*.

    Each local entity receives the related entities whose ``other_field``
    equals its ``local_field``, in fetch order, or an empty list.
    """
    check_column(other_field)

    def bind(executor: AsyncExecutor) -> ManyRelationship[Any, Any]:
        def attach(related: list[Any]) -> Callable[[Any], list[Any]]:
            by_key = index_many(related, other_field)
            return lambda entity: by_key.get(get_field(entity, local_field), [])

        return ManyRelationship(
            other_entity=other,
            load=_batched_load(executor, local_field, other, other_field),
            attach=attach,
        )

    return bind
