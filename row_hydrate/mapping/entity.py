"""Entity mapper - apply an entity definition to one or many rows."""

from __future__ import annotations

import inspect
from collections.abc import AsyncIterable, Iterable
from contextlib import aclosing, nullcontext
from typing import Any

from row_hydrate.mapping.protocol import EntityDefinition


async def map_one(entity_def: EntityDefinition[Any], row: Any) -> Any:
    """Convert a single row, awaiting the conversion if it is asynchronous.

    Errors raised by ``to_entity`` propagate unchanged.
    """
    entity = entity_def.to_entity(row)
    if inspect.isawaitable(entity):
        entity = await entity
    return entity


async def map_many(
    entity_def: EntityDefinition[Any],
    rows: Iterable[Any] | AsyncIterable[Any],
) -> list[Any]:
    """Convert rows in arrival order.

    ``rows`` may be a plain iterable or an async iterable; it is consumed
    exactly once and each element is converted before the next one is pulled.
    Async generators are closed on exit, so a source holding a pooled
    connection releases it even when a conversion fails.
    """
    result: list[Any] = []
    if isinstance(rows, AsyncIterable):
        closing = aclosing(rows) if hasattr(rows, "aclose") else nullcontext()
        async with closing:
            async for row in rows:
                result.append(await map_one(entity_def, row))
    else:
        for row in rows:
            result.append(await map_one(entity_def, row))
    return result
