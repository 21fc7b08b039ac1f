"""Statement execution helpers shared by the engine and transactions."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any, Protocol

from row_hydrate.core.exceptions import QueryExecutionError
from row_hydrate.core.params import normalize_params, resolve_sql
from row_hydrate.core.registry import SQLRegistry

logger = logging.getLogger(__name__)


def as_dict(columns: list[str], row: Any) -> dict[str, Any]:
    """Convert one driver row (dict-like or tuple-like) to a plain dict."""
    if isinstance(row, dict):
        return dict(row)
    return dict(zip(columns, row, strict=True))


async def fetch_rows(cursor: Any) -> list[dict[str, Any]]:
    """Drain *cursor* into a list of dicts."""
    if cursor.description is None:
        return []
    columns = [desc[0] for desc in cursor.description]
    return [as_dict(columns, row) for row in await cursor.fetchall()]


async def run_statement(
    adapter: Any,
    connection: Any,
    query: str,
    params: dict[str, Any] | None,
    registry: SQLRegistry,
) -> tuple[Any, str]:
    """Resolve, normalise and execute *query*; return ``(cursor, label)``.

    Driver errors are wrapped in QueryExecutionError.
    """
    sql, label = resolve_sql(query, registry)
    sql = normalize_params(sql, adapter.paramstyle)
    logger.debug("Executing %s", label)
    try:
        cursor = await adapter.execute_async(connection, sql, params)
    except Exception as e:
        raise QueryExecutionError(label, str(e)) from e
    return cursor, label


class AsyncExecutor(Protocol):
    """Statement runner shared by AsyncEngine and AsyncTransactionManager."""

    async def fetch_one(
        self, query: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any] | None: ...

    async def fetch_all(
        self, query: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]: ...

    def stream(
        self, query: str, params: dict[str, Any] | None = None
    ) -> AsyncIterator[dict[str, Any]]: ...

    async def execute(self, query: str, params: dict[str, Any] | None = None) -> int: ...

    async def execute_returning(
        self, query: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]: ...
