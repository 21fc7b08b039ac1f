"""Query execution engine.

The AsyncEngine resolves queries (registry keys or inline SQL), binds
parameters, executes through the adapter and returns rows as dicts. It is the
executor repositories and SQL relationship factories run their statements on;
AsyncTransactionManager exposes the same methods on a single connection.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from row_hydrate.core.connection import AsyncConnectionManager, ConnectionConfig
from row_hydrate.core.exceptions import MultipleRowsError
from row_hydrate.core.execution import as_dict, fetch_rows, run_statement
from row_hydrate.core.registry import SQLRegistry
from row_hydrate.core.transaction import AsyncTransactionManager


class AsyncEngine:
    """Asynchronous query execution engine."""

    def __init__(
        self,
        connection_manager: AsyncConnectionManager,
        registry: SQLRegistry | None = None,
    ) -> None:
        self._connection_manager = connection_manager
        self._registry = registry if registry is not None else SQLRegistry()

    @classmethod
    def from_config(
        cls,
        config: ConnectionConfig,
        registry: SQLRegistry | None = None,
    ) -> AsyncEngine:
        """Create an AsyncEngine from a ConnectionConfig and optional SQLRegistry."""
        return cls(AsyncConnectionManager(config), registry)

    @property
    def registry(self) -> SQLRegistry:
        return self._registry

    @property
    def connection_manager(self) -> AsyncConnectionManager:
        return self._connection_manager

    async def _run(self, connection: Any, query: str, params: dict[str, Any] | None) -> Any:
        cursor, _ = await run_statement(
            self._connection_manager.adapter, connection, query, params, self._registry
        )
        return cursor

    async def fetch_one(
        self,
        query: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Fetch at most one row.

        Returns None if zero rows match.
        Raises MultipleRowsError if more than one row matches.
        """
        async with self._connection_manager.get_connection() as conn:
            cursor, label = await run_statement(
                self._connection_manager.adapter, conn, query, params, self._registry
            )
            rows = await fetch_rows(cursor)

        if len(rows) > 1:
            raise MultipleRowsError(label, len(rows))
        return rows[0] if rows else None

    async def fetch_all(
        self,
        query: str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch all matching rows."""
        async with self._connection_manager.get_connection() as conn:
            cursor = await self._run(conn, query, params)
            return await fetch_rows(cursor)

    async def stream(
        self,
        query: str,
        params: dict[str, Any] | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield rows one at a time as the driver produces them.

        The connection stays checked out until the iterator is exhausted or
        closed.
        """
        async with self._connection_manager.get_connection() as conn:
            cursor = await self._run(conn, query, params)
            if cursor.description is None:
                return
            columns = [desc[0] for desc in cursor.description]
            async for row in cursor:
                yield as_dict(columns, row)

    async def execute(
        self,
        query: str,
        params: dict[str, Any] | None = None,
    ) -> int:
        """Execute a write query and commit. Returns affected row count."""
        async with self._connection_manager.get_connection() as conn:
            cursor = await self._run(conn, query, params)
            await conn.commit()
            return int(cursor.rowcount)

    async def execute_returning(
        self,
        query: str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Execute a write query with a RETURNING clause and commit."""
        async with self._connection_manager.get_connection() as conn:
            cursor = await self._run(conn, query, params)
            rows = await fetch_rows(cursor)
            await conn.commit()
            return rows

    def transaction(self) -> AsyncTransactionManager:
        """Create a new async transaction context manager.

        The connection is acquired in ``__aenter__``:
        ``async with engine.transaction() as tx: ...``
        """
        return AsyncTransactionManager(
            connection_manager=self._connection_manager,
            registry=self._registry,
        )

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._connection_manager.close_pool()
