"""Database adapter protocol.

Every adapter module implements this protocol. Pooling policy lives in
AsyncConnectionManager; adapters only open, close and execute.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from row_hydrate.core.connection import ConnectionConfig


@runtime_checkable
class AsyncAdapter(Protocol):
    """Asynchronous database adapter protocol."""

    @property
    def paramstyle(self) -> str:
        """Parameter binding style: 'named' (:name) or 'pyformat' (%(name)s)."""
        ...

    async def create_pool_async(self, config: ConnectionConfig) -> list[Any]:
        """Open ``config.pool_size`` connections."""
        ...

    async def close_pool_async(self, pool: list[Any]) -> None:
        """Close every connection in *pool*."""
        ...

    async def execute_async(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute SQL and return a cursor supporting ``description``,
        ``rowcount``, ``fetchall()`` / ``fetchone()`` and async iteration."""
        ...
