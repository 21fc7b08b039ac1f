"""SQLite adapter using aiosqlite."""

from __future__ import annotations

from typing import Any

import aiosqlite

from row_hydrate.core.connection import ConnectionConfig


class SqliteAsyncAdapter:
    """Asynchronous SQLite adapter using aiosqlite.

    Each pooled connection is opened separately, so ``:memory:`` databases
    should use ``pool_size=1``.
    """

    @property
    def paramstyle(self) -> str:
        return "named"

    async def create_pool_async(self, config: ConnectionConfig) -> list[aiosqlite.Connection]:
        pool: list[aiosqlite.Connection] = []
        for _ in range(config.pool_size):
            conn = await aiosqlite.connect(config.database, **config.extra)
            conn.row_factory = aiosqlite.Row
            if config.database != ":memory:":
                await conn.execute("PRAGMA journal_mode=WAL")
            pool.append(conn)
        return pool

    async def close_pool_async(self, pool: list[aiosqlite.Connection]) -> None:
        for conn in pool:
            await conn.close()
        pool.clear()

    async def execute_async(
        self,
        connection: aiosqlite.Connection,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> aiosqlite.Cursor:
        return await connection.execute(sql, params or {})
