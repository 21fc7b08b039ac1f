"""PostgreSQL adapter using psycopg (v3+) async support."""

from __future__ import annotations

from typing import Any

from row_hydrate.core.connection import ConnectionConfig


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    parts: list[str] = []
    if config.host is not None:
        parts.append(f"host={config.host}")
    if config.port is not None:
        parts.append(f"port={config.port}")
    if config.user is not None:
        parts.append(f"user={config.user}")
    if config.password is not None:
        parts.append(f"password={config.password}")
    parts.append(f"dbname={config.database}")
    return " ".join(parts)


class PostgresqlAsyncAdapter:
    """Asynchronous PostgreSQL adapter.

    psycopg is imported on first use so the package imports without the
    ``postgresql`` extra installed.
    """

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    async def create_pool_async(self, config: ConnectionConfig) -> list[Any]:
        import psycopg
        import psycopg.rows

        conninfo = _build_conninfo(config)
        pool: list[Any] = []
        for _ in range(config.pool_size):
            conn = await psycopg.AsyncConnection.connect(
                conninfo, row_factory=psycopg.rows.dict_row, **config.extra
            )
            pool.append(conn)
        return pool

    async def close_pool_async(self, pool: list[Any]) -> None:
        for conn in pool:
            await conn.close()
        pool.clear()

    async def execute_async(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return await connection.execute(sql, params)
