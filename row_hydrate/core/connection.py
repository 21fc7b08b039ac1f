"""Connection configuration and management.

ConnectionConfig is a Pydantic model for type-safe connection config.
AsyncConnectionManager opens connections through an adapter and hands them
out from a bounded pool. Concurrent relation loads each hold a connection,
so acquiring from an exhausted pool waits up to ``pool_timeout`` seconds.
"""

from __future__ import annotations

import asyncio
import importlib
import logging
from contextlib import asynccontextmanager
from typing import Any

from pydantic import BaseModel, Field

from row_hydrate.core.enums import DatabaseBackend
from row_hydrate.core.exceptions import AdapterError, PoolError

logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Configuration for database connections."""

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    pool_size: int = Field(default=5, ge=1)
    pool_timeout: float = 30
    extra: dict[str, Any] = {}


# backend -> (module_path, adapter_class)
_ADAPTER_MAP: dict[DatabaseBackend, tuple[str, str]] = {
    DatabaseBackend.SQLITE: ("row_hydrate.adapters.sqlite", "SqliteAsyncAdapter"),
    DatabaseBackend.POSTGRESQL: ("row_hydrate.adapters.postgresql", "PostgresqlAsyncAdapter"),
}


def load_adapter(driver: str) -> Any:
    """Instantiate the async adapter registered for *driver*."""
    try:
        backend = DatabaseBackend(driver.lower())
    except ValueError:
        raise AdapterError(f"Unsupported database driver: {driver}") from None

    module_path, cls_name = _ADAPTER_MAP[backend]
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{driver}': {e}") from e


class AsyncConnectionManager:
    """Pooled connection manager over an AsyncAdapter."""

    def __init__(self, config: ConnectionConfig, adapter: Any | None = None) -> None:
        self.config = config
        self._adapter = adapter if adapter is not None else load_adapter(config.driver)
        self._connections: list[Any] | None = None
        self._idle: asyncio.Queue[Any] | None = None
        self._init_lock = asyncio.Lock()

    @property
    def adapter(self) -> Any:
        return self._adapter

    @property
    def initialized(self) -> bool:
        return self._connections is not None

    async def initialize_pool(self) -> None:
        """Open ``pool_size`` connections. Safe to call concurrently."""
        async with self._init_lock:
            if self._connections is not None:
                return
            connections = await self._adapter.create_pool_async(self.config)
            idle: asyncio.Queue[Any] = asyncio.Queue()
            for conn in connections:
                idle.put_nowait(conn)
            self._connections = connections
            self._idle = idle
            logger.debug(
                "Opened %d %s connections", len(connections), self.config.driver
            )

    async def acquire(self) -> Any:
        """Take an idle connection, waiting for one if the pool is exhausted."""
        if self._idle is None:
            await self.initialize_pool()
        assert self._idle is not None
        try:
            return await asyncio.wait_for(self._idle.get(), timeout=self.config.pool_timeout)
        except TimeoutError:
            raise PoolError(
                f"No connection became available within {self.config.pool_timeout}s "
                f"(pool_size={self.config.pool_size})"
            ) from None

    def release(self, connection: Any) -> None:
        """Return a connection to the pool."""
        if self._idle is not None:
            self._idle.put_nowait(connection)

    @asynccontextmanager
    async def get_connection(self):  # type: ignore[no-untyped-def]
        """Borrow a pooled connection for the duration of the block."""
        connection = await self.acquire()
        try:
            yield connection
        finally:
            self.release(connection)

    async def close_pool(self) -> None:
        """Close every connection and reset the pool."""
        if self._connections is not None:
            await self._adapter.close_pool_async(self._connections)
            self._connections = None
            self._idle = None
