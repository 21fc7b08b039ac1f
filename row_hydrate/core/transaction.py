"""Transaction management.

Provides an async context manager running several statements on one
connection atomically. Commits on success, rolls back on exception.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from enum import Enum
from typing import TYPE_CHECKING, Any

from row_hydrate.core.exceptions import MultipleRowsError, TransactionStateError
from row_hydrate.core.execution import as_dict, fetch_rows, run_statement
from row_hydrate.core.registry import SQLRegistry

if TYPE_CHECKING:
    from row_hydrate.core.connection import AsyncConnectionManager

logger = logging.getLogger(__name__)


class _TxState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class AsyncTransactionManager:
    """Asynchronous transaction context manager.

    Exposes the same statement methods as AsyncEngine, all bound to the
    connection held for the lifetime of the block. Write methods do not
    commit individually.
    """

    def __init__(
        self,
        connection_manager: AsyncConnectionManager,
        registry: SQLRegistry,
    ) -> None:
        self._connection_manager = connection_manager
        self._adapter = connection_manager.adapter
        self._registry = registry
        self._connection: Any = None
        self._state = _TxState.IDLE

    @property
    def state(self) -> str:
        return self._state.value

    async def __aenter__(self) -> AsyncTransactionManager:
        self._connection = await self._connection_manager.acquire()
        self._state = _TxState.ACTIVE
        logger.debug("Transaction started")
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        try:
            if self._state == _TxState.ACTIVE:
                if exc_type is not None:
                    await self._connection.rollback()
                    self._state = _TxState.ROLLED_BACK
                    logger.debug("Transaction rolled back after %s", exc_type.__name__)
                else:
                    await self._connection.commit()
                    self._state = _TxState.COMMITTED
        finally:
            self._connection_manager.release(self._connection)
            self._connection = None

    async def _run(self, query: str, params: dict[str, Any] | None) -> tuple[Any, str]:
        self._check_active()
        return await run_statement(
            self._adapter, self._connection, query, params, self._registry
        )

    async def fetch_one(
        self,
        query: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Fetch at most one row within the transaction."""
        cursor, label = await self._run(query, params)
        rows = await fetch_rows(cursor)
        if len(rows) > 1:
            raise MultipleRowsError(label, len(rows))
        return rows[0] if rows else None

    async def fetch_all(
        self,
        query: str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch all rows within the transaction."""
        cursor, _ = await self._run(query, params)
        return await fetch_rows(cursor)

    async def stream(
        self,
        query: str,
        params: dict[str, Any] | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield rows one at a time within the transaction."""
        cursor, _ = await self._run(query, params)
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
        """Execute a write query within the transaction."""
        cursor, _ = await self._run(query, params)
        return int(cursor.rowcount)

    async def execute_returning(
        self,
        query: str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Execute a write query with a RETURNING clause within the transaction."""
        cursor, _ = await self._run(query, params)
        return await fetch_rows(cursor)

    async def commit(self) -> None:
        """Explicitly commit the transaction."""
        if self._state == _TxState.IDLE:
            raise TransactionStateError("idle", "commit")
        if self._state == _TxState.ROLLED_BACK:
            raise TransactionStateError("rolled_back", "commit")
        if self._state == _TxState.COMMITTED:
            raise TransactionStateError("committed", "commit")
        await self._connection.commit()
        self._state = _TxState.COMMITTED

    async def rollback(self) -> None:
        """Explicitly roll back the transaction."""
        if self._state == _TxState.IDLE:
            raise TransactionStateError("idle", "rollback")
        if self._state == _TxState.COMMITTED:
            raise TransactionStateError("committed", "rollback")
        await self._connection.rollback()
        self._state = _TxState.ROLLED_BACK

    def _check_active(self) -> None:
        if self._state != _TxState.ACTIVE:
            raise TransactionStateError(self._state.value, "execute")
