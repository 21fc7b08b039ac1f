"""Unit tests for AsyncTransactionManager."""

from __future__ import annotations

import pytest

from row_hydrate.core.engine import AsyncEngine
from row_hydrate.core.exceptions import TransactionStateError

COUNT = "SELECT COUNT(*) AS cnt FROM authors"
INSERT = "INSERT INTO authors (name) VALUES (:name)"


async def _count(engine: AsyncEngine) -> int:
    row = await engine.fetch_one(COUNT)
    assert row is not None
    return row["cnt"]


class TestAsyncTransactionManager:
    async def test_commit_persists_changes(self, engine: AsyncEngine) -> None:
        async with engine.transaction() as tx:
            await tx.execute(INSERT, {"name": "Neil"})
        assert tx.state == "committed"
        assert await _count(engine) == 1

    async def test_auto_rollback_on_exception(self, engine: AsyncEngine) -> None:
        with pytest.raises(RuntimeError, match="boom"):
            async with engine.transaction() as tx:
                await tx.execute(INSERT, {"name": "Neil"})
                raise RuntimeError("boom")
        assert tx.state == "rolled_back"
        assert await _count(engine) == 0

    async def test_explicit_rollback(self, engine: AsyncEngine) -> None:
        async with engine.transaction() as tx:
            await tx.execute(INSERT, {"name": "Neil"})
            await tx.rollback()
        assert await _count(engine) == 0

    async def test_reads_see_own_writes(self, engine: AsyncEngine) -> None:
        async with engine.transaction() as tx:
            rows = await tx.execute_returning(
                "INSERT INTO authors (name) VALUES (:name) RETURNING id", {"name": "Neil"}
            )
            found = await tx.fetch_one(
                "SELECT name FROM authors WHERE id = :id", {"id": rows[0]["id"]}
            )
            assert found == {"name": "Neil"}
            assert [r["name"] async for r in tx.stream("SELECT name FROM authors")] == ["Neil"]
            assert len(await tx.fetch_all("SELECT * FROM authors")) == 1

    async def test_execute_after_commit_fails(self, engine: AsyncEngine) -> None:
        async with engine.transaction() as tx:
            await tx.commit()
            with pytest.raises(TransactionStateError):
                await tx.execute(INSERT, {"name": "Neil"})

    async def test_commit_after_rollback_fails(self, engine: AsyncEngine) -> None:
        async with engine.transaction() as tx:
            await tx.rollback()
            with pytest.raises(TransactionStateError):
                await tx.commit()

    async def test_execute_before_enter_fails(self, engine: AsyncEngine) -> None:
        with pytest.raises(TransactionStateError, match="idle"):
            await engine.transaction().execute(INSERT, {"name": "Neil"})

    async def test_connection_released(self, engine: AsyncEngine) -> None:
        pool_size = engine.connection_manager.config.pool_size
        for _ in range(pool_size + 1):
            async with engine.transaction():
                pass
        assert await _count(engine) == 0
