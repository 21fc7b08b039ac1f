"""Unit tests for map_one / map_many."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import pytest

from row_hydrate.core.exceptions import ColumnMismatchError
from row_hydrate.mapping.entity import map_many, map_one
from row_hydrate.mapping.model import ModelMapper


@dataclass
class Author:
    id: int
    name: str


class AsyncAuthorDef:
    async def to_entity(self, row: dict) -> Author:
        await asyncio.sleep(0)
        return Author(**row)


class RecordingDef:
    def __init__(self, log: list[str]) -> None:
        self.log = log

    def to_entity(self, row: dict) -> int:
        self.log.append(f"map {row['id']}")
        return row["id"]


ROWS = [{"id": 1, "name": "Neil"}, {"id": 2, "name": "Terry"}, {"id": 3, "name": "Ursula"}]


class TestMapOne:
    async def test_sync_conversion(self) -> None:
        author = await map_one(ModelMapper(Author), ROWS[0])
        assert author == Author(id=1, name="Neil")

    async def test_async_conversion_is_awaited(self) -> None:
        author = await map_one(AsyncAuthorDef(), ROWS[1])
        assert author == Author(id=2, name="Terry")

    async def test_errors_propagate_unchanged(self) -> None:
        class Failing:
            def to_entity(self, row):
                raise ValueError("bad row")

        with pytest.raises(ValueError, match="bad row"):
            await map_one(Failing(), {})


class TestMapMany:
    async def test_preserves_order(self) -> None:
        authors = await map_many(ModelMapper(Author), ROWS)
        assert [a.id for a in authors] == [1, 2, 3]

    async def test_async_conversion_preserves_order(self) -> None:
        authors = await map_many(AsyncAuthorDef(), ROWS)
        assert [a.name for a in authors] == ["Neil", "Terry", "Ursula"]

    async def test_async_iterable_source(self) -> None:
        async def produce():
            for row in ROWS:
                await asyncio.sleep(0)
                yield row

        authors = await map_many(ModelMapper(Author), produce())
        assert [a.id for a in authors] == [1, 2, 3]

    async def test_maps_each_row_as_it_arrives(self) -> None:
        log: list[str] = []

        def produce():
            for row in ROWS[:2]:
                log.append(f"pull {row['id']}")
                yield row

        result = await map_many(RecordingDef(log), produce())
        assert result == [1, 2]
        assert log == ["pull 1", "map 1", "pull 2", "map 2"]

    async def test_empty_input(self) -> None:
        assert await map_many(ModelMapper(Author), []) == []

        async def nothing():
            return
            yield

        assert await map_many(ModelMapper(Author), nothing()) == []

    async def test_async_generator_closed_when_conversion_fails(self) -> None:
        state = {"closed": False}

        async def produce():
            try:
                for row in [*ROWS, {"id": 4}]:
                    yield row
            finally:
                state["closed"] = True

        source = produce()
        with pytest.raises(ColumnMismatchError):
            await map_many(ModelMapper(Author), source)
        assert state["closed"] is True
