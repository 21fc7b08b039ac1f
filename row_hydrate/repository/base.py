"""Repository base class.

Wraps an executor (AsyncEngine or open transaction) and a TableDefinition:
fetch rows, map them to entities, and optionally hydrate relations on the
result. Subclasses add domain-specific query methods on top.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from typing import Any, ClassVar, Generic, TypeVar

from row_hydrate.core.exceptions import RelationDefinitionError, ShapeMismatchError
from row_hydrate.mapping.entity import map_many, map_one
from row_hydrate.mapping.table import TableDefinition, check_column
from row_hydrate.relations.descriptor import RelationsToLoad
from row_hydrate.relations.hydrator import hydrate, hydrate_one

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class AsyncRepository(Generic[T]):
    """Data access for one table.

    The table may be passed in or declared on a subclass::

        class BookRepository(AsyncRepository[Book]):
            entity = table("books", Book)

            async def by_author(self, author_id: int) -> list[Book]:
                return await self.get_many(
                    "book.by_author", {"author_id": author_id}
                )

    Args:
        engine: AsyncEngine or AsyncTransactionManager to run statements on.
        entity: Table definition; defaults to the class attribute.
    """

    entity: ClassVar[TableDefinition | None] = None

    def __init__(self, engine: Any, entity: TableDefinition | None = None) -> None:
        self.engine = engine
        resolved = entity if entity is not None else type(self).entity
        if resolved is None:
            raise RelationDefinitionError(
                f"{type(self).__name__} needs a TableDefinition (argument or class attribute)"
            )
        self.table: TableDefinition = resolved

    # --- Loading ---

    async def load_one(
        self,
        row: dict[str, Any] | None | Awaitable[dict[str, Any] | None],
        relations: RelationsToLoad | None = None,
    ) -> T | None:
        """Map a single row (or awaitable row) and hydrate *relations* on it.

        Returns None for a missing row without loading relations.

        Raises:
            ShapeMismatchError: If the row is a list of rows.
        """
        row = await _resolve(row)
        if isinstance(row, list):
            raise ShapeMismatchError(
                "load_one", f"expected a single row, got multiple ({len(row)} rows)"
            )
        if row is None:
            return None
        entity = await map_one(self.table, row)
        return await hydrate_one(entity, relations) if relations else entity

    async def load_many(
        self,
        rows: list[dict[str, Any]] | Awaitable[list[dict[str, Any]]],
        relations: RelationsToLoad | None = None,
    ) -> list[T]:
        """Map rows (or an awaitable of rows) and hydrate *relations* on them.

        Raises:
            ShapeMismatchError: If the resolved value is not a list.
        """
        rows = await _resolve(rows)
        if not isinstance(rows, list):
            raise ShapeMismatchError(
                "load_many", f"expected an array of rows, got {type(rows).__name__}"
            )
        entities = await map_many(self.table, rows)
        return await hydrate(entities, relations) if relations else entities

    # --- Queries ---

    async def get_all(self, relations: RelationsToLoad | None = None) -> list[T]:
        """Fetch every row of the table."""
        return await self.load_many(
            self.engine.fetch_all(f"SELECT * FROM {self.table.table_name}"), relations
        )

    async def get_many(
        self,
        query: str,
        params: dict[str, Any] | None = None,
        relations: RelationsToLoad | None = None,
    ) -> list[T]:
        """Fetch the rows of *query* (registry key or inline SQL)."""
        return await self.load_many(self.engine.fetch_all(query, params), relations)

    async def get_one(
        self,
        query: str,
        params: dict[str, Any] | None = None,
        relations: RelationsToLoad | None = None,
    ) -> T | None:
        """Fetch the single row of *query*, or None.

        Raises:
            MultipleRowsError: If the query yields more than one row.
        """
        return await self.load_one(self.engine.fetch_one(query, params), relations)

    async def get_by_key(
        self,
        key: Any,
        relations: RelationsToLoad | None = None,
    ) -> T | None:
        """Fetch the row whose primary key equals *key*."""
        pk = self._primary_key("get_by_key")
        return await self.get_one(
            f"SELECT * FROM {self.table.table_name} WHERE {pk} = :pk",
            {"pk": key},
            relations,
        )

    # --- Writes ---

    async def _to_row(self, data: Any) -> dict[str, Any]:
        row = data if self.table.to_row is None else await _resolve(self.table.to_row(data))
        for column in row:
            check_column(column)
        return dict(row)

    async def create(self, data: Any) -> T | None:
        """Insert one row and return the created entity.

        Returns None when the table declares no primary key or the insert
        produced no row (for example a conflict skipped by the statement).
        """
        row = await self._to_row(data)
        table_name = self.table.table_name
        if row:
            columns = ", ".join(row)
            values = ", ".join(f":{column}" for column in row)
            sql = f"INSERT INTO {table_name} ({columns}) VALUES ({values})"
        else:
            sql = f"INSERT INTO {table_name} DEFAULT VALUES"

        pk = self.table.primary_key
        if pk is None:
            await self.engine.execute(sql, row)
            return None

        inserted = await self.engine.execute_returning(f"{sql} RETURNING {pk}", row)
        if not inserted:
            logger.debug("Insert into %s returned no row", table_name)
            return None
        logger.debug("Created %s row %r", table_name, inserted[0][pk])
        return await self.get_by_key(inserted[0][pk])

    async def create_many(self, items: list[Any]) -> int:
        """Insert several rows in one statement. Returns the affected row count."""
        if not items:
            return 0
        rows = [await self._to_row(item) for item in items]
        columns = list(dict.fromkeys(column for row in rows for column in row))
        if not columns:
            raise ValueError("create_many needs at least one column")

        params: dict[str, Any] = {}
        groups: list[str] = []
        for i, row in enumerate(rows):
            names = [f"r{i}_{column}" for column in columns]
            params.update({name: row.get(column) for name, column in zip(names, columns)})
            groups.append("(" + ", ".join(f":{name}" for name in names) + ")")

        return await self.engine.execute(
            f"INSERT INTO {self.table.table_name} ({', '.join(columns)}) "
            f"VALUES {', '.join(groups)}",
            params,
        )

    async def update(
        self,
        where: str,
        params: dict[str, Any] | None,
        fields: dict[str, Any],
    ) -> int:
        """Set *fields* on rows matching the *where* fragment.

        *where* is SQL with ``:name`` placeholders bound from *params*; new
        values are bound as ``:set_<column>``.
        """
        if not fields:
            return 0
        assignments = ", ".join(f"{check_column(column)} = :set_{column}" for column in fields)
        bound = dict(params or {})
        bound.update({f"set_{column}": value for column, value in fields.items()})
        return await self.engine.execute(
            f"UPDATE {self.table.table_name} SET {assignments} WHERE {where}", bound
        )

    async def delete(self, where: str, params: dict[str, Any] | None = None) -> int:
        """Delete rows matching the *where* fragment."""
        return await self.engine.execute(
            f"DELETE FROM {self.table.table_name} WHERE {where}", params
        )

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncRepository[T]]:
        """Yield a repository of the same type bound to a new transaction.

        Commits when the block exits normally, rolls back on exception.
        """
        async with self.engine.transaction() as tx:
            yield type(self)(tx, self.table)

    def _primary_key(self, operation: str) -> str:
        if self.table.primary_key is None:
            raise RelationDefinitionError(
                f"{operation} requires a primary key on '{self.table.table_name}'"
            )
        return self.table.primary_key
