"""
Example 02: Repositories and SQL Relationships

This example declares tables and relationships, then loads bookstores with
their books and authors from SQLite using one query per relationship.
"""

import asyncio
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from row_hydrate import (
    AsyncEngine,
    AsyncRepository,
    ConnectionConfig,
    SQLRegistry,
    has_many,
    has_one,
    table,
)


@dataclass
class Bookstore:
    id: int
    name: str


@dataclass
class Book:
    id: int
    title: str
    bookstore_id: int
    author_id: Optional[int]


@dataclass
class Author:
    id: int
    name: str


BOOKSTORES = table("bookstores", Bookstore)
BOOKS = table("books", Book)
AUTHORS = table("authors", Author)

store_books = has_many("id", BOOKS, "bookstore_id")
book_author = has_one("author_id", AUTHORS, "id")


class BookstoreRepository(AsyncRepository[Bookstore]):
    """Repository for Bookstore entities"""

    entity = BOOKSTORES

    async def with_catalogue(self) -> list[Bookstore]:
        """All stores with their books and each book's author"""
        return await self.get_all(
            {"books": (store_books(self.engine), {"author": book_author(self.engine)})}
        )


async def main():
    # Statement logging comes from the row_hydrate loggers
    logging.basicConfig(level=logging.DEBUG, format="   %(name)s: %(message)s")

    db_path = Path(tempfile.mkdtemp()) / "books.db"
    sql_dir = Path(tempfile.mkdtemp())
    (sql_dir / "schema").mkdir()
    (sql_dir / "schema" / "bookstores.sql").write_text(
        "CREATE TABLE bookstores (id INTEGER PRIMARY KEY, name TEXT NOT NULL)"
    )
    (sql_dir / "schema" / "authors.sql").write_text(
        "CREATE TABLE authors (id INTEGER PRIMARY KEY, name TEXT NOT NULL)"
    )
    (sql_dir / "schema" / "books.sql").write_text(
        "CREATE TABLE books (id INTEGER PRIMARY KEY, title TEXT NOT NULL, "
        "bookstore_id INTEGER, author_id INTEGER)"
    )

    config = ConnectionConfig(driver="sqlite", database=str(db_path), pool_size=2)
    engine = AsyncEngine.from_config(config, SQLRegistry(str(sql_dir)))

    for name in engine.registry.query_names:
        await engine.execute(name)

    stores = BookstoreRepository(engine)
    async with stores.transaction() as tx:
        shop = await tx.create({"name": "Ye Olde Book Shoppe"})
        await AsyncRepository(tx.engine, AUTHORS).create_many(
            [{"name": "Terry Pratchett"}, {"name": "Neil Gaiman"}]
        )
        await AsyncRepository(tx.engine, BOOKS).create_many(
            [
                {"title": "Guards! Guards!", "bookstore_id": shop.id, "author_id": 1},
                {"title": "Good Omens", "bookstore_id": shop.id, "author_id": 2},
            ]
        )

    print("=== Bookstores with catalogue ===\n")
    for store in await stores.with_catalogue():
        print(f"{store.name}:")
        for book in store.books:
            print(f"   - {book.title} by {book.author.name}")

    await engine.close()


if __name__ == "__main__":
    asyncio.run(main())
