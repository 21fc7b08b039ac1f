"""
Example 01: Relation Hydration

This example attaches related entities to rows loaded from plain Python data,
with one load per relationship and no database involved.
"""

import asyncio
from dataclasses import dataclass

from row_hydrate import ManyRelationship, ModelMapper, OneRelationship, hydrate, map_many
from row_hydrate.relations import get_field, index_many, index_one


@dataclass
class Bookstore:
    id: int
    name: str


@dataclass
class Book:
    id: int
    title: str
    bookstore_id: int
    author_id: int


@dataclass
class Author:
    id: int
    name: str


BOOKS = [
    {"id": 10, "title": "The Colour of Magic", "bookstore_id": 1, "author_id": 1},
    {"id": 11, "title": "Fragile Things", "bookstore_id": 2, "author_id": 2},
    {"id": 12, "title": "Guards! Guards!", "bookstore_id": 1, "author_id": 1},
]
AUTHORS = [{"id": 1, "name": "Terry Pratchett"}, {"id": 2, "name": "Neil Gaiman"}]


async def load_books(stores):
    ids = {store.id for store in stores}
    print(f"   loading books for {len(stores)} stores")
    return [row for row in BOOKS if row["bookstore_id"] in ids]


async def load_authors(books):
    ids = {book.author_id for book in books}
    print(f"   loading authors for {len(books)} books")
    return [row for row in AUTHORS if row["id"] in ids]


def attach_books(books):
    by_store = index_many(books, "bookstore_id")
    return lambda store: by_store.get(store.id, [])


def attach_author(authors):
    by_id = index_one(authors, "id")
    return lambda book: by_id.get(get_field(book, "author_id"))


async def main():
    stores = await map_many(
        ModelMapper(Bookstore),
        [{"id": 1, "name": "Ye Olde Book Shoppe"}, {"id": 2, "name": "Brigitte's Books"}],
    )

    books = ManyRelationship(ModelMapper(Book), load_books, attach_books)
    author = OneRelationship(ModelMapper(Author), load_authors, attach_author)

    print("=== Nested Hydration ===\n")
    await hydrate(stores, {"books": (books, {"author": author})})
    print()

    for store in stores:
        print(f"{store.name}:")
        for book in store.books:
            print(f"   - {book.title} by {book.author.name}")


if __name__ == "__main__":
    asyncio.run(main())
