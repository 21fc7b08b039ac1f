"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from row_hydrate.core.connection import ConnectionConfig
from row_hydrate.core.engine import AsyncEngine
from row_hydrate.core.registry import SQLRegistry

SCHEMA = [
    "CREATE TABLE bookstores (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL)",
    "CREATE TABLE authors (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL)",
    "CREATE TABLE books (id INTEGER PRIMARY KEY AUTOINCREMENT, title TEXT NOT NULL, "
    "bookstore_id INTEGER, author_id INTEGER)",
    "CREATE TABLE book_details (id INTEGER PRIMARY KEY AUTOINCREMENT, "
    "book_id INTEGER UNIQUE, isbn TEXT NOT NULL)",
]


@pytest.fixture
def sqlite_config(tmp_path: Path) -> ConnectionConfig:
    """SQLite file-backed config; every pooled connection sees the same data."""
    return ConnectionConfig(driver="sqlite", database=str(tmp_path / "test.db"), pool_size=3)


@pytest.fixture
def tmp_sql_dir(tmp_path: Path) -> Path:
    """Temporary directory for SQL files."""
    return tmp_path / "sql"


@pytest.fixture
def write_sql(tmp_sql_dir: Path):
    """Helper to write SQL files into the temp directory.

    Usage:
        write_sql("book/by_author.sql", "SELECT * FROM books WHERE author_id = :author_id")
    """

    def _write(relative_path: str, content: str) -> Path:
        file_path = tmp_sql_dir / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        return file_path

    return _write


@pytest.fixture
async def engine(sqlite_config: ConnectionConfig):
    """AsyncEngine over an empty bookstore schema."""
    eng = AsyncEngine.from_config(sqlite_config, SQLRegistry())
    for statement in SCHEMA:
        await eng.execute(statement)
    yield eng
    await eng.close()
