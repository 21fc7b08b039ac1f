"""SQL Registry - loads and caches named SQL statements.

Namespace convention:
    sql/book/list_by_author.sql      -> "book.list_by_author"
    sql/store/inventory/count.sql    -> "store.inventory.count"
"""

from __future__ import annotations

import logging
from pathlib import Path

from row_hydrate.core.exceptions import DuplicateQueryError, QueryNotFoundError

logger = logging.getLogger(__name__)


class SQLRegistry:
    """Loads and caches SQL files from a directory structure.

    Load once at startup; statements may also be registered in code with
    :meth:`add`. A registry without a root directory starts empty.

    Args:
        root_dir: Root directory containing SQL files, or None.

    Raises:
        DuplicateQueryError: If two sources resolve to the same namespace key.
    """

    def __init__(self, root_dir: Path | str | None = None) -> None:
        self._root_dir = Path(root_dir) if root_dir is not None else None
        self._queries: dict[str, str] = {}
        self._sources: dict[str, str] = {}
        self._load()

    def _load(self) -> None:
        """Recursively load all .sql files from the root directory."""
        if self._root_dir is None or not self._root_dir.exists():
            return

        for sql_file in sorted(self._root_dir.rglob("*.sql")):
            relative = sql_file.relative_to(self._root_dir)
            parts = list(relative.parts)
            parts[-1] = parts[-1].removesuffix(".sql")
            self._register(".".join(parts), sql_file.read_text(encoding="utf-8"), str(sql_file))

        logger.debug("Loaded %d queries from %s", len(self._queries), self._root_dir)

    def _register(self, query_name: str, sql: str, source: str) -> None:
        if query_name in self._queries:
            raise DuplicateQueryError(query_name, self._sources[query_name], source)
        self._queries[query_name] = sql.strip()
        self._sources[query_name] = source

    def add(self, query_name: str, sql: str) -> None:
        """Register a statement under *query_name*.

        Raises:
            ValueError: If the name contains whitespace.
            DuplicateQueryError: If the name is already registered.
        """
        if any(c.isspace() for c in query_name):
            raise ValueError(f"Query names cannot contain whitespace: {query_name!r}")
        self._register(query_name, sql, "<code>")

    def get(self, query_name: str) -> str:
        """Look up SQL text by namespace-qualified name.

        Raises:
            QueryNotFoundError: If no query matches the given name.
        """
        try:
            return self._queries[query_name]
        except KeyError:
            raise QueryNotFoundError(query_name) from None

    def has(self, query_name: str) -> bool:
        return query_name in self._queries

    @property
    def query_names(self) -> list[str]:
        """All registered query names, sorted alphabetically."""
        return sorted(self._queries)

    def __len__(self) -> int:
        return len(self._queries)
