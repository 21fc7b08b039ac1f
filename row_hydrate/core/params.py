"""SQL parameter handling.

Converts `:name` parameter syntax to driver-specific format, handling string
literal exclusion and PostgreSQL `::typecast` syntax, and expands value lists
into named placeholders for `IN (...)` filters.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from functools import lru_cache
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from row_hydrate.core.registry import SQLRegistry

# Matches :name but not ::typecast and not inside words
_PARAM_PATTERN = re.compile(r"(?<![:\w]):([a-zA-Z_]\w*)")

# Matches single-quoted string literals (with escaped quotes handled)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^'\\]|\\.)*'")


def normalize_params(sql: str, paramstyle: str) -> str:
    """Convert :name parameters to the target param style.

    Args:
        sql: SQL string with :name parameters.
        paramstyle: Target style - 'named' (no conversion) or 'pyformat' (%(name)s).

    Returns:
        SQL with parameters converted to the target style.
    """
    if paramstyle == "named":
        return sql
    return _convert_to_pyformat(sql)


@lru_cache(maxsize=256)
def _convert_to_pyformat(sql: str) -> str:
    """Convert :name params to %(name)s, preserving string literals."""
    parts: list[str] = []
    last_end = 0

    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append(_PARAM_PATTERN.sub(r"%(\1)s", sql[last_end:start]))
        parts.append(match.group())
        last_end = end

    if last_end < len(sql):
        parts.append(_PARAM_PATTERN.sub(r"%(\1)s", sql[last_end:]))

    return "".join(parts)


def expand_in(prefix: str, values: Sequence[Any]) -> tuple[str, dict[str, Any]]:
    """Build a placeholder list for an ``IN (...)`` filter.

    >>> expand_in("key", [3, 7])
    (':key_0, :key_1', {'key_0': 3, 'key_1': 7})
    """
    params = {f"{prefix}_{i}": value for i, value in enumerate(values)}
    return ", ".join(f":{name}" for name in params), params


def is_raw_sql(query: str) -> bool:
    """Return True if query is an inline SQL string rather than a registry key.

    Registry keys use dot-notation (e.g. ``users.get_by_id``) and never
    contain whitespace. Any SQL statement will contain at least one space.
    """
    return any(c.isspace() for c in query)


def resolve_sql(query: str, registry: SQLRegistry) -> tuple[str, str]:
    """Return ``(sql_text, label)`` for *query*.

    Inline SQL is returned as-is with the label ``"<inline>"``; anything else
    is looked up in *registry* and labelled with its key. The label is used
    in error messages and logs.
    """
    if is_raw_sql(query):
        return query, "<inline>"
    return registry.get(query), query
