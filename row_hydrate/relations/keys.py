"""Key-based join helpers.

Used by relationship factories to batch a load over the distinct local key
values and to index the loaded entities for constant-time lookup when
attaching.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any


def get_field(entity: Any, name: str) -> Any:
    """Read *name* from a mapping entity or an attribute entity."""
    if isinstance(entity, Mapping):
        return entity.get(name)
    return getattr(entity, name, None)


def set_field(entity: Any, name: str, value: Any) -> None:
    """Write *name* onto an entity in place.

    Frozen dataclasses and Pydantic models refuse unknown attributes, so
    those fall back to ``object.__setattr__``.
    """
    if isinstance(entity, MutableMapping):
        entity[name] = value
        return
    try:
        setattr(entity, name, value)
    except (AttributeError, TypeError, ValueError):
        object.__setattr__(entity, name, value)


def distinct_keys(entities: Iterable[Any], field: str) -> list[Any]:
    """Distinct non-null values of *field*, in first-seen order."""
    seen: dict[Any, None] = {}
    for entity in entities:
        key = get_field(entity, field)
        if key is not None:
            seen.setdefault(key, None)
    return list(seen)


def index_one(entities: Iterable[Any], field: str) -> dict[Any, Any]:
    """Map each *field* value to its entity.

    Duplicate key values resolve to the last entity seen.
    """
    return {get_field(entity, field): entity for entity in entities}


def index_many(entities: Iterable[Any], field: str) -> dict[Any, list[Any]]:
    """Group entities by *field* value, preserving input order within a group."""
    grouped: dict[Any, list[Any]] = {}
    for entity in entities:
        grouped.setdefault(get_field(entity, field), []).append(entity)
    return grouped
