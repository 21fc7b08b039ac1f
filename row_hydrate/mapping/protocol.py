"""Entity definition protocol.

Anything exposing ``to_entity`` qualifies as an entity definition. The
conversion may be synchronous or return an awaitable; the entity mapper
awaits it when needed.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Any, Protocol, TypeVar, runtime_checkable

T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class EntityDefinition(Protocol[T_co]):
    """Converts one raw row into a domain entity."""

    def to_entity(self, row: Any) -> T_co | Awaitable[T_co]:
        """Map a raw row to an entity, possibly asynchronously."""
        ...
