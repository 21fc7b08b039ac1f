"""Repository layer - table access with relation hydration."""

from __future__ import annotations

from row_hydrate.repository.base import AsyncRepository
from row_hydrate.repository.relations import has_many, has_one

__all__ = [
    "AsyncRepository",
    "has_one",
    "has_many",
]
