"""Relations layer - declarative relationships and batched hydration."""

from __future__ import annotations

from row_hydrate.relations.descriptor import (
    ManyRelationship,
    OneRelationship,
    Relationship,
    RelationsToLoad,
)
from row_hydrate.relations.hydrator import hydrate, hydrate_one
from row_hydrate.relations.keys import distinct_keys, get_field, index_many, index_one

__all__ = [
    "Relationship",
    "OneRelationship",
    "ManyRelationship",
    "RelationsToLoad",
    "hydrate",
    "hydrate_one",
    "distinct_keys",
    "get_field",
    "index_one",
    "index_many",
]
