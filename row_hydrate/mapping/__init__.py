"""Mapping layer - transform row dicts into entities."""

from __future__ import annotations

from row_hydrate.mapping.entity import map_many, map_one
from row_hydrate.mapping.model import ModelMapper
from row_hydrate.mapping.protocol import EntityDefinition
from row_hydrate.mapping.table import TableDefinition, table

__all__ = [
    "EntityDefinition",
    "ModelMapper",
    "TableDefinition",
    "table",
    "map_one",
    "map_many",
]
