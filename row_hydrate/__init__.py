"""row-hydrate - row mapping and batched relation hydration over SQL."""

from __future__ import annotations

from row_hydrate.core.connection import AsyncConnectionManager, ConnectionConfig
from row_hydrate.core.engine import AsyncEngine
from row_hydrate.core.enums import DatabaseBackend
from row_hydrate.core.exceptions import (
    AdapterError,
    BackendError,
    ColumnMismatchError,
    ConversionError,
    DuplicateQueryError,
    MappingError,
    MultipleRowsError,
    PoolError,
    QueryExecutionError,
    QueryNotFoundError,
    RegistryError,
    RelationDefinitionError,
    RowHydrateError,
    ShapeMismatchError,
    TransactionError,
    TransactionStateError,
)
from row_hydrate.core.registry import SQLRegistry
from row_hydrate.core.transaction import AsyncTransactionManager
from row_hydrate.mapping import (
    EntityDefinition,
    ModelMapper,
    TableDefinition,
    map_many,
    map_one,
    table,
)
from row_hydrate.relations import (
    ManyRelationship,
    OneRelationship,
    RelationsToLoad,
    hydrate,
    hydrate_one,
)
from row_hydrate.repository import AsyncRepository, has_many, has_one

__all__ = [
    # Connection
    "ConnectionConfig",
    "AsyncConnectionManager",
    # Engine
    "AsyncEngine",
    "AsyncTransactionManager",
    # Registry
    "SQLRegistry",
    # Mapping
    "EntityDefinition",
    "ModelMapper",
    "TableDefinition",
    "table",
    "map_one",
    "map_many",
    # Relations
    "OneRelationship",
    "ManyRelationship",
    "RelationsToLoad",
    "hydrate",
    "hydrate_one",
    # Repository
    "AsyncRepository",
    "has_one",
    "has_many",
    # Enums
    "DatabaseBackend",
    # Exceptions
    "RowHydrateError",
    "RegistryError",
    "QueryNotFoundError",
    "DuplicateQueryError",
    "BackendError",
    "QueryExecutionError",
    "AdapterError",
    "PoolError",
    "ShapeMismatchError",
    "MultipleRowsError",
    "MappingError",
    "ConversionError",
    "ColumnMismatchError",
    "RelationDefinitionError",
    "TransactionError",
    "TransactionStateError",
]
