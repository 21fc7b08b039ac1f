"""row-hydrate exception hierarchy.

Driver exceptions are wrapped at the engine boundary. Errors raised while
hydrating relations are never wrapped: the hydrator only annotates them with
a note naming the relation that failed.
"""

from __future__ import annotations


class RowHydrateError(Exception):
    """Base exception for all row-hydrate errors."""


# --- Registry ---


class RegistryError(RowHydrateError):
    """Base for SQL registry errors."""


class QueryNotFoundError(RegistryError):
    """Raised when a named query cannot be found in the registry."""

    def __init__(self, query_name: str) -> None:
        self.query_name = query_name
        super().__init__(f"Query not found: '{query_name}'")


class DuplicateQueryError(RegistryError):
    """Raised when two SQL sources resolve to the same namespace key."""

    def __init__(self, query_name: str, path_a: str, path_b: str) -> None:
        self.query_name = query_name
        super().__init__(f"Duplicate query name '{query_name}': {path_a} and {path_b}")


# --- Backend ---


class BackendError(RowHydrateError):
    """Base for failures of the underlying database or driver."""


class QueryExecutionError(BackendError):
    """Raised when the driver rejects or fails to run a statement."""

    def __init__(self, query_name: str, detail: str) -> None:
        self.query_name = query_name
        super().__init__(f"Execution of '{query_name}' failed: {detail}")


class AdapterError(BackendError):
    """Raised when a database adapter cannot be loaded or configured."""


class PoolError(AdapterError):
    """Raised on connection pool failures."""


# --- Shape ---


class ShapeMismatchError(RowHydrateError):
    """Raised when a fetch result is not the single-row / multi-row shape expected.

    Attributes:
        operation: Name of the operation whose contract was violated.
    """

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        super().__init__(f"{operation}: {detail}")


class MultipleRowsError(ShapeMismatchError):
    """Raised when a single-row fetch encounters more than one row."""

    def __init__(self, query_name: str, row_count: int) -> None:
        self.query_name = query_name
        self.row_count = row_count
        super().__init__(
            f"fetch_one('{query_name}')",
            f"expected a single row, got multiple ({row_count} rows)",
        )


# --- Mapping ---


class MappingError(RowHydrateError):
    """Base for mapping errors."""


class ConversionError(MappingError):
    """Raised by entity definitions when a row cannot be converted to an entity."""


class ColumnMismatchError(ConversionError):
    """Raised when required fields cannot be mapped from row columns."""

    def __init__(self, target_class: str, missing_fields: list[str]) -> None:
        self.target_class = target_class
        self.missing_fields = missing_fields
        super().__init__(f"Cannot map to {target_class}: missing fields {missing_fields}")


class RelationDefinitionError(MappingError):
    """Raised when a relation map or table definition is malformed."""


# --- Transaction ---


class TransactionError(RowHydrateError):
    """Base for transaction errors."""


class TransactionStateError(TransactionError):
    """Raised on invalid transaction state transitions."""

    def __init__(self, current_state: str, attempted_action: str) -> None:
        self.current_state = current_state
        self.attempted_action = attempted_action
        super().__init__(f"Cannot {attempted_action} transaction in state '{current_state}'")
