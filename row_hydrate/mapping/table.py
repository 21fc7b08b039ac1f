"""Table-backed entity definitions.

A ``TableDefinition`` pairs a table name with the converter used to turn its
rows into entities. Repositories and the SQL relationship factories read the
table name and key columns from it.
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from row_hydrate.core.exceptions import RelationDefinitionError
from row_hydrate.mapping.model import ModelMapper
from row_hydrate.mapping.protocol import EntityDefinition

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")
_COLUMN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def check_identifier(name: str) -> str:
    """Return *name* if it is a plain (optionally schema-qualified) SQL identifier.

    Table names are interpolated into generated statements, so anything else
    is rejected.
    """
    if not isinstance(name, str) or not _IDENTIFIER.match(name):
        raise RelationDefinitionError(f"Invalid SQL identifier: {name!r}")
    return name


def check_column(name: str) -> str:
    """Return *name* if it is an unqualified column name.

    Column names double as ``:name`` placeholders and row keys, so a dot is
    rejected too.
    """
    if not isinstance(name, str) or not _COLUMN.match(name):
        raise RelationDefinitionError(f"Invalid column name: {name!r}")
    return name


@dataclass(frozen=True)
class TableDefinition:
    """Entity definition bound to a database table.

    Attributes:
        table_name: Table the rows come from.
        converter: Entity definition applied to each row.
        primary_key: Key column used to re-fetch created rows, or None.
        to_row: Optional callable turning input data into an insertable row.
    """

    table_name: str
    converter: EntityDefinition[Any]
    primary_key: str | None = "id"
    to_row: Callable[[Any], dict[str, Any] | Awaitable[dict[str, Any]]] | None = None

    def __post_init__(self) -> None:
        check_identifier(self.table_name)
        if self.primary_key is not None:
            check_column(self.primary_key)

    def to_entity(self, row: Any) -> Any:
        return self.converter.to_entity(row)


def table(
    table_name: str,
    model: type | EntityDefinition[Any],
    *,
    primary_key: str | None = "id",
    aliases: dict[str, str] | None = None,
    to_row: Callable[[Any], Any] | None = None,
) -> TableDefinition:
    """Entry point for declaring a table entity.

    Args:
        table_name: Table name.
        model: A model class (wrapped in a ModelMapper) or any object with
               ``to_entity``.
        primary_key: Key column, or None for tables without one.
        aliases: Column-name to field-name mapping for the ModelMapper.
        to_row: Converter applied to data passed to ``create``.

    Returns:
        A frozen TableDefinition.
    """
    if isinstance(model, type):
        converter: EntityDefinition[Any] = ModelMapper(model, aliases=aliases)
    else:
        converter = model
    return TableDefinition(
        table_name=table_name,
        converter=converter,
        primary_key=primary_key,
        to_row=to_row,
    )
