"""Row-to-model entity definition.

Supports dataclasses, Pydantic models, and plain classes.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from row_hydrate.core.exceptions import ColumnMismatchError

T = TypeVar("T")


class ModelMapper(Generic[T]):
    """Entity definition that builds ``target_class`` instances from row dicts.

    Detection order:
    1. Pydantic BaseModel -> model_validate(row)
    2. dataclass -> target_class(**row)
    3. Plain class -> target_class(**row)

    Row keys that are not fields of a dataclass are dropped so that tables
    may carry columns the model does not declare.

    Args:
        target_class: The class to construct from row data.
        aliases: Optional column-name to field-name mapping.
    """

    def __init__(
        self,
        target_class: type[T],
        aliases: dict[str, str] | None = None,
    ) -> None:
        self._target_class = target_class
        self._aliases = aliases
        self._is_pydantic = isinstance(target_class, type) and issubclass(
            target_class, BaseModel
        )
        self._dataclass_fields: frozenset[str] | None = None
        if dataclasses.is_dataclass(target_class):
            self._dataclass_fields = frozenset(
                f.name for f in dataclasses.fields(target_class) if f.init
            )

    @property
    def target_class(self) -> type[T]:
        return self._target_class

    def _apply_aliases(self, row: dict[str, Any]) -> dict[str, Any]:
        if not self._aliases:
            return row
        return {self._aliases.get(key, key): value for key, value in row.items()}

    def to_entity(self, row: dict[str, Any]) -> T:
        """Map a single row to a ``target_class`` instance."""
        row = self._apply_aliases(dict(row))

        if self._is_pydantic:
            try:
                return self._target_class.model_validate(row)  # type: ignore[attr-defined, no-any-return]
            except ValidationError as e:
                raise ColumnMismatchError(
                    self._target_class.__name__,
                    [str(err["loc"][0]) for err in e.errors() if err["loc"]],
                ) from e

        if self._dataclass_fields is not None:
            row = {key: value for key, value in row.items() if key in self._dataclass_fields}

        try:
            return self._target_class(**row)
        except TypeError as e:
            raise ColumnMismatchError(self._target_class.__name__, [str(e)]) from e

