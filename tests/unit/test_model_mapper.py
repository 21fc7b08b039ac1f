"""Unit tests for ModelMapper."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from row_hydrate.core.exceptions import ColumnMismatchError, ConversionError
from row_hydrate.mapping.model import ModelMapper
from row_hydrate.mapping.protocol import EntityDefinition


@dataclass
class AuthorDC:
    id: int
    name: str
    email: str


class AuthorPydantic(BaseModel):
    id: int
    name: str
    email: str


class AuthorPlain:
    def __init__(self, id: int, name: str, email: str) -> None:
        self.id = id
        self.name = name
        self.email = email


class TestModelMapper:
    def test_is_entity_definition(self) -> None:
        assert isinstance(ModelMapper(AuthorDC), EntityDefinition)

    def test_map_to_dataclass(self) -> None:
        result = ModelMapper(AuthorDC).to_entity({"id": 1, "name": "Neil", "email": "n@ex.com"})
        assert isinstance(result, AuthorDC)
        assert result.name == "Neil"

    def test_dataclass_ignores_extra_columns(self) -> None:
        row = {"id": 1, "name": "Neil", "email": "n@ex.com", "created_at": "2024-01-01"}
        result = ModelMapper(AuthorDC).to_entity(row)
        assert result == AuthorDC(id=1, name="Neil", email="n@ex.com")

    def test_map_to_pydantic(self) -> None:
        result = ModelMapper(AuthorPydantic).to_entity({"id": 1, "name": "Neil", "email": "n@ex.com"})
        assert isinstance(result, AuthorPydantic)
        assert result.id == 1

    def test_pydantic_type_coercion(self) -> None:
        result = ModelMapper(AuthorPydantic).to_entity({"id": "42", "name": "Neil", "email": "n"})
        assert result.id == 42

    def test_pydantic_missing_field(self) -> None:
        with pytest.raises(ColumnMismatchError) as exc_info:
            ModelMapper(AuthorPydantic).to_entity({"id": 1, "name": "Neil"})
        assert exc_info.value.missing_fields == ["email"]

    def test_map_to_plain_class(self) -> None:
        result = ModelMapper(AuthorPlain).to_entity({"id": 1, "name": "Neil", "email": "n@ex.com"})
        assert isinstance(result, AuthorPlain)
        assert result.email == "n@ex.com"

    def test_column_mismatch_is_conversion_error(self) -> None:
        with pytest.raises(ConversionError):
            ModelMapper(AuthorDC).to_entity({"id": 1, "name": "Neil"})

    def test_column_aliasing(self) -> None:
        mapper = ModelMapper(AuthorDC, aliases={"author_email": "email"})
        result = mapper.to_entity({"id": 1, "name": "Neil", "author_email": "n@ex.com"})
        assert result.email == "n@ex.com"

    def test_input_row_not_mutated(self) -> None:
        row = {"id": 1, "name": "Neil", "author_email": "n@ex.com"}
        ModelMapper(AuthorDC, aliases={"author_email": "email"}).to_entity(row)
        assert "author_email" in row
