"""Unit tests for ModelMapper."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal

import pytest
from pydantic import BaseModel, Field

from fluent_query.core.exceptions import (
    ColumnMismatchError,
    StrictModeViolation,
    TypeConversionError,
)
from fluent_query.mapping.model import ModelMapper, model_plan, normalize_name
from fluent_query.mapping.plan import ModelKind


@dataclass
class UserDC:
    id: int
    name: str
    email: str
    birth_date: dt.date | None = None


class UserPydantic(BaseModel):
    id: int
    name: str
    email: str
    birth_date: dt.date | None = None


class UserPlain:
    def __init__(self, id: int, name: str, email: str) -> None:
        self.id = id
        self.name = name
        self.email = email


class Account:
    balance: Decimal
    opened: dt.datetime | None = None

    def __init__(self, id: int) -> None:
        self.id = id


@dataclass(frozen=True)
class Versioned:
    id: int
    version: int = field(init=False, default=0)


class AliasedModel(BaseModel):
    user_id: int = Field(alias="userId")


class TestNormalizeName:
    def test_case_and_underscores_ignored(self) -> None:
        assert normalize_name("BIRTH_DATE") == normalize_name("birthDate") == "birthdate"


class TestModelPlan:
    def test_kinds(self) -> None:
        assert model_plan(UserDC).kind is ModelKind.DATACLASS
        assert model_plan(UserPydantic).kind is ModelKind.PYDANTIC
        assert model_plan(UserPlain).kind is ModelKind.PLAIN

    def test_compiled_once_per_class(self) -> None:
        assert model_plan(UserDC) is model_plan(UserDC)

    def test_required_properties(self) -> None:
        required = [p.attribute for p in model_plan(UserDC).required]
        assert required == ["id", "name", "email"]


class TestModelMapper:
    def test_map_to_dataclass(self) -> None:
        mapper = ModelMapper(UserDC)
        row = {"id": 1, "name": "Alice", "email": "alice@ex.com"}
        result = mapper.map_one(row)
        assert isinstance(result, UserDC)
        assert result.id == 1
        assert result.name == "Alice"
        assert result.birth_date is None

    def test_map_to_pydantic(self) -> None:
        mapper = ModelMapper(UserPydantic)
        row = {"id": "42", "name": "Alice", "email": "alice@ex.com"}
        result = mapper.map_one(row)
        assert isinstance(result, UserPydantic)
        assert result.id == 42

    def test_map_to_plain_class(self) -> None:
        mapper = ModelMapper(UserPlain)
        row = {"id": 1, "name": "Alice", "email": "alice@ex.com"}
        result = mapper.map_one(row)
        assert isinstance(result, UserPlain)
        assert result.name == "Alice"

    def test_column_names_match_loosely(self) -> None:
        row = {"ID": 1, "NAME": "mkyong", "EMAIL": "m@x.com", "BIRTH_DATE": "1980-05-20"}
        assert ModelMapper(UserDC).map_one(row).birth_date == dt.date(1980, 5, 20)
        assert ModelMapper(UserPydantic).map_one(row).birth_date == dt.date(1980, 5, 20)

    def test_dataclass_values_converted_to_annotations(self) -> None:
        row = {"id": "7", "name": "Alice", "email": "a@ex.com"}
        assert ModelMapper(UserDC).map_one(row).id == 7

    def test_unconvertible_value(self) -> None:
        row = {"id": "seven", "name": "Alice", "email": "a@ex.com"}
        with pytest.raises(TypeConversionError):
            ModelMapper(UserDC).map_one(row)

    def test_plain_class_annotated_attributes(self) -> None:
        row = {"id": "5", "balance": "1.50", "opened": "2020-01-02 03:04:05"}
        account = ModelMapper(Account).map_one(row)
        assert account.id == 5
        assert account.balance == Decimal("1.50")
        assert account.opened == dt.datetime(2020, 1, 2, 3, 4, 5)

    def test_frozen_dataclass_non_init_field(self) -> None:
        result = ModelMapper(Versioned).map_one({"id": 1, "version": 3})
        assert result.version == 3

    def test_pydantic_alias(self) -> None:
        assert ModelMapper(AliasedModel).map_one({"user_id": 9}).user_id == 9
        assert ModelMapper(AliasedModel).map_one({"userId": 9}).user_id == 9

    def test_unmapped_columns_ignored(self) -> None:
        row = {"id": 1, "name": "Alice", "email": "a@ex.com", "time_of_death": None}
        assert ModelMapper(UserDC).map_one(row).id == 1

    def test_strict_mode(self) -> None:
        row = {"id": 1, "name": "Alice", "email": "a@ex.com", "extra": 1}
        with pytest.raises(StrictModeViolation, match="extra"):
            ModelMapper(UserDC, strict=True).map_one(row)

    def test_map_many(self) -> None:
        mapper = ModelMapper(UserDC)
        rows = [
            {"id": 1, "name": "Alice", "email": "a@ex.com"},
            {"id": 2, "name": "Bob", "email": "b@ex.com"},
        ]
        results = mapper.map_many(rows)
        assert [r.id for r in results] == [1, 2]

    def test_column_mismatch_error(self) -> None:
        mapper = ModelMapper(UserDC)
        with pytest.raises(ColumnMismatchError, match="email"):
            mapper.map_one({"id": 1, "name": "Alice"})

    def test_pydantic_missing_field(self) -> None:
        with pytest.raises(ColumnMismatchError):
            ModelMapper(UserPydantic).map_one({"id": 1})

    def test_column_aliasing(self) -> None:
        mapper = ModelMapper(UserDC, aliases={"user_email": "email"})
        row = {"id": 1, "name": "Alice", "user_email": "alice@ex.com"}
        assert mapper.map_one(row).email == "alice@ex.com"

    def test_map_many_empty(self) -> None:
        assert ModelMapper(UserDC).map_many([]) == []


class Bean:
    def __init__(self) -> None:
        self.id = None
        self.user_name = None
        self._cache = None


class TestInstanceAttributeMapping:
    def test_attributes_set_by_constructor(self) -> None:
        bean = ModelMapper(Bean).map_one({"ID": 1, "USER_NAME": "mkyong"})
        assert bean.id == 1
        assert bean.user_name == "mkyong"

    def test_private_attributes_not_matched(self) -> None:
        bean = ModelMapper(Bean).map_one({"id": 1, "_cache": "x"})
        assert bean._cache is None

    def test_strict_mode_after_attribute_matching(self) -> None:
        with pytest.raises(StrictModeViolation, match="email"):
            ModelMapper(Bean, strict=True).map_one({"id": 1, "email": "a@ex.com"})

    def test_no_matching_column(self) -> None:
        class Empty:
            pass

        with pytest.raises(ColumnMismatchError, match="no property matches"):
            ModelMapper(Empty).map_one({"id": 1, "name": "x"})

    def test_no_matching_column_for_dataclass(self) -> None:
        @dataclass
        class Settings:
            theme: str = "dark"

        with pytest.raises(ColumnMismatchError, match="other"):
            ModelMapper(Settings).map_one({"other": 1})
