"""Unit tests for NamedParameterTemplate against in-memory SQLite."""

from __future__ import annotations

import pytest

from fluent_query.core.exceptions import (
    EmptyResultError,
    ExecutionError,
    IncorrectResultSizeError,
    InvalidUsageError,
    ParameterBindingError,
)
from fluent_query.core.keys import GeneratedKeyHolder
from fluent_query.core.params import MapParameterSource
from fluent_query.fluent.template import FluentTemplate
from fluent_query.mapping.strategy import SingleColumnRowMapper


class TestNamedParameterTemplate:
    def test_fetch_one_returns_dict(self, template: FluentTemplate) -> None:
        row = template.fetch_one("SELECT id, name FROM users WHERE id = :id", {"id": 1})
        assert row == {"id": 1, "name": "mkyong"}

    def test_fetch_one_with_mapper(self, template: FluentTemplate) -> None:
        name = template.fetch_one(
            "SELECT name FROM users WHERE id = :id",
            MapParameterSource({"id": 2}),
            mapper=SingleColumnRowMapper(str),
        )
        assert name == "alex"

    def test_fetch_one_no_rows(self, template: FluentTemplate) -> None:
        with pytest.raises(EmptyResultError):
            template.fetch_one("SELECT * FROM users WHERE id = :id", {"id": 99})

    def test_fetch_one_many_rows(self, template: FluentTemplate) -> None:
        with pytest.raises(IncorrectResultSizeError) as exc_info:
            template.fetch_one("SELECT * FROM users")
        assert exc_info.value.actual_size == 3

    def test_fetch_all_in_order(self, template: FluentTemplate) -> None:
        names = template.fetch_all(
            "SELECT name FROM users ORDER BY id", mapper=lambda row: row["name"]
        )
        assert names == ["mkyong", "alex", "joel"]

    def test_rows_record_result_width(self, template: FluentTemplate) -> None:
        row = template.fetch_one("SELECT name, name FROM users WHERE id = 1")
        assert row == {"name": "mkyong"}
        assert row.column_count == 2

    def test_fetch_all_empty(self, template: FluentTemplate) -> None:
        assert template.fetch_all("SELECT * FROM users WHERE id > :id", {"id": 10}) == []

    def test_in_list_expansion(self, template: FluentTemplate) -> None:
        rows = template.fetch_all(
            "SELECT name FROM users WHERE id IN (:ids) ORDER BY id", {"ids": [1, 3]}
        )
        assert [r["name"] for r in rows] == ["mkyong", "joel"]

    def test_missing_parameter(self, template: FluentTemplate) -> None:
        with pytest.raises(ParameterBindingError, match="'id'"):
            template.fetch_all("SELECT * FROM users WHERE id = :id")

    def test_driver_error_is_wrapped(self, template: FluentTemplate) -> None:
        with pytest.raises(ExecutionError) as exc_info:
            template.fetch_all("SELECT * FROM no_such_table")
        assert exc_info.value.__cause__ is not None
        assert exc_info.value.sql == "SELECT * FROM no_such_table"

    def test_execute_returns_row_count(self, template: FluentTemplate) -> None:
        affected = template.execute("UPDATE users SET email = :email", {"email": "x@y.z"})
        assert affected == 3

    def test_failed_write_rolls_back(self, template: FluentTemplate) -> None:
        with pytest.raises(ExecutionError):
            template.execute("INSERT INTO users (id, name) VALUES (1, 'dup')")
        assert template.fetch_one("SELECT COUNT(*) AS n FROM users") == {"n": 3}

    def test_execute_with_keys(self, template: FluentTemplate) -> None:
        holder = GeneratedKeyHolder()
        count = template.execute_with_keys(
            "INSERT INTO users (name) VALUES (:name)", {"name": "new"}, holder, ["id"]
        )
        assert count == 1
        assert holder.key_list == [{"id": 4}]

    def test_execute_with_keys_requires_columns(self, template: FluentTemplate) -> None:
        with pytest.raises(InvalidUsageError):
            template.execute_with_keys("DELETE FROM users", None, GeneratedKeyHolder(), [])

    def test_query_and_update_return_new_builders(self, template: FluentTemplate) -> None:
        assert template.query("SELECT 1") is not template.query("SELECT 1")
        assert template.update("DELETE FROM users").sql == "DELETE FROM users"
