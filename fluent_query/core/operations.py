"""Database-operations contracts.

``NamedParameterOperations`` is what the fluent builders need from the layer
that actually talks to the database. ``FluentOperations`` adds the builder
factories on top of it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from fluent_query.core.keys import GeneratedKeyHolder
from fluent_query.core.params import ParameterSource

if TYPE_CHECKING:
    from fluent_query.fluent.query import QueryBuilder
    from fluent_query.fluent.update import UpdateBuilder

Params = ParameterSource | Mapping[str, Any] | None


@runtime_checkable
class NamedParameterOperations(Protocol):
    """Executes SQL with ``:name`` placeholders."""

    def fetch_one(self, sql: str, params: Params = None, *, mapper: Any | None = None) -> Any:
        """Return exactly one (mapped) row."""
        ...

    def fetch_all(self, sql: str, params: Params = None, *, mapper: Any | None = None) -> Any:
        """Return all (mapped) rows in result-set order."""
        ...

    def execute(self, sql: str, params: Params = None) -> int:
        """Run a write statement and return the affected row count."""
        ...

    def execute_with_keys(
        self,
        sql: str,
        params: Params,
        key_holder: GeneratedKeyHolder,
        key_columns: list[str],
    ) -> int:
        """Run a write statement, capturing *key_columns* of affected rows into *key_holder*."""
        ...


@runtime_checkable
class FluentOperations(NamedParameterOperations, Protocol):
    """NamedParameterOperations plus fluent statement builders.

    Example::

        user = db.query("SELECT * FROM users WHERE id = :id").bind("id", 1).fetch_one(User)

        db.update("UPDATE users SET name = :name WHERE id = :id") \\
            .bind("name", "Alex") \\
            .bind("id", 2) \\
            .execute()
    """

    def query(self, sql: str) -> QueryBuilder:
        """Create a builder for a SELECT statement."""
        ...

    def update(self, sql: str) -> UpdateBuilder:
        """Create a builder for an INSERT, UPDATE or DELETE statement."""
        ...
