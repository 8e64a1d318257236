"""Fluent builder for SELECT statements."""

from __future__ import annotations

import logging
from typing import Any

from fluent_query.core.operations import NamedParameterOperations
from fluent_query.fluent.binding import ParameterBinder, _BindingMixin
from fluent_query.mapping.strategy import row_mapper_for

logger = logging.getLogger("fluent_query.fluent")


class QueryBuilder(_BindingMixin):
    """Binds parameters to a query and fetches mapped results.

    Example:
        user = (
            template.query("SELECT * FROM users WHERE id = :id")
            .bind("id", 1)
            .fetch_one(User)
        )

    The result type passed to ``fetch_one`` / ``fetch`` selects the mapping:
    a scalar type (``int``, ``str``, ``date`` ...) reads the single column of
    each row, any other class is populated from the columns by name, and an
    object with ``map_one`` or a plain ``row -> value`` callable is used as
    the mapper directly.
    """

    def __init__(self, sql: str, operations: NamedParameterOperations) -> None:
        self._sql = sql
        self._operations = operations
        self._binder = ParameterBinder()

    @property
    def sql(self) -> str:
        return self._sql

    def fetch_one(self, target: Any) -> Any:
        """Execute and return exactly one mapped row.

        Raises:
            EmptyResultError: if the query returns no rows.
            IncorrectResultSizeError: if it returns more than one.
        """
        mapper = row_mapper_for(target)
        logger.debug("fetch_one %r -> %s", self._sql, getattr(target, "__name__", target))
        return self._operations.fetch_one(self._sql, self.bound_parameters, mapper=mapper)

    def fetch(self, target: Any) -> list[Any]:
        """Execute and return every row mapped, in result-set order."""
        mapper = row_mapper_for(target)
        logger.debug("fetch %r -> %s", self._sql, getattr(target, "__name__", target))
        return self._operations.fetch_all(self._sql, self.bound_parameters, mapper=mapper)  # type: ignore[no-any-return]

    def __repr__(self) -> str:
        return f"QueryBuilder({self._sql!r})"
