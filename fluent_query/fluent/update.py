"""Fluent builder for INSERT, UPDATE and DELETE statements."""

from __future__ import annotations

import logging
from typing import Any

from fluent_query.core.exceptions import InvalidUsageError
from fluent_query.core.keys import GeneratedKeyHolder
from fluent_query.core.operations import NamedParameterOperations
from fluent_query.fluent.binding import ParameterBinder, _BindingMixin

logger = logging.getLogger("fluent_query.fluent")


class UpdateBuilder(_BindingMixin):
    """Binds parameters to a write statement and executes it.

    Example:
        new_id = (
            template.update("INSERT INTO users (name) VALUES (:name)")
            .bind("name", "alice")
            .execute_and_return_key("id")
        )
    """

    def __init__(self, sql: str, operations: NamedParameterOperations) -> None:
        self._sql = sql
        self._operations = operations
        self._binder = ParameterBinder()

    @property
    def sql(self) -> str:
        return self._sql

    def execute(self) -> int:
        """Execute the statement and return the number of affected rows."""
        logger.debug("execute %r", self._sql)
        return self._operations.execute(self._sql, self.bound_parameters)

    def _execute_for_keys(self, key_names: tuple[str, ...]) -> GeneratedKeyHolder:
        if not key_names or any(not name for name in key_names):
            raise InvalidUsageError("Key column names must be non-empty")
        holder = GeneratedKeyHolder()
        logger.debug("execute %r returning %s", self._sql, list(key_names))
        self._operations.execute_with_keys(
            self._sql, self.bound_parameters, holder, list(key_names)
        )
        return holder

    def execute_and_return_key(self, key_name: str) -> Any:
        """Execute and return the single generated key as a number.

        Returns None when the statement generated no key.

        Raises:
            InvalidUsageError: if keys were generated for more than one row.
            KeyRetrievalError: if the key value is not numeric.
        """
        return self._execute_for_keys((key_name,)).get_key()

    def execute_and_return_keys(self, *key_names: str) -> dict[str, Any] | None:
        """Execute and return the key columns of the single affected row.

        The result is keyed by *key_names* as given; driver column labels are
        matched ignoring case. Returns None when the statement affected no row.

        Raises:
            InvalidUsageError: if keys were generated for more than one row.
        """
        keys = self._execute_for_keys(key_names).get_keys()
        if keys is None:
            return None
        by_label = {label.lower(): value for label, value in keys.items()}
        return {name: by_label[name.lower()] for name in key_names}

    def __repr__(self) -> str:
        return f"UpdateBuilder({self._sql!r})"
