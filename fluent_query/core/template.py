"""Named-parameter SQL execution.

NamedParameterTemplate resolves ``:name`` placeholders against a parameter
source, executes through the connection manager's adapter, and optionally
applies a mapper to the resulting rows.
"""

from __future__ import annotations

import logging
from typing import Any

from fluent_query.core.connection import ConnectionConfig, ConnectionManager
from fluent_query.core.exceptions import (
    EmptyResultError,
    ExecutionError,
    IncorrectResultSizeError,
    InvalidUsageError,
)
from fluent_query.core.keys import GeneratedKeyHolder
from fluent_query.core.operations import Params
from fluent_query.core.params import (
    as_parameter_source,
    expand_collection_params,
    normalize_params,
    resolve_parameters,
)
from fluent_query.mapping.protocol import ResultRow

logger = logging.getLogger("fluent_query.template")


def _rows_to_dicts(cursor: Any) -> list[ResultRow]:
    """Convert cursor results to list of dicts.

    Handles both tuple-like rows and dict-like rows from different adapters.
    Each row keeps the column count reported by ``cursor.description``.
    """
    if cursor.description is None:
        return []
    columns = [desc[0] for desc in cursor.description]
    rows = cursor.fetchall()
    if not rows:
        return []

    # Check if rows are already dict-like (e.g., psycopg dict_row)
    first_row = rows[0]
    if isinstance(first_row, dict):
        return [ResultRow(row, len(columns)) for row in rows]

    # Tuple-like rows, zip with columns
    return [ResultRow(zip(columns, row, strict=True), len(columns)) for row in rows]


def _as_row_callable(mapper: Any) -> Any:
    """Accept either a Mapper (``map_one``) or a plain row callable."""
    map_one = getattr(mapper, "map_one", None)
    if callable(map_one):
        return map_one
    return mapper


class NamedParameterTemplate:
    """Synchronous named-parameter statement executor.

    Every call borrows one connection from the pool for the duration of a
    single statement. Write statements are committed on success and rolled
    back when the driver raises.
    """

    def __init__(self, connection_manager: ConnectionManager) -> None:
        self._connection_manager = connection_manager
        self._paramstyle = connection_manager.adapter.paramstyle

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> NamedParameterTemplate:
        """Create a template from a ConnectionConfig.

        Args:
            config: ConnectionConfig instance

        Returns:
            Template instance (of the class it is called on)
        """
        return cls(ConnectionManager(config))

    @property
    def connection_manager(self) -> ConnectionManager:
        return self._connection_manager

    def close(self) -> None:
        """Close all pooled connections."""
        self._connection_manager.close_pool()

    def _prepare(self, sql: str, params: Params) -> tuple[str, dict[str, Any]]:
        values = resolve_parameters(sql, as_parameter_source(params))
        statement, values = expand_collection_params(sql, values)
        return normalize_params(statement, self._paramstyle), values

    def _query_rows(self, sql: str, params: Params) -> list[dict[str, Any]]:
        statement, values = self._prepare(sql, params)
        adapter = self._connection_manager.adapter
        logger.debug("Executing query: %s (parameters: %s)", statement, list(values))

        with self._connection_manager.get_connection() as conn:
            try:
                cursor = adapter.execute(conn, statement, values)
                return _rows_to_dicts(cursor)
            except Exception as e:
                logger.debug("Query failed: %s", e)
                raise ExecutionError(sql, str(e)) from e

    def fetch_one(self, sql: str, params: Params = None, *, mapper: Any | None = None) -> Any:
        """Fetch exactly one row.

        Raises:
            EmptyResultError: if zero rows match.
            IncorrectResultSizeError: if more than one row matches.
        """
        rows = self._query_rows(sql, params)
        if len(rows) == 0:
            raise EmptyResultError(1, 0)
        if len(rows) > 1:
            raise IncorrectResultSizeError(1, len(rows))

        row = rows[0]
        if mapper is not None:
            return _as_row_callable(mapper)(row)
        return row

    def fetch_all(self, sql: str, params: Params = None, *, mapper: Any | None = None) -> Any:
        """Fetch all matching rows, in result-set order."""
        rows = self._query_rows(sql, params)
        if mapper is not None:
            map_row = _as_row_callable(mapper)
            return [map_row(row) for row in rows]
        return rows

    def execute(self, sql: str, params: Params = None) -> int:
        """Execute a write statement. Returns affected row count."""
        statement, values = self._prepare(sql, params)
        adapter = self._connection_manager.adapter
        logger.debug("Executing update: %s (parameters: %s)", statement, list(values))

        with self._connection_manager.get_connection() as conn:
            try:
                cursor = adapter.execute(conn, statement, values)
                conn.commit()
            except Exception as e:
                logger.debug("Update failed, rolling back: %s", e)
                conn.rollback()
                raise ExecutionError(sql, str(e)) from e
            return max(int(cursor.rowcount), 0)

    def execute_with_keys(
        self,
        sql: str,
        params: Params,
        key_holder: GeneratedKeyHolder,
        key_columns: list[str],
    ) -> int:
        """Execute a write statement and capture generated keys.

        One key map per affected row is appended to ``key_holder.key_list``.
        Returns the affected row count.
        """
        if not key_columns:
            raise InvalidUsageError("At least one key column name is required")
        statement, values = self._prepare(sql, params)
        adapter = self._connection_manager.adapter
        logger.debug(
            "Executing update returning %s: %s (parameters: %s)",
            key_columns,
            statement,
            list(values),
        )

        with self._connection_manager.get_connection() as conn:
            try:
                cursor = adapter.execute_returning(conn, statement, values, list(key_columns))
                keys = _rows_to_dicts(cursor)
                conn.commit()
            except Exception as e:
                logger.debug("Update failed, rolling back: %s", e)
                conn.rollback()
                raise ExecutionError(sql, str(e)) from e

        key_holder.key_list.extend(keys)
        return len(keys)
