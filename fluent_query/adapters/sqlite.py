"""SQLite adapter using stdlib sqlite3."""

from __future__ import annotations

import sqlite3
from typing import Any

from fluent_query.core.connection import ConnectionConfig
from fluent_query.core.exceptions import ConnectionError, PoolError  # noqa: A004
from fluent_query.core.params import append_returning


class SqliteSyncAdapter:
    """Synchronous SQLite adapter using stdlib sqlite3.

    Generated keys are read with ``RETURNING`` (SQLite 3.35+).
    """

    @property
    def paramstyle(self) -> str:
        return "named"

    def create_pool(self, config: ConnectionConfig) -> list[sqlite3.Connection]:
        """Create a 'pool' (list of connections) for SQLite."""
        pool: list[sqlite3.Connection] = []
        for _ in range(config.pool_size):
            try:
                conn = sqlite3.connect(config.database, **config.extra)
            except sqlite3.Error as e:
                raise ConnectionError(f"Cannot open SQLite database '{config.database}': {e}") from e
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            pool.append(conn)
        return pool

    def acquire_connection(self, pool: list[sqlite3.Connection]) -> sqlite3.Connection:
        """Acquire a connection from the pool."""
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    def release_connection(
        self, connection: sqlite3.Connection, pool: list[sqlite3.Connection]
    ) -> None:
        """Release a connection back to the pool."""
        pool.append(connection)

    def close_pool(self, pool: list[sqlite3.Connection]) -> None:
        """Close all connections in the pool."""
        for conn in pool:
            conn.close()
        pool.clear()

    def execute(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> sqlite3.Cursor:
        """Execute SQL and return a cursor."""
        return connection.execute(sql, params or {})

    def execute_returning(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: dict[str, Any] | None,
        key_columns: list[str],
    ) -> sqlite3.Cursor:
        """Execute DML with a RETURNING clause for the key columns."""
        return connection.execute(append_returning(sql, key_columns), params or {})
