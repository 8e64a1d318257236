"""PostgreSQL adapter using psycopg (v3+)."""

from __future__ import annotations

from typing import Any

from fluent_query.core.connection import ConnectionConfig
from fluent_query.core.exceptions import ConnectionError, PoolError  # noqa: A004
from fluent_query.core.params import append_returning


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    parts: list[str] = []
    if config.host is not None:
        parts.append(f"host={config.host}")
    if config.port is not None:
        parts.append(f"port={config.port}")
    if config.user is not None:
        parts.append(f"user={config.user}")
    if config.password is not None:
        parts.append(f"password={config.password}")
    parts.append(f"dbname={config.database}")
    return " ".join(parts)


class PostgresqlSyncAdapter:
    """Synchronous PostgreSQL adapter using psycopg (v3+)."""

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    def create_pool(self, config: ConnectionConfig) -> list[Any]:
        import psycopg
        import psycopg.rows

        conninfo = _build_conninfo(config)
        pool: list[Any] = []
        for _ in range(config.pool_size):
            try:
                conn = psycopg.connect(
                    conninfo,
                    row_factory=psycopg.rows.dict_row,
                    connect_timeout=config.pool_timeout,
                    **config.extra,
                )
            except psycopg.Error as e:
                raise ConnectionError(f"Cannot connect to PostgreSQL: {e}") from e
            pool.append(conn)
        return pool

    def acquire_connection(self, pool: list[Any]) -> Any:
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    def release_connection(self, connection: Any, pool: list[Any]) -> None:
        pool.append(connection)

    def close_pool(self, pool: list[Any]) -> None:
        for conn in pool:
            conn.close()
        pool.clear()

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return connection.execute(sql, params or {})

    def execute_returning(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None,
        key_columns: list[str],
    ) -> Any:
        return connection.execute(append_returning(sql, key_columns), params or {})
