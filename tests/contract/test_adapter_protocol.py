"""Contract tests for adapter protocol compliance."""

from __future__ import annotations

import pytest

from fluent_query.adapters.protocol import SyncAdapter
from fluent_query.adapters.sqlite import SqliteSyncAdapter
from fluent_query.core.connection import ConnectionConfig
from fluent_query.core.exceptions import PoolError


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


class TestSqliteSyncAdapterProtocol:
    def test_implements_sync_protocol(self) -> None:
        adapter = SqliteSyncAdapter()
        assert isinstance(adapter, SyncAdapter)

    def test_paramstyle(self) -> None:
        adapter = SqliteSyncAdapter()
        assert adapter.paramstyle == "named"

    def test_lifecycle(self, sqlite_config: ConnectionConfig) -> None:
        adapter = SqliteSyncAdapter()
        pool = adapter.create_pool(sqlite_config)
        assert len(pool) == 1

        conn = adapter.acquire_connection(pool)
        assert conn is not None

        cursor = adapter.execute(conn, "SELECT 1 AS val")
        row = cursor.fetchone()
        assert row["val"] == 1

        adapter.release_connection(conn, pool)
        assert len(pool) == 1

        adapter.close_pool(pool)
        assert len(pool) == 0

    def test_acquire_from_empty_pool(self) -> None:
        with pytest.raises(PoolError):
            SqliteSyncAdapter().acquire_connection([])

    def test_execute_returning(self, sqlite_config: ConnectionConfig) -> None:
        adapter = SqliteSyncAdapter()
        pool = adapter.create_pool(sqlite_config)
        conn = adapter.acquire_connection(pool)
        conn.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT)")

        cursor = adapter.execute_returning(
            conn, "INSERT INTO t (name) VALUES (:name)", {"name": "a"}, ["id"]
        )
        assert [tuple(row) for row in cursor.fetchall()] == [(1,)]

        adapter.release_connection(conn, pool)
        adapter.close_pool(pool)


# --- PostgreSQL protocol compliance ---


class TestPostgresqlSyncAdapterProtocol:
    def test_implements_sync_protocol(self) -> None:
        from fluent_query.adapters.postgresql import PostgresqlSyncAdapter

        adapter = PostgresqlSyncAdapter()
        assert isinstance(adapter, SyncAdapter)

    def test_paramstyle(self) -> None:
        from fluent_query.adapters.postgresql import PostgresqlSyncAdapter

        adapter = PostgresqlSyncAdapter()
        assert adapter.paramstyle == "pyformat"

    def test_conninfo(self) -> None:
        from fluent_query.adapters.postgresql import _build_conninfo

        config = ConnectionConfig(driver="postgresql", host="db", port=5432, database="app")
        assert _build_conninfo(config) == "host=db port=5432 dbname=app"
