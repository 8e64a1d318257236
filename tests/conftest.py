"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from fluent_query.core.connection import ConnectionConfig
from fluent_query.fluent.template import FluentTemplate

USERS_SCHEMA = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT,
    email TEXT,
    birth_date DATE,
    time_of_death TIMESTAMP,
    column_with_default INTEGER DEFAULT 100
)
"""

USERS = [
    ("mkyong", "mkyong@gmail.com", "1980-05-20", "2016-04-01 12:33:00"),
    ("alex", "alex@yahoo.com", "1981-03-11", "2016-09-13 09:01:00"),
    ("joel", "joel@gmail.com", "1982-09-17", "2016-10-22 17:41:00"),
]


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config.

    A single pooled connection, since every in-memory connection is its own
    database.
    """
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


@pytest.fixture
def template(sqlite_config: ConnectionConfig) -> Iterator[FluentTemplate]:
    """FluentTemplate over an in-memory users table with three rows."""
    tpl = FluentTemplate.from_config(sqlite_config)
    with tpl.connection_manager.get_connection() as conn:
        conn.execute(USERS_SCHEMA)
        conn.executemany(
            "INSERT INTO users (name, email, birth_date, time_of_death) VALUES (?, ?, ?, ?)",
            USERS,
        )
        conn.commit()
    yield tpl
    tpl.close()
