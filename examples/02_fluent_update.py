"""
Example 02: Fluent Updates

This example runs INSERT, UPDATE and DELETE statements and reads back
generated keys.
"""

import sqlite3
import tempfile
from pathlib import Path

from fluent_query import ConnectionConfig, FluentTemplate, InvalidUsageError


def main():
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    conn = sqlite3.connect(db_path)
    conn.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT,
            column_with_default INTEGER DEFAULT 100
        )
    """)
    conn.commit()
    conn.close()

    db = FluentTemplate.from_config(ConnectionConfig(driver="sqlite", database=db_path))

    print("=== Fluent Updates ===\n")

    # execute_and_return_key: the single generated key as a number
    alice_id = db.update("INSERT INTO users (name) VALUES (:name)").bind("name", "Alice").execute_and_return_key("id")
    print(f"Inserted Alice with id {alice_id}")

    # execute_and_return_keys: several generated columns of one row
    keys = (
        db.update("INSERT INTO users (name) VALUES (:name)")
        .bind("name", "Bob")
        .execute_and_return_keys("id", "column_with_default")
    )
    print(f"Inserted Bob with keys {keys}\n")

    # execute: number of affected rows
    affected = db.update("UPDATE users SET name = upper(name)").execute()
    print(f"Upper-cased {affected} names")

    try:
        db.update("UPDATE users SET name = name").execute_and_return_key("id")
    except InvalidUsageError as e:
        print(f"Several rows, one key expected: {e}\n")

    deleted = db.update("DELETE FROM users WHERE id = :id").bind("id", alice_id).execute()
    print(f"Deleted {deleted} row(s)")

    db.close()
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
