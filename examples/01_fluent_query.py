"""
Example 01: Fluent Queries

This example binds parameters to SELECT statements and maps the results to
scalars, dataclasses and Pydantic models.
"""

import datetime as dt
import sqlite3
import tempfile
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel

from fluent_query import ConnectionConfig, FluentTemplate


@dataclass
class User:
    id: int
    name: str
    email: str
    birth_date: dt.date | None = None


class UserSummary(BaseModel):
    name: str
    email: str


def main():
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    conn = sqlite3.connect(db_path)
    conn.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT,
            email TEXT,
            birth_date DATE
        )
    """)
    conn.execute("INSERT INTO users (name, email, birth_date) VALUES ('mkyong', 'mkyong@gmail.com', '1980-05-20')")
    conn.execute("INSERT INTO users (name, email, birth_date) VALUES ('alex', 'alex@yahoo.com', '1981-03-11')")
    conn.execute("INSERT INTO users (name, email, birth_date) VALUES ('joel', 'joel@gmail.com', '1982-09-17')")
    conn.commit()
    conn.close()

    db = FluentTemplate.from_config(ConnectionConfig(driver="sqlite", database=db_path))

    print("=== Fluent Queries ===\n")

    # Scalar result: one column converted to the requested type
    name = db.query("SELECT name FROM users WHERE id = :id").bind("id", 1).fetch_one(str)
    print(f"User 1 is {name}")

    count = db.query("SELECT COUNT(*) FROM users").fetch_one(int)
    print(f"{count} users in total\n")

    # Structured result: columns land on properties by name
    user = db.query("SELECT * FROM users WHERE id = :id").bind("id", 2).fetch_one(User)
    print(f"fetch_one(User): {user}")

    summaries = (
        db.query("SELECT name, email FROM users WHERE email LIKE :domain ORDER BY id")
        .bind("domain", "%@gmail.com")
        .fetch(UserSummary)
    )
    print(f"fetch(UserSummary): {summaries}\n")

    # Record binding: parameter values come from the object's attributes
    user.id = 3
    name = db.query("SELECT name FROM users WHERE id = :id").bind_record(user).fetch_one(str)
    print(f"bind_record -> {name}")

    # IN lists expand to one placeholder per element
    names = db.query("SELECT name FROM users WHERE id IN (:ids) ORDER BY id").bind("ids", [1, 3]).fetch(str)
    print(f"IN (:ids) -> {names}")

    # Any row -> value callable works as a mapper
    labels = db.query("SELECT id, name FROM users ORDER BY id").fetch(lambda row: f"#{row['id']} {row['name']}")
    print(f"custom mapper -> {labels}")

    db.close()
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
