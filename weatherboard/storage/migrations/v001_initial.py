"""Initial schema: favorite cities."""

import sqlite3

DDL = [
    # Ordered favorites per owner; position preserves insertion order
    """
    CREATE TABLE IF NOT EXISTS favorite_cities (
        owner TEXT NOT NULL,
        position INTEGER NOT NULL,
        name TEXT NOT NULL,
        latitude REAL NOT NULL,
        longitude REAL NOT NULL,
        added_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
        PRIMARY KEY (owner, name)
    )
    """,
    (
        "CREATE INDEX IF NOT EXISTS idx_favorite_cities_owner_position "
        "ON favorite_cities(owner, position)"
    ),
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
    conn.commit()
