"""Repository for persisted favorite cities."""

import sqlite3

from weatherboard.config.schema import CityConfig


def load_favorites(conn: sqlite3.Connection, owner: str) -> list[CityConfig]:
    """Load an owner's favorites in insertion order."""
    rows = conn.execute(
        "SELECT name, latitude, longitude FROM favorite_cities "
        "WHERE owner = ? ORDER BY position",
        (owner,),
    ).fetchall()
    return [
        CityConfig(name=r["name"], latitude=r["latitude"], longitude=r["longitude"])
        for r in rows
    ]


def replace_favorites(
    conn: sqlite3.Connection, owner: str, cities: list[CityConfig]
) -> None:
    """Replace an owner's favorites with the given ordered list in one transaction."""
    with conn:
        conn.execute("DELETE FROM favorite_cities WHERE owner = ?", (owner,))
        conn.executemany(
            "INSERT INTO favorite_cities (owner, position, name, latitude, longitude) "
            "VALUES (?, ?, ?, ?, ?)",
            [
                (owner, i, c.name, c.latitude, c.longitude)
                for i, c in enumerate(cities)
            ],
        )
