"""
db/repositories/place_repo.py
-------------------------------
CRUD operations for the `places` table.

Source: db/schema.sql Table places

All functions accept a psycopg2 connection object.
Commit/rollback is managed by the caller via db.pool.get_conn().
"""

from __future__ import annotations

from typing import Any

from db.repositories.rows import fetch_all, fetch_one


def insert_place(conn, place: dict[str, Any]) -> dict:
    """
    Insert a catalogue entry. Returns the stored row.

    Required keys: name, category, location, latitude, longitude
    Optional keys: description, image_url
    """
    row = {"description": None, "image_url": None, **place}
    sql = """
        INSERT INTO places (
            name, category, location, latitude, longitude, description, image_url
        ) VALUES (
            %(name)s, %(category)s, %(location)s,
            %(latitude)s, %(longitude)s, %(description)s, %(image_url)s
        )
        RETURNING *
    """
    with conn.cursor() as cur:
        cur.execute(sql, row)
        return fetch_one(cur)


def get_place(conn, place_id: str) -> dict | None:
    """Return a single place row by UUID, or None if not found."""
    with conn.cursor() as cur:
        cur.execute("SELECT * FROM places WHERE place_id = %s", (place_id,))
        return fetch_one(cur)


def list_places(conn, category: str | None = None) -> list[dict]:
    """Return all places ordered by name, optionally filtered by category."""
    if category:
        sql = "SELECT * FROM places WHERE category = %s ORDER BY name ASC, place_id ASC"
        params: tuple = (category,)
    else:
        sql = "SELECT * FROM places ORDER BY name ASC, place_id ASC"
        params = ()
    with conn.cursor() as cur:
        cur.execute(sql, params)
        return fetch_all(cur)
