"""
db/repositories/itinerary_repo.py
-----------------------------------
CRUD operations for the `itineraries` and `itinerary_stops` tables.

Source: db/schema.sql Tables itineraries, itinerary_stops

All functions accept a psycopg2 connection object.
Commit/rollback is managed by the caller via db.pool.get_conn().
"""

from __future__ import annotations

from typing import Any

from db.repositories.rows import fetch_all, fetch_one


# ── itineraries table ──────────────────────────────────────────────────────────

def insert_itinerary(conn, data: dict[str, Any]) -> dict:
    """
    Insert a new itinerary row. Returns the stored row.

    Required keys: user_id, title
    Optional keys: description, start_date, end_date
    """
    row = {"description": None, "start_date": None, "end_date": None, **data}
    sql = """
        INSERT INTO itineraries (user_id, title, description, start_date, end_date)
        VALUES (%(user_id)s, %(title)s, %(description)s, %(start_date)s, %(end_date)s)
        RETURNING *
    """
    with conn.cursor() as cur:
        cur.execute(sql, row)
        return fetch_one(cur)


def get_itinerary(conn, itinerary_id: str) -> dict | None:
    """Return a single itinerary row by UUID, or None if not found."""
    with conn.cursor() as cur:
        cur.execute("SELECT * FROM itineraries WHERE itinerary_id = %s", (itinerary_id,))
        return fetch_one(cur)


def list_itineraries_by_user(conn, user_id: str) -> list[dict]:
    """Return all itineraries owned by a user, newest first."""
    sql = "SELECT * FROM itineraries WHERE user_id = %s ORDER BY created_at DESC"
    with conn.cursor() as cur:
        cur.execute(sql, (user_id,))
        return fetch_all(cur)


# ── itinerary_stops table ──────────────────────────────────────────────────────

def insert_stop(conn, itinerary_id: str, stop: dict[str, Any]) -> dict:
    """
    Insert an itinerary_stops row. Returns the stored row.

    Required keys: place_id, day, position
    """
    sql = """
        INSERT INTO itinerary_stops (itinerary_id, place_id, day, position)
        VALUES (%s, %s, %s, %s)
        RETURNING *
    """
    with conn.cursor() as cur:
        cur.execute(sql, (itinerary_id, stop["place_id"], stop["day"], stop["position"]))
        return fetch_one(cur)


def list_stops(conn, itinerary_id: str) -> list[dict]:
    """Return all stops of an itinerary ordered by day, then position."""
    sql = """
        SELECT stop_id, itinerary_id, place_id, day, position
        FROM itinerary_stops
        WHERE itinerary_id = %s
        ORDER BY day ASC, position ASC, stop_id ASC
    """
    with conn.cursor() as cur:
        cur.execute(sql, (itinerary_id,))
        return fetch_all(cur)
