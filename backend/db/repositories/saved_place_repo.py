"""
db/repositories/saved_place_repo.py
-------------------------------------
CRUD operations for the `saved_places` table.

Source: db/schema.sql Table saved_places

All functions accept a psycopg2 connection object.
Commit/rollback is managed by the caller via db.pool.get_conn().
"""

from __future__ import annotations

from db.repositories.rows import fetch_all, fetch_one


def insert_saved_place(conn, user_id: str, place_id: str) -> dict:
    """
    Bookmark a place. Returns the stored row.

    (user_id, place_id) is unique; saving twice returns the existing row.
    """
    sql = """
        INSERT INTO saved_places (user_id, place_id) VALUES (%s, %s)
        ON CONFLICT (user_id, place_id) DO UPDATE SET user_id = EXCLUDED.user_id
        RETURNING *
    """
    with conn.cursor() as cur:
        cur.execute(sql, (user_id, place_id))
        return fetch_one(cur)


def get_saved_place(conn, saved_place_id: str) -> dict | None:
    with conn.cursor() as cur:
        cur.execute("SELECT * FROM saved_places WHERE saved_place_id = %s", (saved_place_id,))
        return fetch_one(cur)


def list_saved_places_for_user(conn, user_id: str) -> list[dict]:
    """Return the user's saved places, most recent first."""
    sql = """
        SELECT * FROM saved_places
        WHERE user_id = %s
        ORDER BY created_at DESC, saved_place_id DESC
    """
    with conn.cursor() as cur:
        cur.execute(sql, (user_id,))
        return fetch_all(cur)


def delete_saved_place(conn, saved_place_id: str) -> bool:
    """Delete one row. Returns False when nothing matched."""
    with conn.cursor() as cur:
        cur.execute("DELETE FROM saved_places WHERE saved_place_id = %s", (saved_place_id,))
        return cur.rowcount > 0
