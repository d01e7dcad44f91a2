"""
db/repositories/connection_repo.py
------------------------------------
CRUD operations for the `connections` table.

Source: db/schema.sql Table connections

All functions accept a psycopg2 connection object.
Commit/rollback is managed by the caller via db.pool.get_conn().
"""

from __future__ import annotations

from typing import Any

from db.repositories.rows import fetch_all, fetch_one

_COLUMNS = """
    connection_id, from_user_id, to_user_id, status,
    message, trip_details, budget, created_at
"""


def insert_connection(conn, data: dict[str, Any]) -> dict:
    """
    Insert a new connection row with status 'pending'. Returns the stored row.

    Required keys: from_user_id, to_user_id, message
    Optional keys: trip_details, budget, created_at (defaults to NOW())
    """
    row = {"trip_details": None, "budget": None, "created_at": None, **data}
    sql = f"""
        INSERT INTO connections (
            from_user_id, to_user_id, status,
            message, trip_details, budget, created_at
        ) VALUES (
            %(from_user_id)s, %(to_user_id)s, 'pending',
            %(message)s, %(trip_details)s, %(budget)s,
            COALESCE(%(created_at)s, NOW())
        )
        RETURNING {_COLUMNS}
    """
    with conn.cursor() as cur:
        cur.execute(sql, row)
        return fetch_one(cur)


def get_connection(conn, connection_id: str) -> dict | None:
    """Return a single connection row by UUID, or None if not found."""
    sql = f"SELECT {_COLUMNS} FROM connections WHERE connection_id = %s"
    with conn.cursor() as cur:
        cur.execute(sql, (connection_id,))
        return fetch_one(cur)


def list_connections_for_user(conn, user_id: str) -> list[dict]:
    """Return every connection the user sent or received, oldest first."""
    sql = f"""
        SELECT {_COLUMNS} FROM connections
        WHERE from_user_id = %s OR to_user_id = %s
        ORDER BY created_at ASC
    """
    with conn.cursor() as cur:
        cur.execute(sql, (user_id, user_id))
        return fetch_all(cur)


def update_connection_status(conn, connection_id: str, status: str) -> dict | None:
    """
    Unconditionally overwrite connections.status.

    Valid values (CHECK constraint): 'pending' | 'accepted' | 'rejected' | 'withdrawn'
    """
    sql = f"""
        UPDATE connections SET status = %s
        WHERE connection_id = %s
        RETURNING {_COLUMNS}
    """
    with conn.cursor() as cur:
        cur.execute(sql, (status, connection_id))
        return fetch_one(cur)


def compare_and_set_status(conn, connection_id: str, expected: str, status: str) -> dict | None:
    """
    Set connections.status only while it still equals ``expected``.

    A single UPDATE, so concurrent callers cannot both succeed.  Returns the
    updated row, or None when the row is missing or its status has changed.
    """
    sql = f"""
        UPDATE connections SET status = %s
        WHERE connection_id = %s AND status = %s
        RETURNING {_COLUMNS}
    """
    with conn.cursor() as cur:
        cur.execute(sql, (status, connection_id, expected))
        return fetch_one(cur)
