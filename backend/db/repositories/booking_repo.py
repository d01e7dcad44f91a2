"""
db/repositories/booking_repo.py
---------------------------------
CRUD operations for the `bookings` table.

Source: db/schema.sql Table bookings

All functions accept a psycopg2 connection object.
Commit/rollback is managed by the caller via db.pool.get_conn().
"""

from __future__ import annotations

from typing import Any, Optional

from psycopg2.extras import Json

from db.repositories.rows import fetch_all, fetch_one


def insert_booking(conn, data: dict[str, Any]) -> dict:
    """
    Insert a booking row. Returns the stored row.

    Required keys: user_id, booking_type
    Optional keys: origin, destination, departure_date, return_date,
                   passengers, room_count, details (dict, stored as JSONB)
    """
    row = {
        "origin":         None,
        "destination":    None,
        "departure_date": None,
        "return_date":    None,
        "passengers":     None,
        "room_count":     None,
        **data,
        "details":        Json(data.get("details") or {}),
    }
    sql = """
        INSERT INTO bookings (
            user_id, booking_type, origin, destination,
            departure_date, return_date, passengers, room_count, details
        ) VALUES (
            %(user_id)s, %(booking_type)s, %(origin)s, %(destination)s,
            %(departure_date)s, %(return_date)s, %(passengers)s, %(room_count)s, %(details)s
        )
        RETURNING *
    """
    with conn.cursor() as cur:
        cur.execute(sql, row)
        return fetch_one(cur)


def get_booking(conn, booking_id: str) -> dict | None:
    with conn.cursor() as cur:
        cur.execute("SELECT * FROM bookings WHERE booking_id = %s", (booking_id,))
        return fetch_one(cur)


def list_bookings_for_user(conn, user_id: str, booking_type: Optional[str] = None) -> list[dict]:
    """Return the user's bookings, newest first, optionally of one type."""
    sql = "SELECT * FROM bookings WHERE user_id = %s"
    params: list[Any] = [user_id]
    if booking_type is not None:
        sql += " AND booking_type = %s"
        params.append(booking_type)
    sql += " ORDER BY created_at DESC, booking_id DESC"
    with conn.cursor() as cur:
        cur.execute(sql, tuple(params))
        return fetch_all(cur)
