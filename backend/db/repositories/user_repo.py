"""
db/repositories/user_repo.py
------------------------------
CRUD operations for the `users` and `guide_profiles` tables.

Source: db/schema.sql Tables users, guide_profiles

All functions accept a psycopg2 connection object.
Commit/rollback is managed by the caller via db.pool.get_conn().
"""

from __future__ import annotations

from typing import Any

from db.repositories.rows import fetch_all, fetch_one


# ── users table ────────────────────────────────────────────────────────────────

def insert_user(conn, data: dict[str, Any]) -> dict:
    """
    Insert a new user row. Returns the stored row.

    Required keys: username, full_name, email, role
    Optional keys: phone, latitude, longitude

    Raises psycopg2.errors.UniqueViolation on a duplicate username.
    """
    row = {"phone": None, "latitude": None, "longitude": None, **data}
    sql = """
        INSERT INTO users (username, full_name, email, phone, role, latitude, longitude)
        VALUES (%(username)s, %(full_name)s, %(email)s, %(phone)s,
                %(role)s, %(latitude)s, %(longitude)s)
        RETURNING *
    """
    with conn.cursor() as cur:
        cur.execute(sql, row)
        return fetch_one(cur)


def get_user(conn, user_id: str) -> dict | None:
    """Return a single user row by UUID, or None if not found."""
    with conn.cursor() as cur:
        cur.execute("SELECT * FROM users WHERE user_id = %s", (user_id,))
        return fetch_one(cur)


def get_user_by_username(conn, username: str) -> dict | None:
    with conn.cursor() as cur:
        cur.execute("SELECT * FROM users WHERE username = %s", (username,))
        return fetch_one(cur)


def list_users_by_role(conn, role: str) -> list[dict]:
    """Return all users with the given role, ordered by username."""
    with conn.cursor() as cur:
        cur.execute("SELECT * FROM users WHERE role = %s ORDER BY username ASC", (role,))
        return fetch_all(cur)


def update_user_location(conn, user_id: str, latitude: float, longitude: float) -> dict | None:
    """Overwrite the user's last-known coordinates. Returns the updated row."""
    sql = """
        UPDATE users SET latitude = %s, longitude = %s
        WHERE user_id = %s
        RETURNING *
    """
    with conn.cursor() as cur:
        cur.execute(sql, (latitude, longitude, user_id))
        return fetch_one(cur)


# ── guide_profiles table ───────────────────────────────────────────────────────

def insert_guide_profile(conn, user_id: str, profile: dict[str, Any]) -> dict:
    """
    Insert the guide_profiles row for a guide. Returns the stored row.

    Required keys: location
    Optional keys: experience_years, languages, specialties, rating, bio
    """
    row = {
        "experience_years": 0,
        "languages":        [],
        "specialties":      [],
        "rating":           None,
        "bio":              None,
        **profile,
        "user_id":          user_id,
    }
    sql = """
        INSERT INTO guide_profiles (
            user_id, location, experience_years,
            languages, specialties, rating, bio
        ) VALUES (
            %(user_id)s, %(location)s, %(experience_years)s,
            %(languages)s, %(specialties)s, %(rating)s, %(bio)s
        )
        RETURNING *
    """
    with conn.cursor() as cur:
        cur.execute(sql, row)
        return fetch_one(cur)


def get_guide_profiles(conn, user_ids: list[str]) -> dict[str, dict]:
    """Return guide_profiles rows for the given users, keyed by user_id string."""
    if not user_ids:
        return {}
    sql = "SELECT * FROM guide_profiles WHERE user_id = ANY(%s::uuid[])"
    with conn.cursor() as cur:
        cur.execute(sql, (list(user_ids),))
        return {str(r["user_id"]): r for r in fetch_all(cur)}


# ── updates ────────────────────────────────────────────────────────────────────

_USER_UPDATABLE = ("full_name", "email", "phone")
_PROFILE_UPDATABLE = ("location", "experience_years", "languages", "specialties", "rating", "bio")


def update_user(conn, user_id: str, fields: dict[str, Any]) -> dict | None:
    """
    Overwrite the supplied account columns. Returns the updated row.

    Only full_name, email and phone may be changed; other keys are ignored.
    """
    cols = [c for c in _USER_UPDATABLE if c in fields]
    if not cols:
        return get_user(conn, user_id)
    assignments = ", ".join(f"{c} = %({c})s" for c in cols)
    sql = f"UPDATE users SET {assignments} WHERE user_id = %(user_id)s RETURNING *"
    with conn.cursor() as cur:
        cur.execute(sql, {**{c: fields[c] for c in cols}, "user_id": user_id})
        return fetch_one(cur)


def upsert_guide_profile(conn, user_id: str, fields: dict[str, Any]) -> dict:
    """
    Merge ``fields`` into the guide_profiles row, inserting it when missing.

    On insert, columns not supplied take their table defaults; ``location``
    must then be present (NOT NULL).
    """
    cols = [c for c in _PROFILE_UPDATABLE if c in fields]
    if not cols:
        return get_guide_profiles(conn, [user_id]).get(str(user_id))
    col_list = ", ".join(["user_id", *cols])
    values = ", ".join(f"%({c})s" for c in ["user_id", *cols])
    assignments = ", ".join(f"{c} = EXCLUDED.{c}" for c in cols)
    sql = f"""
        INSERT INTO guide_profiles ({col_list}) VALUES ({values})
        ON CONFLICT (user_id) DO UPDATE SET {assignments}
        RETURNING *
    """
    with conn.cursor() as cur:
        cur.execute(sql, {**{c: fields[c] for c in cols}, "user_id": user_id})
        return fetch_one(cur)
