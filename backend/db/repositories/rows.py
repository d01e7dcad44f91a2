"""
db/repositories/rows.py
------------------------
Cursor → dict helpers shared by the repository modules.
"""

from __future__ import annotations


def fetch_one(cur) -> dict | None:
    """Return the cursor's next row as a column→value dict, or None."""
    row = cur.fetchone()
    if row is None:
        return None
    cols = [d[0] for d in cur.description]
    return dict(zip(cols, row))


def fetch_all(cur) -> list[dict]:
    """Return every remaining row as column→value dicts."""
    cols = [d[0] for d in cur.description]
    return [dict(zip(cols, row)) for row in cur.fetchall()]
