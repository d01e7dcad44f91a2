"""
db/
----
Persistence layer for the GuideConnect backend.

Storage architecture:
  In-memory (default, STORE_BACKEND=in_memory) — process-local dicts
  PostgreSQL (psycopg2, STORE_BACKEND=postgres) — persistent backing store
    tables: users, guide_profiles, places, itineraries,
            itinerary_stops, connections, bookings, saved_places
    schema: db/schema.sql
    apply:  python -m scripts.run_migrations

Public exports (import from here for convenience):
    from db import build_stores
    from db.stores import ConnectionStore, InMemoryConnectionStore, ...
    from db.repositories import connection_repo, user_repo, ...
"""

from db.factory import Stores, build_stores

__all__ = ["Stores", "build_stores"]
