"""
db/factory.py
--------------
Builds the set of stores selected by config.STORE_BACKEND.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import config
from db.stores.base import (
    BookingStore,
    ConnectionStore,
    ItineraryStore,
    PlaceStore,
    SavedPlaceStore,
    UserStore,
)
from db.stores.memory import (
    InMemoryBookingStore,
    InMemoryConnectionStore,
    InMemoryItineraryStore,
    InMemoryPlaceStore,
    InMemorySavedPlaceStore,
    InMemoryUserStore,
)

logger = logging.getLogger(__name__)

_BACKENDS = ("in_memory", "postgres")


@dataclass
class Stores:
    users: UserStore
    places: PlaceStore
    itineraries: ItineraryStore
    connections: ConnectionStore
    bookings: BookingStore
    saved_places: SavedPlaceStore


def build_stores(backend: Optional[str] = None) -> Stores:
    """Return fresh stores for ``backend`` (defaults to config.STORE_BACKEND)."""
    backend = (backend or config.STORE_BACKEND).strip().lower()
    if backend not in _BACKENDS:
        raise ValueError(f"STORE_BACKEND={backend!r} must be one of {' | '.join(_BACKENDS)}")

    logger.info("using %s stores", backend)
    if backend == "postgres":
        from db.stores.postgres import (
            PostgresBookingStore,
            PostgresConnectionStore,
            PostgresItineraryStore,
            PostgresPlaceStore,
            PostgresSavedPlaceStore,
            PostgresUserStore,
        )
        return Stores(
            users=PostgresUserStore(),
            places=PostgresPlaceStore(),
            itineraries=PostgresItineraryStore(),
            connections=PostgresConnectionStore(),
            bookings=PostgresBookingStore(),
            saved_places=PostgresSavedPlaceStore(),
        )
    return Stores(
        users=InMemoryUserStore(),
        places=InMemoryPlaceStore(),
        itineraries=InMemoryItineraryStore(),
        connections=InMemoryConnectionStore(),
        bookings=InMemoryBookingStore(),
        saved_places=InMemorySavedPlaceStore(),
    )
