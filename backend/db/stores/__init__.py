"""
db/stores package — store contracts plus in-memory and Postgres backends.
"""
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

__all__ = [
    "BookingStore",
    "ConnectionStore",
    "ItineraryStore",
    "PlaceStore",
    "SavedPlaceStore",
    "UserStore",
    "InMemoryBookingStore",
    "InMemoryConnectionStore",
    "InMemoryItineraryStore",
    "InMemoryPlaceStore",
    "InMemorySavedPlaceStore",
    "InMemoryUserStore",
]
