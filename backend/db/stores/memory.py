"""
db/stores/memory.py
--------------------
In-memory store implementations.

Each store keeps its records in a dict keyed by a uuid4 string and guards
every read-modify-write with a threading.Lock, so compare_and_set_status is
atomic within the process.  Contents are lost on restart.
"""

from __future__ import annotations

import copy
import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Optional

from db.stores.base import (
    BookingStore,
    ConnectionStore,
    ItineraryStore,
    PlaceStore,
    SavedPlaceStore,
    UserStore,
)
from modules.errors import UsernameTaken
from schemas.booking import Booking, BookingType
from schemas.connection import Connection, ConnectionStatus
from schemas.itinerary import Itinerary, ItineraryStop
from schemas.place import Place, SavedPlace
from schemas.user import GuideProfile, Role, User


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryUserStore(UserStore):

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: dict[str, User] = {}

    def create(self, user: User) -> User:
        with self._lock:
            if any(u.username == user.username for u in self._users.values()):
                raise UsernameTaken(user.username)
            stored = replace(user, id=_new_id(), created_at=user.created_at or _now())
            self._users[stored.id] = stored
            return copy.deepcopy(stored)

    def get_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return copy.deepcopy(user) if user else None

    def get_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return copy.deepcopy(user)
        return None

    def list_by_role(self, role: Role) -> list[User]:
        with self._lock:
            users = [copy.deepcopy(u) for u in self._users.values() if u.role == role]
        return sorted(users, key=lambda u: u.username)

    def update_location(self, user_id: str, latitude: float, longitude: float) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            user = replace(user, latitude=latitude, longitude=longitude)
            self._users[user_id] = user
            return copy.deepcopy(user)

    def update(self, user_id: str, fields: dict[str, Any]) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            user = replace(user, **fields)
            self._users[user_id] = user
            return copy.deepcopy(user)

    def update_guide_profile(self, user_id: str, fields: dict[str, Any]) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            profile = replace(user.guide_profile or GuideProfile(), **copy.deepcopy(fields))
            user = replace(user, guide_profile=profile)
            self._users[user_id] = user
            return copy.deepcopy(user)


class InMemoryPlaceStore(PlaceStore):

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._places: dict[str, Place] = {}

    def create(self, place: Place) -> Place:
        with self._lock:
            stored = replace(place, id=_new_id())
            self._places[stored.id] = stored
            return replace(stored)

    def get_by_id(self, place_id: str) -> Optional[Place]:
        with self._lock:
            place = self._places.get(place_id)
            return replace(place) if place else None

    def list(self, category: Optional[str] = None) -> list[Place]:
        with self._lock:
            places = [
                replace(p) for p in self._places.values()
                if category is None or p.category == category
            ]
        return sorted(places, key=lambda p: (p.name, p.id))


class InMemoryItineraryStore(ItineraryStore):

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._itineraries: dict[str, Itinerary] = {}
        self._stops: dict[str, ItineraryStop] = {}

    def create(self, itinerary: Itinerary) -> Itinerary:
        with self._lock:
            stored = replace(
                itinerary,
                id=_new_id(),
                created_at=itinerary.created_at or _now(),
                stops=[],
            )
            self._itineraries[stored.id] = stored
            return replace(stored, stops=[])

    def get_by_id(self, itinerary_id: str) -> Optional[Itinerary]:
        with self._lock:
            itinerary = self._itineraries.get(itinerary_id)
            return replace(itinerary, stops=[]) if itinerary else None

    def list_by_user(self, user_id: str) -> list[Itinerary]:
        with self._lock:
            owned = [
                replace(i, stops=[]) for i in self._itineraries.values()
                if i.user_id == user_id
            ]
        return sorted(owned, key=lambda i: i.created_at, reverse=True)

    def add_stop(self, stop: ItineraryStop) -> ItineraryStop:
        with self._lock:
            stored = replace(stop, id=_new_id(), place=None)
            self._stops[stored.id] = stored
            return replace(stored)

    def list_stops(self, itinerary_id: str) -> list[ItineraryStop]:
        with self._lock:
            stops = [replace(s) for s in self._stops.values() if s.itinerary_id == itinerary_id]
        return sorted(stops, key=lambda s: (s.day, s.position, s.id))


class InMemoryConnectionStore(ConnectionStore):
    """Connections are frozen dataclasses, so they are shared without copying."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._connections: dict[str, Connection] = {}

    def create(self, connection: Connection) -> Connection:
        with self._lock:
            stored = replace(
                connection,
                id=_new_id(),
                status=ConnectionStatus.pending,
                created_at=connection.created_at or _now(),
            )
            self._connections[stored.id] = stored
            return stored

    def get_by_id(self, connection_id: str) -> Optional[Connection]:
        with self._lock:
            return self._connections.get(connection_id)

    def list_by_participant(self, user_id: str) -> list[Connection]:
        with self._lock:
            return [c for c in self._connections.values() if c.involves(user_id)]

    def update_status(self, connection_id: str, status: ConnectionStatus) -> Optional[Connection]:
        with self._lock:
            current = self._connections.get(connection_id)
            if current is None:
                return None
            updated = replace(current, status=status)
            self._connections[connection_id] = updated
            return updated

    def compare_and_set_status(
        self,
        connection_id: str,
        expected: ConnectionStatus,
        status: ConnectionStatus,
    ) -> Optional[Connection]:
        with self._lock:
            current = self._connections.get(connection_id)
            if current is None or current.status != expected:
                return None
            updated = replace(current, status=status)
            self._connections[connection_id] = updated
            return updated


class InMemoryBookingStore(BookingStore):

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._bookings: dict[str, Booking] = {}

    def create(self, booking: Booking) -> Booking:
        with self._lock:
            stored = replace(booking, id=_new_id(), created_at=booking.created_at or _now())
            self._bookings[stored.id] = stored
            return copy.deepcopy(stored)

    def get_by_id(self, booking_id: str) -> Optional[Booking]:
        with self._lock:
            booking = self._bookings.get(booking_id)
            return copy.deepcopy(booking) if booking else None

    def list_by_user(self, user_id: str, booking_type: Optional[BookingType] = None) -> list[Booking]:
        with self._lock:
            owned = [
                copy.deepcopy(b) for b in self._bookings.values()
                if b.user_id == user_id and (booking_type is None or b.booking_type == booking_type)
            ]
        return sorted(owned, key=lambda b: (b.created_at, b.id), reverse=True)


class InMemorySavedPlaceStore(SavedPlaceStore):

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._saved: dict[str, SavedPlace] = {}

    def create(self, saved: SavedPlace) -> SavedPlace:
        with self._lock:
            for existing in self._saved.values():
                if existing.user_id == saved.user_id and existing.place_id == saved.place_id:
                    return replace(existing)
            stored = replace(saved, id=_new_id(), created_at=saved.created_at or _now(), place=None)
            self._saved[stored.id] = stored
            return replace(stored)

    def get_by_id(self, saved_place_id: str) -> Optional[SavedPlace]:
        with self._lock:
            saved = self._saved.get(saved_place_id)
            return replace(saved) if saved else None

    def list_by_user(self, user_id: str) -> list[SavedPlace]:
        with self._lock:
            owned = [replace(s) for s in self._saved.values() if s.user_id == user_id]
        return sorted(owned, key=lambda s: (s.created_at, s.id), reverse=True)

    def delete(self, saved_place_id: str) -> bool:
        with self._lock:
            return self._saved.pop(saved_place_id, None) is not None
