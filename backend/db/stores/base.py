"""
db/stores/base.py
------------------
Abstract store contracts the services depend on.

Two implementations exist for each:
    db/stores/memory.py    process-local dicts (dev + tests)
    db/stores/postgres.py  psycopg2 over the tables in db/schema.sql

Stores persist and query; they never enforce business rules.  The one
exception is ConnectionStore.compare_and_set_status, whose atomicity is the
store's job so that a connection's terminal transition is recorded once.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from schemas.booking import Booking, BookingType
from schemas.connection import Connection, ConnectionStatus
from schemas.itinerary import Itinerary, ItineraryStop
from schemas.place import Place, SavedPlace
from schemas.user import Role, User


class UserStore(ABC):

    @abstractmethod
    def create(self, user: User) -> User:
        """Persist a new user (and guide profile); raise UsernameTaken on a duplicate username."""

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def list_by_role(self, role: Role) -> list[User]:
        """All users with ``role``, ordered by username."""

    @abstractmethod
    def update_location(self, user_id: str, latitude: float, longitude: float) -> Optional[User]: ...

    @abstractmethod
    def update(self, user_id: str, fields: dict[str, Any]) -> Optional[User]:
        """Overwrite the given account fields (full_name, email, phone); None if the user is missing."""

    @abstractmethod
    def update_guide_profile(self, user_id: str, fields: dict[str, Any]) -> Optional[User]:
        """
        Merge ``fields`` into the user's guide profile, creating it when absent.

        Returns the updated user, or None if the user is missing.
        """


class PlaceStore(ABC):

    @abstractmethod
    def create(self, place: Place) -> Place: ...

    @abstractmethod
    def get_by_id(self, place_id: str) -> Optional[Place]: ...

    @abstractmethod
    def list(self, category: Optional[str] = None) -> list[Place]:
        """All places, optionally only one category, ordered by name."""


class ItineraryStore(ABC):

    @abstractmethod
    def create(self, itinerary: Itinerary) -> Itinerary: ...

    @abstractmethod
    def get_by_id(self, itinerary_id: str) -> Optional[Itinerary]: ...

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[Itinerary]:
        """The user's itineraries, newest first."""

    @abstractmethod
    def add_stop(self, stop: ItineraryStop) -> ItineraryStop: ...

    @abstractmethod
    def list_stops(self, itinerary_id: str) -> list[ItineraryStop]:
        """Stops ordered by (day, position, id), without their Place joined."""


class ConnectionStore(ABC):

    @abstractmethod
    def create(self, connection: Connection) -> Connection:
        """Persist a new pending connection and return it with its assigned id."""

    @abstractmethod
    def get_by_id(self, connection_id: str) -> Optional[Connection]: ...

    @abstractmethod
    def list_by_participant(self, user_id: str) -> list[Connection]:
        """Connections where the user is either endpoint; order is not guaranteed."""

    @abstractmethod
    def update_status(self, connection_id: str, status: ConnectionStatus) -> Optional[Connection]:
        """Unconditional status write.  Does not check transition legality."""

    @abstractmethod
    def compare_and_set_status(
        self,
        connection_id: str,
        expected: ConnectionStatus,
        status: ConnectionStatus,
    ) -> Optional[Connection]:
        """
        Atomically set ``status`` only while the stored status is ``expected``.

        Returns the updated connection, or None when the row is missing or its
        status has already moved on.
        """


class BookingStore(ABC):

    @abstractmethod
    def create(self, booking: Booking) -> Booking: ...

    @abstractmethod
    def get_by_id(self, booking_id: str) -> Optional[Booking]: ...

    @abstractmethod
    def list_by_user(self, user_id: str, booking_type: Optional[BookingType] = None) -> list[Booking]:
        """The user's bookings, optionally of one type, newest first."""


class SavedPlaceStore(ABC):

    @abstractmethod
    def create(self, saved: SavedPlace) -> SavedPlace:
        """
        Bookmark a place for a user.

        Saving a place the user already saved returns the existing entry.
        """

    @abstractmethod
    def get_by_id(self, saved_place_id: str) -> Optional[SavedPlace]: ...

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[SavedPlace]:
        """The user's saved places, most recently saved first, without Place joined."""

    @abstractmethod
    def delete(self, saved_place_id: str) -> bool:
        """Remove the entry; False when it did not exist."""
