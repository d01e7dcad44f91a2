"""
db/stores/postgres.py
----------------------
PostgreSQL store implementations over the repository functions in
db/repositories/*.  Each call borrows one pooled connection via
db.pool.get_conn(), so every method is its own transaction.

Ids are UUIDs; a malformed id can never match a row, so lookups short-circuit
to "not found" instead of letting Postgres reject the cast.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict
from typing import Any, Callable, Optional

import psycopg2.errors

from db.pool import get_conn
from db.repositories import (
    booking_repo,
    connection_repo,
    itinerary_repo,
    place_repo,
    saved_place_repo,
    user_repo,
)
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
from schemas.user import Role, User


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


class PostgresUserStore(UserStore):

    def __init__(self, conn_factory: Callable = get_conn) -> None:
        self._conn = conn_factory

    def create(self, user: User) -> User:
        data = {
            "username":  user.username,
            "full_name": user.full_name,
            "email":     user.email,
            "phone":     user.phone,
            "role":      user.role.value,
            "latitude":  user.latitude,
            "longitude": user.longitude,
        }
        try:
            with self._conn() as conn:
                row = user_repo.insert_user(conn, data)
                profile_row = None
                if user.guide_profile is not None:
                    profile_row = user_repo.insert_guide_profile(
                        conn, row["user_id"], asdict(user.guide_profile)
                    )
        except psycopg2.errors.UniqueViolation as exc:
            raise UsernameTaken(user.username) from exc
        return User.from_row(row, profile_row)

    def get_by_id(self, user_id: str) -> Optional[User]:
        if not _is_uuid(user_id):
            return None
        with self._conn() as conn:
            row = user_repo.get_user(conn, user_id)
            return self._hydrate(conn, row)

    def get_by_username(self, username: str) -> Optional[User]:
        with self._conn() as conn:
            row = user_repo.get_user_by_username(conn, username)
            return self._hydrate(conn, row)

    def list_by_role(self, role: Role) -> list[User]:
        with self._conn() as conn:
            rows = user_repo.list_users_by_role(conn, role.value)
            profiles = user_repo.get_guide_profiles(conn, [str(r["user_id"]) for r in rows])
        return [User.from_row(r, profiles.get(str(r["user_id"]))) for r in rows]

    def update_location(self, user_id: str, latitude: float, longitude: float) -> Optional[User]:
        if not _is_uuid(user_id):
            return None
        with self._conn() as conn:
            row = user_repo.update_user_location(conn, user_id, latitude, longitude)
            return self._hydrate(conn, row)

    def update(self, user_id: str, fields: dict[str, Any]) -> Optional[User]:
        if not _is_uuid(user_id):
            return None
        with self._conn() as conn:
            row = user_repo.update_user(conn, user_id, fields)
            return self._hydrate(conn, row)

    def update_guide_profile(self, user_id: str, fields: dict[str, Any]) -> Optional[User]:
        if not _is_uuid(user_id):
            return None
        with self._conn() as conn:
            row = user_repo.get_user(conn, user_id)
            if row is None:
                return None
            profile_row = user_repo.upsert_guide_profile(conn, user_id, fields)
        return User.from_row(row, profile_row)

    @staticmethod
    def _hydrate(conn, row: dict | None) -> Optional[User]:
        if row is None:
            return None
        profile_row = None
        if row["role"] == Role.guide.value:
            profile_row = user_repo.get_guide_profiles(conn, [str(row["user_id"])]).get(str(row["user_id"]))
        return User.from_row(row, profile_row)


class PostgresPlaceStore(PlaceStore):

    def __init__(self, conn_factory: Callable = get_conn) -> None:
        self._conn = conn_factory

    def create(self, place: Place) -> Place:
        data = {
            "name":        place.name,
            "category":    place.category,
            "location":    place.location,
            "latitude":    place.latitude,
            "longitude":   place.longitude,
            "description": place.description or None,
            "image_url":   place.image_url,
        }
        with self._conn() as conn:
            return Place.from_row(place_repo.insert_place(conn, data))

    def get_by_id(self, place_id: str) -> Optional[Place]:
        if not _is_uuid(place_id):
            return None
        with self._conn() as conn:
            row = place_repo.get_place(conn, place_id)
        return Place.from_row(row) if row else None

    def list(self, category: Optional[str] = None) -> list[Place]:
        with self._conn() as conn:
            rows = place_repo.list_places(conn, category)
        return [Place.from_row(r) for r in rows]


class PostgresItineraryStore(ItineraryStore):

    def __init__(self, conn_factory: Callable = get_conn) -> None:
        self._conn = conn_factory

    def create(self, itinerary: Itinerary) -> Itinerary:
        data = {
            "user_id":     itinerary.user_id,
            "title":       itinerary.title,
            "description": itinerary.description or None,
            "start_date":  itinerary.start_date,
            "end_date":    itinerary.end_date,
        }
        with self._conn() as conn:
            return Itinerary.from_row(itinerary_repo.insert_itinerary(conn, data))

    def get_by_id(self, itinerary_id: str) -> Optional[Itinerary]:
        if not _is_uuid(itinerary_id):
            return None
        with self._conn() as conn:
            row = itinerary_repo.get_itinerary(conn, itinerary_id)
        return Itinerary.from_row(row) if row else None

    def list_by_user(self, user_id: str) -> list[Itinerary]:
        if not _is_uuid(user_id):
            return []
        with self._conn() as conn:
            rows = itinerary_repo.list_itineraries_by_user(conn, user_id)
        return [Itinerary.from_row(r) for r in rows]

    def add_stop(self, stop: ItineraryStop) -> ItineraryStop:
        with self._conn() as conn:
            row = itinerary_repo.insert_stop(conn, stop.itinerary_id, {
                "place_id": stop.place_id,
                "day":      stop.day,
                "position": stop.position,
            })
        return ItineraryStop.from_row(row)

    def list_stops(self, itinerary_id: str) -> list[ItineraryStop]:
        if not _is_uuid(itinerary_id):
            return []
        with self._conn() as conn:
            rows = itinerary_repo.list_stops(conn, itinerary_id)
        return [ItineraryStop.from_row(r) for r in rows]


class PostgresConnectionStore(ConnectionStore):

    def __init__(self, conn_factory: Callable = get_conn) -> None:
        self._conn = conn_factory

    def create(self, connection: Connection) -> Connection:
        data = {
            "from_user_id": connection.from_user_id,
            "to_user_id":   connection.to_user_id,
            "message":      connection.message,
            "trip_details": connection.trip_details,
            "budget":       connection.budget,
            "created_at":   connection.created_at,
        }
        with self._conn() as conn:
            return Connection.from_row(connection_repo.insert_connection(conn, data))

    def get_by_id(self, connection_id: str) -> Optional[Connection]:
        if not _is_uuid(connection_id):
            return None
        with self._conn() as conn:
            row = connection_repo.get_connection(conn, connection_id)
        return Connection.from_row(row) if row else None

    def list_by_participant(self, user_id: str) -> list[Connection]:
        if not _is_uuid(user_id):
            return []
        with self._conn() as conn:
            rows = connection_repo.list_connections_for_user(conn, user_id)
        return [Connection.from_row(r) for r in rows]

    def update_status(self, connection_id: str, status: ConnectionStatus) -> Optional[Connection]:
        if not _is_uuid(connection_id):
            return None
        with self._conn() as conn:
            row = connection_repo.update_connection_status(conn, connection_id, status.value)
        return Connection.from_row(row) if row else None

    def compare_and_set_status(
        self,
        connection_id: str,
        expected: ConnectionStatus,
        status: ConnectionStatus,
    ) -> Optional[Connection]:
        if not _is_uuid(connection_id):
            return None
        with self._conn() as conn:
            row = connection_repo.compare_and_set_status(
                conn, connection_id, expected.value, status.value
            )
        return Connection.from_row(row) if row else None


class PostgresBookingStore(BookingStore):

    def __init__(self, conn_factory: Callable = get_conn) -> None:
        self._conn = conn_factory

    def create(self, booking: Booking) -> Booking:
        data = {
            "user_id":        booking.user_id,
            "booking_type":   booking.booking_type.value,
            "origin":         booking.origin,
            "destination":    booking.destination,
            "departure_date": booking.departure_date,
            "return_date":    booking.return_date,
            "passengers":     booking.passengers,
            "room_count":     booking.room_count,
            "details":        booking.details,
        }
        with self._conn() as conn:
            return Booking.from_row(booking_repo.insert_booking(conn, data))

    def get_by_id(self, booking_id: str) -> Optional[Booking]:
        if not _is_uuid(booking_id):
            return None
        with self._conn() as conn:
            row = booking_repo.get_booking(conn, booking_id)
        return Booking.from_row(row) if row else None

    def list_by_user(self, user_id: str, booking_type: Optional[BookingType] = None) -> list[Booking]:
        if not _is_uuid(user_id):
            return []
        with self._conn() as conn:
            rows = booking_repo.list_bookings_for_user(
                conn, user_id, booking_type.value if booking_type else None
            )
        return [Booking.from_row(r) for r in rows]


class PostgresSavedPlaceStore(SavedPlaceStore):

    def __init__(self, conn_factory: Callable = get_conn) -> None:
        self._conn = conn_factory

    def create(self, saved: SavedPlace) -> SavedPlace:
        with self._conn() as conn:
            row = saved_place_repo.insert_saved_place(conn, saved.user_id, saved.place_id)
        return SavedPlace.from_row(row)

    def get_by_id(self, saved_place_id: str) -> Optional[SavedPlace]:
        if not _is_uuid(saved_place_id):
            return None
        with self._conn() as conn:
            row = saved_place_repo.get_saved_place(conn, saved_place_id)
        return SavedPlace.from_row(row) if row else None

    def list_by_user(self, user_id: str) -> list[SavedPlace]:
        if not _is_uuid(user_id):
            return []
        with self._conn() as conn:
            rows = saved_place_repo.list_saved_places_for_user(conn, user_id)
        return [SavedPlace.from_row(r) for r in rows]

    def delete(self, saved_place_id: str) -> bool:
        if not _is_uuid(saved_place_id):
            return False
        with self._conn() as conn:
            return saved_place_repo.delete_saved_place(conn, saved_place_id)
