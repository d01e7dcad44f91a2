"""
modules/bookings/service.py
----------------------------
BookingService — hotel stays and transport legs a user records for a trip.

Bookings are the user's own records: nothing here talks to a hotel or
carrier.  Provider references and fares travel in ``details``.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from db.stores.base import BookingStore
from modules.errors import InvalidRecord, NotFound
from modules.users.directory import UserDirectory
from modules.validation import raise_if_invalid, validate_booking
from schemas.booking import Booking, BookingType

logger = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> Optional[str]:
    return value.strip() or None if value else None


class BookingService:

    def __init__(self, store: BookingStore, users: UserDirectory) -> None:
        self._store = store
        self._users = users

    def create(
        self,
        user_id: str,
        booking_type: str,
        origin: Optional[str] = None,
        destination: Optional[str] = None,
        departure_date: Optional[date] = None,
        return_date: Optional[date] = None,
        passengers: Optional[int] = None,
        room_count: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> Booking:
        owner = self._users.get(user_id)
        raise_if_invalid(validate_booking({
            "booking_type":   booking_type,
            "origin":         origin,
            "destination":    destination,
            "departure_date": departure_date,
            "return_date":    return_date,
            "passengers":     passengers,
            "room_count":     room_count,
            "details":        details,
        }))
        booking = self._store.create(Booking(
            user_id=owner.id,
            booking_type=BookingType(booking_type),
            origin=_clean(origin),
            destination=_clean(destination),
            departure_date=departure_date,
            return_date=return_date,
            passengers=passengers,
            room_count=room_count,
            details=dict(details or {}),
        ))
        logger.info("user %s booked %s %s", owner.id, booking.booking_type.value, booking.id)
        return booking

    def get(self, booking_id: str) -> Booking:
        booking = self._store.get_by_id(booking_id)
        if booking is None:
            raise NotFound("booking", booking_id)
        return booking

    def list_for_user(self, user_id: str, booking_type: Optional[str] = None) -> list[Booking]:
        """The user's bookings, newest first; ``booking_type`` narrows to hotel or transport."""
        self._users.get(user_id)
        kind = None
        if booking_type is not None:
            try:
                kind = BookingType(booking_type)
            except ValueError:
                raise InvalidRecord([f"type={booking_type!r} must be one of 'hotel' | 'transport'"]) from None
        return self._store.list_by_user(user_id, kind)
