"""
schemas/booking.py
------------------
Hotel and transport bookings a user records against their trip.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional


class BookingType(str, Enum):
    hotel = "hotel"
    transport = "transport"


@dataclass
class Booking:
    id: str = ""
    user_id: str = ""
    booking_type: BookingType = BookingType.hotel
    origin: Optional[str] = None            # "from"; transport only
    destination: Optional[str] = None       # "to"; the hotel's city for hotels
    departure_date: Optional[date] = None   # check-in date for hotels
    return_date: Optional[date] = None      # check-out date for hotels
    passengers: Optional[int] = None
    room_count: Optional[int] = None
    details: dict[str, Any] = field(default_factory=dict)   # provider reference, fare class, ...
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Booking":
        return cls(
            id=str(row["booking_id"]),
            user_id=str(row["user_id"]),
            booking_type=BookingType(row["booking_type"]),
            origin=row.get("origin"),
            destination=row.get("destination"),
            departure_date=row.get("departure_date"),
            return_date=row.get("return_date"),
            passengers=row.get("passengers"),
            room_count=row.get("room_count"),
            details=dict(row.get("details") or {}),
            created_at=row.get("created_at"),
        )
