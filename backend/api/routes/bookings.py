"""
api/routes/bookings.py
-----------------------
Hotel and transport bookings recorded against a user.

    POST /v1/bookings
    GET  /v1/users/{user_id}/bookings?type=hotel|transport
"""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import Field

from api.deps import Services, get_services
from api.models import CamelModel
from api.serializers import ser_booking

router = APIRouter()


# ── Request schemas ────────────────────────────────────────────────────────────

class BookingRequest(CamelModel):
    user_id: str
    booking_type: str = Field(..., alias="type", description="hotel | transport")
    origin: Optional[str] = Field(None, alias="from")
    destination: Optional[str] = Field(None, alias="to")
    departure_date: Optional[date] = Field(None, description="ISO-8601 date YYYY-MM-DD")
    return_date: Optional[date] = Field(None, description="ISO-8601 date YYYY-MM-DD")
    passengers: Optional[int] = None
    room_count: Optional[int] = None
    details: dict[str, Any] = Field(default_factory=dict)


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.post("/bookings", status_code=201, summary="Record a hotel or transport booking")
def create_booking(req: BookingRequest, services: Services = Depends(get_services)) -> dict:
    booking = services.bookings.create(
        user_id=req.user_id,
        booking_type=req.booking_type,
        origin=req.origin,
        destination=req.destination,
        departure_date=req.departure_date,
        return_date=req.return_date,
        passengers=req.passengers,
        room_count=req.room_count,
        details=req.details,
    )
    return ser_booking(booking)


@router.get("/users/{user_id}/bookings", summary="The user's bookings, newest first")
def list_bookings(
    user_id: str,
    booking_type: Optional[str] = Query(None, alias="type"),
    services: Services = Depends(get_services),
) -> list[dict]:
    return [ser_booking(b) for b in services.bookings.list_for_user(user_id, booking_type)]
