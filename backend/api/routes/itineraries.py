"""
api/routes/itineraries.py
--------------------------
User-built trip plans.

    POST /v1/itineraries
    GET  /v1/itineraries/{itinerary_id}
    POST /v1/itineraries/{itinerary_id}/stops
    GET  /v1/users/{user_id}/itineraries
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import Field

from api.deps import Services, get_services
from api.models import CamelModel
from api.serializers import ser_itinerary, ser_stop

router = APIRouter()


# ── Request schemas ────────────────────────────────────────────────────────────

class ItineraryRequest(CamelModel):
    user_id: str
    title: str
    description: str = ""
    start_date: Optional[date] = Field(None, description="ISO-8601 date YYYY-MM-DD")
    end_date: Optional[date] = Field(None, description="ISO-8601 date YYYY-MM-DD")


class StopRequest(CamelModel):
    place_id: str
    day: int = 1
    order: Optional[int] = Field(None, description="Position within the day; appended when omitted")


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.post("/itineraries", status_code=201, summary="Create an itinerary")
def create_itinerary(req: ItineraryRequest, services: Services = Depends(get_services)) -> dict:
    itinerary = services.itineraries.create(
        user_id=req.user_id,
        title=req.title,
        description=req.description,
        start_date=req.start_date,
        end_date=req.end_date,
    )
    return ser_itinerary(itinerary)


@router.get("/itineraries/{itinerary_id}", summary="Fetch an itinerary with its stops")
def get_itinerary(itinerary_id: str, services: Services = Depends(get_services)) -> dict:
    return ser_itinerary(services.itineraries.get(itinerary_id), with_stops=True)


@router.post("/itineraries/{itinerary_id}/stops", status_code=201, summary="Add a place to an itinerary")
def add_stop(
    itinerary_id: str,
    req: StopRequest,
    services: Services = Depends(get_services),
) -> dict:
    stop = services.itineraries.add_stop(itinerary_id, req.place_id, req.day, req.order)
    return ser_stop(stop)


@router.get("/users/{user_id}/itineraries", summary="List a user's itineraries, newest first")
def list_user_itineraries(user_id: str, services: Services = Depends(get_services)) -> list[dict]:
    return [ser_itinerary(i) for i in services.itineraries.list_for_user(user_id)]
