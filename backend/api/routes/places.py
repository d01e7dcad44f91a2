"""
api/routes/places.py
---------------------
Catalogue of attractions, hotels and restaurants.

    POST /v1/places
    GET  /v1/places?category=
    GET  /v1/places/nearby?lat=&lon=&radiusKm=&category=
    GET  /v1/places/{place_id}
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.deps import Services, get_services
from api.models import CamelModel
from api.serializers import ser_place, ser_ranked

router = APIRouter()


class PlaceRequest(CamelModel):
    name: str
    category: str
    location: str
    latitude: float
    longitude: float
    description: str = ""
    image_url: Optional[str] = None


@router.post("", status_code=201, summary="Add a place to the catalogue")
def add_place(req: PlaceRequest, services: Services = Depends(get_services)) -> dict:
    place = services.places.add(**req.model_dump())
    return ser_place(place)


@router.get("", summary="List places, optionally by category")
def list_places(
    category: Optional[str] = None,
    services: Services = Depends(get_services),
) -> list[dict]:
    return [ser_place(p) for p in services.places.list(category)]


@router.get("/nearby", summary="Places near a point, nearest first")
def nearby_places(
    lat: float,
    lon: float,
    radius_km: Optional[float] = Query(None, alias="radiusKm", gt=0),
    category: Optional[str] = None,
    services: Services = Depends(get_services),
) -> list[dict]:
    hits = services.places.nearby(lat, lon, radius_km, category)
    return [ser_ranked(h, ser_place) for h in hits]


@router.get("/{place_id}", summary="Fetch one place")
def get_place(place_id: str, services: Services = Depends(get_services)) -> dict:
    return ser_place(services.places.get(place_id))
