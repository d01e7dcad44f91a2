"""
api/routes/users.py
--------------------
User registration, lookup, account and profile updates, location updates
and guide discovery.

    POST /v1/users
    GET  /v1/users/{user_id}
    PATCH /v1/users/{user_id}
    PUT  /v1/users/{user_id}/location
    GET  /v1/guides
    GET  /v1/guides/nearby?lat=&lon=&radiusKm=
    GET  /v1/guides/{user_id}
    PATCH /v1/guides/{user_id}/profile
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import Field

from api.deps import Services, get_services
from api.models import CamelModel
from api.serializers import ser_ranked, ser_user
from modules.errors import NotFound

router = APIRouter()


# ── Request schemas ────────────────────────────────────────────────────────────

class GuideProfileIn(CamelModel):
    location: str
    experience_years: int = 0
    languages: list[str] = Field(default_factory=list)
    specialties: list[str] = Field(default_factory=list)
    rating: Optional[float] = None
    bio: str = ""


class RegisterRequest(CamelModel):
    username: str
    full_name: str
    email: str
    role: str = Field(..., description="tourist | guide")
    phone: Optional[str] = None
    guide_profile: Optional[GuideProfileIn] = None


class UserUpdateRequest(CamelModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class GuideProfileUpdateRequest(CamelModel):
    location: Optional[str] = None
    experience_years: Optional[int] = None
    languages: Optional[list[str]] = None
    specialties: Optional[list[str]] = None
    rating: Optional[float] = None
    bio: Optional[str] = None


class LocationRequest(CamelModel):
    latitude: float
    longitude: float


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.post("/users", status_code=201, summary="Register a tourist or guide")
def register(req: RegisterRequest, services: Services = Depends(get_services)) -> dict:
    user = services.users.register(
        username=req.username,
        full_name=req.full_name,
        email=req.email,
        role=req.role,
        phone=req.phone,
        guide_profile=req.guide_profile.model_dump() if req.guide_profile else None,
    )
    return ser_user(user)


@router.get("/users/{user_id}", summary="Fetch one user")
def get_user(user_id: str, services: Services = Depends(get_services)) -> dict:
    return ser_user(services.users.get(user_id))


@router.patch("/users/{user_id}", summary="Change account details; omitted fields are kept")
def update_user(
    user_id: str,
    req: UserUpdateRequest,
    services: Services = Depends(get_services),
) -> dict:
    return ser_user(services.users.update_user(user_id, req.model_dump(exclude_unset=True)))


@router.put("/users/{user_id}/location", summary="Report the user's current position")
def update_location(
    user_id: str,
    req: LocationRequest,
    services: Services = Depends(get_services),
) -> dict:
    return ser_user(services.users.update_location(user_id, req.latitude, req.longitude))


@router.get("/guides", summary="List every registered guide")
def list_guides(services: Services = Depends(get_services)) -> list[dict]:
    return [ser_user(g) for g in services.users.list_guides()]


@router.get("/guides/nearby", summary="Guides near a point, nearest first")
def nearby_guides(
    lat: float,
    lon: float,
    radius_km: Optional[float] = Query(None, alias="radiusKm", gt=0),
    services: Services = Depends(get_services),
) -> list[dict]:
    hits = services.users.nearby_guides(lat, lon, radius_km)
    return [ser_ranked(h, ser_user) for h in hits]


@router.get("/guides/{user_id}", summary="Fetch one guide with their profile")
def get_guide(user_id: str, services: Services = Depends(get_services)) -> dict:
    user = services.users.get(user_id)
    if not user.is_guide:
        raise NotFound("guide", user_id)
    return ser_user(user)


@router.patch("/guides/{user_id}/profile", summary="Merge changes into a guide's profile")
def update_guide_profile(
    user_id: str,
    req: GuideProfileUpdateRequest,
    services: Services = Depends(get_services),
) -> dict:
    changes = req.model_dump(exclude_unset=True)
    return ser_user(services.users.update_guide_profile(user_id, changes))
