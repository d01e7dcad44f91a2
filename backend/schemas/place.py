"""
schemas/place.py
----------------
Catalogue entries: attractions, hotels, restaurants and other points of interest.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass
class Place:
    id: str = ""
    name: str = ""
    category: str = ""          # e.g. "attraction" | "hotel" | "restaurant"
    location: str = ""          # city / district label, e.g. "Pune"
    latitude: float = 0.0
    longitude: float = 0.0
    description: str = ""
    image_url: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Place":
        return cls(
            id=str(row["place_id"]),
            name=row["name"],
            category=row["category"],
            location=row["location"],
            latitude=float(row["latitude"]),
            longitude=float(row["longitude"]),
            description=row.get("description") or "",
            image_url=row.get("image_url"),
        )


@dataclass(frozen=True)
class Ranked:
    """A catalogue hit annotated with its distance from the search origin."""
    item: Any
    distance_km: float


@dataclass
class SavedPlace:
    """A place bookmarked by a user.  ``place`` is joined in by the service."""
    id: str = ""
    user_id: str = ""
    place_id: str = ""
    created_at: Optional[datetime] = None
    place: Optional[Place] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "SavedPlace":
        return cls(
            id=str(row["saved_place_id"]),
            user_id=str(row["user_id"]),
            place_id=str(row["place_id"]),
            created_at=row.get("created_at"),
        )
