"""
schemas/itinerary.py
--------------------
Dataclass definitions for user-built itineraries.

An Itinerary is an ordered set of stops; each stop references a catalogue
Place and sits on a trip day at a position within that day.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from schemas.place import Place


@dataclass
class ItineraryStop:
    id: str = ""
    itinerary_id: str = ""
    place_id: str = ""
    day: int = 1               # 1-based trip day
    position: int = 0          # order within the day
    place: Optional[Place] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ItineraryStop":
        return cls(
            id=str(row["stop_id"]),
            itinerary_id=str(row["itinerary_id"]),
            place_id=str(row["place_id"]),
            day=row["day"],
            position=row["position"],
        )


@dataclass
class Itinerary:
    """Top-level trip plan owned by one user."""
    id: str = ""
    user_id: str = ""
    title: str = ""
    description: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: Optional[datetime] = None
    stops: list[ItineraryStop] = field(default_factory=list)

    @property
    def num_days(self) -> Optional[int]:
        """Inclusive trip length, or None while either date is unset."""
        if self.start_date is None or self.end_date is None:
            return None
        return (self.end_date - self.start_date).days + 1

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Itinerary":
        return cls(
            id=str(row["itinerary_id"]),
            user_id=str(row["user_id"]),
            title=row["title"],
            description=row.get("description") or "",
            start_date=row.get("start_date"),
            end_date=row.get("end_date"),
            created_at=row.get("created_at"),
        )
