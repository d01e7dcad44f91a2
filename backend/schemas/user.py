"""
schemas/user.py
---------------
Dataclass definitions for marketplace users and guide profiles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class Role(str, Enum):
    tourist = "tourist"
    guide = "guide"


@dataclass
class GuideProfile:
    """Public profile shown to tourists browsing guides."""
    location: str = ""
    experience_years: int = 0
    languages: list[str] = field(default_factory=list)
    specialties: list[str] = field(default_factory=list)
    rating: Optional[float] = None     # 0–5, None until reviewed
    bio: str = ""


@dataclass
class User:
    """
    A registered tourist or guide.

    latitude / longitude hold the last location the client reported and are
    None until the first update.
    """
    id: str = ""
    username: str = ""
    full_name: str = ""
    email: str = ""
    role: Role = Role.tourist
    phone: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: Optional[datetime] = None
    guide_profile: Optional[GuideProfile] = None

    @property
    def is_guide(self) -> bool:
        return self.role == Role.guide

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def summary(self) -> "UserSummary":
        return UserSummary(
            id=self.id,
            name=self.full_name,
            role=self.role,
            contact=self.phone or self.email,
        )

    @classmethod
    def from_row(cls, row: dict[str, Any], profile_row: dict[str, Any] | None = None) -> "User":
        """Build from a `users` row plus an optional `guide_profiles` row."""
        profile = None
        if profile_row is not None:
            profile = GuideProfile(
                location=profile_row["location"],
                experience_years=profile_row["experience_years"],
                languages=list(profile_row.get("languages") or []),
                specialties=list(profile_row.get("specialties") or []),
                rating=profile_row.get("rating"),
                bio=profile_row.get("bio") or "",
            )
        return cls(
            id=str(row["user_id"]),
            username=row["username"],
            full_name=row["full_name"],
            email=row["email"],
            role=Role(row["role"]),
            phone=row.get("phone"),
            latitude=row.get("latitude"),
            longitude=row.get("longitude"),
            created_at=row.get("created_at"),
            guide_profile=profile,
        )


@dataclass(frozen=True)
class UserSummary:
    """Denormalized participant details attached to connections for display."""
    id: str
    name: str
    role: Role
    contact: str
