"""
modules/users/directory.py
---------------------------
UserDirectory — registration and lookup of tourists and guides.

This is the only way other services resolve a user id; it raises NotFound
for unknown ids so callers never handle None themselves.
Authentication is out of scope: users carry no credentials.
"""

from __future__ import annotations

import logging
from dataclasses import fields as dataclass_fields
from typing import Any, Optional

import config
from db.stores.base import UserStore
from modules.errors import InvalidRecord, NotFound
from modules.geo.distance import within_radius
from modules.validation import (
    raise_if_invalid,
    validate_coordinates,
    validate_guide_profile_update,
    validate_user,
    validate_user_update,
)
from schemas.place import Ranked
from schemas.user import GuideProfile, Role, User

logger = logging.getLogger(__name__)

_ACCOUNT_FIELDS = ("full_name", "email", "phone")
_PROFILE_FIELDS = tuple(f.name for f in dataclass_fields(GuideProfile))


class UserDirectory:

    def __init__(self, store: UserStore) -> None:
        self._store = store

    def register(
        self,
        username: str,
        full_name: str,
        email: str,
        role: str,
        phone: Optional[str] = None,
        guide_profile: Optional[dict[str, Any]] = None,
    ) -> User:
        """
        Create a tourist or guide account.

        guide_profile is a dict with the GuideProfile fields and is only
        accepted for guides.  Raises InvalidRecord or UsernameTaken.
        """
        record = {
            "username":      username,
            "full_name":     full_name,
            "email":         email,
            "role":          role,
            "guide_profile": guide_profile,
        }
        raise_if_invalid(validate_user(record))

        user = User(
            username=username.strip(),
            full_name=full_name.strip(),
            email=email.strip(),
            role=Role(role),
            phone=phone or None,
            guide_profile=GuideProfile(**guide_profile) if guide_profile else None,
        )
        stored = self._store.create(user)
        logger.info("registered %s %s (%s)", stored.role.value, stored.username, stored.id)
        return stored

    def get(self, user_id: str) -> User:
        user = self._store.get_by_id(user_id)
        if user is None:
            raise NotFound("user", user_id)
        return user

    def find(self, user_id: str) -> Optional[User]:
        """Like get(), but returns None for an unknown id."""
        return self._store.get_by_id(user_id)

    def update_user(self, user_id: str, changes: dict[str, Any]) -> User:
        """
        Change account details.  ``changes`` may hold full_name, email and phone;
        keys left out keep their current value and an empty phone clears it.
        """
        unknown = sorted(set(changes) - set(_ACCOUNT_FIELDS))
        if unknown:
            raise InvalidRecord([f"{key} cannot be updated" for key in unknown])
        raise_if_invalid(validate_user_update(changes))

        updates = {k: v.strip() if isinstance(v, str) else v for k, v in changes.items()}
        if "phone" in updates:
            updates["phone"] = updates["phone"] or None
        user = self._store.update(user_id, updates)
        if user is None:
            raise NotFound("user", user_id)
        logger.info("user %s updated %s", user_id, ", ".join(sorted(updates)) or "nothing")
        return user

    def update_guide_profile(self, user_id: str, changes: dict[str, Any]) -> User:
        """
        Merge ``changes`` into a guide's profile.

        A guide registered without a profile gets one here, which then needs a
        location.  Raises NotFound for unknown users and for non-guides.
        """
        user = self.get(user_id)
        if not user.is_guide:
            raise NotFound("guide", user_id)
        unknown = sorted(set(changes) - set(_PROFILE_FIELDS))
        if unknown:
            raise InvalidRecord([f"guide_profile.{key} cannot be updated" for key in unknown])
        if user.guide_profile is None:
            raise_if_invalid(validate_guide_profile_update({"location": None, **changes}))
        else:
            raise_if_invalid(validate_guide_profile_update(changes))

        updated = self._store.update_guide_profile(user_id, changes)
        if updated is None:
            raise NotFound("user", user_id)
        logger.info("guide %s updated profile %s", user_id, ", ".join(sorted(changes)) or "nothing")
        return updated

    def list_guides(self) -> list[User]:
        return self._store.list_by_role(Role.guide)

    def update_location(self, user_id: str, latitude: float, longitude: float) -> User:
        raise_if_invalid(validate_coordinates({"latitude": latitude, "longitude": longitude}))
        user = self._store.update_location(user_id, latitude, longitude)
        if user is None:
            raise NotFound("user", user_id)
        return user

    def nearby_guides(
        self,
        latitude: float,
        longitude: float,
        radius_km: Optional[float] = None,
    ) -> list[Ranked]:
        """Guides with a known location within ``radius_km``, nearest first."""
        raise_if_invalid(validate_coordinates({"latitude": latitude, "longitude": longitude}))
        radius = config.NEARBY_DEFAULT_RADIUS_KM if radius_km is None else radius_km
        return within_radius(
            self.list_guides(),
            latitude,
            longitude,
            radius,
            lambda g: (g.latitude, g.longitude) if g.has_location else None,
        )
