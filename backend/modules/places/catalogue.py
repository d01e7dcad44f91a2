"""
modules/places/catalogue.py
----------------------------
PlaceCatalogue — attractions, hotels and restaurants users can browse and
add to itineraries.
"""

from __future__ import annotations

import logging
from typing import Optional

import config
from db.stores.base import PlaceStore
from modules.errors import NotFound
from modules.geo.distance import within_radius
from modules.validation import raise_if_invalid, validate_coordinates, validate_place
from schemas.place import Place, Ranked

logger = logging.getLogger(__name__)


class PlaceCatalogue:

    def __init__(self, store: PlaceStore) -> None:
        self._store = store

    def add(
        self,
        name: str,
        category: str,
        location: str,
        latitude: float,
        longitude: float,
        description: str = "",
        image_url: Optional[str] = None,
    ) -> Place:
        record = {
            "name":      name,
            "category":  category,
            "location":  location,
            "latitude":  latitude,
            "longitude": longitude,
        }
        raise_if_invalid(validate_place(record))
        place = self._store.create(Place(
            name=name.strip(),
            category=category.strip().lower(),
            location=location.strip(),
            latitude=float(latitude),
            longitude=float(longitude),
            description=description or "",
            image_url=image_url,
        ))
        logger.info("catalogued %s %r (%s)", place.category, place.name, place.id)
        return place

    def get(self, place_id: str) -> Place:
        place = self._store.get_by_id(place_id)
        if place is None:
            raise NotFound("place", place_id)
        return place

    def list(self, category: Optional[str] = None) -> list[Place]:
        return self._store.list(category.strip().lower() if category else None)

    def nearby(
        self,
        latitude: float,
        longitude: float,
        radius_km: Optional[float] = None,
        category: Optional[str] = None,
    ) -> list[Ranked]:
        """Places within ``radius_km`` of the point, nearest first."""
        raise_if_invalid(validate_coordinates({"latitude": latitude, "longitude": longitude}))
        radius = config.NEARBY_DEFAULT_RADIUS_KM if radius_km is None else radius_km
        return within_radius(
            self.list(category),
            latitude,
            longitude,
            radius,
            lambda p: (p.latitude, p.longitude),
        )
