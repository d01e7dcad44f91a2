"""
modules/geo/distance.py
------------------------
Great-circle distances and radius search for guides and places.
No external HTTP calls are made.

Config knob (config.py):
  NEARBY_DEFAULT_RADIUS_KM -- radius used when the caller gives none (default: 10)
"""

from __future__ import annotations

import math
from typing import Callable, Iterable, Optional, TypeVar

from schemas.place import Ranked

T = TypeVar("T")

_EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points (Haversine formula) in km."""
    r = _EARTH_RADIUS_KM
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lam = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    )
    return 2 * r * math.asin(math.sqrt(a))


def within_radius(
    items: Iterable[T],
    lat: float,
    lon: float,
    radius_km: float,
    coords_of: Callable[[T], Optional[tuple[float, float]]],
) -> list[Ranked]:
    """
    Return the items lying within ``radius_km`` of (lat, lon), nearest first.

    ``coords_of`` maps an item to its (lat, lon), or None when the item has
    no known position; such items are skipped.
    """
    hits: list[Ranked] = []
    for item in items:
        coords = coords_of(item)
        if coords is None:
            continue
        km = haversine_km(lat, lon, coords[0], coords[1])
        if km <= radius_km:
            hits.append(Ranked(item=item, distance_km=round(km, 3)))
    hits.sort(key=lambda r: r.distance_km)
    return hits
