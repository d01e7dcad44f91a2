"""
api/deps.py
-----------
Process-wide service container handed to route handlers via FastAPI Depends.

Tests swap the container through ``app.dependency_overrides[get_services]``.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

import config
from db.factory import Stores, build_stores
from modules.bookings.service import BookingService
from modules.connections.service import ConnectionService
from modules.itineraries.planner import ItineraryPlanner
from modules.observability.audit_log import AuditLog
from modules.places.catalogue import PlaceCatalogue
from modules.places.saved import SavedPlaceService
from modules.users.directory import UserDirectory


@dataclass
class Services:
    users: UserDirectory
    places: PlaceCatalogue
    itineraries: ItineraryPlanner
    connections: ConnectionService
    bookings: BookingService
    saved_places: SavedPlaceService


def build_services(stores: Optional[Stores] = None, audit: Optional[AuditLog] = None) -> Services:
    """Wire every service over ``stores`` (defaults to config.STORE_BACKEND)."""
    stores = stores or build_stores()
    if audit is None and config.AUDIT_LOG_PATH:
        audit = AuditLog(config.AUDIT_LOG_PATH)

    users = UserDirectory(stores.users)
    places = PlaceCatalogue(stores.places)
    return Services(
        users=users,
        places=places,
        itineraries=ItineraryPlanner(stores.itineraries, users, places),
        connections=ConnectionService(stores.connections, users, audit=audit),
        bookings=BookingService(stores.bookings, users),
        saved_places=SavedPlaceService(stores.saved_places, users, places),
    )


# Module-level singleton; initialised lazily on first request
_services: Services | None = None
_services_lock = threading.Lock()


def get_services() -> Services:
    global _services
    if _services is None:
        with _services_lock:
            if _services is None:
                _services = build_services()
    return _services
