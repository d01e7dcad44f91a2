"""
modules/places/saved.py
------------------------
SavedPlaceService — a user's bookmarked catalogue places.

Saving is idempotent per (user, place).  Only the owner may remove an entry.
"""

from __future__ import annotations

import logging

from db.stores.base import SavedPlaceStore
from modules.errors import NotAuthorized, NotFound
from modules.places.catalogue import PlaceCatalogue
from modules.users.directory import UserDirectory
from schemas.place import SavedPlace

logger = logging.getLogger(__name__)


class SavedPlaceService:

    def __init__(
        self,
        store: SavedPlaceStore,
        users: UserDirectory,
        places: PlaceCatalogue,
    ) -> None:
        self._store = store
        self._users = users
        self._places = places

    def save(self, user_id: str, place_id: str) -> SavedPlace:
        user = self._users.get(user_id)
        place = self._places.get(place_id)
        saved = self._store.create(SavedPlace(user_id=user.id, place_id=place.id))
        saved.place = place
        logger.info("user %s saved place %s", user.id, place.id)
        return saved

    def list_for_user(self, user_id: str) -> list[SavedPlace]:
        """Most recently saved first, each with its Place attached."""
        self._users.get(user_id)
        saved = self._store.list_by_user(user_id)
        for entry in saved:
            entry.place = self._places.get(entry.place_id)
        return saved

    def remove(self, saved_place_id: str, acting_user_id: str) -> None:
        saved = self._store.get_by_id(saved_place_id)
        if saved is None:
            raise NotFound("saved place", saved_place_id)
        if saved.user_id != acting_user_id:
            raise NotAuthorized(f"only the owner may remove saved place {saved_place_id!r}")
        self._store.delete(saved_place_id)
        logger.info("user %s removed saved place %s", acting_user_id, saved_place_id)
