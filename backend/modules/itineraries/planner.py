"""
modules/itineraries/planner.py
-------------------------------
ItineraryPlanner — users assemble trip plans out of catalogue places.

Stops are placed on a 1-based trip day.  When the itinerary has both dates,
the day must fall inside the trip.  Omitting ``position`` appends the stop
after the last one already on that day.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from db.stores.base import ItineraryStore
from modules.errors import InvalidRecord, NotFound
from modules.places.catalogue import PlaceCatalogue
from modules.users.directory import UserDirectory
from modules.validation import raise_if_invalid, validate_itinerary, validate_stop
from schemas.itinerary import Itinerary, ItineraryStop

logger = logging.getLogger(__name__)


class ItineraryPlanner:

    def __init__(
        self,
        store: ItineraryStore,
        users: UserDirectory,
        places: PlaceCatalogue,
    ) -> None:
        self._store = store
        self._users = users
        self._places = places

    def create(
        self,
        user_id: str,
        title: str,
        description: str = "",
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Itinerary:
        owner = self._users.get(user_id)
        raise_if_invalid(validate_itinerary({
            "title":      title,
            "start_date": start_date,
            "end_date":   end_date,
        }))
        itinerary = self._store.create(Itinerary(
            user_id=owner.id,
            title=title.strip(),
            description=description or "",
            start_date=start_date,
            end_date=end_date,
        ))
        logger.info("user %s created itinerary %s", owner.id, itinerary.id)
        return itinerary

    def get(self, itinerary_id: str) -> Itinerary:
        """Return the itinerary with its stops (and their places) attached."""
        itinerary = self._require(itinerary_id)
        itinerary.stops = self.list_stops(itinerary_id)
        return itinerary

    def list_for_user(self, user_id: str) -> list[Itinerary]:
        self._users.get(user_id)
        return self._store.list_by_user(user_id)

    def add_stop(
        self,
        itinerary_id: str,
        place_id: str,
        day: int,
        position: Optional[int] = None,
    ) -> ItineraryStop:
        itinerary = self._require(itinerary_id)
        place = self._places.get(place_id)
        raise_if_invalid(validate_stop({"day": day, "position": position}))

        num_days = itinerary.num_days
        if num_days is not None and day > num_days:
            raise InvalidRecord([f"day={day} is past the end of a {num_days}-day trip"])

        if position is None:
            same_day = [s.position for s in self._store.list_stops(itinerary_id) if s.day == day]
            position = max(same_day) + 1 if same_day else 0

        stop = self._store.add_stop(ItineraryStop(
            itinerary_id=itinerary.id,
            place_id=place.id,
            day=day,
            position=position,
        ))
        stop.place = place
        return stop

    def list_stops(self, itinerary_id: str) -> list[ItineraryStop]:
        self._require(itinerary_id)
        stops = self._store.list_stops(itinerary_id)
        for stop in stops:
            stop.place = self._places.get(stop.place_id)
        return stops

    def _require(self, itinerary_id: str) -> Itinerary:
        itinerary = self._store.get_by_id(itinerary_id)
        if itinerary is None:
            raise NotFound("itinerary", itinerary_id)
        return itinerary
