"""
In-memory store contracts: id assignment, ordering, copies, and the
compare-and-set guard on connection status.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from db.factory import build_stores
from db.stores.memory import (
    InMemoryBookingStore,
    InMemoryConnectionStore,
    InMemoryItineraryStore,
    InMemoryPlaceStore,
    InMemorySavedPlaceStore,
    InMemoryUserStore,
)
from modules.errors import UsernameTaken
from schemas.booking import Booking, BookingType
from schemas.connection import Connection, ConnectionStatus
from schemas.itinerary import Itinerary, ItineraryStop
from schemas.place import Place, SavedPlace
from schemas.user import GuideProfile, Role, User


class TestUserStore:

    @pytest.fixture
    def store(self):
        return InMemoryUserStore()

    def test_create_assigns_id_and_timestamp(self, store):
        user = store.create(User(username="a", full_name="A", email="a@x", role=Role.tourist))
        assert user.id
        assert user.created_at.tzinfo is not None
        assert store.get_by_id(user.id) == user

    def test_duplicate_username(self, store):
        store.create(User(username="a", full_name="A", email="a@x", role=Role.tourist))
        with pytest.raises(UsernameTaken):
            store.create(User(username="a", full_name="B", email="b@x", role=Role.guide))

    def test_returned_users_are_copies(self, store):
        user = store.create(User(
            username="g", full_name="G", email="g@x", role=Role.guide,
            guide_profile=GuideProfile(location="Goa", languages=["English"]),
        ))
        user.guide_profile.languages.append("Konkani")
        assert store.get_by_id(user.id).guide_profile.languages == ["English"]

    def test_list_by_role_sorted_by_username(self, store):
        for name in ("zed", "amy", "kim"):
            store.create(User(username=name, full_name=name, email=f"{name}@x", role=Role.guide))
        store.create(User(username="bob", full_name="Bob", email="b@x", role=Role.tourist))
        assert [u.username for u in store.list_by_role(Role.guide)] == ["amy", "kim", "zed"]

    def test_lookup_by_username(self, store):
        created = store.create(User(username="a", full_name="A", email="a@x", role=Role.tourist))
        assert store.get_by_username("a").id == created.id
        assert store.get_by_username("nobody") is None

    def test_update_location(self, store):
        user = store.create(User(username="a", full_name="A", email="a@x", role=Role.tourist))
        moved = store.update_location(user.id, 18.52, 73.85)
        assert (moved.latitude, moved.longitude) == (18.52, 73.85)
        assert store.update_location("missing", 0, 0) is None

    def test_update_replaces_only_given_fields(self, store):
        user = store.create(User(username="a", full_name="A", email="a@x", role=Role.tourist, phone="1"))
        updated = store.update(user.id, {"email": "new@x"})
        assert (updated.email, updated.phone, updated.username) == ("new@x", "1", "a")
        assert store.update("missing", {"email": "x"}) is None

    def test_update_guide_profile_creates_then_merges(self, store):
        user = store.create(User(username="g", full_name="G", email="g@x", role=Role.guide))
        created = store.update_guide_profile(user.id, {"location": "Pune"})
        assert created.guide_profile == GuideProfile(location="Pune")
        merged = store.update_guide_profile(user.id, {"languages": ["Marathi"]})
        assert merged.guide_profile.location == "Pune"
        assert merged.guide_profile.languages == ["Marathi"]
        assert store.update_guide_profile("missing", {"bio": "x"}) is None


class TestPlaceStore:

    def test_list_filters_and_sorts(self):
        store = InMemoryPlaceStore()
        for name, category in [("Taj", "hotel"), ("Aga Khan Palace", "attraction"), ("Fort", "attraction")]:
            store.create(Place(name=name, category=category, location="Pune", latitude=18.5, longitude=73.8))
        assert [p.name for p in store.list("attraction")] == ["Aga Khan Palace", "Fort"]
        assert len(store.list()) == 3
        assert store.get_by_id("missing") is None


class TestItineraryStore:

    def test_list_by_user_newest_first(self):
        store = InMemoryItineraryStore()
        t0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
        older = store.create(Itinerary(user_id="u1", title="Old", created_at=t0))
        newer = store.create(Itinerary(user_id="u1", title="New", created_at=t0 + timedelta(days=1)))
        store.create(Itinerary(user_id="u2", title="Other"))
        assert [i.id for i in store.list_by_user("u1")] == [newer.id, older.id]

    def test_stops_ordered_by_day_then_position(self):
        store = InMemoryItineraryStore()
        trip = store.create(Itinerary(user_id="u1", title="Trip", start_date=date(2024, 1, 1)))
        store.add_stop(ItineraryStop(itinerary_id=trip.id, place_id="p3", day=2, position=0))
        store.add_stop(ItineraryStop(itinerary_id=trip.id, place_id="p2", day=1, position=1))
        store.add_stop(ItineraryStop(itinerary_id=trip.id, place_id="p1", day=1, position=0))
        assert [s.place_id for s in store.list_stops(trip.id)] == ["p1", "p2", "p3"]
        assert store.list_stops("other") == []


class TestConnectionStore:

    @pytest.fixture
    def store(self):
        return InMemoryConnectionStore()

    @pytest.fixture
    def pending(self, store):
        return store.create(Connection(from_user_id="t", to_user_id="g", message="Hi"))

    def test_create_forces_pending(self, store):
        stored = store.create(Connection(
            from_user_id="t", to_user_id="g", message="Hi", status=ConnectionStatus.accepted,
        ))
        assert stored.status == ConnectionStatus.pending
        assert stored.id

    def test_compare_and_set_succeeds_once(self, store, pending):
        first = store.compare_and_set_status(pending.id, ConnectionStatus.pending, ConnectionStatus.accepted)
        second = store.compare_and_set_status(pending.id, ConnectionStatus.pending, ConnectionStatus.rejected)
        assert first.status == ConnectionStatus.accepted
        assert second is None
        assert store.get_by_id(pending.id).status == ConnectionStatus.accepted

    def test_compare_and_set_missing(self, store):
        assert store.compare_and_set_status("nope", ConnectionStatus.pending, ConnectionStatus.accepted) is None

    def test_list_by_participant(self, store, pending):
        store.create(Connection(from_user_id="x", to_user_id="y", message="Hi"))
        assert store.list_by_participant("t") == [pending]
        assert store.list_by_participant("g") == [pending]
        assert store.list_by_participant("z") == []


class TestBookingStore:

    def test_list_newest_first_and_by_type(self):
        store = InMemoryBookingStore()
        t0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
        hotel = store.create(Booking(
            user_id="u1", booking_type=BookingType.hotel, destination="Goa", created_at=t0,
        ))
        train = store.create(Booking(
            user_id="u1", booking_type=BookingType.transport, origin="Pune", destination="Goa",
            details={"pnr": "4521"}, created_at=t0 + timedelta(hours=1),
        ))
        store.create(Booking(user_id="u2", booking_type=BookingType.hotel, destination="Ooty"))

        assert [b.id for b in store.list_by_user("u1")] == [train.id, hotel.id]
        assert [b.id for b in store.list_by_user("u1", BookingType.hotel)] == [hotel.id]
        assert store.list_by_user("nobody") == []

    def test_details_are_copied(self):
        store = InMemoryBookingStore()
        booking = store.create(Booking(user_id="u1", destination="Goa", details={"pnr": "1"}))
        booking.details["pnr"] = "changed"
        assert store.get_by_id(booking.id).details == {"pnr": "1"}
        assert store.get_by_id("missing") is None


class TestSavedPlaceStore:

    def test_saving_twice_returns_the_same_entry(self):
        store = InMemorySavedPlaceStore()
        first = store.create(SavedPlace(user_id="u1", place_id="p1"))
        again = store.create(SavedPlace(user_id="u1", place_id="p1"))
        assert again.id == first.id
        assert len(store.list_by_user("u1")) == 1

    def test_list_most_recent_first(self):
        store = InMemorySavedPlaceStore()
        t0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
        old = store.create(SavedPlace(user_id="u1", place_id="p1", created_at=t0))
        new = store.create(SavedPlace(user_id="u1", place_id="p2", created_at=t0 + timedelta(days=1)))
        store.create(SavedPlace(user_id="u2", place_id="p1"))
        assert [s.id for s in store.list_by_user("u1")] == [new.id, old.id]

    def test_delete(self):
        store = InMemorySavedPlaceStore()
        saved = store.create(SavedPlace(user_id="u1", place_id="p1"))
        assert store.delete(saved.id) is True
        assert store.delete(saved.id) is False
        assert store.get_by_id(saved.id) is None

class TestFactory:

    def test_in_memory_backend(self):
        stores = build_stores("in_memory")
        assert isinstance(stores.connections, InMemoryConnectionStore)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            build_stores("sqlite")

    def test_each_call_is_isolated(self):
        a, b = build_stores("in_memory"), build_stores("in_memory")
        a.users.create(User(username="a", full_name="A", email="a@x", role=Role.tourist))
        assert b.users.get_by_username("a") is None
