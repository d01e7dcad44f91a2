"""
Postgres stores and repositories against a mocked psycopg2 connection.
"""
from contextlib import contextmanager
from datetime import datetime, timezone
from unittest.mock import MagicMock

import psycopg2.errors
import pytest
from psycopg2.extras import Json

from db.repositories import booking_repo, connection_repo, saved_place_repo, user_repo
from db.stores.postgres import (
    PostgresBookingStore,
    PostgresConnectionStore,
    PostgresSavedPlaceStore,
    PostgresUserStore,
)
from modules.errors import UsernameTaken
from schemas.booking import Booking, BookingType
from schemas.connection import Connection, ConnectionStatus
from schemas.place import SavedPlace
from schemas.user import GuideProfile, Role, User

CONN_ID = "6f1c2a4e-8d9b-4a4e-9f0e-1b2c3d4e5f60"
FROM_ID = "0a0a0a0a-0000-4000-8000-000000000001"
TO_ID = "0b0b0b0b-0000-4000-8000-000000000002"
CREATED = datetime(2024, 11, 1, 9, 0, tzinfo=timezone.utc)

CONNECTION_COLUMNS = [
    "connection_id", "from_user_id", "to_user_id", "status",
    "message", "trip_details", "budget", "created_at",
]


def _row(status="pending"):
    return (CONN_ID, FROM_ID, TO_ID, status, "Hi", None, None, CREATED)


@pytest.fixture
def cursor():
    cur = MagicMock()
    cur.description = [(name,) for name in CONNECTION_COLUMNS]
    return cur


@pytest.fixture
def pg_conn(cursor):
    conn = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cursor
    return conn


@pytest.fixture
def conn_factory(pg_conn):
    @contextmanager
    def factory():
        yield pg_conn
    return factory


class TestConnectionRepo:

    def test_compare_and_set_guards_on_expected_status(self, pg_conn, cursor):
        cursor.fetchone.return_value = _row("accepted")
        row = connection_repo.compare_and_set_status(pg_conn, CONN_ID, "pending", "accepted")

        sql, params = cursor.execute.call_args.args
        assert "AND status = %s" in sql
        assert params == ("accepted", CONN_ID, "pending")
        assert row["status"] == "accepted"
        assert row["connection_id"] == CONN_ID

    def test_lost_race_returns_none(self, pg_conn, cursor):
        cursor.fetchone.return_value = None
        assert connection_repo.compare_and_set_status(pg_conn, CONN_ID, "pending", "rejected") is None

    def test_list_for_user_matches_both_sides(self, pg_conn, cursor):
        cursor.fetchall.return_value = [_row(), _row("accepted")]
        rows = connection_repo.list_connections_for_user(pg_conn, FROM_ID)
        assert cursor.execute.call_args.args[1] == (FROM_ID, FROM_ID)
        assert [r["status"] for r in rows] == ["pending", "accepted"]


class TestPostgresConnectionStore:

    def test_create_maps_row(self, conn_factory, cursor):
        cursor.fetchone.return_value = _row()
        store = PostgresConnectionStore(conn_factory)
        stored = store.create(Connection(from_user_id=FROM_ID, to_user_id=TO_ID, message="Hi"))
        assert stored.id == CONN_ID
        assert stored.status == ConnectionStatus.pending
        assert stored.created_at == CREATED

    def test_compare_and_set(self, conn_factory, cursor):
        cursor.fetchone.return_value = _row("rejected")
        store = PostgresConnectionStore(conn_factory)
        updated = store.compare_and_set_status(CONN_ID, ConnectionStatus.pending, ConnectionStatus.rejected)
        assert updated.status == ConnectionStatus.rejected

    def test_malformed_id_never_queries(self, conn_factory, pg_conn):
        store = PostgresConnectionStore(conn_factory)
        assert store.get_by_id("not-a-uuid") is None
        assert store.list_by_participant("not-a-uuid") == []
        pg_conn.cursor.assert_not_called()


class TestPostgresUserStore:

    def test_unique_violation_becomes_username_taken(self, pg_conn, cursor, conn_factory):
        cursor.execute.side_effect = psycopg2.errors.UniqueViolation("duplicate key")
        store = PostgresUserStore(conn_factory)
        with pytest.raises(UsernameTaken):
            store.create(User(username="asha", full_name="Asha", email="a@x", role=Role.tourist))

    def test_guide_profile_written_with_user(self, pg_conn, conn_factory):
        user_cur = MagicMock()
        user_cur.description = [(c,) for c in (
            "user_id", "username", "full_name", "email", "phone",
            "role", "latitude", "longitude", "created_at",
        )]
        user_cur.fetchone.return_value = (
            TO_ID, "rohan", "Rohan", "r@x", None, "guide", None, None, CREATED,
        )
        profile_cur = MagicMock()
        profile_cur.description = [(c,) for c in (
            "user_id", "location", "experience_years", "languages", "specialties", "rating", "bio",
        )]
        profile_cur.fetchone.return_value = (TO_ID, "Pune", 6, ["English"], [], None, "")
        pg_conn.cursor.return_value.__enter__.side_effect = [user_cur, profile_cur]

        store = PostgresUserStore(conn_factory)
        user = store.create(User(
            username="rohan", full_name="Rohan", email="r@x", role=Role.guide,
            guide_profile=GuideProfile(location="Pune", experience_years=6, languages=["English"]),
        ))

        assert user.id == TO_ID
        assert user.guide_profile.location == "Pune"
        assert user.guide_profile.experience_years == 6


    def test_update_writes_only_account_columns(self, pg_conn, cursor):
        cursor.description = [(c,) for c in ("user_id", "full_name")]
        cursor.fetchone.return_value = (TO_ID, "Rohan P")
        row = user_repo.update_user(pg_conn, TO_ID, {"full_name": "Rohan P", "role": "tourist"})

        sql, params = cursor.execute.call_args.args
        assert "full_name = %(full_name)s" in sql
        assert "role" not in sql
        assert params == {"full_name": "Rohan P", "user_id": TO_ID}
        assert row["full_name"] == "Rohan P"

    def test_profile_upsert_sets_only_given_columns(self, pg_conn, cursor):
        cursor.description = [(c,) for c in ("user_id", "bio")]
        cursor.fetchone.return_value = (TO_ID, "Forts")
        user_repo.upsert_guide_profile(pg_conn, TO_ID, {"bio": "Forts"})

        sql, params = cursor.execute.call_args.args
        assert "ON CONFLICT (user_id) DO UPDATE SET bio = EXCLUDED.bio" in sql
        assert "location" not in sql
        assert params == {"bio": "Forts", "user_id": TO_ID}

    def test_update_unknown_id_never_queries(self, conn_factory, pg_conn):
        store = PostgresUserStore(conn_factory)
        assert store.update("ghost", {"full_name": "G"}) is None
        assert store.update_guide_profile("ghost", {"bio": "x"}) is None
        pg_conn.cursor.assert_not_called()


BOOKING_ID = "1c1c1c1c-0000-4000-8000-000000000003"
SAVED_ID = "2d2d2d2d-0000-4000-8000-000000000004"
PLACE_ID = "3e3e3e3e-0000-4000-8000-000000000005"

BOOKING_COLUMNS = [
    "booking_id", "user_id", "booking_type", "origin", "destination",
    "departure_date", "return_date", "passengers", "room_count", "details", "created_at",
]


class TestBookingPersistence:

    def test_insert_wraps_details_as_json(self, pg_conn, cursor):
        cursor.description = [(c,) for c in BOOKING_COLUMNS]
        cursor.fetchone.return_value = (
            BOOKING_ID, FROM_ID, "transport", "Pune", "Goa",
            None, None, 2, None, {"pnr": "4521"}, CREATED,
        )
        booking_repo.insert_booking(pg_conn, {
            "user_id": FROM_ID, "booking_type": "transport",
            "origin": "Pune", "destination": "Goa", "passengers": 2, "details": {"pnr": "4521"},
        })

        params = cursor.execute.call_args.args[1]
        assert isinstance(params["details"], Json)
        assert params["room_count"] is None
        assert params["origin"] == "Pune"

    def test_list_filters_by_type(self, pg_conn, cursor):
        cursor.description = [(c,) for c in BOOKING_COLUMNS]
        cursor.fetchall.return_value = []
        booking_repo.list_bookings_for_user(pg_conn, FROM_ID, "hotel")
        sql, params = cursor.execute.call_args.args
        assert "AND booking_type = %s" in sql
        assert params == (FROM_ID, "hotel")

        booking_repo.list_bookings_for_user(pg_conn, FROM_ID)
        sql, params = cursor.execute.call_args.args
        assert "booking_type" not in sql
        assert params == (FROM_ID,)

    def test_store_maps_row(self, conn_factory, cursor):
        cursor.description = [(c,) for c in BOOKING_COLUMNS]
        cursor.fetchone.return_value = (
            BOOKING_ID, FROM_ID, "hotel", None, "Goa",
            None, None, None, 1, {}, CREATED,
        )
        store = PostgresBookingStore(conn_factory)
        stored = store.create(Booking(
            user_id=FROM_ID, booking_type=BookingType.hotel, destination="Goa", room_count=1,
        ))
        assert stored.id == BOOKING_ID
        assert stored.booking_type == BookingType.hotel
        assert stored.details == {}
        assert store.list_by_user("not-a-uuid", BookingType.hotel) == []


class TestSavedPlacePersistence:

    def test_insert_is_idempotent_on_user_and_place(self, pg_conn, cursor):
        cursor.description = [(c,) for c in ("saved_place_id", "user_id", "place_id", "created_at")]
        cursor.fetchone.return_value = (SAVED_ID, FROM_ID, PLACE_ID, CREATED)
        row = saved_place_repo.insert_saved_place(pg_conn, FROM_ID, PLACE_ID)

        sql, params = cursor.execute.call_args.args
        assert "ON CONFLICT (user_id, place_id)" in sql
        assert params == (FROM_ID, PLACE_ID)
        assert row["saved_place_id"] == SAVED_ID

    def test_store_maps_row_and_delete(self, conn_factory, cursor):
        cursor.description = [(c,) for c in ("saved_place_id", "user_id", "place_id", "created_at")]
        cursor.fetchone.return_value = (SAVED_ID, FROM_ID, PLACE_ID, CREATED)
        cursor.rowcount = 1
        store = PostgresSavedPlaceStore(conn_factory)

        saved = store.create(SavedPlace(user_id=FROM_ID, place_id=PLACE_ID))
        assert (saved.id, saved.place_id, saved.place) == (SAVED_ID, PLACE_ID, None)
        assert store.delete(SAVED_ID) is True
        cursor.rowcount = 0
        assert store.delete(SAVED_ID) is False
        assert store.delete("not-a-uuid") is False

class TestPool:

    @pytest.fixture
    def fake_pool(self, monkeypatch):
        from db import pool as pool_module

        fake = MagicMock()
        fake.closed = False
        fake.getconn.return_value.closed = 0
        monkeypatch.setattr(pool_module, "_pool", fake)
        return fake

    def test_commits_and_returns_connection(self, fake_pool):
        from db.pool import get_conn

        with get_conn() as conn:
            pass
        conn.commit.assert_called_once()
        fake_pool.putconn.assert_called_once_with(conn, close=False)

    def test_rolls_back_on_error(self, fake_pool):
        from db.pool import get_conn

        with pytest.raises(RuntimeError):
            with get_conn():
                raise RuntimeError("boom")
        conn = fake_pool.getconn.return_value
        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()

    def test_dropped_connection_is_discarded(self, fake_pool):
        from db.pool import get_conn

        conn = fake_pool.getconn.return_value
        conn.closed = 2
        with pytest.raises(psycopg2.OperationalError):
            with get_conn():
                raise psycopg2.OperationalError("server closed the connection")
        conn.rollback.assert_not_called()
        fake_pool.putconn.assert_called_once_with(conn, close=True)

    def test_ping(self, fake_pool):
        from db.pool import ping

        cur = fake_pool.getconn.return_value.cursor.return_value.__enter__.return_value
        cur.fetchone.return_value = (1,)
        assert ping() is True

        cur.execute.side_effect = psycopg2.OperationalError("down")
        assert ping() is False
