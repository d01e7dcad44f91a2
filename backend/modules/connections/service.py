"""
modules/connections/service.py
-------------------------------
ConnectionService — the only entry point HTTP handlers use for connections.

Flow for every operation:
    load users / connection  →  lifecycle rule (pure)  →  store write

Status changes go through ConnectionStore.compare_and_set_status with
``expected=pending``.  When another request wins the race the write returns
None; the connection is re-read and re-validated, which surfaces
AlreadyFinalized to the loser.  The loop is bounded by
config.CONNECTION_CAS_MAX_ATTEMPTS.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import config
from db.stores.base import ConnectionStore
from modules.connections import lifecycle
from modules.errors import AlreadyFinalized, NotFound
from modules.observability.audit_log import AuditLog
from modules.users.directory import UserDirectory
from schemas.connection import (
    Connection,
    ConnectionDetails,
    ConnectionInboxView,
    ConnectionStatus,
)
from schemas.user import User, UserSummary

logger = logging.getLogger(__name__)


class ConnectionService:

    def __init__(
        self,
        store: ConnectionStore,
        users: UserDirectory,
        audit: Optional[AuditLog] = None,
        max_attempts: Optional[int] = None,
    ) -> None:
        self._store = store
        self._users = users
        self._audit = audit
        self._max_attempts = max(1, max_attempts or config.CONNECTION_CAS_MAX_ATTEMPTS)

    # ── operations ────────────────────────────────────────────────────────

    def request(
        self,
        from_user_id: str,
        to_user_id: str,
        message: str,
        trip_details: Optional[str] = None,
        budget: Optional[str] = None,
    ) -> ConnectionDetails:
        """A tourist asks a guide to connect.  Returns the stored pending request."""
        from_user = self._users.get(from_user_id)
        to_user = self._users.get(to_user_id)
        draft = lifecycle.validate_create(from_user, to_user, message, trip_details, budget)

        stored = self._store.create(draft)
        logger.info("connection %s requested: %s -> %s", stored.id, from_user.id, to_user.id)
        self._record("connection_requested", stored, actor_id=from_user.id)
        return ConnectionDetails(
            connection=stored,
            from_user=from_user.summary(),
            to_user=to_user.summary(),
        )

    def respond(
        self,
        connection_id: str,
        acting_user_id: str,
        new_status: str | ConnectionStatus,
    ) -> Connection:
        """The target guide accepts or rejects a pending request."""
        actor = self._users.get(acting_user_id)
        updated = self._transition(
            connection_id,
            actor,
            lambda conn: lifecycle.validate_transition(conn, actor, new_status),
        )
        self._record("connection_responded", updated, actor_id=actor.id)
        return updated

    def withdraw(self, connection_id: str, acting_user_id: str) -> Connection:
        """The requesting tourist cancels their own pending request."""
        actor = self._users.get(acting_user_id)
        updated = self._transition(
            connection_id,
            actor,
            lambda conn: lifecycle.validate_withdrawal(conn, actor),
        )
        self._record("connection_withdrawn", updated, actor_id=actor.id)
        return updated

    def list_for_viewer(self, viewer_id: str) -> ConnectionInboxView:
        """The viewer's connections, partitioned and joined with participant summaries."""
        viewer = self._users.get(viewer_id)
        inbox = lifecycle.classify_for_viewer(self._store.list_by_participant(viewer.id), viewer.id)

        summaries: dict[str, Optional[UserSummary]] = {viewer.id: viewer.summary()}
        return ConnectionInboxView(**{
            name: [self._details(conn, summaries) for conn in bucket]
            for name, bucket in inbox.buckets().items()
        })

    def get(self, connection_id: str) -> Connection:
        connection = self._store.get_by_id(connection_id)
        if connection is None:
            raise NotFound("connection", connection_id)
        return connection

    # ── internals ─────────────────────────────────────────────────────────

    def _transition(
        self,
        connection_id: str,
        actor: User,
        decide: Callable[[Connection], Connection],
    ) -> Connection:
        last_seen: Optional[Connection] = None
        for attempt in range(1, self._max_attempts + 1):
            current = self.get(connection_id)
            proposed = decide(current)
            stored = self._store.compare_and_set_status(
                connection_id, expected=current.status, status=proposed.status
            )
            if stored is not None:
                logger.info(
                    "connection %s %s -> %s by %s",
                    connection_id, current.status.value, stored.status.value, actor.id,
                )
                return stored
            last_seen = current
            logger.warning(
                "connection %s changed under %s (attempt %d/%d)",
                connection_id, actor.id, attempt, self._max_attempts,
            )
            self._record("connection_race_lost", current, actor_id=actor.id, attempt=attempt)

        # Out of attempts; report whatever the store holds now.
        final = self._store.get_by_id(connection_id) or last_seen
        raise AlreadyFinalized(connection_id, final.status.value)

    def _details(
        self,
        connection: Connection,
        cache: dict[str, Optional[UserSummary]],
    ) -> ConnectionDetails:
        def summary(user_id: str) -> Optional[UserSummary]:
            if user_id not in cache:
                user = self._users.find(user_id)
                cache[user_id] = user.summary() if user else None
            return cache[user_id]

        return ConnectionDetails(
            connection=connection,
            from_user=summary(connection.from_user_id),
            to_user=summary(connection.to_user_id),
        )

    def _record(self, event_type: str, connection: Connection, **extra) -> None:
        if self._audit is not None:
            self._audit.record(event_type, connection, **extra)
