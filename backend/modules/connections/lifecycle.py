"""
modules/connections/lifecycle.py
---------------------------------
Pure decision logic for tourist → guide connections.  No I/O.

Every rule about who may create, answer, withdraw or see a connection lives
here; ConnectionService and the API delegate rather than re-deriving them.

State machine:
    pending ─► accepted    actor must be the target guide (to_user_id)
    pending ─► rejected    actor must be the target guide (to_user_id)
    pending ─► withdrawn   actor must be the requesting tourist (from_user_id)
    terminal states have no outgoing transitions.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable, Optional, Union

from modules.errors import (
    AlreadyFinalized,
    EmptyMessage,
    InvalidRole,
    InvalidTargetStatus,
    NotAuthorized,
    SelfConnection,
)
from schemas.connection import (
    GUIDE_RESPONSES,
    Connection,
    ConnectionInbox,
    ConnectionStatus,
)
from schemas.user import Role, User


def validate_create(
    from_user: User,
    to_user: User,
    message: str,
    trip_details: Optional[str] = None,
    budget: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Connection:
    """
    Check a new request and return the pending Connection to persist.

    Raises SelfConnection, InvalidRole or EmptyMessage, checked in that order.
    The returned value has no id yet; the store assigns one.
    """
    if from_user.id == to_user.id:
        raise SelfConnection(f"user {from_user.id!r} cannot connect with themselves")
    if from_user.role != Role.tourist:
        raise InvalidRole(f"requester {from_user.id!r} must be a tourist, not {from_user.role.value}")
    if to_user.role != Role.guide:
        raise InvalidRole(f"target {to_user.id!r} must be a guide, not {to_user.role.value}")
    if message is None or not message.strip():
        raise EmptyMessage("a connection request needs a message")

    return Connection(
        from_user_id=from_user.id,
        to_user_id=to_user.id,
        message=message,
        status=ConnectionStatus.pending,
        trip_details=trip_details,
        budget=budget,
        created_at=now or datetime.now(timezone.utc),
    )


def _parse_status(value: Union[str, ConnectionStatus]) -> Optional[ConnectionStatus]:
    try:
        return ConnectionStatus(value)
    except ValueError:
        return None


def validate_transition(
    connection: Connection,
    acting_user: User,
    new_status: Union[str, ConnectionStatus],
) -> Connection:
    """
    Check a guide's answer and return the connection with its new status.

    Raises NotAuthorized unless the actor is the target guide, AlreadyFinalized
    when the connection has left ``pending``, and InvalidTargetStatus unless
    ``new_status`` is ``accepted`` or ``rejected``.
    """
    if acting_user.id != connection.to_user_id:
        raise NotAuthorized(
            f"only the target guide may answer connection {connection.id!r}"
        )
    if connection.status.is_terminal:
        raise AlreadyFinalized(connection.id, connection.status.value)

    target = _parse_status(new_status)
    if target not in GUIDE_RESPONSES:
        raise InvalidTargetStatus(
            f"status {getattr(new_status, 'value', new_status)!r} is not one of 'accepted' | 'rejected'"
        )
    return replace(connection, status=target)


def validate_withdrawal(connection: Connection, acting_user: User) -> Connection:
    """
    Check a tourist cancelling their own pending request.

    Raises NotAuthorized unless the actor sent the request and
    AlreadyFinalized when it is no longer pending.
    """
    if acting_user.id != connection.from_user_id:
        raise NotAuthorized(
            f"only the requesting tourist may withdraw connection {connection.id!r}"
        )
    if connection.status.is_terminal:
        raise AlreadyFinalized(connection.id, connection.status.value)
    return replace(connection, status=ConnectionStatus.withdrawn)


def classify_for_viewer(connections: Iterable[Connection], viewer_id: str) -> ConnectionInbox:
    """
    Partition ``connections`` into the viewer's inbox buckets.

    A pending connection is ``outgoing_pending`` for its requester and
    ``incoming_pending`` for its target, never both.  Connections the viewer
    does not take part in are dropped.  Buckets are ordered by created_at,
    then id.
    """
    inbox = ConnectionInbox()
    ordered = sorted(
        (c for c in connections if c.involves(viewer_id)),
        key=lambda c: (c.created_at or datetime.min.replace(tzinfo=timezone.utc), c.id),
    )
    for conn in ordered:
        if conn.status == ConnectionStatus.pending:
            if conn.from_user_id == viewer_id:
                inbox.outgoing_pending.append(conn)
            else:
                inbox.incoming_pending.append(conn)
        elif conn.status == ConnectionStatus.accepted:
            inbox.accepted.append(conn)
        elif conn.status == ConnectionStatus.rejected:
            inbox.rejected.append(conn)
        else:
            inbox.withdrawn.append(conn)
    return inbox
