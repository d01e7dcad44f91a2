"""
schemas/connection.py
---------------------
Dataclass definitions for tourist → guide connection requests.

Lifecycle:
    pending ──(target guide)──► accepted   (terminal)
    pending ──(target guide)──► rejected   (terminal)
    pending ──(requesting tourist)──► withdrawn  (terminal)

Only `status` ever changes after creation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from schemas.user import UserSummary


class ConnectionStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    withdrawn = "withdrawn"

    @property
    def is_terminal(self) -> bool:
        return self is not ConnectionStatus.pending


# Statuses a guide may move a pending request to.
GUIDE_RESPONSES = frozenset({ConnectionStatus.accepted, ConnectionStatus.rejected})


@dataclass(frozen=True)
class Connection:
    id: str = ""                       # assigned by the store on create
    from_user_id: str = ""
    to_user_id: str = ""
    message: str = ""
    status: ConnectionStatus = ConnectionStatus.pending
    trip_details: Optional[str] = None
    budget: Optional[str] = None
    created_at: Optional[datetime] = None

    def involves(self, user_id: str) -> bool:
        return user_id in (self.from_user_id, self.to_user_id)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Connection":
        return cls(
            id=str(row["connection_id"]),
            from_user_id=str(row["from_user_id"]),
            to_user_id=str(row["to_user_id"]),
            message=row["message"],
            status=ConnectionStatus(row["status"]),
            trip_details=row.get("trip_details"),
            budget=row.get("budget"),
            created_at=row.get("created_at"),
        )


@dataclass(frozen=True)
class ConnectionDetails:
    """A connection joined with both participants' summaries."""
    connection: Connection
    from_user: Optional[UserSummary]
    to_user: Optional[UserSummary]


@dataclass
class ConnectionInbox:
    """
    One viewer's partition of the connections they take part in.

    outgoing_pending  requests the viewer sent that await the guide
    incoming_pending  requests addressed to the viewer that await their answer
    accepted / rejected / withdrawn  terminal connections, either side
    """
    outgoing_pending: list[Connection] = field(default_factory=list)
    incoming_pending: list[Connection] = field(default_factory=list)
    accepted: list[Connection] = field(default_factory=list)
    rejected: list[Connection] = field(default_factory=list)
    withdrawn: list[Connection] = field(default_factory=list)

    def buckets(self) -> dict[str, list[Connection]]:
        return {
            "outgoing_pending": self.outgoing_pending,
            "incoming_pending": self.incoming_pending,
            "accepted":         self.accepted,
            "rejected":         self.rejected,
            "withdrawn":        self.withdrawn,
        }


@dataclass
class ConnectionInboxView:
    """The same partition as ConnectionInbox, each entry joined with participant summaries."""
    outgoing_pending: list[ConnectionDetails] = field(default_factory=list)
    incoming_pending: list[ConnectionDetails] = field(default_factory=list)
    accepted: list[ConnectionDetails] = field(default_factory=list)
    rejected: list[ConnectionDetails] = field(default_factory=list)
    withdrawn: list[ConnectionDetails] = field(default_factory=list)

    def buckets(self) -> dict[str, list[ConnectionDetails]]:
        return {
            "outgoing_pending": self.outgoing_pending,
            "incoming_pending": self.incoming_pending,
            "accepted":         self.accepted,
            "rejected":         self.rejected,
            "withdrawn":        self.withdrawn,
        }
