"""
modules/errors.py
------------------
Typed error hierarchy shared by every service.

Services raise these; they never format user-facing text or pick HTTP
status codes.  The API layer (api/errors.py) maps each class to a response.

    MarketplaceError
    ├── NotFound              referenced user / place / itinerary / connection missing
    ├── InvalidRecord         record failed field validation
    ├── UsernameTaken         registration with an existing username
    ├── InvalidRole           connection endpoints have the wrong roles
    ├── SelfConnection        initiator == target
    ├── EmptyMessage          connection request without message text
    ├── NotAuthorized         actor may not transition this connection
    ├── AlreadyFinalized      transition attempted on a non-pending connection
    └── InvalidTargetStatus   transition to a status the operation cannot set
"""

from __future__ import annotations


class MarketplaceError(Exception):
    """Base class.  ``code`` is a stable machine-readable identifier."""

    code: str = "marketplace_error"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.code)
        self.detail = detail or self.code


class NotFound(MarketplaceError):
    code = "NotFound"

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} {entity_id!r} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidRecord(MarketplaceError):
    code = "InvalidRecord"

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class UsernameTaken(MarketplaceError):
    code = "UsernameTaken"

    def __init__(self, username: str) -> None:
        super().__init__(f"username {username!r} is already registered")
        self.username = username


class InvalidRole(MarketplaceError):
    code = "InvalidRole"


class SelfConnection(MarketplaceError):
    code = "SelfConnection"


class EmptyMessage(MarketplaceError):
    code = "EmptyMessage"


class NotAuthorized(MarketplaceError):
    code = "NotAuthorized"


class AlreadyFinalized(MarketplaceError):
    code = "AlreadyFinalized"

    def __init__(self, connection_id: str, status: str) -> None:
        super().__init__(f"connection {connection_id!r} is already {status}")
        self.connection_id = connection_id
        self.status = status


class InvalidTargetStatus(MarketplaceError):
    code = "InvalidTargetStatus"
