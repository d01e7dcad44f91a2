"""
api/routes/connections.py
--------------------------
Tourist → guide connection requests.

Flow:
  1. POST  /v1/connections                  tourist sends a request (pending)
  2. PATCH /v1/connections/{id}             target guide accepts / rejects
  3. POST  /v1/connections/{id}/withdraw    tourist cancels a pending request
  4. GET   /v1/users/{user_id}/connections  viewer's inbox, bucketed

The acting user is always explicit in the request body.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import Field

from api.deps import Services, get_services
from api.models import CamelModel
from api.serializers import ser_connection, ser_connection_details, ser_inbox

router = APIRouter()


# ── Request schemas ────────────────────────────────────────────────────────────

class ConnectionRequest(CamelModel):
    from_user_id: str
    to_user_id: str
    message: str = ""
    trip_details: Optional[str] = None
    budget: Optional[str] = None


class RespondRequest(CamelModel):
    acting_user_id: str
    status: str = Field(..., description="accepted | rejected")


class WithdrawRequest(CamelModel):
    acting_user_id: str


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.post("/connections", status_code=201, summary="Request a connection with a guide")
def request_connection(req: ConnectionRequest, services: Services = Depends(get_services)) -> dict:
    details = services.connections.request(
        from_user_id=req.from_user_id,
        to_user_id=req.to_user_id,
        message=req.message,
        trip_details=req.trip_details,
        budget=req.budget,
    )
    return ser_connection_details(details)


@router.patch("/connections/{connection_id}", summary="Accept or reject a pending request")
def respond(
    connection_id: str,
    req: RespondRequest,
    services: Services = Depends(get_services),
) -> dict:
    connection = services.connections.respond(connection_id, req.acting_user_id, req.status)
    return ser_connection(connection)


@router.post("/connections/{connection_id}/withdraw", summary="Withdraw a pending request")
def withdraw(
    connection_id: str,
    req: WithdrawRequest,
    services: Services = Depends(get_services),
) -> dict:
    return ser_connection(services.connections.withdraw(connection_id, req.acting_user_id))


@router.get("/users/{user_id}/connections", summary="The user's connections, bucketed")
def list_connections(user_id: str, services: Services = Depends(get_services)) -> dict:
    return ser_inbox(services.connections.list_for_viewer(user_id))
