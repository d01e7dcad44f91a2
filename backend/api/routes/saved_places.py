"""
api/routes/saved_places.py
---------------------------
Places a user has bookmarked from the catalogue.

    POST   /v1/saved-places
    GET    /v1/users/{user_id}/saved-places
    DELETE /v1/saved-places/{saved_place_id}?userId=
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response

from api.deps import Services, get_services
from api.models import CamelModel
from api.serializers import ser_saved_place

router = APIRouter()


class SavePlaceRequest(CamelModel):
    user_id: str
    place_id: str


@router.post("/saved-places", status_code=201, summary="Bookmark a place")
def save_place(req: SavePlaceRequest, services: Services = Depends(get_services)) -> dict:
    return ser_saved_place(services.saved_places.save(req.user_id, req.place_id))


@router.get("/users/{user_id}/saved-places", summary="The user's bookmarks, most recent first")
def list_saved_places(user_id: str, services: Services = Depends(get_services)) -> list[dict]:
    return [ser_saved_place(s) for s in services.saved_places.list_for_user(user_id)]


@router.delete("/saved-places/{saved_place_id}", status_code=204, summary="Remove a bookmark")
def remove_saved_place(
    saved_place_id: str,
    user_id: str = Query(..., alias="userId"),
    services: Services = Depends(get_services),
) -> Response:
    services.saved_places.remove(saved_place_id, user_id)
    return Response(status_code=204)
