"""
api/serializers.py
------------------
Dataclass → camelCase JSON dicts for every response body.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from schemas.booking import Booking
from schemas.connection import Connection, ConnectionDetails, ConnectionInboxView
from schemas.itinerary import Itinerary, ItineraryStop
from schemas.place import Place, Ranked, SavedPlace
from schemas.user import User, UserSummary


def _iso(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def ser_user(user: User) -> dict:
    profile = user.guide_profile
    return {
        "id":        user.id,
        "username":  user.username,
        "fullName":  user.full_name,
        "email":     user.email,
        "phone":     user.phone,
        "role":      user.role.value,
        "latitude":  user.latitude,
        "longitude": user.longitude,
        "createdAt": _iso(user.created_at),
        "guideProfile": {
            "location":        profile.location,
            "experienceYears": profile.experience_years,
            "languages":       profile.languages,
            "specialties":     profile.specialties,
            "rating":          profile.rating,
            "bio":             profile.bio,
        } if profile else None,
    }


def ser_summary(summary: Optional[UserSummary]) -> Optional[dict]:
    if summary is None:
        return None
    return {
        "id":      summary.id,
        "name":    summary.name,
        "role":    summary.role.value,
        "contact": summary.contact,
    }


def ser_place(place: Place) -> dict:
    return {
        "id":          place.id,
        "name":        place.name,
        "category":    place.category,
        "location":    place.location,
        "latitude":    place.latitude,
        "longitude":   place.longitude,
        "description": place.description,
        "imageUrl":    place.image_url,
    }


def ser_saved_place(saved: SavedPlace) -> dict:
    return {
        "id":        saved.id,
        "userId":    saved.user_id,
        "placeId":   saved.place_id,
        "createdAt": _iso(saved.created_at),
        "place":     ser_place(saved.place) if saved.place else None,
    }


def ser_ranked(hit: Ranked, ser) -> dict:
    return {**ser(hit.item), "distanceKm": hit.distance_km}


def ser_stop(stop: ItineraryStop) -> dict:
    return {
        "id":          stop.id,
        "itineraryId": stop.itinerary_id,
        "placeId":     stop.place_id,
        "day":         stop.day,
        "order":       stop.position,
        "place":       ser_place(stop.place) if stop.place else None,
    }


def ser_itinerary(itinerary: Itinerary, with_stops: bool = False) -> dict:
    body = {
        "id":          itinerary.id,
        "userId":      itinerary.user_id,
        "title":       itinerary.title,
        "description": itinerary.description,
        "startDate":   _iso(itinerary.start_date),
        "endDate":     _iso(itinerary.end_date),
        "createdAt":   _iso(itinerary.created_at),
    }
    if with_stops:
        body["stops"] = [ser_stop(s) for s in itinerary.stops]
    return body


def ser_connection(connection: Connection) -> dict:
    return {
        "id":          connection.id,
        "fromUserId":  connection.from_user_id,
        "toUserId":    connection.to_user_id,
        "status":      connection.status.value,
        "message":     connection.message,
        "tripDetails": connection.trip_details,
        "budget":      connection.budget,
        "createdAt":   _iso(connection.created_at),
    }


def ser_connection_details(details: ConnectionDetails) -> dict:
    return {
        **ser_connection(details.connection),
        "fromUser": ser_summary(details.from_user),
        "toUser":   ser_summary(details.to_user),
    }


def ser_inbox(inbox: ConnectionInboxView) -> dict:
    return {
        "outgoingPending": [ser_connection_details(d) for d in inbox.outgoing_pending],
        "incomingPending": [ser_connection_details(d) for d in inbox.incoming_pending],
        "accepted":        [ser_connection_details(d) for d in inbox.accepted],
        "rejected":        [ser_connection_details(d) for d in inbox.rejected],
        "withdrawn":       [ser_connection_details(d) for d in inbox.withdrawn],
    }


def ser_booking(booking: Booking) -> dict:
    return {
        "id":            booking.id,
        "userId":        booking.user_id,
        "type":          booking.booking_type.value,
        "from":          booking.origin,
        "to":            booking.destination,
        "departureDate": _iso(booking.departure_date),
        "returnDate":    _iso(booking.return_date),
        "passengers":    booking.passengers,
        "roomCount":     booking.room_count,
        "details":       booking.details,
        "createdAt":     _iso(booking.created_at),
    }
