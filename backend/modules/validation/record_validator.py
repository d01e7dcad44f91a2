"""
modules/validation/record_validator.py
---------------------------------------
Data-quality guards applied before any user, place, itinerary or booking record
is written to a store.

  Coordinates:
    ✓ Latitude in [-90, 90]
    ✓ Longitude in [-180, 180]

  User:
    ✓ Non-empty username / full_name / email
    ✓ Role is "tourist" or "guide"
    ✓ Guide profile only for guides; experience_years >= 0; rating numeric in [0, 5]
    ✓ Partial updates check only the fields supplied

  Place:
    ✓ Non-empty name / category / location
    ✓ Valid coordinates, not both exactly 0.0 (likely missing)

  Itinerary:
    ✓ Non-empty title
    ✓ end_date >= start_date

  Itinerary stop:
    ✓ day >= 1, position >= 0

  Booking:
    ✓ Type is "hotel" or "transport"
    ✓ Transport has from + to; hotel has to
    ✓ passengers, room_count >= 1; return_date >= departure_date

Usage:
    from modules.validation import validate_place, raise_if_invalid

    raise_if_invalid(validate_place(record))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from modules.errors import InvalidRecord
from schemas.booking import BookingType
from schemas.user import Role


# ── Result dataclass ───────────────────────────────────────────────────────────

@dataclass
class ValidationResult:
    """
    Outcome of a single validation run.

    Attributes:
        valid:  True iff there are zero errors.
        errors: Human-readable list of failure reasons.
        record: The input record dict (for logging purposes).
    """
    valid: bool
    errors: list[str] = field(default_factory=list)
    record: dict = field(default_factory=dict, repr=False)

    def __bool__(self) -> bool:
        return self.valid


def _result(errors: list[str], record: dict[str, Any]) -> ValidationResult:
    return ValidationResult(valid=len(errors) == 0, errors=errors, record=record)


def raise_if_invalid(result: ValidationResult) -> None:
    """Raise InvalidRecord carrying every collected error."""
    if not result.valid:
        raise InvalidRecord(result.errors)


def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()


# ── Coordinates ────────────────────────────────────────────────────────────────

def coordinate_errors(lat: Any, lon: Any) -> list[str]:
    """Return range errors for a lat/lon pair (empty list when valid)."""
    try:
        lat = float(lat)
        lon = float(lon)
    except (TypeError, ValueError):
        return [f"latitude/longitude must be numeric (got lat={lat!r}, lon={lon!r})"]

    errors: list[str] = []
    if not (-90.0 <= lat <= 90.0):
        errors.append(f"latitude={lat} is outside valid range [-90, 90]")
    if not (-180.0 <= lon <= 180.0):
        errors.append(f"longitude={lon} is outside valid range [-180, 180]")
    return errors


def validate_coordinates(record: dict[str, Any]) -> ValidationResult:
    return _result(coordinate_errors(record.get("latitude"), record.get("longitude")), record)


# ── User validation ────────────────────────────────────────────────────────────

def rating_errors(rating: Any) -> list[str]:
    """Errors for a guide rating; None means "not yet rated"."""
    if rating is None:
        return []
    try:
        value = float(rating)
    except (TypeError, ValueError):
        return [f"guide_profile.rating={rating!r} must be numeric"]
    if not (0.0 <= value <= 5.0):
        return [f"guide_profile.rating={value} is outside valid range [0, 5]"]
    return []


def guide_profile_errors(profile: dict[str, Any], partial: bool = False) -> list[str]:
    """
    Field errors for a guide profile dict.

    With ``partial=True`` only the keys present are checked (profile updates).
    """
    errors: list[str] = []
    if (not partial or "location" in profile) and _blank(profile.get("location")):
        errors.append("guide_profile.location must not be empty")
    if not partial or "experience_years" in profile:
        exp = profile.get("experience_years", 0)
        if not isinstance(exp, int) or isinstance(exp, bool) or exp < 0:
            errors.append(f"guide_profile.experience_years={exp!r} must be an integer >= 0")
    errors.extend(rating_errors(profile.get("rating")))
    return errors


def validate_user(record: dict[str, Any]) -> ValidationResult:
    """Validate a registration record (``guide_profile`` may be None or a dict)."""
    errors: list[str] = []

    for key in ("username", "full_name", "email"):
        if _blank(record.get(key)):
            errors.append(f"{key} must not be empty")

    role = record.get("role")
    try:
        role = Role(role)
    except ValueError:
        errors.append(f"role={role!r} must be one of 'tourist' | 'guide'")
        role = None

    profile = record.get("guide_profile")
    if profile is not None:
        if role is Role.tourist:
            errors.append("guide_profile is only accepted for role 'guide'")
        errors.extend(guide_profile_errors(profile))

    return _result(errors, record)


def validate_user_update(record: dict[str, Any]) -> ValidationResult:
    """Validate the fields of a partial account update; absent keys are left alone."""
    errors = [
        f"{key} must not be empty"
        for key in ("full_name", "email")
        if key in record and _blank(record[key])
    ]
    return _result(errors, record)


def validate_guide_profile_update(record: dict[str, Any]) -> ValidationResult:
    return _result(guide_profile_errors(record, partial=True), record)


# ── Place validation ───────────────────────────────────────────────────────────

def validate_place(record: dict[str, Any]) -> ValidationResult:
    """Validate a catalogue entry before it is stored."""
    errors: list[str] = []

    for key in ("name", "category", "location"):
        if _blank(record.get(key)):
            errors.append(f"{key} must not be empty")

    lat = record.get("latitude")
    lon = record.get("longitude")
    coord_errors = coordinate_errors(lat, lon)
    errors.extend(coord_errors)
    if not coord_errors and float(lat) == 0.0 and float(lon) == 0.0:
        errors.append(
            "latitude=0.0 and longitude=0.0: likely a missing/default value"
        )

    return _result(errors, record)


# ── Itinerary validation ───────────────────────────────────────────────────────

def validate_itinerary(record: dict[str, Any]) -> ValidationResult:
    errors: list[str] = []

    if _blank(record.get("title")):
        errors.append("title must not be empty")

    start = record.get("start_date")
    end = record.get("end_date")
    if start is not None and end is not None:
        # Accept date objects or YYYY-MM-DD strings
        try:
            start_d = start if isinstance(start, date) else date.fromisoformat(str(start))
            end_d = end if isinstance(end, date) else date.fromisoformat(str(end))
            if end_d < start_d:
                errors.append(f"end_date={end_d} is before start_date={start_d}")
        except ValueError:
            errors.append(
                f"start_date={start!r} or end_date={end!r} is not a valid ISO-8601 date"
            )

    return _result(errors, record)


def validate_stop(record: dict[str, Any]) -> ValidationResult:
    errors: list[str] = []

    day = record.get("day")
    if not isinstance(day, int) or day < 1:
        errors.append(f"day={day!r} must be a positive integer")

    position = record.get("position")
    if position is not None and (not isinstance(position, int) or position < 0):
        errors.append(f"position={position!r} must be an integer >= 0")

    return _result(errors, record)


# ── Booking validation ─────────────────────────────────────────────────────────

def _positive_int_errors(record: dict[str, Any], key: str) -> list[str]:
    value = record.get(key)
    if value is None:
        return []
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        return [f"{key}={value!r} must be a positive integer"]
    return []


def validate_booking(record: dict[str, Any]) -> ValidationResult:
    """
    Validate a hotel or transport booking.

    Transport needs both ends of the journey; a hotel needs its destination.
    """
    errors: list[str] = []

    booking_type = record.get("booking_type")
    try:
        booking_type = BookingType(booking_type)
    except ValueError:
        errors.append(f"type={booking_type!r} must be one of 'hotel' | 'transport'")
        booking_type = None

    if booking_type is BookingType.transport and _blank(record.get("origin")):
        errors.append("from must not be empty for a transport booking")
    if booking_type is not None and _blank(record.get("destination")):
        errors.append(f"to must not be empty for a {booking_type.value} booking")

    errors.extend(_positive_int_errors(record, "passengers"))
    errors.extend(_positive_int_errors(record, "room_count"))

    departure = record.get("departure_date")
    return_date = record.get("return_date")
    if departure is not None and return_date is not None and return_date < departure:
        errors.append(f"return_date={return_date} is before departure_date={departure}")

    details = record.get("details")
    if details is not None and not isinstance(details, dict):
        errors.append("details must be a JSON object")

    return _result(errors, record)
