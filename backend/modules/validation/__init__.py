"""
modules/validation package — data quality guards before any store write.
"""
from modules.validation.record_validator import (
    ValidationResult,
    coordinate_errors,
    raise_if_invalid,
    rating_errors,
    validate_booking,
    validate_coordinates,
    validate_guide_profile_update,
    validate_itinerary,
    validate_place,
    validate_stop,
    validate_user,
    validate_user_update,
)

__all__ = [
    "ValidationResult",
    "coordinate_errors",
    "raise_if_invalid",
    "rating_errors",
    "validate_booking",
    "validate_coordinates",
    "validate_guide_profile_update",
    "validate_itinerary",
    "validate_place",
    "validate_stop",
    "validate_user",
    "validate_user_update",
]
