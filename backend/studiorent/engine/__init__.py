"""Availability and pricing engine: pure functions over immutable inputs.

Nothing in this package performs I/O or reads application settings; callers
pass a ``BookingPolicy`` built from configuration.
"""

from studiorent.engine.availability import (
    MODE_AUTO_EXTENDED,
    MODE_GAP_FILLING,
    MODE_STANDARD,
    AvailabilityResult,
    Bounded,
    RangeCheck,
    Resolution,
    Unbounded,
    check_range,
    evaluate,
    resolve_availability,
)
from studiorent.engine.errors import BookingError, ConflictError, FieldError, ValidationError
from studiorent.engine.intervals import Interval, apply_cleaning_buffer, end_date_for
from studiorent.engine.policy import BookingPolicy, CleaningFeePolicy, DiscountTier
from studiorent.engine.pricing import PriceBreakdown, calculate_cleaning_fee, calculate_price, discount_percent_for

__all__ = [
    "MODE_AUTO_EXTENDED",
    "MODE_GAP_FILLING",
    "MODE_STANDARD",
    "AvailabilityResult",
    "BookingError",
    "BookingPolicy",
    "Bounded",
    "CleaningFeePolicy",
    "ConflictError",
    "DiscountTier",
    "FieldError",
    "Interval",
    "PriceBreakdown",
    "RangeCheck",
    "Resolution",
    "Unbounded",
    "ValidationError",
    "apply_cleaning_buffer",
    "calculate_cleaning_fee",
    "calculate_price",
    "check_range",
    "discount_percent_for",
    "end_date_for",
    "evaluate",
    "resolve_availability",
]
