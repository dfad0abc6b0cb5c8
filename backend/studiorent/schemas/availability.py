"""Pydantic v2 response schemas for availability, calendar and price quotes."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AvailabilityResponse(BaseModel):
    """Live feedback for the date picker.

    ``max_available_days`` is ``None`` when ``unbounded`` is true.
    """

    room_id: uuid.UUID
    start_date: date
    duration_days: int
    end_date: date
    is_valid: bool
    conflict_date: date | None = None
    max_available_days: int | None = None
    unbounded: bool
    mode: str
    recommended_days: int | None = None

    model_config = ConfigDict(from_attributes=True)


class PriceBreakdownResponse(BaseModel):
    total_price: Decimal
    original_price: Decimal
    daily_rate: Decimal
    days: int
    savings: Decimal
    savings_percent: int
    cleaning_fee: Decimal | None = None
    cleaning_periods: int | None = None
    cleaning_rate_type: str | None = None

    model_config = ConfigDict(from_attributes=True)


class CalendarInterval(BaseModel):
    """An occupied span without any guest data."""

    start_date: date
    end_date: date
    status: str | None = None

    model_config = ConfigDict(from_attributes=True)


class CalendarResponse(BaseModel):
    room_id: uuid.UUID
    bookings: list[CalendarInterval]
    availability_blocks: list[CalendarInterval]
    cleaning_buffer_days: int


# ---------------------------------------------------------------------------
# Admin availability blocks
# ---------------------------------------------------------------------------


class BlockCreate(BaseModel):
    start_date: date
    end_date: date
    reason: str = Field("maintenance", min_length=1, max_length=255)

    @model_validator(mode="after")
    def check_dates(self) -> "BlockCreate":
        """Blocks are inclusive, so a single-day block has end_date == start_date."""
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class BlockResponse(BaseModel):
    id: uuid.UUID
    room_id: uuid.UUID
    start_date: date
    end_date: date
    reason: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
