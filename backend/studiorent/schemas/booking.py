"""Pydantic v2 request/response schemas for booking endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from studiorent.schemas.guest import GuestResponse
from studiorent.schemas.room import RoomResponse

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BookingSubmission(BaseModel):
    """The completed booking wizard as posted by the frontend.

    Field content is checked by the wizard validators, which report
    bilingual field-scoped errors (HTTP 400). Accepts camelCase or
    snake_case keys.
    """

    room_id: uuid.UUID
    start_date: date
    duration_days: int
    cleaning_service: bool = False
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    id_type: str | None = None
    id_number: str | None = None
    nationality: str | None = None
    terms_accepted: bool = False
    signature: str | None = None
    payment_method: str = Field("bank_transfer", pattern="^(stripe|bank_transfer|cash)$")
    notes: str | None = Field(None, max_length=2000)
    locale: str = Field("en", pattern="^(en|ar)$")
    # Total the client displayed; cross-checked against the server price
    total_price: Decimal | None = Field(None, ge=0)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingCancelRequest(BaseModel):
    reason: str | None = Field(None, max_length=1000)


class BookingConfirmRequest(BaseModel):
    """Posted by the checkout success page with the IDs Stripe sent it back with."""

    booking_id: uuid.UUID
    session_id: str = Field(..., min_length=1, max_length=255)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingResponse(BaseModel):
    """Booking as stored, including its pricing snapshot."""

    id: uuid.UUID
    room_id: uuid.UUID
    guest_id: uuid.UUID
    start_date: date
    end_date: date
    duration_days: int
    status: str
    rate_at_booking: Decimal
    original_amount: Decimal
    discount_percent: int
    cleaning_service: bool
    cleaning_fee: Decimal
    total_amount: Decimal
    payment_method: str
    payment_status: str
    expires_at: datetime | None = None
    guest_locale: str
    confirmed_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookingDetailResponse(BookingResponse):
    """Admin view with nested room and guest, plus the stored notes."""

    notes: str | None = None
    room: RoomResponse | None = None
    guest: GuestResponse | None = None


class BookingListResponse(BaseModel):
    """Paginated list of bookings."""

    items: list[BookingResponse]
    total: int


class CheckoutResponse(BaseModel):
    """A pending booking plus the Stripe Checkout page to pay for it."""

    booking: BookingResponse
    checkout_url: str
    session_id: str


class ExpireResponse(BaseModel):
    expired: int
