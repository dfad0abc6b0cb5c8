"""Async Stripe API wrapper for booking payments."""

import logging
from decimal import Decimal

import stripe
from stripe import StripeClient

from studiorent.config import settings
from studiorent.models.booking import Booking
from studiorent.models.room import Room

logger = logging.getLogger(__name__)


def get_stripe_client() -> StripeClient:
    """Create a StripeClient instance with async HTTP support."""
    return StripeClient(
        settings.stripe_secret_key,
        http_client=stripe.HTTPXClient(),
    )


def to_minor_units(amount: Decimal) -> int:
    """Stripe amounts are integers in the currency's smallest unit (halalas for SAR)."""
    return int((amount * 100).to_integral_value())


async def create_booking_checkout_session(
    booking: Booking,
    room: Room,
    customer_email: str | None,
    success_url: str,
    cancel_url: str,
) -> stripe.checkout.Session:
    """Create a one-off Stripe Checkout Session for a pending booking."""
    client = get_stripe_client()
    logger.info("Creating checkout session for booking %s (%s)", booking.id, booking.total_amount)

    description = f"{booking.start_date.isoformat()} to {booking.end_date.isoformat()} ({booking.duration_days} days)"
    if booking.cleaning_service:
        description += ", cleaning service included"

    params = {
        "mode": "payment",
        "line_items": [
            {
                "price_data": {
                    "currency": settings.currency,
                    "product_data": {"name": room.name, "description": description},
                    "unit_amount": to_minor_units(booking.total_amount),
                },
                "quantity": 1,
            }
        ],
        "success_url": success_url,
        "cancel_url": cancel_url,
        "metadata": {"booking_id": str(booking.id), "room_id": str(room.id)},
    }
    if customer_email:
        params["customer_email"] = customer_email

    return await client.v1.checkout.sessions.create_async(params=params)


def session_booking_id(session) -> str | None:
    """The booking ID stored in a Checkout Session's metadata, if any."""
    metadata = getattr(session, "metadata", None) or {}
    return metadata["booking_id"] if "booking_id" in metadata else None


async def retrieve_checkout_session(session_id: str) -> stripe.checkout.Session:
    """Fetch a Checkout Session to read its payment status."""
    client = get_stripe_client()
    return await client.v1.checkout.sessions.retrieve_async(session_id)


async def expire_checkout_session(session_id: str) -> stripe.checkout.Session:
    """Expire an open Checkout Session so it can no longer be paid."""
    client = get_stripe_client()
    logger.info("Expiring checkout session %s", session_id)
    return await client.v1.checkout.sessions.expire_async(session_id)


def construct_webhook_event(payload: bytes, sig_header: str) -> stripe.Event:
    """Verify and construct a Stripe webhook event (synchronous)."""
    client = get_stripe_client()
    return client.construct_event(payload, sig_header, settings.stripe_webhook_secret)
