"""Stripe webhook event handlers for booking checkout sessions."""

import logging
import uuid

import stripe
from sqlalchemy.ext.asyncio import AsyncSession

from studiorent.engine import ConflictError
from studiorent.models.booking import Booking
from studiorent.payments.stripe_client import session_booking_id
from studiorent.services.booking_service import (
    STATUS_CANCELLED,
    STATUS_CONFIRMED,
    cancel_booking,
    confirm_payment,
    get_booking,
    get_booking_by_stripe_session,
)

logger = logging.getLogger(__name__)


async def _find_booking(db: AsyncSession, session) -> Booking | None:
    """Match a Checkout Session to its booking by session ID, then by metadata."""
    booking = await get_booking_by_stripe_session(db, session.id)
    if booking is not None:
        return booking

    booking_id = session_booking_id(session)
    if not booking_id:
        return None
    try:
        return await get_booking(db, uuid.UUID(booking_id))
    except ValueError:
        logger.warning("Checkout session %s carries a malformed booking_id %r", session.id, booking_id)
        return None


async def handle_checkout_session_completed(db: AsyncSession, event: stripe.Event) -> None:
    """Handle checkout.session.completed: confirm the paid booking."""
    session = event.data.object

    booking = await _find_booking(db, session)
    if booking is None:
        logger.warning("No booking found for checkout session %s", session.id)
        return

    if booking.status == STATUS_CONFIRMED:
        logger.info("Booking %s already confirmed, skipping", booking.id)
        return
    if booking.status == STATUS_CANCELLED:
        logger.warning("Checkout session %s completed for cancelled booking %s", session.id, booking.id)
        return

    try:
        await confirm_payment(db, booking, stripe_session_id=session.id)
    except ConflictError as e:
        # Paid but cancelled: the guest is owed a refund
        logger.error(
            "Checkout session %s paid for booking %s whose dates are taken (conflict on %s); refund required",
            session.id,
            booking.id,
            e.conflict_date,
        )
        return
    logger.info("Checkout completed: booking %s confirmed", booking.id)


async def handle_checkout_session_expired(db: AsyncSession, event: stripe.Event) -> None:
    """Handle checkout.session.expired: release the unpaid booking's dates."""
    session = event.data.object

    booking = await _find_booking(db, session)
    if booking is None:
        logger.warning("No booking found for expired checkout session %s", session.id)
        return

    if booking.status == STATUS_CONFIRMED:
        logger.info("Booking %s already confirmed, ignoring expired session %s", booking.id, session.id)
        return

    await cancel_booking(db, booking, reason="Checkout session expired")
    logger.info("Checkout expired: booking %s cancelled", booking.id)
