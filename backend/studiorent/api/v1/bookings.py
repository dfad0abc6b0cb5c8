"""Public booking endpoints: submission, Stripe return trip and release."""

import logging
import uuid

import stripe
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from studiorent.api.deps import get_booking_policy, get_db
from studiorent.api.errors import conflict_http_error, not_found, validation_http_error
from studiorent.config import settings
from studiorent.engine import BookingPolicy, ConflictError, FieldError, ValidationError
from studiorent.models.booking import Booking
from studiorent.payments.stripe_client import (
    expire_checkout_session,
    retrieve_checkout_session,
    session_booking_id,
)
from studiorent.schemas.booking import BookingCancelRequest, BookingConfirmRequest, BookingResponse, BookingSubmission
from studiorent.services import availability_service, booking_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


def _session_error(message: str, message_ar: str) -> HTTPException:
    return validation_http_error(ValidationError(FieldError(field="sessionId", message=message, message_ar=message_ar)))


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a completed booking wizard",
)
async def create_booking(
    body: BookingSubmission,
    db: AsyncSession = Depends(get_db),
    policy: BookingPolicy = Depends(get_booking_policy),
) -> Booking:
    """Validate every wizard step, re-check the dates and store the booking.

    Status depends on the payment method: ``bank_transfer`` bookings wait for
    payment until they expire, ``stripe`` bookings wait for the webhook and
    ``cash`` bookings are confirmed immediately. Use ``/api/v1/checkout`` to
    get a Stripe payment page along with the booking.
    """
    room = await availability_service.get_room(db, body.room_id)
    if room is None:
        raise not_found("Room")

    draft = booking_service.draft_from_submission(body)
    try:
        return await booking_service.submit_booking(db, room, draft, client_total=body.total_price, policy=policy)
    except ConflictError as e:
        raise conflict_http_error(e) from e
    except ValidationError as e:
        raise validation_http_error(e) from e


@router.post(
    "/confirm",
    response_model=BookingResponse,
    summary="Confirm a booking paid through Stripe Checkout",
)
async def confirm_checkout(
    body: BookingConfirmRequest,
    db: AsyncSession = Depends(get_db),
    policy: BookingPolicy = Depends(get_booking_policy),
) -> Booking:
    """Called by the checkout success page so the guest does not wait for the webhook.

    The session is fetched from Stripe and must belong to the booking and be
    paid. Confirming an already confirmed booking returns it unchanged.
    """
    if not settings.stripe_secret_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Online payment is not configured",
        )

    booking = await booking_service.get_booking(db, body.booking_id)
    if booking is None:
        raise not_found("Booking")

    try:
        session = await retrieve_checkout_session(body.session_id)
    except stripe.StripeError as e:
        logger.error("Could not retrieve checkout session %s: %s", body.session_id, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        ) from e

    if session.id != booking.stripe_session_id and session_booking_id(session) != str(booking.id):
        logger.warning("Checkout session %s does not belong to booking %s", session.id, booking.id)
        raise _session_error("Payment session does not match this booking", "جلسة الدفع لا تخص هذا الحجز")
    if session.payment_status != "paid":
        raise _session_error("Payment has not been completed", "لم يكتمل الدفع بعد")

    if booking.status == booking_service.STATUS_CONFIRMED:
        return booking

    try:
        await booking_service.confirm_payment(db, booking, stripe_session_id=session.id, policy=policy)
    except ValidationError as e:
        raise validation_http_error(e) from e
    except ConflictError as e:
        logger.error("Checkout session %s paid for booking %s whose dates are taken", session.id, booking.id)
        await db.commit()
        raise conflict_http_error(e) from e
    await db.refresh(booking)
    return booking


@router.post(
    "/{booking_id}/release",
    response_model=BookingResponse,
    summary="Release the dates of an unpaid booking",
)
async def release_booking(
    booking_id: uuid.UUID,
    body: BookingCancelRequest | None = None,
    db: AsyncSession = Depends(get_db),
) -> Booking:
    """Cancel a ``pending`` or ``pending_payment`` booking the guest abandoned.

    An open Stripe Checkout Session is expired first so it can no longer be
    paid; if Stripe refuses, the booking is left as it is.
    """
    booking = await booking_service.get_booking(db, booking_id)
    if booking is None:
        raise not_found("Booking")

    open_session = booking.status in booking_service.RELEASABLE_STATUSES and booking.stripe_session_id
    if open_session and settings.stripe_secret_key:
        try:
            await expire_checkout_session(booking.stripe_session_id)
        except stripe.StripeError as e:
            logger.error("Could not expire checkout session %s: %s", booking.stripe_session_id, e)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=str(e),
            ) from e

    try:
        await booking_service.release_booking(db, booking, reason=body.reason if body else None)
    except ValidationError as e:
        raise validation_http_error(e) from e
    await db.refresh(booking)
    return booking
