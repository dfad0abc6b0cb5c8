"""Stripe Checkout endpoint: book and get a payment page in one call."""

import logging

import stripe
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from studiorent.api.deps import get_booking_policy, get_db
from studiorent.api.errors import conflict_http_error, not_found, validation_http_error
from studiorent.config import settings
from studiorent.engine import BookingPolicy, ConflictError, ValidationError
from studiorent.payments.stripe_client import create_booking_checkout_session
from studiorent.schemas.booking import BookingResponse, BookingSubmission, CheckoutResponse
from studiorent.services import availability_service, booking_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/checkout", tags=["checkout"])


@router.post(
    "",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a booking and its Stripe Checkout Session",
)
async def create_checkout(
    body: BookingSubmission,
    db: AsyncSession = Depends(get_db),
    policy: BookingPolicy = Depends(get_booking_policy),
) -> CheckoutResponse:
    """Store a ``pending`` Stripe booking and return the hosted payment page.

    The booking is confirmed by the ``checkout.session.completed`` webhook
    and cancelled by ``checkout.session.expired``. If Stripe rejects the
    session, nothing is stored.
    """
    if not settings.stripe_secret_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Online payment is not configured",
        )

    room = await availability_service.get_room(db, body.room_id)
    if room is None:
        raise not_found("Room")

    draft = booking_service.draft_from_submission(body.model_copy(update={"payment_method": "stripe"}))
    try:
        booking = await booking_service.submit_booking(db, room, draft, client_total=body.total_price, policy=policy)
    except ConflictError as e:
        raise conflict_http_error(e) from e
    except ValidationError as e:
        raise validation_http_error(e) from e

    success_url = (
        f"{settings.frontend_url}/{draft.locale}/booking/success"
        f"?booking_id={booking.id}&session_id={{CHECKOUT_SESSION_ID}}"
    )
    cancel_url = f"{settings.frontend_url}/{draft.locale}/rooms/{room.slug}"

    try:
        session = await create_booking_checkout_session(
            booking=booking,
            room=room,
            customer_email=draft.customer_email or None,
            success_url=success_url,
            cancel_url=cancel_url,
        )
    except stripe.StripeError as e:
        logger.error("Stripe checkout error for booking %s: %s", booking.id, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        ) from e

    booking.stripe_session_id = session.id
    await db.flush()
    await db.refresh(booking)

    return CheckoutResponse(
        booking=BookingResponse.model_validate(booking),
        checkout_url=session.url,
        session_id=session.id,
    )
