"""Booking service: submission, guest upsert, payment confirmation and cancellation."""

import logging
import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from studiorent.config import settings
from studiorent.engine import BookingPolicy, ConflictError, FieldError, ValidationError, check_range, end_date_for
from studiorent.engine.draft import LAST_STEP, BookingDraft, validate_draft
from studiorent.engine.pricing import calculate_price
from studiorent.models.booking import Booking
from studiorent.models.guest import Guest
from studiorent.models.room import Room
from studiorent.schemas.booking import BookingSubmission
from studiorent.services.availability_service import load_effective_intervals, lock_room, utcnow

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"
STATUS_PENDING_PAYMENT = "pending_payment"
STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"

# Unpaid statuses a guest may release themselves
RELEASABLE_STATUSES = (STATUS_PENDING, STATUS_PENDING_PAYMENT)

# payment method -> booking status right after submission
INITIAL_STATUS = {
    "bank_transfer": STATUS_PENDING_PAYMENT,
    "stripe": STATUS_PENDING,
    "cash": STATUS_CONFIRMED,
}


def draft_from_submission(submission: BookingSubmission) -> BookingDraft:
    """Build the final-step wizard draft from a posted submission."""
    return BookingDraft(
        room_id=str(submission.room_id),
        step=LAST_STEP,
        start_date=submission.start_date,
        duration_days=submission.duration_days,
        cleaning_service=submission.cleaning_service,
        customer_name=(submission.customer_name or "").strip(),
        customer_email=(submission.customer_email or "").strip().lower(),
        customer_phone=(submission.customer_phone or "").strip(),
        id_type=submission.id_type,
        id_number=(submission.id_number or "").strip(),
        nationality=(submission.nationality or "").strip(),
        terms_accepted=submission.terms_accepted,
        signature=submission.signature,
        payment_method=submission.payment_method,
        notes=submission.notes,
        locale=submission.locale,
    )


async def upsert_guest(db: AsyncSession, draft: BookingDraft) -> Guest:
    """Find the guest by email (or phone when no email) and refresh their details."""
    guest = None
    if draft.customer_email:
        result = await db.execute(select(Guest).where(Guest.email == draft.customer_email))
        guest = result.scalars().first()
    elif draft.customer_phone:
        result = await db.execute(select(Guest).where(Guest.phone == draft.customer_phone))
        guest = result.scalars().first()

    if guest is None:
        guest = Guest(
            full_name=draft.customer_name,
            email=draft.customer_email or None,
            phone=draft.customer_phone or None,
            id_type=draft.id_type,
            id_number=draft.id_number or None,
            nationality=draft.nationality,
        )
        db.add(guest)
        await db.flush()
        logger.info("Created guest %s", guest.id)
        return guest

    guest.full_name = draft.customer_name
    if draft.customer_phone:
        guest.phone = draft.customer_phone
    guest.id_type = draft.id_type
    guest.id_number = draft.id_number or None
    guest.nationality = draft.nationality
    await db.flush()
    return guest


def _check_client_price(client_total: Decimal, server_total: Decimal, tolerance: Decimal) -> None:
    if abs(client_total - server_total) > tolerance:
        logger.warning("Client price %s differs from server price %s", client_total, server_total)
        raise ValidationError(
            FieldError(
                field="totalPrice",
                message="Price mismatch. Please refresh the page and try again.",
                message_ar="عدم تطابق السعر. يرجى تحديث الصفحة والمحاولة مرة أخرى.",
            )
        )


async def submit_booking(
    db: AsyncSession,
    room: Room,
    draft: BookingDraft,
    client_total: Decimal | None = None,
    today: date | None = None,
    policy: BookingPolicy | None = None,
) -> Booking:
    """Validate a completed wizard draft and persist it as a booking.

    The range check runs here against freshly loaded intervals, right before
    the insert, whatever the client saw when it picked the dates.

    Raises:
        ConflictError: If any day of the stay (with cleaning buffers) is taken.
        ValidationError: If any wizard step fails or the client price is off.
    """
    if not draft.is_complete:
        raise ValidationError(
            FieldError(
                field="step",
                message="Please complete every step of the booking form",
                message_ar="يرجى إكمال جميع خطوات نموذج الحجز",
            )
        )

    policy = policy or settings.booking_policy()
    today = today or utcnow().date()

    # Serialises concurrent submissions for the room on databases with row locks
    await lock_room(db, room.id)
    intervals = await load_effective_intervals(db, room.id, policy)

    duration = draft.duration_days
    if draft.start_date is not None and isinstance(duration, int) and duration > 0:
        check = check_range(intervals, draft.start_date, duration)
        if not check.is_valid:
            logger.info("Booking conflict for room %s on %s", room.slug, check.conflict_date)
            raise ConflictError(check.conflict_date)

    errors = validate_draft(draft, today, intervals, policy)
    if errors:
        raise ValidationError(errors)

    price = calculate_price(room.monthly_rate, duration, draft.cleaning_service, policy)
    if client_total is not None:
        _check_client_price(client_total, price.total_price, settings.max_price_difference)

    guest = await upsert_guest(db, draft)

    now = utcnow()
    status = INITIAL_STATUS[draft.payment_method]
    booking = Booking(
        room_id=room.id,
        guest_id=guest.id,
        start_date=draft.start_date,
        end_date=end_date_for(draft.start_date, duration),
        duration_days=duration,
        status=status,
        rate_at_booking=room.monthly_rate,
        original_amount=price.original_price,
        discount_percent=price.savings_percent,
        cleaning_service=draft.cleaning_service,
        cleaning_fee=price.cleaning_fee or Decimal("0"),
        total_amount=price.total_price,
        payment_method=draft.payment_method,
        payment_status="pending",
        terms_accepted_at=now,
        signature=draft.signature,
        notes=draft.notes,
        guest_locale=draft.locale,
    )
    if status == STATUS_PENDING_PAYMENT:
        booking.expires_at = now + timedelta(minutes=settings.bank_transfer_expiry_minutes)
    if status == STATUS_CONFIRMED:
        booking.confirmed_at = now

    db.add(booking)
    await db.flush()
    await db.refresh(booking)
    logger.info(
        "Created booking %s for room %s: %s..%s, %s via %s",
        booking.id,
        room.slug,
        booking.start_date,
        booking.end_date,
        booking.total_amount,
        booking.payment_method,
    )
    return booking


async def get_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking | None:
    return await db.get(Booking, booking_id)


async def get_booking_by_stripe_session(db: AsyncSession, session_id: str) -> Booking | None:
    """Look up a booking by its Checkout Session ID (used by webhooks)."""
    result = await db.execute(select(Booking).where(Booking.stripe_session_id == session_id))
    return result.scalar_one_or_none()


async def confirm_payment(
    db: AsyncSession,
    booking: Booking,
    stripe_session_id: str | None = None,
    policy: BookingPolicy | None = None,
) -> Booking:
    """Mark a booking as paid and confirmed.

    An unconfirmed booking may have lost its dates while it waited, for
    example when its payment window lapsed and another guest took the room.
    Its stay is checked again against every other booking first; on a clash
    the booking is cancelled instead.

    Raises:
        ValidationError: If the booking was already cancelled.
        ConflictError: If the dates are now taken by another booking or block.
    """
    if booking.status == STATUS_CANCELLED:
        raise ValidationError(
            FieldError(
                field="status",
                message="Cannot confirm payment for a cancelled booking",
                message_ar="لا يمكن تأكيد الدفع لحجز ملغى",
            )
        )

    if booking.status != STATUS_CONFIRMED:
        policy = policy or settings.booking_policy()
        await lock_room(db, booking.room_id)
        intervals = await load_effective_intervals(db, booking.room_id, policy, exclude_booking_id=booking.id)
        check = check_range(intervals, booking.start_date, booking.duration_days)
        if not check.is_valid:
            logger.warning(
                "Booking %s lost its dates (conflict on %s) before payment was confirmed",
                booking.id,
                check.conflict_date,
            )
            await cancel_booking(db, booking, reason="Another booking was confirmed for these dates")
            raise ConflictError(check.conflict_date)

    booking.status = STATUS_CONFIRMED
    booking.payment_status = "paid"
    booking.confirmed_at = booking.confirmed_at or utcnow()
    booking.expires_at = None
    if stripe_session_id:
        booking.stripe_session_id = stripe_session_id
    await db.flush()
    logger.info("Confirmed payment for booking %s", booking.id)
    return booking


async def cancel_booking(db: AsyncSession, booking: Booking, reason: str | None = None) -> Booking:
    """Cancel a booking, releasing its dates. Cancelling twice is a no-op."""
    if booking.status == STATUS_CANCELLED:
        return booking

    booking.status = STATUS_CANCELLED
    booking.cancelled_at = utcnow()
    booking.cancellation_reason = reason
    if booking.payment_status == "pending":
        booking.payment_status = "failed"
    await db.flush()
    logger.info("Cancelled booking %s (%s)", booking.id, reason or "no reason given")
    return booking


async def release_booking(db: AsyncSession, booking: Booking, reason: str | None = None) -> Booking:
    """Cancel an unpaid booking on the guest's behalf. Releasing twice is a no-op.

    Raises:
        ValidationError: If the booking is already confirmed.
    """
    if booking.status == STATUS_CANCELLED:
        return booking
    if booking.status not in RELEASABLE_STATUSES:
        raise ValidationError(
            FieldError(
                field="status",
                message="Only unpaid bookings can be released",
                message_ar="لا يمكن إلغاء إلا الحجوزات غير المدفوعة",
            )
        )
    return await cancel_booking(db, booking, reason=reason or "Released by guest")


async def expire_unpaid_bookings(db: AsyncSession, now: datetime | None = None) -> int:
    """Cancel bank-transfer bookings whose payment window has passed.

    Returns:
        The number of bookings cancelled.
    """
    now = now or utcnow()
    result = await db.execute(
        select(Booking).where(
            Booking.status == STATUS_PENDING_PAYMENT,
            Booking.expires_at.is_not(None),
            Booking.expires_at <= now,
        )
    )
    expired = list(result.scalars().all())
    for booking in expired:
        await cancel_booking(db, booking, reason="Payment window expired")
    if expired:
        logger.info("Expired %d unpaid bookings", len(expired))
    return len(expired)
