"""Availability service: turns stored bookings and blocks into engine intervals."""

import logging
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from studiorent.engine import AvailabilityResult, BookingPolicy, Interval, PriceBreakdown, evaluate
from studiorent.engine.intervals import CANCELLED, KIND_BLOCK, KIND_BOOKING, apply_cleaning_buffer
from studiorent.engine.pricing import calculate_price
from studiorent.models.availability_block import AvailabilityBlock
from studiorent.models.booking import Booking
from studiorent.models.room import Room

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


async def get_room(db: AsyncSession, room_ref: str | uuid.UUID) -> Room | None:
    """Look up a room by UUID or by slug."""
    if isinstance(room_ref, uuid.UUID):
        return await db.get(Room, room_ref)
    try:
        room_id = uuid.UUID(room_ref)
    except ValueError:
        result = await db.execute(select(Room).where(Room.slug == room_ref))
        return result.scalar_one_or_none()
    return await db.get(Room, room_id)


def room_lock_statement(room_id: uuid.UUID) -> Select:
    """``SELECT ... FOR UPDATE`` on the room row. SQLite has no row locks and drops the clause."""
    return select(Room.id).where(Room.id == room_id).with_for_update()


async def lock_room(db: AsyncSession, room_id: uuid.UUID) -> None:
    """Hold the room row until the transaction ends so date checks and inserts do not interleave."""
    await db.execute(room_lock_statement(room_id))


async def list_active_bookings(
    db: AsyncSession,
    room_id: uuid.UUID,
    now: datetime | None = None,
    exclude_booking_id: uuid.UUID | None = None,
) -> list[Booking]:
    """Bookings that still occupy the room.

    Cancelled bookings never occupy it; an unpaid booking stops occupying it
    once its payment window has passed, even before the expiry sweep runs.
    """
    now = now or utcnow()
    query = select(Booking).where(
        Booking.room_id == room_id,
        Booking.status != CANCELLED,
        or_(Booking.expires_at.is_(None), Booking.expires_at > now),
    )
    if exclude_booking_id is not None:
        query = query.where(Booking.id != exclude_booking_id)
    result = await db.execute(query.order_by(Booking.start_date))
    return list(result.scalars().all())


async def list_blocks(db: AsyncSession, room_id: uuid.UUID) -> list[AvailabilityBlock]:
    result = await db.execute(
        select(AvailabilityBlock).where(AvailabilityBlock.room_id == room_id).order_by(AvailabilityBlock.start_date)
    )
    return list(result.scalars().all())


async def load_intervals(
    db: AsyncSession,
    room_id: uuid.UUID,
    exclude_booking_id: uuid.UUID | None = None,
) -> list[Interval]:
    """All occupied spans of a room as engine intervals, before any buffer."""
    bookings = await list_active_bookings(db, room_id, exclude_booking_id=exclude_booking_id)
    blocks = await list_blocks(db, room_id)
    intervals = [Interval(start=b.start_date, end=b.end_date, kind=KIND_BOOKING, status=b.status) for b in bookings]
    intervals.extend(Interval(start=b.start_date, end=b.end_date, kind=KIND_BLOCK) for b in blocks)
    return intervals


async def load_effective_intervals(
    db: AsyncSession,
    room_id: uuid.UUID,
    policy: BookingPolicy,
    exclude_booking_id: uuid.UUID | None = None,
) -> list[Interval]:
    """Occupied spans with the cleaning buffer applied around each booking."""
    intervals = await load_intervals(db, room_id, exclude_booking_id=exclude_booking_id)
    return apply_cleaning_buffer(intervals, policy.cleaning_buffer_days)


async def check_availability(
    db: AsyncSession,
    room: Room,
    start_date: date,
    duration_days: int,
    policy: BookingPolicy,
) -> AvailabilityResult:
    """Range check plus gap/extension resolution for one candidate stay."""
    intervals = await load_effective_intervals(db, room.id, policy)
    result = evaluate(intervals, start_date, duration_days, policy)
    logger.debug(
        "Availability for room %s from %s (%d days): valid=%s mode=%s",
        room.slug,
        start_date,
        duration_days,
        result.is_valid,
        result.mode,
    )
    return result


def quote(
    room: Room,
    duration_days: int,
    cleaning_service: bool,
    policy: BookingPolicy,
) -> PriceBreakdown:
    """Price a stay at the room's current monthly rate."""
    return calculate_price(room.monthly_rate, duration_days, cleaning_service, policy)
