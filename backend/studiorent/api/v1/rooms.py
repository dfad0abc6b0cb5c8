"""Public room API: listing, live availability, calendar and price quotes."""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from studiorent.api.deps import get_booking_policy, get_db
from studiorent.api.errors import not_found, validation_http_error
from studiorent.engine import BookingPolicy, ValidationError, end_date_for
from studiorent.models.room import Room
from studiorent.schemas.availability import (
    AvailabilityResponse,
    CalendarInterval,
    CalendarResponse,
    PriceBreakdownResponse,
)
from studiorent.schemas.room import RoomListResponse, RoomResponse
from studiorent.services import availability_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/rooms", tags=["rooms"])


async def _get_room_or_404(db: AsyncSession, room_ref: str) -> Room:
    room = await availability_service.get_room(db, room_ref)
    if room is None:
        raise not_found("Room")
    return room


@router.get("", response_model=RoomListResponse, summary="List rooms")
async def list_rooms(
    featured: bool | None = Query(None, description="Only featured (or only non-featured) rooms"),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Return every room, featured ones first."""
    query = select(Room)
    count_query = select(func.count()).select_from(Room)
    if featured is not None:
        query = query.where(Room.featured == featured)
        count_query = count_query.where(Room.featured == featured)

    total = (await db.execute(count_query)).scalar_one()
    result = await db.execute(query.order_by(Room.featured.desc(), Room.monthly_rate))
    return {"items": list(result.scalars().all()), "total": total}


@router.get("/{room_ref}", response_model=RoomResponse, summary="Get a room by slug or ID")
async def get_room(room_ref: str, db: AsyncSession = Depends(get_db)) -> Room:
    return await _get_room_or_404(db, room_ref)


@router.get(
    "/{room_ref}/availability",
    response_model=AvailabilityResponse,
    summary="Check a candidate stay against the room's occupied dates",
)
async def get_availability(
    room_ref: str,
    start_date: date = Query(..., description="First night of the stay (YYYY-MM-DD)"),
    duration_days: int = Query(..., description="Number of days in the stay"),
    db: AsyncSession = Depends(get_db),
    policy: BookingPolicy = Depends(get_booking_policy),
) -> AvailabilityResponse:
    """Range check and gap/extension resolution for the date picker.

    Cleaning buffers around existing bookings are already applied, so
    ``conflict_date`` may fall on a buffer day rather than a booked one.
    """
    room = await _get_room_or_404(db, room_ref)
    try:
        result = await availability_service.check_availability(db, room, start_date, duration_days, policy)
    except ValidationError as e:
        raise validation_http_error(e) from e

    return AvailabilityResponse(
        room_id=room.id,
        start_date=start_date,
        duration_days=duration_days,
        end_date=end_date_for(start_date, duration_days),
        is_valid=result.is_valid,
        conflict_date=result.conflict_date,
        max_available_days=result.max_available_days,
        unbounded=result.unbounded,
        mode=result.mode,
        recommended_days=result.recommended_days,
    )


@router.get("/{room_ref}/calendar", response_model=CalendarResponse, summary="Occupied dates of a room")
async def get_calendar(
    room_ref: str,
    db: AsyncSession = Depends(get_db),
    policy: BookingPolicy = Depends(get_booking_policy),
) -> CalendarResponse:
    """Active bookings and admin blocks, dates and status only."""
    room = await _get_room_or_404(db, room_ref)
    bookings = await availability_service.list_active_bookings(db, room.id)
    blocks = await availability_service.list_blocks(db, room.id)
    return CalendarResponse(
        room_id=room.id,
        bookings=[CalendarInterval(start_date=b.start_date, end_date=b.end_date, status=b.status) for b in bookings],
        availability_blocks=[CalendarInterval(start_date=b.start_date, end_date=b.end_date) for b in blocks],
        cleaning_buffer_days=policy.cleaning_buffer_days,
    )


@router.get("/{room_ref}/quote", response_model=PriceBreakdownResponse, summary="Price a stay")
async def get_quote(
    room_ref: str,
    duration_days: int = Query(..., description="Number of days in the stay"),
    cleaning_service: bool = Query(False, description="Add the weekly/monthly cleaning service"),
    db: AsyncSession = Depends(get_db),
    policy: BookingPolicy = Depends(get_booking_policy),
):
    room = await _get_room_or_404(db, room_ref)
    try:
        return availability_service.quote(room, duration_days, cleaning_service, policy)
    except ValidationError as e:
        raise validation_http_error(e) from e
