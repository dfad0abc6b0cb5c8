"""Admin back office: login, booking management, rooms and availability blocks.

Every route except ``/login`` requires the admin JWT, sent either as a
Bearer token or in the ``admin_session`` cookie set by ``/login``.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from studiorent.api.deps import get_booking_policy, get_current_admin, get_db
from studiorent.api.errors import conflict_http_error, not_found, validation_http_error
from studiorent.auth.jwt import create_admin_token
from studiorent.auth.passwords import verify_password
from studiorent.config import settings
from studiorent.engine import BookingPolicy, ConflictError, ValidationError
from studiorent.models.availability_block import AvailabilityBlock
from studiorent.models.booking import BOOKING_STATUSES, Booking
from studiorent.models.guest import Guest
from studiorent.models.room import Room
from studiorent.schemas.auth import AdminLoginRequest, MessageResponse, TokenResponse
from studiorent.schemas.availability import BlockCreate, BlockResponse
from studiorent.schemas.booking import (
    BookingCancelRequest,
    BookingDetailResponse,
    BookingListResponse,
    BookingResponse,
    ExpireResponse,
)
from studiorent.schemas.room import RoomCreate, RoomResponse, RoomUpdate
from studiorent.services import booking_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


async def _get_booking_or_404(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    booking = await booking_service.get_booking(db, booking_id)
    if booking is None:
        raise not_found("Booking")
    return booking


async def _get_room_or_404(db: AsyncSession, room_id: uuid.UUID) -> Room:
    room = await db.get(Room, room_id)
    if room is None:
        raise not_found("Room")
    return room


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


@router.post("/login", response_model=TokenResponse, summary="Log in to the back office")
async def login(body: AdminLoginRequest, response: Response) -> TokenResponse:
    """Exchange the admin password for a JWT, also set as an HTTP-only cookie."""
    if not verify_password(body.password, settings.admin_password_hash):
        logger.warning("Failed admin login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password",
        )

    token = create_admin_token()
    max_age = settings.jwt_admin_token_expire_hours * 3600
    response.set_cookie(
        key=settings.admin_cookie_name,
        value=token,
        max_age=max_age,
        httponly=True,
        secure=settings.environment == "production",
        samesite="lax",
    )
    logger.info("Admin logged in")
    return TokenResponse(access_token=token, expires_in=max_age)


@router.post("/logout", response_model=MessageResponse, summary="Clear the session cookie")
async def logout(response: Response) -> dict:
    response.delete_cookie(settings.admin_cookie_name)
    return {"message": "Logged out"}


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


@router.get("/bookings", response_model=BookingListResponse, summary="List bookings")
async def list_bookings(
    room_id: uuid.UUID | None = Query(None, description="Filter by room"),
    status_filter: str | None = Query(None, alias="status", description="Filter by booking status"),
    email: str | None = Query(None, description="Filter by guest email"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    _admin: dict = Depends(get_current_admin),
) -> dict:
    """Return a paginated list of bookings, newest first."""
    if status_filter is not None and status_filter not in BOOKING_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown status '{status_filter}'",
        )

    base_query = select(Booking)
    count_query = select(func.count()).select_from(Booking)

    if room_id is not None:
        base_query = base_query.where(Booking.room_id == room_id)
        count_query = count_query.where(Booking.room_id == room_id)
    if status_filter is not None:
        base_query = base_query.where(Booking.status == status_filter)
        count_query = count_query.where(Booking.status == status_filter)
    if email:
        base_query = base_query.join(Guest, Booking.guest_id == Guest.id).where(Guest.email == email.strip().lower())
        count_query = count_query.join(Guest, Booking.guest_id == Guest.id).where(
            Guest.email == email.strip().lower()
        )

    total = (await db.execute(count_query)).scalar_one()
    result = await db.execute(base_query.order_by(Booking.created_at.desc()).offset(skip).limit(limit))
    return {"items": list(result.scalars().all()), "total": total}


@router.post("/bookings/expire", response_model=ExpireResponse, summary="Cancel expired unpaid bookings")
async def expire_bookings(
    db: AsyncSession = Depends(get_db),
    _admin: dict = Depends(get_current_admin),
) -> dict:
    expired = await booking_service.expire_unpaid_bookings(db)
    return {"expired": expired}


@router.get(
    "/bookings/{booking_id}",
    response_model=BookingDetailResponse,
    summary="Get booking detail with nested room and guest",
)
async def get_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _admin: dict = Depends(get_current_admin),
) -> Booking:
    result = await db.execute(
        select(Booking)
        .options(selectinload(Booking.room), selectinload(Booking.guest))
        .where(Booking.id == booking_id)
    )
    booking = result.scalar_one_or_none()
    if booking is None:
        raise not_found("Booking")
    return booking


@router.post("/bookings/{booking_id}/cancel", response_model=BookingResponse, summary="Cancel a booking")
async def cancel_booking(
    booking_id: uuid.UUID,
    body: BookingCancelRequest | None = None,
    db: AsyncSession = Depends(get_db),
    _admin: dict = Depends(get_current_admin),
) -> Booking:
    """Cancel a booking and free its dates. Cancelling twice is harmless."""
    booking = await _get_booking_or_404(db, booking_id)
    reason = body.reason if body is not None else None
    await booking_service.cancel_booking(db, booking, reason=reason)
    await db.refresh(booking)
    return booking


@router.post(
    "/bookings/{booking_id}/confirm-payment",
    response_model=BookingResponse,
    summary="Mark a bank transfer or cash booking as paid",
)
async def confirm_payment(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    policy: BookingPolicy = Depends(get_booking_policy),
    _admin: dict = Depends(get_current_admin),
) -> Booking:
    """Confirm the booking, or cancel it with a 409 when its dates were taken meanwhile."""
    booking = await _get_booking_or_404(db, booking_id)
    try:
        await booking_service.confirm_payment(db, booking, policy=policy)
    except ValidationError as e:
        raise validation_http_error(e) from e
    except ConflictError as e:
        # The cancellation must outlive the error response
        await db.commit()
        raise conflict_http_error(e) from e
    await db.refresh(booking)
    return booking


# ---------------------------------------------------------------------------
# Rooms
# ---------------------------------------------------------------------------


@router.post(
    "/rooms",
    response_model=RoomResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a room",
)
async def create_room(
    body: RoomCreate,
    db: AsyncSession = Depends(get_db),
    _admin: dict = Depends(get_current_admin),
) -> Room:
    room = Room(**body.model_dump())
    db.add(room)
    try:
        await db.flush()
    except IntegrityError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A room with slug '{body.slug}' already exists",
        ) from e
    await db.refresh(room)
    logger.info("Created room %s", room.slug)
    return room


@router.put("/rooms/{room_id}", response_model=RoomResponse, summary="Update a room")
async def update_room(
    room_id: uuid.UUID,
    body: RoomUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: dict = Depends(get_current_admin),
) -> Room:
    """Partially update a room. Rate changes apply to new bookings only."""
    room = await _get_room_or_404(db, room_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(room, field, value)
    await db.flush()
    await db.refresh(room)
    return room


# ---------------------------------------------------------------------------
# Availability blocks
# ---------------------------------------------------------------------------


@router.get("/rooms/{room_id}/blocks", response_model=list[BlockResponse], summary="List a room's blocks")
async def list_blocks(
    room_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _admin: dict = Depends(get_current_admin),
) -> list[AvailabilityBlock]:
    await _get_room_or_404(db, room_id)
    result = await db.execute(
        select(AvailabilityBlock).where(AvailabilityBlock.room_id == room_id).order_by(AvailabilityBlock.start_date)
    )
    return list(result.scalars().all())


@router.post(
    "/rooms/{room_id}/blocks",
    response_model=BlockResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Block dates for a room",
)
async def create_block(
    room_id: uuid.UUID,
    body: BlockCreate,
    db: AsyncSession = Depends(get_db),
    _admin: dict = Depends(get_current_admin),
) -> AvailabilityBlock:
    """Block an inclusive date range. Existing bookings inside it are left alone."""
    await _get_room_or_404(db, room_id)
    block = AvailabilityBlock(room_id=room_id, **body.model_dump())
    db.add(block)
    await db.flush()
    await db.refresh(block)
    logger.info("Blocked room %s from %s to %s (%s)", room_id, block.start_date, block.end_date, block.reason)
    return block


@router.delete("/blocks/{block_id}", response_model=MessageResponse, summary="Remove an availability block")
async def delete_block(
    block_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _admin: dict = Depends(get_current_admin),
) -> dict:
    block = await db.get(AvailabilityBlock, block_id)
    if block is None:
        raise not_found("Block")
    await db.delete(block)
    await db.flush()
    return {"message": "Block deleted"}
