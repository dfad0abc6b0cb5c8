"""Plain helpers shared by test modules (fixtures live in conftest.py)."""

import base64
import uuid
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from studiorent.engine import end_date_for
from studiorent.models import Booking, Guest, Room

# A canvas export long enough to pass the signature check
SIGNATURE = "data:image/png;base64," + base64.b64encode(b"\x89PNG\r\n\x1a\n" + bytes(600)).decode()


def future(days: int) -> date:
    """A date far enough ahead that UTC/local 'today' never matters."""
    return date.today() + timedelta(days=days)


def booking_payload(room_id, start_date: date, duration_days: int = 30, **overrides) -> dict:
    """A valid camelCase wizard submission."""
    payload = {
        "roomId": str(room_id),
        "startDate": start_date.isoformat(),
        "durationDays": duration_days,
        "cleaningService": False,
        "customerName": "Sara Al-Harbi",
        "customerEmail": "sara@example.com",
        "customerPhone": "0531182200",
        "idType": "saudi_id",
        "idNumber": "1012345678",
        "nationality": "Saudi Arabia",
        "termsAccepted": True,
        "signature": SIGNATURE,
        "paymentMethod": "bank_transfer",
        "locale": "en",
    }
    payload.update(overrides)
    return payload


async def make_room(db_session: AsyncSession, monthly_rate: str = "4900", **overrides) -> Room:
    unique = uuid.uuid4().hex[:8]
    data = {
        "slug": f"studio-{unique}",
        "name": f"Studio {unique}",
        "name_ar": "استوديو",
        "monthly_rate": Decimal(monthly_rate),
        "yearly_rate": Decimal("52000"),
        "capacity": 2,
        "amenities": ["wifi"],
    }
    data.update(overrides)
    room = Room(**data)
    db_session.add(room)
    await db_session.flush()
    await db_session.refresh(room)
    return room


async def add_booking(
    db_session: AsyncSession,
    room: Room,
    guest: Guest,
    start_date: date,
    duration_days: int = 30,
    status: str = "confirmed",
    **overrides,
) -> Booking:
    """Insert a booking row directly, bypassing validation."""
    data = {
        "room_id": room.id,
        "guest_id": guest.id,
        "start_date": start_date,
        "end_date": end_date_for(start_date, duration_days),
        "duration_days": duration_days,
        "status": status,
        "rate_at_booking": room.monthly_rate,
        "original_amount": Decimal("4900.00"),
        "total_amount": Decimal("4900.00"),
        "payment_method": "cash",
    }
    data.update(overrides)
    booking = Booking(**data)
    db_session.add(booking)
    await db_session.flush()
    await db_session.refresh(booking)
    return booking
