"""Seed the database with sample studios, a few bookings and one maintenance block.

Run from the backend directory:
    python -m scripts.seed_data
"""

import asyncio
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add backend to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete

from studiorent.config import settings
from studiorent.database import Base, async_session_factory, engine
from studiorent.engine import calculate_price, end_date_for
from studiorent.models import AvailabilityBlock, Booking, Guest, Room

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

ROOMS = [
    {
        "slug": "garden-studio",
        "name": "Garden Studio",
        "name_ar": "استوديو الحديقة",
        "description": "Ground-floor studio opening onto the shared garden, with a kitchenette and workspace.",
        "description_ar": "استوديو في الطابق الأرضي يطل على الحديقة المشتركة، مع مطبخ صغير ومساحة عمل.",
        "monthly_rate": Decimal("4500.00"),
        "yearly_rate": Decimal("48000.00"),
        "capacity": 2,
        "size_sqm": 32,
        "amenities": ["wifi", "kitchenette", "washer", "workspace", "garden"],
        "featured": True,
    },
    {
        "slug": "skyline-studio",
        "name": "Skyline Studio",
        "name_ar": "استوديو الأفق",
        "description": "Top-floor studio with city views, a full kitchen and a separate sleeping nook.",
        "description_ar": "استوديو في الطابق العلوي بإطلالة على المدينة ومطبخ كامل وركن نوم منفصل.",
        "monthly_rate": Decimal("4900.00"),
        "yearly_rate": Decimal("52000.00"),
        "capacity": 2,
        "size_sqm": 38,
        "amenities": ["wifi", "kitchen", "washer", "city-view", "parking"],
        "featured": True,
    },
    {
        "slug": "courtyard-studio",
        "name": "Courtyard Studio",
        "name_ar": "استوديو الفناء",
        "description": "Quiet single studio facing the inner courtyard. Ideal for long solo stays.",
        "description_ar": "استوديو هادئ يطل على الفناء الداخلي، مثالي للإقامات الطويلة الفردية.",
        "monthly_rate": Decimal("3600.00"),
        "yearly_rate": Decimal("39000.00"),
        "capacity": 1,
        "size_sqm": 24,
        "amenities": ["wifi", "kitchenette", "workspace"],
        "featured": False,
    },
]

GUESTS = [
    {
        "full_name": "Sara Al-Harbi",
        "email": "sara.alharbi@example.com",
        "phone": "0531182200",
        "id_type": "saudi_id",
        "id_number": "1012345678",
        "nationality": "Saudi Arabia",
    },
    {
        "full_name": "Daniel Moreau",
        "email": "daniel.moreau@example.com",
        "phone": "+33612345678",
        "id_type": "passport",
        "id_number": "18AB45621",
        "nationality": "France",
    },
]


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def seed() -> None:
    """Recreate the sample data from scratch. Safe to run repeatedly."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    policy = settings.booking_policy()
    today = date.today()

    async with async_session_factory() as session:
        for model in (Booking, AvailabilityBlock, Guest, Room):
            await session.execute(delete(model))
        await session.flush()

        rooms = [Room(**data) for data in ROOMS]
        guests = [Guest(**data) for data in GUESTS]
        session.add_all(rooms + guests)
        await session.flush()
        print(f"Created {len(rooms)} rooms and {len(guests)} guests")

        # Garden: booked from next week for three months, leaving a gap before it.
        # Skyline: a confirmed year-long stay starting in two months.
        stays = [
            (rooms[0], guests[0], today + timedelta(days=7), 90, "confirmed", "cash"),
            (rooms[1], guests[1], today + timedelta(days=60), 360, "confirmed", "stripe"),
        ]
        for room, guest, start, days, status, method in stays:
            price = calculate_price(room.monthly_rate, days, cleaning_service_enabled=False, policy=policy)
            session.add(
                Booking(
                    room_id=room.id,
                    guest_id=guest.id,
                    start_date=start,
                    end_date=end_date_for(start, days),
                    duration_days=days,
                    status=status,
                    rate_at_booking=room.monthly_rate,
                    original_amount=price.original_price,
                    discount_percent=price.savings_percent,
                    total_amount=price.total_price,
                    payment_method=method,
                    payment_status="paid",
                )
            )
            print(f"   {room.slug}: {start} for {days} days, {price.total_price} {settings.currency.upper()}")

        session.add(
            AvailabilityBlock(
                room_id=rooms[2].id,
                start_date=today + timedelta(days=14),
                end_date=today + timedelta(days=20),
                reason="maintenance",
            )
        )

        await session.commit()

    print("Done. Try GET /api/v1/rooms/garden-studio/availability?start_date=...&duration_days=30")


if __name__ == "__main__":
    asyncio.run(seed())
