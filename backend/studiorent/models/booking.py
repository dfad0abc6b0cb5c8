"""Booking model: tracks studio reservations."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studiorent.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

BOOKING_STATUSES = ("pending", "pending_payment", "confirmed", "cancelled")


class Booking(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A reservation linking a guest to a room for an inclusive date range."""

    __tablename__ = "bookings"

    room_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    guest_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("guests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)  # last occupied day
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(50),
        default="pending",
        index=True,
    )  # pending, pending_payment, confirmed, cancelled

    # Pricing snapshot
    rate_at_booking: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)  # monthly rate
    original_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    discount_percent: Mapped[int] = mapped_column(Integer, default=0)
    cleaning_service: Mapped[bool] = mapped_column(Boolean, default=False)
    cleaning_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # Payment
    payment_method: Mapped[str] = mapped_column(String(30), default="bank_transfer")  # stripe, bank_transfer, cash
    payment_status: Mapped[str] = mapped_column(String(30), default="pending")  # pending, paid, failed
    stripe_session_id: Mapped[str | None] = mapped_column(String(255), default=None, index=True)
    expires_at: Mapped[datetime | None] = mapped_column(default=None)

    # Terms and signature
    terms_accepted_at: Mapped[datetime | None] = mapped_column(default=None)
    signature: Mapped[str | None] = mapped_column(Text, default=None)

    notes: Mapped[str | None] = mapped_column(Text, default=None)
    guest_locale: Mapped[str] = mapped_column(String(5), default="en")
    confirmed_at: Mapped[datetime | None] = mapped_column(default=None)
    cancelled_at: Mapped[datetime | None] = mapped_column(default=None)
    cancellation_reason: Mapped[str | None] = mapped_column(Text, default=None)

    # Relationships
    room: Mapped["Room"] = relationship(back_populates="bookings", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    guest: Mapped["Guest"] = relationship(back_populates="bookings", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (Index("ix_bookings_room_dates", "room_id", "start_date", "end_date"),)

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, room_id={self.room_id}, start_date={self.start_date}, status={self.status})>"
