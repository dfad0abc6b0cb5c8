"""Room model: the rentable studios."""

from decimal import Decimal

from sqlalchemy import JSON, Boolean, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studiorent.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Room(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A studio with bilingual copy and its monthly/yearly rates."""

    __tablename__ = "rooms"

    slug: Mapped[str] = mapped_column(String(120), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    name_ar: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    description_ar: Mapped[str | None] = mapped_column(Text, default=None)
    monthly_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)  # per 30 days
    yearly_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)  # per 365 days
    capacity: Mapped[int] = mapped_column(Integer, default=1)
    size_sqm: Mapped[int | None] = mapped_column(Integer, default=None)
    amenities: Mapped[list | None] = mapped_column(JSON, default=list)
    featured: Mapped[bool] = mapped_column(Boolean, default=False)

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="room", lazy="selectin", cascade="all, delete-orphan"
    )
    blocks: Mapped[list["AvailabilityBlock"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="room", lazy="selectin", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, slug={self.slug!r}, monthly_rate={self.monthly_rate})>"
