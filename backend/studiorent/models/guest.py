"""Guest domain model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studiorent.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Guest(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Guest model: people who book studios, matched by email (or phone)."""

    __tablename__ = "guests"

    full_name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255), index=True)
    phone: Mapped[str | None] = mapped_column(String(50), index=True)
    id_type: Mapped[str] = mapped_column(String(20))  # passport, saudi_id, iqama
    id_number: Mapped[str | None] = mapped_column(String(50))
    nationality: Mapped[str] = mapped_column(String(100))

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship(  # noqa: F821
        back_populates="guest", lazy="selectin", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Guest(id={self.id}, email={self.email!r})>"
