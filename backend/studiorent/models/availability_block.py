"""Availability block model: owner stays, maintenance and other closures."""

import uuid
from datetime import date, datetime

from sqlalchemy import Date, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studiorent.database import Base, UUIDPrimaryKeyMixin


class AvailabilityBlock(UUIDPrimaryKeyMixin, Base):
    """An admin-created inclusive date range during which a room cannot be booked."""

    __tablename__ = "availability_blocks"

    room_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str] = mapped_column(String(255), default="maintenance")
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    room: Mapped["Room"] = relationship(back_populates="blocks", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    def __repr__(self) -> str:
        return f"<AvailabilityBlock(id={self.id}, room_id={self.room_id}, {self.start_date}..{self.end_date})>"
