"""Occupied date ranges and the calendar arithmetic shared by the engine.

Intervals are closed on both ends: ``start`` and ``end`` are both days the
room is occupied. A guest leaving on ``end`` frees the room from ``end + 1``.
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date, timedelta

from studiorent.engine.errors import FieldError, ValidationError

KIND_BOOKING = "booking"
KIND_BLOCK = "block"

CANCELLED = "cancelled"


@dataclass(frozen=True)
class Interval:
    """A booked or blocked span for one room."""

    start: date
    end: date
    kind: str = KIND_BOOKING
    status: str | None = None

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValidationError(
                FieldError(
                    field="endDate",
                    message=f"Interval end {self.end.isoformat()} is before its start {self.start.isoformat()}",
                    message_ar="تاريخ النهاية يسبق تاريخ البداية",
                )
            )

    @property
    def is_active(self) -> bool:
        return self.status != CANCELLED

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def parse_date(value: str | date, field: str = "startDate") -> date:
    """Parse a ``YYYY-MM-DD`` string, raising ``ValidationError`` when malformed."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(
            FieldError(
                field=field,
                message=f"Invalid date '{value}'. Expected format: YYYY-MM-DD",
                message_ar="صيغة التاريخ غير صحيحة",
            )
        ) from None


def end_date_for(start: date, duration_days: int) -> date:
    """Last occupied day of a stay of ``duration_days`` starting on ``start``.

    Raises:
        ValidationError: If the stay would run past the last representable date.
    """
    try:
        return start + timedelta(days=duration_days - 1)
    except OverflowError:
        raise ValidationError(
            FieldError(
                field="durationDays",
                message=f"Duration of {duration_days} days is out of range",
                message_ar="المدة المطلوبة خارج النطاق المسموح",
            )
        ) from None


def active_intervals(intervals: Iterable[Interval]) -> list[Interval]:
    return [i for i in intervals if i.is_active]


def apply_cleaning_buffer(intervals: Iterable[Interval], buffer_days: int) -> list[Interval]:
    """Widen every active booking by ``buffer_days`` on both sides.

    The trailing pad keeps the room free for cleaning after checkout; the
    leading pad reserves the same turnaround before the next check-in, so a
    new stay ending right before an existing booking still leaves room to
    clean. Admin blocks are not padded. Cancelled intervals are dropped.
    """
    if buffer_days < 0:
        raise ValidationError(
            FieldError(
                field="cleaningBufferDays",
                message="Cleaning buffer cannot be negative",
                message_ar="لا يمكن أن تكون فترة التنظيف سالبة",
            )
        )

    pad = timedelta(days=buffer_days)
    effective = []
    for interval in active_intervals(intervals):
        if interval.kind == KIND_BOOKING and buffer_days:
            interval = replace(interval, start=interval.start - pad, end=interval.end + pad)
        effective.append(interval)
    return effective
