"""Range checker and gap/extension resolver.

Both functions are pure: they see only the interval list they are given.
Cleaning buffers, cancelled-status filtering at the database level and
"start date in the past" rules belong to the caller.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from studiorent.engine.errors import FieldError, ValidationError
from studiorent.engine.intervals import Interval, active_intervals, end_date_for
from studiorent.engine.policy import BookingPolicy
from studiorent.engine.pricing import discount_percent_for, tier_breakpoints

MODE_STANDARD = "standard"
MODE_GAP_FILLING = "gap-filling"
MODE_AUTO_EXTENDED = "auto-extended"


# ---------------------------------------------------------------------------
# Max-available variant
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Bounded:
    """A finite run of free days before the next occupied day."""

    days: int

    @property
    def is_unbounded(self) -> bool:
        return False

    def allows(self, duration_days: int) -> bool:
        return duration_days <= self.days


@dataclass(frozen=True)
class Unbounded:
    """Nothing is booked after the start date."""

    @property
    def is_unbounded(self) -> bool:
        return True

    def allows(self, duration_days: int) -> bool:
        return True


MaxAvailable = Bounded | Unbounded


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RangeCheck:
    is_valid: bool
    conflict_date: date | None = None


@dataclass(frozen=True)
class Resolution:
    max_available: MaxAvailable
    mode: str
    recommended_days: int | None = None


@dataclass(frozen=True)
class AvailabilityResult:
    """Combined range check and resolution for one start date and duration."""

    is_valid: bool
    conflict_date: date | None
    max_available: MaxAvailable
    mode: str
    recommended_days: int | None = None

    @property
    def max_available_days(self) -> int | None:
        return None if self.max_available.is_unbounded else self.max_available.days

    @property
    def unbounded(self) -> bool:
        return self.max_available.is_unbounded


# ---------------------------------------------------------------------------
# Range checker
# ---------------------------------------------------------------------------


def check_range(intervals: Iterable[Interval], candidate_start: date, duration_days: int) -> RangeCheck:
    """Decide whether every day of the candidate stay is free.

    Returns the earliest occupied day of the stay as ``conflict_date``.

    Raises:
        ValidationError: If ``duration_days`` is not positive.
    """
    if isinstance(duration_days, bool) or not isinstance(duration_days, int) or duration_days <= 0:
        raise ValidationError(
            FieldError(
                field="durationDays",
                message=f"Duration must be a positive number of days, got {duration_days!r}",
                message_ar="يجب أن تكون المدة عدداً موجباً من الأيام",
            )
        )

    candidate_end = end_date_for(candidate_start, duration_days)
    earliest: date | None = None
    for interval in active_intervals(intervals):
        if interval.start <= candidate_end and interval.end >= candidate_start:
            # First occupied day of this overlap
            first = max(interval.start, candidate_start)
            if earliest is None or first < earliest:
                earliest = first
                if earliest == candidate_start:
                    break

    if earliest is None:
        return RangeCheck(is_valid=True)
    return RangeCheck(is_valid=False, conflict_date=earliest)


# ---------------------------------------------------------------------------
# Gap / extension resolver
# ---------------------------------------------------------------------------


def _snap_to_breakpoint(requested_days: int, policy: BookingPolicy) -> int:
    """Smallest breakpoint at or above ``requested_days`` that raises the discount.

    Stays whose month rounding already reaches a tier move on to the next one,
    so 75 days (5%) becomes 180 rather than 90. Returns ``requested_days`` when
    that breakpoint lies beyond the stay cap or no tier is left.
    """
    tiers = policy.discount_tiers
    current = discount_percent_for(requested_days, tiers)
    for breakpoint_days in tier_breakpoints(tiers):
        if breakpoint_days >= requested_days and discount_percent_for(breakpoint_days, tiers) > current:
            return breakpoint_days if breakpoint_days <= policy.max_stay_days else requested_days
    return requested_days


def resolve_availability(
    intervals: Iterable[Interval],
    candidate_start: date,
    requested_days: int | None = None,
    policy: BookingPolicy | None = None,
) -> Resolution:
    """Find how far a stay starting on ``candidate_start`` can run, and classify it.

    * ``auto-extended``: nothing booked afterwards; the recommendation snaps
      up to the next breakpoint that raises the discount.
    * ``gap-filling``: the next booking leaves at least
      ``policy.min_gap_fill_days`` but fewer than requested (or fewer than the
      minimum stay); the recommendation is the gap.
    * ``standard``: everything else, including an occupied start date.
    """
    policy = policy or BookingPolicy()
    requested = requested_days if requested_days is not None else policy.min_stay_days
    if requested <= 0:
        raise ValidationError(
            FieldError(
                field="durationDays",
                message=f"Requested duration must be positive, got {requested}",
                message_ar="يجب أن تكون المدة المطلوبة موجبة",
            )
        )

    relevant = [i for i in active_intervals(intervals) if i.end >= candidate_start]

    if any(i.start <= candidate_start for i in relevant):
        return Resolution(max_available=Bounded(0), mode=MODE_STANDARD)

    upcoming = sorted(relevant, key=lambda i: i.start)
    if not upcoming:
        return Resolution(
            max_available=Unbounded(),
            mode=MODE_AUTO_EXTENDED,
            recommended_days=_snap_to_breakpoint(requested, policy),
        )

    gap = (upcoming[0].start - candidate_start).days
    if gap < policy.min_gap_fill_days:
        return Resolution(max_available=Bounded(gap), mode=MODE_STANDARD)
    if gap < requested or gap < policy.min_stay_days:
        return Resolution(max_available=Bounded(gap), mode=MODE_GAP_FILLING, recommended_days=gap)
    return Resolution(max_available=Bounded(gap), mode=MODE_STANDARD, recommended_days=requested)


def evaluate(
    intervals: Iterable[Interval],
    candidate_start: date,
    duration_days: int,
    policy: BookingPolicy | None = None,
) -> AvailabilityResult:
    """Run the range checker and the resolver over the same interval list."""
    intervals = list(intervals)
    check = check_range(intervals, candidate_start, duration_days)
    resolution = resolve_availability(intervals, candidate_start, duration_days, policy)
    return AvailabilityResult(
        is_valid=check.is_valid,
        conflict_date=check.conflict_date,
        max_available=resolution.max_available,
        mode=resolution.mode,
        recommended_days=resolution.recommended_days,
    )
