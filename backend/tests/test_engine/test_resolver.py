"""Tests for the gap/extension resolver."""

from datetime import date

import pytest

from studiorent.engine import (
    MODE_AUTO_EXTENDED,
    MODE_GAP_FILLING,
    MODE_STANDARD,
    BookingPolicy,
    Bounded,
    Interval,
    Unbounded,
    ValidationError,
    check_range,
    evaluate,
    resolve_availability,
)
from studiorent.engine.intervals import KIND_BLOCK


class TestResolveAvailability:
    """Mode classification and max-available days."""

    def test_gap_before_next_booking_is_gap_filling(self):
        intervals = [Interval(date(2026, 3, 1), date(2026, 3, 10))]
        resolution = resolve_availability(intervals, date(2026, 2, 1))

        assert resolution.max_available == Bounded(28)
        assert resolution.mode == MODE_GAP_FILLING
        assert resolution.recommended_days == 28

    def test_exactly_filling_a_short_gap_is_gap_filling(self):
        intervals = [Interval(date(2026, 3, 1), date(2026, 3, 10))]
        resolution = resolve_availability(intervals, date(2026, 2, 1), requested_days=28)

        assert resolution.mode == MODE_GAP_FILLING
        assert resolution.recommended_days == 28

    def test_long_gap_shorter_than_request_is_gap_filling(self):
        intervals = [Interval(date(2026, 4, 2), date(2026, 4, 30))]
        resolution = resolve_availability(intervals, date(2026, 2, 1), requested_days=90)

        assert resolution.max_available == Bounded(60)
        assert resolution.mode == MODE_GAP_FILLING
        assert resolution.recommended_days == 60

    def test_empty_calendar_auto_extends_to_next_tier(self):
        resolution = resolve_availability([], date(2026, 2, 1), requested_days=40)

        assert resolution.max_available == Unbounded()
        assert resolution.max_available.is_unbounded is True
        assert resolution.mode == MODE_AUTO_EXTENDED
        assert resolution.recommended_days == 90

    @pytest.mark.parametrize(
        ("requested", "recommended"),
        [
            # 75 days already rounds to 3 months (5%), so 90 would gain nothing
            (75, 180),
            (170, 270),
            (180, 270),
            (89, 180),
            (60, 90),
        ],
    )
    def test_auto_extend_moves_to_a_better_tier(self, requested, recommended):
        resolution = resolve_availability([], date(2026, 2, 1), requested_days=requested)
        assert resolution.recommended_days == recommended

    def test_auto_extend_respects_max_stay(self):
        policy = BookingPolicy(max_stay_days=120)
        resolution = resolve_availability([], date(2026, 2, 1), requested_days=100, policy=policy)
        # Next breakpoint is 180, beyond the cap
        assert resolution.recommended_days == 100

    def test_auto_extend_past_last_breakpoint_keeps_request(self):
        resolution = resolve_availability([], date(2026, 2, 1), requested_days=1000)
        assert resolution.recommended_days == 1000

    def test_only_past_bookings_count_as_empty(self):
        intervals = [Interval(date(2025, 1, 1), date(2025, 6, 30))]
        resolution = resolve_availability(intervals, date(2026, 2, 1), requested_days=30)
        assert resolution.mode == MODE_AUTO_EXTENDED

    def test_enough_room_before_next_booking_is_standard(self):
        intervals = [Interval(date(2026, 6, 1), date(2026, 6, 30))]
        resolution = resolve_availability(intervals, date(2026, 2, 1), requested_days=30)

        assert resolution.mode == MODE_STANDARD
        assert resolution.max_available == Bounded(120)
        assert resolution.recommended_days == 30

    def test_tiny_gap_is_standard_without_recommendation(self):
        intervals = [Interval(date(2026, 2, 5), date(2026, 2, 28))]
        resolution = resolve_availability(intervals, date(2026, 2, 1), requested_days=30)

        assert resolution.mode == MODE_STANDARD
        assert resolution.max_available == Bounded(4)
        assert resolution.recommended_days is None

    def test_occupied_start_has_nothing_available(self):
        intervals = [Interval(date(2026, 1, 15), date(2026, 2, 15))]
        resolution = resolve_availability(intervals, date(2026, 2, 1), requested_days=30)

        assert resolution.max_available == Bounded(0)
        assert resolution.mode == MODE_STANDARD
        assert resolution.recommended_days is None

    def test_cancelled_interval_does_not_bound(self):
        intervals = [Interval(date(2026, 3, 1), date(2026, 3, 10), status="cancelled")]
        resolution = resolve_availability(intervals, date(2026, 2, 1))
        assert resolution.mode == MODE_AUTO_EXTENDED

    def test_nearest_upcoming_interval_wins(self):
        intervals = [
            Interval(date(2026, 5, 1), date(2026, 5, 31)),
            Interval(date(2026, 2, 21), date(2026, 2, 22), kind=KIND_BLOCK),
        ]
        resolution = resolve_availability(intervals, date(2026, 2, 1), requested_days=30)
        assert resolution.max_available == Bounded(20)
        assert resolution.mode == MODE_GAP_FILLING

    def test_non_positive_request_rejected(self):
        with pytest.raises(ValidationError):
            resolve_availability([], date(2026, 2, 1), requested_days=0)


class TestResolverProperties:
    """A bounded max-available run is always free, and one more day is not."""

    INTERVALS = [
        Interval(date(2026, 1, 10), date(2026, 1, 20)),
        Interval(date(2026, 2, 14), date(2026, 2, 16), kind=KIND_BLOCK),
        Interval(date(2026, 4, 1), date(2026, 4, 30)),
    ]

    @pytest.mark.parametrize("day", range(1, 28, 2))
    def test_max_available_is_free_and_maximal(self, day):
        start = date(2026, 1, day)
        resolution = resolve_availability(self.INTERVALS, start, requested_days=30)
        days = resolution.max_available.days

        if days > 0:
            assert check_range(self.INTERVALS, start, days).is_valid
        assert not check_range(self.INTERVALS, start, days + 1).is_valid


class TestEvaluate:
    def test_combines_check_and_resolution(self):
        intervals = [Interval(date(2026, 3, 1), date(2026, 3, 10))]
        result = evaluate(intervals, date(2026, 2, 1), 30)

        assert result.is_valid is False
        assert result.conflict_date == date(2026, 3, 1)
        assert result.max_available_days == 28
        assert result.unbounded is False
        assert result.mode == MODE_GAP_FILLING

    def test_unbounded_has_no_day_count(self):
        result = evaluate([], date(2026, 2, 1), 30)
        assert result.is_valid is True
        assert result.max_available_days is None
        assert result.unbounded is True
