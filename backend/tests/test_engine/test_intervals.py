"""Tests for interval arithmetic and the cleaning buffer."""

from datetime import date

import pytest

from studiorent.engine import Interval, ValidationError, apply_cleaning_buffer, end_date_for
from studiorent.engine.intervals import KIND_BLOCK, parse_date


class TestInterval:
    def test_closed_on_both_ends(self):
        interval = Interval(date(2026, 2, 1), date(2026, 2, 28))
        assert interval.days == 28
        assert interval.contains(date(2026, 2, 1))
        assert interval.contains(date(2026, 2, 28))
        assert not interval.contains(date(2026, 3, 1))

    def test_single_day(self):
        assert Interval(date(2026, 2, 1), date(2026, 2, 1)).days == 1

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError):
            Interval(date(2026, 2, 2), date(2026, 2, 1))

    def test_cancelled_is_inactive(self):
        assert not Interval(date(2026, 2, 1), date(2026, 2, 2), status="cancelled").is_active
        assert Interval(date(2026, 2, 1), date(2026, 2, 2), status="pending_payment").is_active


def test_end_date_for():
    assert end_date_for(date(2026, 2, 1), 1) == date(2026, 2, 1)
    assert end_date_for(date(2026, 2, 1), 28) == date(2026, 2, 28)
    assert end_date_for(date(2026, 12, 20), 30) == date(2027, 1, 18)


def test_end_date_past_calendar_limit_is_a_validation_error():
    with pytest.raises(ValidationError) as exc_info:
        end_date_for(date(2026, 2, 1), 10_000_000)
    assert exc_info.value.fields == ["durationDays"]


class TestParseDate:
    def test_iso(self):
        assert parse_date("2026-02-01") == date(2026, 2, 1)

    def test_passthrough(self):
        assert parse_date(date(2026, 2, 1)) == date(2026, 2, 1)

    @pytest.mark.parametrize("value", ["2026-02-30", "tomorrow", "", None])
    def test_malformed(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_date(value)
        assert exc_info.value.errors[0].message_ar


class TestCleaningBuffer:
    """Bookings are padded on both sides; blocks are not."""

    def test_pads_bookings(self):
        booking = Interval(date(2026, 3, 1), date(2026, 3, 10))
        (padded,) = apply_cleaning_buffer([booking], 2)
        assert padded.start == date(2026, 2, 27)
        assert padded.end == date(2026, 3, 12)

    def test_blocks_untouched(self):
        block = Interval(date(2026, 3, 1), date(2026, 3, 10), kind=KIND_BLOCK)
        assert apply_cleaning_buffer([block], 2) == [block]

    def test_drops_cancelled(self):
        cancelled = Interval(date(2026, 3, 1), date(2026, 3, 10), status="cancelled")
        assert apply_cleaning_buffer([cancelled], 2) == []

    def test_zero_buffer_is_identity(self):
        booking = Interval(date(2026, 3, 1), date(2026, 3, 10))
        assert apply_cleaning_buffer([booking], 0) == [booking]

    def test_negative_buffer_rejected(self):
        with pytest.raises(ValidationError):
            apply_cleaning_buffer([], -1)
