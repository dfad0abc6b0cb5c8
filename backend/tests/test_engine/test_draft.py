"""Tests for the immutable booking draft and its step transitions."""

from datetime import date

import pytest

from helpers import SIGNATURE
from studiorent.engine import Interval, ValidationError
from studiorent.engine.draft import (
    STEP_CONTACT,
    STEP_IDENTITY,
    STEP_PLAN,
    STEP_TERMS,
    BookingDraft,
    advance_step,
    apply_field_change,
    retreat_step,
    validate_draft,
)

TODAY = date(2026, 1, 1)


def _complete_draft(**overrides) -> BookingDraft:
    values = {
        "room_id": "garden-studio",
        "step": STEP_TERMS,
        "start_date": date(2026, 2, 1),
        "duration_days": 30,
        "customer_name": "Sara Al-Harbi",
        "customer_email": "sara@example.com",
        "customer_phone": "0531182200",
        "id_type": "saudi_id",
        "id_number": "1012345678",
        "nationality": "Saudi Arabia",
        "terms_accepted": True,
        "signature": SIGNATURE,
    }
    values.update(overrides)
    return BookingDraft(**values)


class TestApplyFieldChange:
    def test_returns_new_draft(self):
        draft = BookingDraft(room_id="r1")
        updated = apply_field_change(draft, "duration_days", 60)

        assert updated.duration_days == 60
        assert draft.duration_days is None

    def test_parses_start_date(self):
        updated = apply_field_change(BookingDraft(room_id="r1"), "start_date", "2026-02-01")
        assert updated.start_date == date(2026, 2, 1)

    def test_malformed_start_date(self):
        with pytest.raises(ValidationError) as exc_info:
            apply_field_change(BookingDraft(room_id="r1"), "start_date", "02/01/2026")
        assert exc_info.value.fields == ["startDate"]

    @pytest.mark.parametrize("field", ["step", "room_id", "surname"])
    def test_rejects_non_editable_fields(self, field):
        with pytest.raises(ValidationError):
            apply_field_change(BookingDraft(room_id="r1"), field, "x")

    def test_draft_is_frozen(self):
        draft = BookingDraft(room_id="r1")
        with pytest.raises(AttributeError):
            draft.step = STEP_TERMS


class TestStepTransitions:
    """Walking the four wizard steps."""

    def test_cannot_leave_incomplete_plan(self):
        with pytest.raises(ValidationError) as exc_info:
            advance_step(BookingDraft(room_id="r1"), TODAY)
        assert exc_info.value.fields == ["durationDays", "startDate"]

    def test_full_walk(self):
        draft = _complete_draft(step=STEP_PLAN)

        draft = advance_step(draft, TODAY)
        assert draft.step == STEP_CONTACT
        draft = advance_step(draft, TODAY)
        assert draft.step == STEP_IDENTITY
        draft = advance_step(draft, TODAY)
        assert draft.step == STEP_TERMS
        assert draft.is_complete

        assert advance_step(draft, TODAY).step == STEP_TERMS

    def test_cannot_step_past_a_conflict(self):
        intervals = [Interval(date(2026, 2, 10), date(2026, 2, 20))]
        draft = _complete_draft(step=STEP_PLAN)

        with pytest.raises(ValidationError) as exc_info:
            advance_step(draft, TODAY, intervals)
        assert "startDate" in exc_info.value.fields

    def test_only_current_step_is_checked(self):
        draft = _complete_draft(step=STEP_PLAN, customer_name="")
        assert advance_step(draft, TODAY).step == STEP_CONTACT

    def test_retreat(self):
        draft = _complete_draft(step=STEP_IDENTITY)
        assert retreat_step(draft).step == STEP_CONTACT
        assert retreat_step(BookingDraft(room_id="r1")).step == STEP_PLAN

    def test_retreat_skips_validation(self):
        draft = BookingDraft(room_id="r1", step=STEP_CONTACT)
        assert retreat_step(draft).step == STEP_PLAN


class TestValidateDraft:
    def test_complete_draft_is_valid(self):
        assert validate_draft(_complete_draft(), TODAY) == []

    def test_collects_errors_from_every_step(self):
        draft = _complete_draft(duration_days=None, customer_name="", nationality="", terms_accepted=False)
        fields = [e.field for e in validate_draft(draft, TODAY)]
        assert fields == ["durationDays", "customerName", "nationality", "termsAccepted"]
