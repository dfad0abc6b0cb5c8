"""Tests for the booking wizard validators and their bilingual messages."""

from datetime import date

import pytest

from helpers import SIGNATURE
from studiorent.engine import FieldError, Interval
from studiorent.engine.validation import (
    is_valid_email,
    is_valid_iqama,
    is_valid_name,
    is_valid_passport,
    is_valid_phone,
    is_valid_saudi_id,
    is_valid_signature,
    validate_contact,
    validate_identity,
    validate_plan,
    validate_terms,
)

TODAY = date(2026, 1, 1)


def _fields(errors: list[FieldError]) -> list[str]:
    return [e.field for e in errors]


class TestPredicates:
    @pytest.mark.parametrize("email", ["sara@example.com", "John.Doe@Example.COM", "a_b-c@mail.co"])
    def test_valid_emails(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize("email", ["no-at-sign", "a..b@x.com", ".a@x.com", "a.@x.com", "a+tag@x.com", "a@b"])
    def test_invalid_emails(self, email):
        assert not is_valid_email(email)

    @pytest.mark.parametrize(
        "phone", ["0531182200", "+966531182200", "966531182200", "531182200", "053 118 2200", "+33612345678"]
    )
    def test_valid_phones(self, phone):
        assert is_valid_phone(phone)

    @pytest.mark.parametrize("phone", ["12345", "abc", "+1", "05311822"])
    def test_invalid_phones(self, phone):
        assert not is_valid_phone(phone)

    def test_saudi_id(self):
        assert is_valid_saudi_id("1012345678")
        assert is_valid_saudi_id("2012345678")
        assert not is_valid_saudi_id("3012345678")
        assert not is_valid_saudi_id("101234567")

    def test_iqama_must_start_with_two(self):
        assert is_valid_iqama("2012345678")
        assert not is_valid_iqama("1012345678")

    def test_passport(self):
        assert is_valid_passport("AB123456")
        assert is_valid_passport("18ab45621")
        assert not is_valid_passport("AB1")
        assert not is_valid_passport("AB-12345")

    @pytest.mark.parametrize("name", ["Sara Al-Harbi", "Jo O'Neil", "محمد العتيبي", "José Álvarez"])
    def test_valid_names(self, name):
        assert is_valid_name(name)

    @pytest.mark.parametrize("name", ["Sara", "A B", "John 3rd", "-Jo Smith"])
    def test_invalid_names(self, name):
        assert not is_valid_name(name)

    def test_signature(self):
        assert is_valid_signature(SIGNATURE)
        assert is_valid_signature(SIGNATURE.split(",", 1)[1])
        assert not is_valid_signature("short")
        assert not is_valid_signature("data:image/png;base64," + "!" * 600)


class TestValidatePlan:
    """Step 1, with and without availability context."""

    def test_valid_plan(self):
        assert validate_plan(date(2026, 2, 1), 30, TODAY) == []

    def test_missing_values(self):
        errors = validate_plan(None, None, TODAY)
        assert _fields(errors) == ["durationDays", "startDate"]
        assert all(e.message_ar for e in errors)

    def test_start_in_past(self):
        assert _fields(validate_plan(date(2025, 12, 31), 30, TODAY)) == ["startDate"]

    def test_start_today_allowed(self):
        assert validate_plan(TODAY, 30, TODAY) == []

    def test_below_minimum_stay(self):
        errors = validate_plan(date(2026, 2, 1), 20, TODAY)
        assert _fields(errors) == ["durationDays"]
        assert "30" in errors[0].message

    def test_above_maximum_stay(self):
        assert _fields(validate_plan(date(2026, 2, 1), 1081, TODAY)) == ["durationDays"]

    def test_gap_filling_stay_may_be_short(self):
        intervals = [Interval(date(2026, 3, 1), date(2026, 3, 10))]
        assert validate_plan(date(2026, 2, 1), 28, TODAY, intervals) == []

    def test_longer_than_gap(self):
        intervals = [Interval(date(2026, 3, 1), date(2026, 3, 10))]
        errors = validate_plan(date(2026, 2, 1), 29, TODAY, intervals)
        assert _fields(errors) == ["durationDays", "startDate"]
        assert "28" in errors[0].message

    def test_short_stay_with_plenty_of_room_needs_minimum(self):
        intervals = [Interval(date(2026, 6, 1), date(2026, 6, 30))]
        assert _fields(validate_plan(date(2026, 2, 1), 20, TODAY, intervals)) == ["durationDays"]

    def test_short_stay_on_empty_calendar_needs_minimum(self):
        assert _fields(validate_plan(date(2026, 2, 1), 20, TODAY, [])) == ["durationDays"]

    def test_occupied_start(self):
        intervals = [Interval(date(2026, 1, 20), date(2026, 2, 20))]
        errors = validate_plan(date(2026, 2, 1), 30, TODAY, intervals)
        assert "startDate" in _fields(errors)


class TestValidateContact:
    def test_valid(self):
        assert validate_contact("Sara Al-Harbi", "sara@example.com", "0531182200") == []

    def test_phone_alone_is_enough(self):
        assert validate_contact("Sara Al-Harbi", "", "0531182200") == []

    def test_email_alone_is_enough(self):
        assert validate_contact("Sara Al-Harbi", "sara@example.com", None) == []

    def test_invalid_email_reported_even_with_phone(self):
        assert _fields(validate_contact("Sara Al-Harbi", "not-an-email", "0531182200")) == ["customerEmail"]

    def test_no_contact_at_all(self):
        assert _fields(validate_contact("Sara Al-Harbi", "", "")) == ["customerEmail", "customerPhone"]

    def test_single_word_name(self):
        assert _fields(validate_contact("Sara", "sara@example.com", "")) == ["customerName"]


class TestValidateIdentity:
    def test_valid(self):
        assert validate_identity("saudi_id", "1012345678", "Saudi Arabia") == []

    def test_iqama_rule_applied(self):
        errors = validate_identity("iqama", "1012345678", "Egypt")
        assert _fields(errors) == ["idNumber"]
        assert "Iqama" in errors[0].message

    def test_everything_missing(self):
        assert _fields(validate_identity(None, "", "")) == ["idType", "idNumber", "nationality"]


class TestValidateTerms:
    def test_valid(self):
        assert validate_terms(True, SIGNATURE) == []

    def test_nothing_given(self):
        assert _fields(validate_terms(False, None)) == ["termsAccepted", "signature"]

    def test_blank_canvas(self):
        errors = validate_terms(True, "data:image/png;base64,AAAA")
        assert _fields(errors) == ["signature"]
        assert errors[0].message_ar == "يبدو أن التوقيع فارغ"


def test_field_error_to_dict():
    error = FieldError(field="startDate", message="Bad date", message_ar="تاريخ غير صالح")
    assert error.to_dict() == {"field": "startDate", "message": "Bad date", "messageAr": "تاريخ غير صالح"}
