"""Booking wizard state as an immutable value plus pure transitions.

The wizard has four steps: plan (dates and duration), contact, identity and
terms. ``advance_step`` refuses to leave a step whose fields do not
validate, so an unresolved date conflict can never be stepped past.
"""

from collections.abc import Iterable
from dataclasses import dataclass, fields, replace
from datetime import date

from studiorent.engine.errors import FieldError, ValidationError
from studiorent.engine.intervals import Interval, parse_date
from studiorent.engine.policy import BookingPolicy
from studiorent.engine.validation import validate_contact, validate_identity, validate_plan, validate_terms

STEP_PLAN = 1
STEP_CONTACT = 2
STEP_IDENTITY = 3
STEP_TERMS = 4
FIRST_STEP = STEP_PLAN
LAST_STEP = STEP_TERMS


@dataclass(frozen=True)
class BookingDraft:
    room_id: str
    step: int = FIRST_STEP
    start_date: date | None = None
    duration_days: int | None = None
    cleaning_service: bool = False
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    id_type: str | None = None
    id_number: str = ""
    nationality: str = ""
    terms_accepted: bool = False
    signature: str | None = None
    payment_method: str = "bank_transfer"
    notes: str | None = None
    locale: str = "en"

    @property
    def is_complete(self) -> bool:
        return self.step == LAST_STEP


# Fields the wizard may edit; ``room_id`` and ``step`` change only via transitions
EDITABLE_FIELDS = frozenset(f.name for f in fields(BookingDraft)) - {"room_id", "step"}


def apply_field_change(draft: BookingDraft, field: str, value: object) -> BookingDraft:
    """Return a copy of ``draft`` with one field replaced.

    Raises:
        ValidationError: For an unknown or non-editable field, or a malformed date.
    """
    if field not in EDITABLE_FIELDS:
        raise ValidationError(
            FieldError(field=field, message=f"Unknown booking field '{field}'", message_ar="حقل غير معروف")
        )
    if field == "start_date" and value is not None:
        value = parse_date(value)
    return replace(draft, **{field: value})


def step_errors(
    draft: BookingDraft,
    today: date,
    intervals: Iterable[Interval] | None = None,
    policy: BookingPolicy | None = None,
) -> list[FieldError]:
    """Validation errors for the draft's current step only."""
    if draft.step == STEP_PLAN:
        return validate_plan(draft.start_date, draft.duration_days, today, intervals, policy)
    if draft.step == STEP_CONTACT:
        return validate_contact(draft.customer_name, draft.customer_email, draft.customer_phone)
    if draft.step == STEP_IDENTITY:
        return validate_identity(draft.id_type, draft.id_number, draft.nationality)
    return validate_terms(draft.terms_accepted, draft.signature)


def validate_draft(
    draft: BookingDraft,
    today: date,
    intervals: Iterable[Interval] | None = None,
    policy: BookingPolicy | None = None,
) -> list[FieldError]:
    """Validation errors across every step, as checked at submission time."""
    intervals = list(intervals) if intervals is not None else None
    errors: list[FieldError] = []
    for step in range(FIRST_STEP, LAST_STEP + 1):
        errors.extend(step_errors(replace(draft, step=step), today, intervals, policy))
    return errors


def advance_step(
    draft: BookingDraft,
    today: date,
    intervals: Iterable[Interval] | None = None,
    policy: BookingPolicy | None = None,
) -> BookingDraft:
    """Move to the next step if the current one validates.

    Raises:
        ValidationError: With every error of the current step.
    """
    errors = step_errors(draft, today, intervals, policy)
    if errors:
        raise ValidationError(errors)
    return replace(draft, step=min(draft.step + 1, LAST_STEP))


def retreat_step(draft: BookingDraft) -> BookingDraft:
    """Go back one step; going back never validates."""
    return replace(draft, step=max(draft.step - 1, FIRST_STEP))
