"""Engine error taxonomy: validation failures and date conflicts.

Both carry bilingual, field-scoped messages so the HTTP layer can hand them
straight to the booking wizard.
"""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class FieldError:
    """A single field-scoped validation message in English and Arabic."""

    field: str
    message: str
    message_ar: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message, "messageAr": self.message_ar}


class BookingError(Exception):
    """Base class for errors raised by the availability and pricing engine."""


class ValidationError(BookingError):
    """Malformed input: non-positive duration or rate, bad dates, failed wizard step."""

    def __init__(self, errors: list[FieldError] | FieldError) -> None:
        if isinstance(errors, FieldError):
            errors = [errors]
        self.errors: list[FieldError] = list(errors)
        super().__init__("; ".join(e.message for e in self.errors) or "Validation failed")

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]


class ConflictError(BookingError):
    """The requested range overlaps an occupied day."""

    message = "Room is not available for the selected dates"
    message_ar = "الغرفة غير متاحة في التواريخ المحددة"

    def __init__(self, conflict_date: date | None, field: str = "startDate") -> None:
        self.conflict_date = conflict_date
        self.field = field
        super().__init__(
            f"{self.message} (first unavailable day: {conflict_date.isoformat()})"
            if conflict_date
            else self.message
        )
