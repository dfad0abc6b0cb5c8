"""Booking wizard validators with bilingual, field-scoped messages.

Each ``validate_*`` function returns a (possibly empty) list of
``FieldError`` so the wizard can show every problem of a step at once.
"""

import base64
import binascii
import re
from collections.abc import Iterable
from datetime import date

from studiorent.engine.availability import MODE_GAP_FILLING, check_range, resolve_availability
from studiorent.engine.errors import FieldError
from studiorent.engine.intervals import Interval
from studiorent.engine.policy import BookingPolicy

ID_TYPES = ("passport", "saudi_id", "iqama")
PAYMENT_METHODS = ("stripe", "bank_transfer", "cash")

MIN_SIGNATURE_LENGTH = 500

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_EMAIL_LOCAL_RE = re.compile(r"^[a-z0-9._-]+$")
_PHONE_STRIP_RE = re.compile(r"[\s\-()]")
_SAUDI_PHONE_RES = (
    re.compile(r"^0\d{9}$"),
    re.compile(r"^\+966\d{9}$"),
    re.compile(r"^966\d{9}$"),
    re.compile(r"^5\d{8}$"),
)
_INTERNATIONAL_PHONE_RE = re.compile(r"^\+\d{1,3}\d{6,14}$")
_BARE_COUNTRY_CODE_PHONE_RE = re.compile(r"^\d{10,15}$")
_SAUDI_ID_RE = re.compile(r"^[12]\d{9}$")
_IQAMA_RE = re.compile(r"^2\d{9}$")
_PASSPORT_RE = re.compile(r"^[A-Z0-9]{6,20}$", re.IGNORECASE)
_DATA_URL_RE = re.compile(r"^data:image/(png|jpeg|jpg|webp);base64,")
_BASE64_RE = re.compile(r"^[A-Za-z0-9+/]+=*$")


# ---------------------------------------------------------------------------
# Field-level predicates
# ---------------------------------------------------------------------------


def is_valid_email(email: str) -> bool:
    trimmed = email.strip().lower()
    if not _EMAIL_RE.match(trimmed):
        return False
    local, _, domain = trimmed.partition("@")
    if not local or not domain:
        return False
    if not _EMAIL_LOCAL_RE.match(local):
        return False
    if local.startswith(".") or local.endswith(".") or ".." in local:
        return False
    return True


def is_valid_phone(phone: str) -> bool:
    """Saudi mobile formats or an international number with a country code."""
    cleaned = _PHONE_STRIP_RE.sub("", phone)
    if any(r.match(cleaned) for r in _SAUDI_PHONE_RES):
        return True
    if _INTERNATIONAL_PHONE_RE.match(cleaned):
        return True
    return bool(_BARE_COUNTRY_CODE_PHONE_RE.match(cleaned))


def is_valid_saudi_id(value: str) -> bool:
    return bool(_SAUDI_ID_RE.match(re.sub(r"\s", "", value)))


def is_valid_iqama(value: str) -> bool:
    return bool(_IQAMA_RE.match(re.sub(r"\s", "", value)))


def is_valid_passport(value: str) -> bool:
    return bool(_PASSPORT_RE.match(re.sub(r"\s", "", value)))


def _is_name_word(word: str) -> bool:
    if len(word) < 2:
        return False
    if word[0] in "-'" or word[-1] in "-'":
        return False
    # ASCII letters, hyphen, apostrophe, or any non-ASCII character (accents, Arabic)
    return all(("a" <= c.lower() <= "z") or c in "-'" or ord(c) >= 0x80 for c in word)


def is_valid_name(name: str) -> bool:
    """First and last name required, each at least two characters."""
    trimmed = name.strip()
    if len(trimmed) < 5:
        return False
    words = trimmed.split()
    return len(words) >= 2 and all(_is_name_word(w) for w in words)


def is_valid_signature(signature: str) -> bool:
    """A canvas export: base64 image data of at least ``MIN_SIGNATURE_LENGTH`` characters."""
    if not signature or len(signature) < MIN_SIGNATURE_LENGTH:
        return False

    if _DATA_URL_RE.match(signature):
        content = signature.split(",", 1)[1]
    else:
        content = re.sub(r"\s", "", signature)
        if not _BASE64_RE.match(content):
            return False

    if len(content) < MIN_SIGNATURE_LENGTH:
        return False
    try:
        base64.b64decode(content, validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


# ---------------------------------------------------------------------------
# Step validators
# ---------------------------------------------------------------------------


def validate_plan(
    start_date: date | None,
    duration_days: int | None,
    today: date,
    intervals: Iterable[Interval] | None = None,
    policy: BookingPolicy | None = None,
) -> list[FieldError]:
    """Step 1: start date and duration, checked against availability when known."""
    policy = policy or BookingPolicy()
    errors: list[FieldError] = []

    if not duration_days or duration_days <= 0:
        errors.append(
            FieldError(
                field="durationDays",
                message="Please select a rental duration",
                message_ar="يرجى اختيار مدة الإيجار",
            )
        )
    elif duration_days > policy.max_stay_days:
        errors.append(
            FieldError(
                field="durationDays",
                message=f"Maximum rental period is {policy.max_stay_days} days",
                message_ar=f"الحد الأقصى للإيجار هو {policy.max_stay_days} يوم",
            )
        )

    if start_date is None:
        errors.append(
            FieldError(
                field="startDate",
                message="Please select a start date",
                message_ar="يرجى اختيار تاريخ البدء",
            )
        )
    elif start_date < today:
        errors.append(
            FieldError(
                field="startDate",
                message="Start date must be today or in the future",
                message_ar="يجب أن يكون تاريخ البدء اليوم أو في المستقبل",
            )
        )

    if errors:
        return errors

    if intervals is None:
        if duration_days < policy.min_stay_days:
            errors.append(
                FieldError(
                    field="durationDays",
                    message=f"Minimum rental period is {policy.min_stay_days} days",
                    message_ar=f"الحد الأدنى للإيجار هو {policy.min_stay_days} يوم",
                )
            )
        return errors

    intervals = list(intervals)
    resolution = resolve_availability(intervals, start_date, duration_days, policy)

    # Only a stay that fills a gap before the next booking may be shorter
    if resolution.mode != MODE_GAP_FILLING and duration_days < policy.min_stay_days:
        errors.append(
            FieldError(
                field="durationDays",
                message=f"Minimum rental period is {policy.min_stay_days} days",
                message_ar=f"الحد الأدنى للإيجار هو {policy.min_stay_days} يوم",
            )
        )

    max_available = resolution.max_available
    if not max_available.allows(duration_days):
        errors.append(
            FieldError(
                field="durationDays",
                message=f"Only {max_available.days} days available before next booking",
                message_ar=f"{max_available.days} يوم فقط متاحة قبل الحجز التالي",
            )
        )

    check = check_range(intervals, start_date, duration_days)
    if not check.is_valid:
        errors.append(
            FieldError(
                field="startDate",
                message=f"The selected dates are not available (first unavailable day: {check.conflict_date.isoformat()})",
                message_ar="التواريخ المحددة غير متاحة",
            )
        )
    return errors


def validate_contact(name: str | None, email: str | None, phone: str | None) -> list[FieldError]:
    """Step 2: full name plus at least one valid way to reach the guest."""
    errors: list[FieldError] = []

    if not name or not is_valid_name(name):
        errors.append(
            FieldError(
                field="customerName",
                message="Please enter your full name (first and last name required)",
                message_ar="يرجى إدخال اسمك الكامل (الاسم الأول والأخير مطلوبان)",
            )
        )

    has_email = bool(email) and is_valid_email(email)
    has_phone = bool(phone) and is_valid_phone(phone)

    if not email:
        if not has_phone:
            errors.append(
                FieldError(
                    field="customerEmail",
                    message="Please enter a valid email address (required if phone is invalid)",
                    message_ar="يرجى إدخال بريد إلكتروني صحيح (مطلوب إذا كان الهاتف غير صحيح)",
                )
            )
    elif not has_email:
        errors.append(
            FieldError(
                field="customerEmail",
                message="Please enter a valid email address (e.g., example@email.com)",
                message_ar="يرجى إدخال بريد إلكتروني صحيح (مثال: example@email.com)",
            )
        )

    if not phone:
        if not has_email:
            errors.append(
                FieldError(
                    field="customerPhone",
                    message="Please enter a valid phone number (required if email is invalid)",
                    message_ar="يرجى إدخال رقم هاتف صحيح (مطلوب إذا كان البريد الإلكتروني غير صحيح)",
                )
            )
    elif not has_phone:
        errors.append(
            FieldError(
                field="customerPhone",
                message="Please enter a valid phone number (Saudi: 0531182200 or +966531182200; International: +country code)",
                message_ar="يرجى إدخال رقم هاتف صحيح (سعودي: 0531182200 أو +966531182200؛ دولي: +كود البلد)",
            )
        )

    return errors


_ID_RULES = {
    "saudi_id": (
        is_valid_saudi_id,
        "Please enter a valid Saudi ID (10 digits starting with 1 or 2)",
        "يرجى إدخال هوية سعودية صحيحة (10 أرقام تبدأ بـ 1 أو 2)",
    ),
    "iqama": (
        is_valid_iqama,
        "Please enter a valid Iqama number (10 digits starting with 2)",
        "يرجى إدخال رقم إقامة صحيح (10 أرقام تبدأ بـ 2)",
    ),
    "passport": (
        is_valid_passport,
        "Please enter a valid passport number (6-20 alphanumeric characters)",
        "يرجى إدخال رقم جواز سفر صحيح (6-20 حرف أو رقم)",
    ),
}


def validate_identity(id_type: str | None, id_number: str | None, nationality: str | None) -> list[FieldError]:
    """Step 3: identity document and nationality."""
    errors: list[FieldError] = []

    if id_type not in ID_TYPES:
        errors.append(
            FieldError(field="idType", message="Please select an ID type", message_ar="يرجى اختيار نوع الهوية")
        )

    if not id_number:
        errors.append(
            FieldError(field="idNumber", message="Please enter your ID number", message_ar="يرجى إدخال رقم الهوية")
        )
    elif id_type in _ID_RULES:
        check, message, message_ar = _ID_RULES[id_type]
        if not check(id_number):
            errors.append(FieldError(field="idNumber", message=message, message_ar=message_ar))

    if not nationality or not nationality.strip():
        errors.append(
            FieldError(field="nationality", message="Please select your nationality", message_ar="يرجى اختيار جنسيتك")
        )

    return errors


def validate_terms(terms_accepted: bool, signature: str | None) -> list[FieldError]:
    """Step 4: terms acceptance and a drawn signature."""
    errors: list[FieldError] = []

    if terms_accepted is not True:
        errors.append(
            FieldError(
                field="termsAccepted",
                message="You must accept the terms and conditions",
                message_ar="يجب عليك الموافقة على الشروط والأحكام",
            )
        )

    if not signature:
        errors.append(
            FieldError(field="signature", message="Please provide your signature", message_ar="يرجى تقديم توقيعك")
        )
    elif not is_valid_signature(signature):
        errors.append(
            FieldError(field="signature", message="Signature appears to be empty", message_ar="يبدو أن التوقيع فارغ")
        )

    return errors
