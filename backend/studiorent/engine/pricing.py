"""Price calculator: tiered long-stay discounts plus the cleaning add-on.

All money is ``Decimal``. The discount is applied to the unrounded base
price; only the amounts handed back to the caller are rounded (half up, to
``policy.currency_quantum``).
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from studiorent.engine.errors import FieldError, ValidationError
from studiorent.engine.policy import BookingPolicy, CleaningFeePolicy, DiscountTier

DAYS_PER_MONTH = 30

RATE_WEEKLY = "weekly"
RATE_MONTHLY = "monthly"


@dataclass(frozen=True)
class CleaningFee:
    fee: Decimal
    periods: int
    rate_type: str


@dataclass(frozen=True)
class PriceBreakdown:
    """Everything the booking summary needs to render a price."""

    total_price: Decimal
    original_price: Decimal
    daily_rate: Decimal
    days: int
    savings: Decimal
    savings_percent: int
    cleaning_fee: Decimal | None = None
    cleaning_periods: int | None = None
    cleaning_rate_type: str | None = None


def _require_positive_days(duration_days: int) -> None:
    if isinstance(duration_days, bool) or not isinstance(duration_days, int) or duration_days <= 0:
        raise ValidationError(
            FieldError(
                field="durationDays",
                message=f"Duration must be a positive number of days, got {duration_days!r}",
                message_ar="يجب أن تكون المدة عدداً موجباً من الأيام",
            )
        )


def _to_money(value: Decimal | int | float | str) -> Decimal:
    try:
        # str() first so floats like 4900.1 do not carry binary noise
        return value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(
            FieldError(
                field="monthlyRate",
                message=f"Invalid monthly rate: {value!r}",
                message_ar="السعر الشهري غير صالح",
            )
        ) from None


def round_money(amount: Decimal, quantum: Decimal) -> Decimal:
    return amount.quantize(quantum, rounding=ROUND_HALF_UP)


def months_for(duration_days: int) -> int:
    """Stay length in 30-day months, rounded half up (75 days -> 3 months)."""
    return (duration_days + DAYS_PER_MONTH // 2) // DAYS_PER_MONTH


def discount_percent_for(duration_days: int, tiers: Sequence[DiscountTier]) -> int:
    _require_positive_days(duration_days)
    months = months_for(duration_days)
    percent = 0
    for tier in sorted(tiers, key=lambda t: t.min_months):
        if months >= tier.min_months:
            percent = tier.percent
    return percent


def tier_breakpoints(tiers: Sequence[DiscountTier]) -> list[int]:
    """Stay lengths in days at which a discount tier starts, ascending."""
    return sorted({t.breakpoint_days for t in tiers if t.percent > 0})


def calculate_cleaning_fee(duration_days: int, policy: CleaningFeePolicy) -> CleaningFee:
    """Bill cleaning in whole periods covering the stay (a partial week is a full week)."""
    _require_positive_days(duration_days)
    if duration_days < policy.monthly_threshold_days:
        periods = math.ceil(duration_days / policy.week_length_days)
        return CleaningFee(fee=periods * policy.weekly_rate, periods=periods, rate_type=RATE_WEEKLY)

    periods = math.ceil(duration_days / policy.month_length_days)
    return CleaningFee(fee=periods * policy.monthly_rate, periods=periods, rate_type=RATE_MONTHLY)


def calculate_price(
    monthly_rate: Decimal | int | float | str,
    duration_days: int,
    cleaning_service_enabled: bool = False,
    policy: BookingPolicy | None = None,
) -> PriceBreakdown:
    """Price a stay of ``duration_days`` at ``monthly_rate`` per 30 days.

    Raises:
        ValidationError: If ``duration_days`` or ``monthly_rate`` is not positive.
    """
    policy = policy or BookingPolicy()
    _require_positive_days(duration_days)

    rate = _to_money(monthly_rate)
    if not rate.is_finite() or rate <= 0:
        raise ValidationError(
            FieldError(
                field="monthlyRate",
                message=f"Monthly rate must be positive, got {monthly_rate!r}",
                message_ar="يجب أن يكون السعر الشهري موجباً",
            )
        )

    quantum = policy.currency_quantum
    percent = discount_percent_for(duration_days, policy.discount_tiers)

    exact_original = rate * duration_days / DAYS_PER_MONTH
    exact_total = exact_original * (100 - percent) / 100

    original_price = round_money(exact_original, quantum)
    discounted = round_money(exact_total, quantum)

    cleaning = None
    if cleaning_service_enabled:
        cleaning = calculate_cleaning_fee(duration_days, policy.cleaning)

    return PriceBreakdown(
        total_price=discounted + (cleaning.fee if cleaning else 0),
        original_price=original_price,
        daily_rate=round_money(rate / DAYS_PER_MONTH, quantum),
        days=duration_days,
        savings=original_price - discounted,
        savings_percent=percent,
        cleaning_fee=cleaning.fee if cleaning else None,
        cleaning_periods=cleaning.periods if cleaning else None,
        cleaning_rate_type=cleaning.rate_type if cleaning else None,
    )
