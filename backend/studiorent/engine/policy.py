"""Business policy consumed by the engine, passed in and never read from globals."""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class DiscountTier:
    """Discount applied from ``min_months`` (rounded stay length) upward."""

    min_months: int
    percent: int

    @property
    def breakpoint_days(self) -> int:
        return self.min_months * 30


# 1-2mo=0%, 3-5mo=5%, then +2% every 3 months, capped at 25% from 33 months
DEFAULT_DISCOUNT_TIERS: tuple[DiscountTier, ...] = (
    DiscountTier(0, 0),
    DiscountTier(3, 5),
    DiscountTier(6, 7),
    DiscountTier(9, 9),
    DiscountTier(12, 11),
    DiscountTier(15, 13),
    DiscountTier(18, 15),
    DiscountTier(21, 17),
    DiscountTier(24, 19),
    DiscountTier(27, 21),
    DiscountTier(30, 23),
    DiscountTier(33, 25),
)


@dataclass(frozen=True)
class CleaningFeePolicy:
    """Recurring cleaning add-on, billed in whole weeks or whole 30-day months."""

    weekly_rate: Decimal = Decimal("50")
    monthly_rate: Decimal = Decimal("200")
    # Stays shorter than this are billed weekly
    monthly_threshold_days: int = 30
    week_length_days: int = 7
    month_length_days: int = 30


@dataclass(frozen=True)
class BookingPolicy:
    discount_tiers: tuple[DiscountTier, ...] = DEFAULT_DISCOUNT_TIERS
    cleaning: CleaningFeePolicy = field(default_factory=CleaningFeePolicy)
    min_stay_days: int = 30
    min_gap_fill_days: int = 7
    max_stay_days: int = 1080
    cleaning_buffer_days: int = 2
    currency_quantum: Decimal = Decimal("0.01")
