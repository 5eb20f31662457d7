"""
Pricing

Guest-facing price of a stay: nightly base rate times nights, plus the
platform commission, rounded half-up to a whole currency unit. The amount
computed here is stored on the booking and charged as-is.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
import math

COMMISSION_RATE = Decimal('0.12')

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class PriceQuote:
    nights: int
    nightly_rate: int
    subtotal: int
    commission: int
    total: int


def count_nights(check_in: date | datetime, check_out: date | datetime) -> int:
    """
    Whole nights between the two dates, rounded up, at least one

    Same-day or inverted ranges still count as one night; rejecting them is
    the caller's job.
    """
    seconds = (check_out - check_in).total_seconds()
    return max(1, math.ceil(seconds / SECONDS_PER_DAY))


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def _as_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quote(base_price, check_in, check_out, commission_rate=COMMISSION_RATE) -> PriceQuote:
    """Full price breakdown for a stay"""
    base = _as_decimal(base_price)
    if base < 0:
        raise ValueError("Base price cannot be negative")

    nights = count_nights(check_in, check_out)
    subtotal = base * nights
    total = round_half_up(subtotal * (1 + _as_decimal(commission_rate)))
    rounded_subtotal = round_half_up(subtotal)

    return PriceQuote(
        nights=nights,
        nightly_rate=round_half_up(base),
        subtotal=rounded_subtotal,
        commission=total - rounded_subtotal,
        total=total,
    )


def calculate_total_price(base_price, check_in, check_out, commission_rate=COMMISSION_RATE) -> int:
    return quote(base_price, check_in, check_out, commission_rate).total
