"""Unit tests for stay pricing."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from apps.bookings.domain.pricing import (
    COMMISSION_RATE,
    calculate_total_price,
    count_nights,
    quote,
    round_half_up,
)


def test_three_nights_at_1000_costs_3360() -> None:
    assert calculate_total_price(1000, date(2024, 6, 1), date(2024, 6, 4)) == 3360


def test_commission_rate_is_twelve_percent() -> None:
    assert COMMISSION_RATE == Decimal("0.12")


@pytest.mark.parametrize(
    ("check_in", "check_out", "nights"),
    [
        (date(2024, 6, 1), date(2024, 6, 2), 1),
        (date(2024, 6, 1), date(2024, 6, 8), 7),
        (date(2024, 6, 1), date(2024, 6, 1), 1),
        (date(2024, 6, 5), date(2024, 6, 1), 1),
        (datetime(2024, 6, 1, 14), datetime(2024, 6, 2, 16), 2),
    ],
)
def test_count_nights(check_in, check_out, nights) -> None:
    assert count_nights(check_in, check_out) == nights


def test_same_day_range_is_priced_as_one_night() -> None:
    assert calculate_total_price(1000, date(2024, 6, 1), date(2024, 6, 1)) == 1120


def test_rounds_half_up() -> None:
    assert round_half_up(Decimal("2.5")) == 3
    assert round_half_up(Decimal("3.5")) == 4
    assert round_half_up(Decimal("2.49")) == 2
    # 2083 * 1.12 = 2332.96
    assert calculate_total_price(2083, date(2024, 1, 1), date(2024, 1, 2)) == 2333


def test_half_unit_total_rounds_up_not_to_even() -> None:
    # 15 * 1.1 = 16.5
    assert calculate_total_price(15, date(2024, 1, 1), date(2024, 1, 2), commission_rate=Decimal("0.1")) == 17


def test_quote_breakdown_adds_up() -> None:
    breakdown = quote(2500, date(2024, 7, 10), date(2024, 7, 15))

    assert breakdown.nights == 5
    assert breakdown.nightly_rate == 2500
    assert breakdown.subtotal == 12500
    assert breakdown.commission == 1500
    assert breakdown.total == 14000
    assert breakdown.subtotal + breakdown.commission == breakdown.total


def test_accepts_decimal_base_price() -> None:
    assert calculate_total_price(Decimal("1000.00"), date(2024, 6, 1), date(2024, 6, 2)) == 1120


def test_zero_price_is_free() -> None:
    assert calculate_total_price(0, date(2024, 6, 1), date(2024, 6, 3)) == 0


def test_negative_price_rejected() -> None:
    with pytest.raises(ValueError):
        calculate_total_price(-1, date(2024, 6, 1), date(2024, 6, 2))


def test_long_stay() -> None:
    check_in = date(2024, 1, 1)
    assert calculate_total_price(1500, check_in, check_in + timedelta(days=30)) == 50400
