"""Tests for core calculation and month helpers."""

from decimal import Decimal

import pytest

from condowater.core.calculations import (
    carry_forward,
    coerce_amount,
    compute_reading,
    round_half_up,
)
from condowater.core.dates import following_month, is_month_key, validate_month
from condowater.core.errors import ValidationError


@pytest.mark.parametrize(
    "previous, current, price, usage, total",
    [
        (Decimal("100"), Decimal("130"), Decimal("5"), Decimal("30"), Decimal("150")),
        (Decimal("0"), Decimal("0"), Decimal("5"), Decimal("0"), Decimal("0")),
        (Decimal("120.25"), Decimal("150.55"), Decimal("2.5"), Decimal("30.30"), Decimal("75.750")),
        (Decimal("100"), Decimal("100"), Decimal("0"), Decimal("0"), Decimal("0")),
    ],
)
def test_compute_reading(previous, current, price, usage, total):
    """Tests usage and total for ordinary readings."""
    figures = compute_reading(previous, current, price)
    assert figures.usage == usage
    assert figures.total_charge == total
    assert figures.total_charge == round_half_up(figures.usage * figures.unit_price)


def test_compute_reading_allows_negative_usage():
    """A meter reset gives negative usage, which is kept as is."""
    figures = compute_reading(Decimal("500"), Decimal("20"), Decimal("5"))
    assert figures.usage == Decimal("-480")
    assert figures.total_charge == Decimal("-2400")


def test_compute_reading_defaults():
    """Omitted values fall back to zero and the configured unit price."""
    figures = compute_reading()
    assert figures.previous == Decimal("0")
    assert figures.current == Decimal("0")
    assert figures.unit_price == Decimal("5.0")
    assert figures.usage == Decimal("0")


def test_compute_reading_coerces_strings_and_floats():
    figures = compute_reading("10", 25.5, " 2 ")
    assert figures.usage == Decimal("15.5")
    assert figures.total_charge == Decimal("31.0")


@pytest.mark.parametrize(
    "previous, current, price, expected",
    [
        (
            "0.005",
            "0.015",
            "5",
            (Decimal("0.01"), Decimal("0.02"), Decimal("5"), Decimal("0.01"), Decimal("0.05")),
        ),
        (
            "100.125",
            "110.5",
            "1.23456",
            (Decimal("100.13"), Decimal("110.50"), Decimal("1.2346"), Decimal("10.37"), Decimal("12.80")),
        ),
    ],
)
def test_compute_reading_rounds_inputs_to_stored_precision(previous, current, price, expected):
    """Sub-cent inputs are rounded half-up before usage and total are derived."""
    figures = compute_reading(previous, current, price)
    assert (
        figures.previous,
        figures.current,
        figures.unit_price,
        figures.usage,
        figures.total_charge,
    ) == expected
    assert figures.usage == figures.current - figures.previous
    assert figures.total_charge == round_half_up(figures.usage * figures.unit_price)


@pytest.mark.parametrize("bad", ["abc", "12,5", "NaN", float("inf"), True, "1.2.3"])
def test_compute_reading_rejects_non_numbers(bad):
    with pytest.raises(ValidationError) as exc_info:
        compute_reading(0, bad, 5)
    assert exc_info.value.code == "INVALID_NUMBER"


@pytest.mark.parametrize(
    "previous, price",
    [(Decimal("-1"), Decimal("5")), (Decimal("0"), Decimal("-0.5"))],
)
def test_compute_reading_rejects_negative_inputs(previous, price):
    with pytest.raises(ValidationError) as exc_info:
        compute_reading(previous, Decimal("10"), price)
    assert exc_info.value.code == "NEGATIVE_VALUE"


def test_coerce_amount_blank_string_uses_default():
    assert coerce_amount("  ", "lastMonth", default=Decimal("7")) == Decimal("7")


def test_carry_forward():
    """The closing value opens the next month with nothing billed yet."""
    figures = carry_forward(Decimal("245.50"), Decimal("6.25"))
    assert figures.previous == Decimal("245.50")
    assert figures.current == Decimal("0")
    assert figures.usage == Decimal("0")
    assert figures.total_charge == Decimal("0")
    assert figures.unit_price == Decimal("6.25")


@pytest.mark.parametrize(
    "value, expected",
    [
        (Decimal("1.005"), Decimal("1.01")),
        (Decimal("2.675"), Decimal("2.68")),
        (Decimal("35"), Decimal("35.00")),
        (Decimal("-1.005"), Decimal("-1.01")),
    ],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


@pytest.mark.parametrize("month", ["2024-01", "1999-12", "2030-10"])
def test_valid_month_keys(month):
    assert is_month_key(month)
    assert validate_month(month) == month


@pytest.mark.parametrize("month", ["2024-13", "24-01", "2024/01", "2024-00", "2024-1", ""])
def test_invalid_month_keys(month):
    assert not is_month_key(month)
    with pytest.raises(ValidationError):
        validate_month(month)


def test_validate_month_codes():
    with pytest.raises(ValidationError) as missing:
        validate_month(None)
    assert missing.value.code == "MISSING_MONTH"

    with pytest.raises(ValidationError) as invalid:
        validate_month("2024-13", invalid_code="INVALID_TO_MONTH_FORMAT")
    assert invalid.value.code == "INVALID_TO_MONTH_FORMAT"


@pytest.mark.parametrize(
    "month, expected",
    [("2024-01", "2024-02"), ("2024-12", "2025-01")],
)
def test_following_month(month, expected):
    assert following_month(month) == expected
