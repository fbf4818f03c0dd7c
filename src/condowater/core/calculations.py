"""Core business logic for reading calculations."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from condowater.config import settings
from condowater.core.errors import ValidationError

CENT = Decimal("0.01")
# Stored precision of unit prices; meter values and charges are kept to the cent.
PRICE_STEP = Decimal("0.0001")
ZERO = Decimal("0")


@dataclass(frozen=True)
class ReadingFigures:
    """All values stored on a reading, derived ones included."""

    previous: Decimal
    current: Decimal
    unit_price: Decimal
    usage: Decimal
    total_charge: Decimal


def coerce_amount(value: object, field: str, default: Decimal = ZERO) -> Decimal:
    """
    Converts a free-form value into a Decimal.

    Args:
        value: An int, float, Decimal or numeric string. None means "omitted".
        field: Name used in the error message.
        default: Value returned for omitted input.

    Raises:
        ValidationError: if the value is not a finite number.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", "INVALID_NUMBER")
    try:
        amount = Decimal(str(value).strip()) if not isinstance(value, Decimal) else value
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number", "INVALID_NUMBER") from None
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number", "INVALID_NUMBER")
    return amount


def compute_reading(
    previous: object = None,
    current: object = None,
    unit_price: object = None,
) -> ReadingFigures:
    """
    Derives usage and total charge for one reading.

    Meter values are rounded half-up to the cent and the unit price to four
    places first, so the figures match what is stored. Usage is
    ``current - previous`` and may be negative after a meter reset or
    correction. The total is ``usage * unit_price`` rounded half-up to the
    cent.

    Raises:
        ValidationError: for non-numeric input or a negative previous value
            or unit price.
    """
    prev = coerce_amount(previous, "lastMonth")
    curr = coerce_amount(current, "thisMonth")
    price = coerce_amount(
        unit_price, "pricePerUnit", default=settings.DEFAULT_PRICE_PER_UNIT
    )

    if prev < 0:
        raise ValidationError("lastMonth cannot be negative", "NEGATIVE_VALUE")
    if price < 0:
        raise ValidationError("pricePerUnit cannot be negative", "NEGATIVE_VALUE")

    prev = round_half_up(prev)
    curr = round_half_up(curr)
    price = price.quantize(PRICE_STEP, rounding=ROUND_HALF_UP)
    usage = curr - prev
    return ReadingFigures(
        previous=prev,
        current=curr,
        unit_price=price,
        usage=usage,
        total_charge=round_half_up(usage * price),
    )


def carry_forward(current: Decimal, unit_price: Decimal) -> ReadingFigures:
    """
    Builds the opening figures of the next month from a closed reading.

    The closing value becomes the new previous value. Usage and charge are
    zero because the new month has no meter value yet.
    """
    return ReadingFigures(
        previous=current,
        current=ZERO,
        unit_price=unit_price,
        usage=ZERO,
        total_charge=ZERO,
    )


def round_half_up(value: Decimal) -> Decimal:
    """Rounds to the cent, halves away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
