"""Month key helpers."""

from __future__ import annotations

import re
from datetime import date

from dateutil.relativedelta import relativedelta

from condowater.core.errors import ValidationError

MONTH_KEY_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

MONTH_NAMES = {
    1: "January",
    2: "February",
    3: "March",
    4: "April",
    5: "May",
    6: "June",
    7: "July",
    8: "August",
    9: "September",
    10: "October",
    11: "November",
    12: "December",
}


def is_month_key(value: object) -> bool:
    """Returns True for strings shaped like ``YYYY-MM`` with a real month."""
    return isinstance(value, str) and MONTH_KEY_RE.match(value) is not None


def validate_month(
    value: str | None,
    *,
    missing_code: str = "MISSING_MONTH",
    invalid_code: str = "INVALID_MONTH_FORMAT",
    label: str = "month",
) -> str:
    """
    Checks a month key and returns it unchanged.

    Raises:
        ValidationError: with ``missing_code`` when the value is empty and
            ``invalid_code`` when it does not match ``YYYY-MM``.
    """
    if not value:
        raise ValidationError(f"{label} is required", missing_code)
    if not is_month_key(value):
        raise ValidationError(f"{label} must be in YYYY-MM format", invalid_code)
    return value


def month_to_date(month: str) -> date:
    """Converts a month key into the first day of that month."""
    year, mon = month.split("-")
    return date(int(year), int(mon), 1)


def following_month(month: str) -> str:
    """Returns the month key right after ``month``."""
    return (month_to_date(month) + relativedelta(months=1)).strftime("%Y-%m")


def format_month_for_display(month: str) -> str:
    """Formats a month key as 'Month YYYY'."""
    period = month_to_date(month)
    return f"{MONTH_NAMES[period.month]} {period.year}"
