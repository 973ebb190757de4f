"""Utility functions for the amortisation engine.

This module provides the decimal rounding helper used for every monetary
figure, calendar helpers for stepping through months and days, and parsers
that turn user input into Python data types. Dates are handled with Python's
``datetime`` module; month arithmetic clamps to the last valid day.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext
from typing import Iterator, Optional

from .errors import InputParseError

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

DEFAULT_PRECISION = 28
DEFAULT_SCALE = 2
DEFAULT_ROUNDING = ROUND_HALF_UP  # half away from zero
DATE_FORMAT = "%Y-%m-%d"


def round_decimal(
    value: Decimal,
    precision: Optional[int] = None,
    scale: Optional[int] = None,
    rounding: Optional[str] = None,
) -> Decimal:
    """Round ``value`` to ``min(scale, precision)`` fractional digits.

    Parameters
    ----------
    value: Decimal
        The value to round.
    precision: int, optional
        Upper bound on the number of fractional digits. Defaults to 28.
    scale: int, optional
        Number of fractional digits to keep. Defaults to 2.
    rounding: str, optional
        One of the ``decimal`` rounding constants. Defaults to
        ``ROUND_HALF_UP``, which rounds ties away from zero.
    """
    precision = DEFAULT_PRECISION if precision is None else precision
    scale = DEFAULT_SCALE if scale is None else scale
    rounding = DEFAULT_ROUNDING if rounding is None else rounding
    exponent = Decimal(1).scaleb(-min(scale, precision))
    return value.quantize(exponent, rounding=rounding)


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string into a ``date``.

    Raises
    ------
    InputParseError
        If the string is not a valid calendar date.
    """
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except (AttributeError, ValueError) as exc:
        raise InputParseError(f"Invalid date (expected YYYY-MM-DD): {value}") from exc


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and surrounding whitespace. Non-finite
    values such as ``NaN`` or ``Infinity`` are rejected.
    """
    try:
        cleaned = str(value).replace(",", "").strip()
        result = Decimal(cleaned)
    except (InvalidOperation, ValueError) as exc:
        raise InputParseError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise InputParseError(f"Invalid numeric value: {value}")
    return result


def optional_decimal(value: Optional[str]) -> Optional[Decimal]:
    if value is None or str(value).strip() == "":
        return None
    return decimal_from_str(value)


def percent_to_fraction(value: Decimal) -> Decimal:
    """Convert a rate given in percent (e.g. ``8.9``) to a fraction."""
    return value / Decimal(100)
