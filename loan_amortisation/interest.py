"""Interest accrual under the supported day-count conventions.

Capitalisation dates, payment dates and the disbursal date are independent
calendar inputs, so interest is accrued day by day. Only the 30/360
convention has a closed form.
"""

from __future__ import annotations

import calendar
from datetime import date
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Tuple

from .data_models import InterestMethod
from .utils import iter_days, round_decimal

DAYS_360 = Decimal(360)
DAYS_365 = Decimal(365)
LEAP_YEAR_WEIGHT = Decimal(365) / Decimal(366)
THIRTY_DAYS = 30
INTEREST_SCALE = 2
DECOMPOUND_SCALE = 6
PERIODS_PER_YEAR = 12


def get_daily_interest_rate(annual_rate: Decimal, interest_method: InterestMethod) -> Decimal:
    """Return the per-day rate for ``annual_rate``.

    Actual/Actual divides by 365 like Actual/365; leap days are weighted
    during the day walk in :func:`calculate_period_interest`.
    """
    if interest_method in (InterestMethod.Convention30_360, InterestMethod.Actual360):
        return annual_rate / DAYS_360
    return annual_rate / DAYS_365


def calculate_period_interest(
    start_date: date,
    to_date: date,
    payment_date: date,
    daily_rate: Decimal,
    balance: Decimal,
    payment_amount: Decimal,
    interest_method: InterestMethod,
) -> Tuple[Decimal, int]:
    """Return ``(interest, days)`` accrued from ``start_date`` to ``to_date`` inclusive.

    A payment landing on ``payment_date`` reduces the balance at the start of
    that day, before the day's interest accrues. Under Actual/Actual the
    rate is scaled by 365/366 on every leap-year day and the scaling carries
    forward to the rest of the window. The summed interest is rounded
    half-to-even to two decimal places.
    """
    if interest_method is InterestMethod.Convention30_360:
        interest = Decimal(THIRTY_DAYS) * balance * daily_rate
        return round_decimal(interest, scale=INTEREST_SCALE, rounding=ROUND_HALF_EVEN), THIRTY_DAYS

    running_balance = balance
    interest = Decimal(0)
    days = 0
    rate = daily_rate
    for day in iter_days(start_date, to_date):
        if interest_method is InterestMethod.ActualActual and calendar.isleap(day.year):
            rate *= LEAP_YEAR_WEIGHT
        if day == payment_date:
            running_balance -= payment_amount
        interest += running_balance * rate
        days += 1

    return round_decimal(interest, scale=INTEREST_SCALE, rounding=ROUND_HALF_EVEN), days


def decompound_rate(annual_rate: Decimal) -> Decimal:
    """Convert a monthly-compounded annual rate to the equivalent simple rate.

        ((1 + annual_rate) ** (1/12) - 1) * 12
    """
    periods = Decimal(PERIODS_PER_YEAR)
    monthly = (Decimal(1) + annual_rate) ** (Decimal(1) / periods) - Decimal(1)
    return round_decimal(monthly * periods, scale=DECOMPOUND_SCALE)
