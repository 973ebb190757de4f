"""Period-by-period construction of the amortisation schedule.

The builder walks the loan one period at a time, accruing interest with the
day-count convention, applying the level payment, and settling the final
period. It is used both as the payment solver's objective function (with
``settle_balance=False``) and to produce the final ledger.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, List, Optional

from .data_models import InterestMethod, InterestType, LoanTerms, Payment, Schedule, ScheduleMeta
from .interest import calculate_period_interest, decompound_rate, get_daily_interest_rate
from .utils import add_months, round_decimal

logger = logging.getLogger(__name__)

PAYMENTS_PER_YEAR = Decimal(12)
DAYS_PER_YEAR = Decimal(365)
APR_SCALE = 6


def build_schedule(
    principal: Decimal,
    disbursal_date: date,
    first_capitalisation_date: date,
    first_payment_date: date,
    num_payments: int,
    annual_rate: Decimal,
    period_payment: Decimal,
    interest_method: InterestMethod,
    interest_type: InterestType,
    settle_balance: bool,
    balloon_payment: Optional[Decimal] = None,
    option_fee: Optional[Decimal] = None,
) -> Schedule:
    """Build the schedule for a level ``period_payment``.

    Parameters
    ----------
    settle_balance: bool
        When True the final payment is whatever clears the balance plus that
        period's interest, so the schedule always ends at zero.
    balloon_payment: Decimal, optional
        Amount of the final payment. Its principal component is forced to
        the outstanding balance unless ``settle_balance`` is set.
    option_fee: Decimal, optional
        Added to the final payment but excluded from its principal.

    Returns
    -------
    Schedule
        A new schedule with one ``Payment`` per period and its summary.
    """
    if interest_type is InterestType.Compound:
        effective_rate = decompound_rate(annual_rate)
    else:
        effective_rate = annual_rate
    daily_rate = get_daily_interest_rate(effective_rate, interest_method)

    payments: List[Payment] = []
    total_payable = Decimal(0)
    total_principal = Decimal(0)
    total_interest = Decimal(0)

    balance = principal
    interest_payable_from = disbursal_date
    next_cap_date = first_capitalisation_date
    next_payment_date = first_payment_date

    for month in range(1, num_payments + 1):
        is_final = month == num_payments
        interest, days = calculate_period_interest(
            interest_payable_from,
            next_cap_date,
            next_payment_date,
            daily_rate,
            balance,
            period_payment,
            interest_method,
        )

        if settle_balance and is_final:
            payment = balance + interest
            if option_fee is not None:
                payment += option_fee
        elif is_final and balloon_payment is not None:
            payment = balloon_payment
            if option_fee is not None:
                payment += option_fee
        else:
            payment = period_payment

        principal_payment = round_decimal(payment - interest)
        if is_final and option_fee is not None:
            # The fee is cash flow only; it never reduces the balance.
            principal_payment = round_decimal(principal_payment - option_fee)
        if is_final and balloon_payment is not None and not settle_balance:
            principal_payment = balance

        balance = round_decimal(balance - principal_payment)

        payments.append(
            Payment(
                month=month,
                payment=payment,
                principal=principal_payment,
                interest=interest,
                balance=balance,
                days=days,
            )
        )
        total_payable += payment
        total_principal += principal_payment
        total_interest += interest

        interest_payable_from = next_cap_date + timedelta(days=1)
        next_cap_date = add_months(next_cap_date, 1)
        next_payment_date = add_months(next_payment_date, 1)

    apr = get_apr(payments)
    meta = ScheduleMeta(
        total_payable=total_payable,
        total_principal=total_principal,
        total_interest=total_interest,
        daily_rate=daily_rate,
        annual_rate=effective_rate,
        calculated_apr=apr,
        calculated_ear=apr,  # EAR is reported as the APR until fees are modelled
    )
    return Schedule(payments=tuple(payments), meta=meta)


def build_schedule_for_terms(terms: LoanTerms, period_payment: Decimal, settle_balance: bool) -> Schedule:
    """Build a schedule from ``LoanTerms``, including its balloon and option fee."""
    return build_schedule(
        terms.principal,
        terms.disbursal_date,
        terms.first_capitalisation_date,
        terms.first_payment_date,
        terms.num_payments,
        terms.annual_rate,
        period_payment,
        terms.interest_method,
        terms.interest_type,
        settle_balance,
        terms.balloon_payment,
        terms.option_fee,
    )


def get_apr(payments: Iterable[Payment]) -> Optional[Decimal]:
    """Return the balance-weighted APR of a schedule, rounded to 6 places.

    The daily cost of credit is total interest divided by the balance curve
    (each period's closing balance times the days it accrued), compounded
    monthly over a year:

        apr = (1 + daily_cost * 365 / 12) ** 12 - 1

    Returns ``None`` when the balance curve is zero, e.g. for a single
    payment that clears the loan.
    """
    balance_curve = Decimal(0)
    total_interest = Decimal(0)
    for payment in payments:
        balance_curve += payment.balance * Decimal(payment.days)
        total_interest += payment.interest

    if balance_curve == 0:
        logger.warning("balance curve is zero; APR is undefined for this schedule")
        return None

    daily_cost = total_interest / balance_curve
    apr = (Decimal(1) + daily_cost * DAYS_PER_YEAR / PAYMENTS_PER_YEAR) ** 12 - Decimal(1)
    return round_decimal(apr, scale=APR_SCALE)
