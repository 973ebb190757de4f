"""Core calculation engine for the amortisation calculator.

This module finds the level payment that retires a loan by its final
payment date and returns the resulting schedule. A rough payment is
estimated with the annuity formula, then refined with the secant method,
using the day-accurate schedule builder as the objective function. A
caller-supplied fixed payment bypasses the solver entirely.

Results are returned as a ``Schedule``. When the solver fails to converge
the schedule is empty; check ``Schedule.converged``.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, getcontext
from typing import Optional, Union

from .data_models import InterestMethod, InterestType, LoanTerms, Schedule
from .schedule import build_schedule, build_schedule_for_terms
from .secant import secant_method
from .utils import round_decimal

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

PERIODS_PER_YEAR = 12
ESTIMATE_WINDOW = Decimal("2.5")
SOLVER_TOLERANCE = Decimal("0.1")
SOLVER_MAX_ITERATIONS = 4
MIN_ESTIMATE = Decimal("0.01")


def calculate_rough_period_payment(principal: Decimal, annual_rate: Decimal, num_payments: int) -> Decimal:
    """Return the annuity (equal installment) payment, rounded to cents.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly rate
    (``annual_rate / 12``) and ``n`` is the number of payments. When the
    interest rate is zero, the payment simplifies to ``P / n``.
    """
    if num_payments <= 0:
        raise ValueError("Number of payments must be positive")
    period_rate = annual_rate / Decimal(PERIODS_PER_YEAR)
    if period_rate == 0:
        return round_decimal(principal / Decimal(num_payments))
    factor = (1 + period_rate) ** num_payments
    return round_decimal(principal * (period_rate * factor) / (factor - 1))


def _solve_period_payment(terms: LoanTerms) -> Optional[Decimal]:
    """Return the level payment that drives the final balance to its target."""
    balloon = terms.balloon_payment or Decimal(0)
    estimate = calculate_rough_period_payment(
        terms.principal - balloon, terms.annual_rate, terms.num_payments
    )
    # a zero estimate would make both seeds zero
    estimate = max(estimate, MIN_ESTIMATE)
    logger.debug("rough period payment estimate: %s", estimate)

    def final_balance_gap(period_payment: Decimal) -> Decimal:
        logger.debug("trying period payment %s", period_payment)
        trial = build_schedule(
            terms.principal,
            terms.disbursal_date,
            terms.first_capitalisation_date,
            terms.first_payment_date,
            terms.num_payments,
            terms.annual_rate,
            period_payment,
            terms.interest_method,
            terms.interest_type,
            False,
        )
        return trial.payments[-1].balance - balloon

    root = secant_method(
        final_balance_gap,
        estimate / ESTIMATE_WINDOW,
        estimate * ESTIMATE_WINDOW,
        SOLVER_TOLERANCE,
        SOLVER_MAX_ITERATIONS,
    )
    if root is None:
        return None
    return round_decimal(root)


def compute_schedule(terms: LoanTerms) -> Schedule:
    """Compute the amortisation schedule for ``terms``.

    Parameters
    ----------
    terms: LoanTerms
        The loan. It is validated before any computation.

    Returns
    -------
    Schedule
        The payment ledger and summary. Empty if the payment solver did not
        converge.

    Raises
    ------
    InvalidLoanTermsError
        If the terms violate the loan invariants.
    DegenerateSecantStepError
        If the solver hit a flat secant step.
    """
    terms.validate()

    if terms.fixed_payment is not None:
        return build_schedule_for_terms(terms, terms.fixed_payment, settle_balance=False)

    period_payment = _solve_period_payment(terms)
    if period_payment is None:
        logger.warning(
            "payment solver did not converge within %d iterations", SOLVER_MAX_ITERATIONS
        )
        return Schedule.empty()

    logger.debug("solved period payment: %s", period_payment)
    # Balloon schedules fix the final payment to the balloon instead of settling.
    settle = terms.balloon_payment is None
    return build_schedule_for_terms(terms, period_payment, settle_balance=settle)


def amortise(
    principal: Decimal,
    annual_rate: Decimal,
    num_payments: int,
    disbursal_date: date,
    first_payment_date: date,
    first_capitalisation_date: date,
    interest_method: Union[InterestMethod, str],
    interest_type: Union[InterestType, str],
    fixed_payment: Optional[Decimal] = None,
    balloon_payment: Optional[Decimal] = None,
    option_fee: Optional[Decimal] = None,
) -> Schedule:
    """Compute an amortisation schedule.

    ``annual_rate`` is a fraction, not a percentage. ``interest_method`` and
    ``interest_type`` may be enum members or their exact names, e.g.
    ``"ActualActual"`` and ``"Simple"``.
    """
    terms = LoanTerms(
        principal=principal,
        annual_rate=annual_rate,
        num_payments=num_payments,
        disbursal_date=disbursal_date,
        first_payment_date=first_payment_date,
        first_capitalisation_date=first_capitalisation_date,
        interest_method=InterestMethod.coerce(interest_method),
        interest_type=InterestType.coerce(interest_type),
        fixed_payment=fixed_payment,
        balloon_payment=balloon_payment,
        option_fee=option_fee,
    )
    return compute_schedule(terms)
