"""Data models for the amortisation engine.

This module defines the enumerations that select how interest accrues, the
loan terms supplied by the caller, and the schedule produced by the engine:
individual payments plus a block of summary figures. Using dataclasses makes
it easy to construct, inspect and serialize these structures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .errors import InvalidLoanTermsError, UnknownTokenError


class _TokenEnum(Enum):
    """Enum parsed from tokens that match the member names exactly."""

    @classmethod
    def from_str(cls, token: str):
        try:
            return cls[token]
        except KeyError as exc:
            choices = ", ".join(cls.tokens())
            raise UnknownTokenError(
                f"Unknown {cls.__name__} '{token}'; expected one of: {choices}"
            ) from exc

    @classmethod
    def coerce(cls, value: Union[str, "_TokenEnum"]):
        if isinstance(value, cls):
            return value
        return cls.from_str(value)

    @classmethod
    def tokens(cls) -> Tuple[str, ...]:
        return tuple(member.name for member in cls)


class InterestMethod(_TokenEnum):
    """Day-count convention used to accrue interest."""

    Convention30_360 = "30/360"
    Actual365 = "Actual/365"
    Actual360 = "Actual/360"
    ActualActual = "Actual/Actual"


class InterestType(_TokenEnum):
    """Whether the quoted annual rate is simple or compounded monthly."""

    Simple = "simple"
    Compound = "compound"


@dataclass(frozen=True)
class LoanTerms:
    """Inputs describing a single loan.

    ``annual_rate`` is a fraction (``Decimal("0.089")`` for 8.9 %).
    ``fixed_payment`` bypasses the payment solver. ``balloon_payment`` is the
    final payment amount for PCP/HP style agreements and ``option_fee`` is a
    one-off charge added to the final payment without being amortised.
    """

    principal: Decimal
    annual_rate: Decimal
    num_payments: int
    disbursal_date: date
    first_payment_date: date
    first_capitalisation_date: date
    interest_method: InterestMethod = InterestMethod.ActualActual
    interest_type: InterestType = InterestType.Simple
    fixed_payment: Optional[Decimal] = None
    balloon_payment: Optional[Decimal] = None
    option_fee: Optional[Decimal] = None

    def __post_init__(self) -> None:
        # a zero balloon or fee means there is none
        for name in ("balloon_payment", "option_fee"):
            value = getattr(self, name)
            if value is not None and value == 0:
                object.__setattr__(self, name, None)

    def validate(self) -> None:
        """Raise ``InvalidLoanTermsError`` if the terms describe an impossible loan."""
        if self.principal <= 0:
            raise InvalidLoanTermsError("Principal must be positive")
        if self.annual_rate < 0:
            raise InvalidLoanTermsError("Annual rate must not be negative")
        if self.num_payments <= 0:
            raise InvalidLoanTermsError("Number of payments must be positive")
        if self.first_payment_date < self.disbursal_date:
            raise InvalidLoanTermsError("First payment date precedes disbursal date")
        if self.first_capitalisation_date < self.disbursal_date:
            raise InvalidLoanTermsError(
                "First capitalisation date precedes disbursal date"
            )
        if self.fixed_payment is not None and self.fixed_payment <= 0:
            raise InvalidLoanTermsError("Fixed payment must be positive")
        if self.balloon_payment is not None:
            if self.balloon_payment < 0:
                raise InvalidLoanTermsError("Balloon payment must not be negative")
            if self.balloon_payment >= self.principal:
                raise InvalidLoanTermsError(
                    "Balloon payment must be smaller than the principal"
                )
        if self.option_fee is not None and self.option_fee < 0:
            raise InvalidLoanTermsError("Option fee must not be negative")


@dataclass(frozen=True)
class Payment:
    """One line of the amortisation schedule.

    ``days`` is the number of days interest accrued for the period. For every
    period except the last, ``payment == principal + interest``.
    """

    month: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal
    days: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "payment": str(self.payment),
            "principal": str(self.principal),
            "interest": str(self.interest),
            "balance": str(self.balance),
            "days": self.days,
        }


@dataclass(frozen=True)
class ScheduleMeta:
    """Aggregate figures computed once the schedule has been built.

    ``calculated_apr`` is ``None`` when the schedule carries no outstanding
    balance between payments, in which case the APR is undefined.
    ``calculated_ear`` currently equals ``calculated_apr``.
    """

    total_payable: Decimal = Decimal(0)
    total_principal: Decimal = Decimal(0)
    total_interest: Decimal = Decimal(0)
    daily_rate: Decimal = Decimal(0)
    annual_rate: Decimal = Decimal(0)
    calculated_apr: Optional[Decimal] = Decimal(0)
    calculated_ear: Optional[Decimal] = Decimal(0)

    def to_dict(self) -> Dict[str, Any]:
        def _fmt(value: Optional[Decimal]) -> Optional[str]:
            return None if value is None else str(value)

        return {
            "total_payable": _fmt(self.total_payable),
            "total_principal": _fmt(self.total_principal),
            "total_interest": _fmt(self.total_interest),
            "daily_rate": _fmt(self.daily_rate),
            "annual_rate": _fmt(self.annual_rate),
            "calculated_apr": _fmt(self.calculated_apr),
            "calculated_ear": _fmt(self.calculated_ear),
        }


@dataclass(frozen=True)
class Schedule:
    """An ordered sequence of payments plus summary figures.

    An empty ``payments`` tuple signals that the payment solver did not
    converge; check ``converged`` rather than catching an exception.
    """

    payments: Tuple[Payment, ...] = ()
    meta: ScheduleMeta = field(default_factory=ScheduleMeta)

    @classmethod
    def empty(cls) -> "Schedule":
        return cls()

    @property
    def converged(self) -> bool:
        return bool(self.payments)

    @property
    def final_payment(self) -> Optional[Payment]:
        return self.payments[-1] if self.payments else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "payments": [p.to_dict() for p in self.payments],
            "meta": self.meta.to_dict(),
        }
