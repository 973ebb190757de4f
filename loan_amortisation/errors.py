"""Typed errors raised by the amortisation engine.

Exports
-------
- AmortisationError          (base class)
- InputParseError            malformed decimal, date or integer input
- UnknownTokenError          unrecognised interest method / type token
- InvalidLoanTermsError      terms that violate the loan invariants
- CalculationError           degenerate arithmetic during a computation
- DegenerateSecantStepError  zero denominator in a secant step

A payment solver that fails to converge is not an error: it returns an empty
schedule instead (see ``Schedule.converged``).
"""

from __future__ import annotations


class AmortisationError(Exception):
    """Base class for amortisation failures."""


class InputParseError(AmortisationError, ValueError):
    """A caller-supplied value could not be parsed."""


class UnknownTokenError(InputParseError):
    """An enumeration token did not match any member name exactly."""


class InvalidLoanTermsError(AmortisationError, ValueError):
    """Loan terms are well-formed but describe an impossible loan."""


class CalculationError(AmortisationError, ArithmeticError):
    """A computation reached an undefined arithmetic state."""


class DegenerateSecantStepError(CalculationError):
    """Two successive objective values were equal, so the secant is flat."""

    def __init__(self, x0, x1, fx) -> None:
        super().__init__(
            f"secant step undefined: f({x0}) == f({x1}) == {fx}"
        )
        self.x0 = x0
        self.x1 = x1
        self.fx = fx
