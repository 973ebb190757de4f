"""Shared fixtures for the amortisation tests.

Fixture loan: 15,000 at 8.9 % over 36 months, disbursed 2023-01-10, first
capitalisation 2023-02-01, first payment 2023-03-01, Actual/Actual, simple.
"""

from datetime import date
from decimal import Decimal

import pytest

from loan_amortisation.data_models import InterestMethod, InterestType, LoanTerms


@pytest.fixture
def fixture_terms() -> LoanTerms:
    return LoanTerms(
        principal=Decimal("15000"),
        annual_rate=Decimal("8.9") / Decimal(100),
        num_payments=36,
        disbursal_date=date(2023, 1, 10),
        first_payment_date=date(2023, 3, 1),
        first_capitalisation_date=date(2023, 2, 1),
        interest_method=InterestMethod.ActualActual,
        interest_type=InterestType.Simple,
    )


@pytest.fixture
def jan_2023_kwargs():
    """Dates and conventions shared by the HP/PCP style scenarios."""
    return {
        "disbursal_date": date(2023, 1, 1),
        "first_payment_date": date(2023, 2, 1),
        "first_capitalisation_date": date(2023, 2, 1),
        "interest_method": InterestMethod.ActualActual,
        "interest_type": InterestType.Simple,
    }


@pytest.fixture
def cli_args():
    return [
        "-p", "15000",
        "-r", "8.9",
        "-n", "36",
        "-d", "2023-01-10",
        "-f", "2023-03-01",
        "-c", "2023-02-01",
    ]
