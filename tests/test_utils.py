from datetime import date
from decimal import ROUND_HALF_EVEN, Decimal

import pytest

from loan_amortisation.errors import InputParseError
from loan_amortisation.utils import (
    add_months,
    decimal_from_str,
    iter_days,
    optional_decimal,
    parse_date,
    percent_to_fraction,
    round_decimal,
)


class TestRoundDecimal:
    def test_default_rounds_half_away_from_zero(self):
        assert round_decimal(Decimal("2.345")) == Decimal("2.35")
        assert round_decimal(Decimal("-2.345")) == Decimal("-2.35")

    def test_half_even_rounds_ties_to_even(self):
        assert round_decimal(Decimal("2.345"), rounding=ROUND_HALF_EVEN) == Decimal("2.34")
        assert round_decimal(Decimal("2.355"), rounding=ROUND_HALF_EVEN) == Decimal("2.36")

    def test_scale_is_capped_by_precision(self):
        assert round_decimal(Decimal("1.23456"), precision=3, scale=5) == Decimal("1.235")

    def test_custom_scale(self):
        value = round_decimal(Decimal("0.0538034"), scale=6)
        assert value == Decimal("0.053803")
        assert value.as_tuple().exponent == -6


class TestDates:
    def test_add_months_clamps_to_month_end(self):
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_add_months_crosses_year(self):
        assert add_months(date(2023, 11, 15), 3) == date(2024, 2, 15)

    def test_iter_days_is_inclusive(self):
        days = list(iter_days(date(2023, 2, 27), date(2023, 3, 2)))
        assert days == [date(2023, 2, 27), date(2023, 2, 28), date(2023, 3, 1), date(2023, 3, 2)]

    def test_iter_days_empty_when_end_before_start(self):
        assert list(iter_days(date(2023, 3, 2), date(2023, 3, 1))) == []

    def test_parse_date(self):
        assert parse_date("2023-01-10") == date(2023, 1, 10)

    @pytest.mark.parametrize("value", ["2023-02-30", "10/01/2023", "", "2023-1"])
    def test_parse_date_rejects_malformed(self, value):
        with pytest.raises(InputParseError):
            parse_date(value)


class TestNumbers:
    def test_decimal_from_str_strips_commas(self):
        assert decimal_from_str("15,000.50") == Decimal("15000.50")

    @pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", ""])
    def test_decimal_from_str_rejects_invalid(self, value):
        with pytest.raises(InputParseError):
            decimal_from_str(value)

    def test_optional_decimal(self):
        assert optional_decimal(None) is None
        assert optional_decimal("  ") is None
        assert optional_decimal("199") == Decimal("199")

    def test_percent_to_fraction(self):
        assert percent_to_fraction(Decimal("8.9")) == Decimal("0.089")
