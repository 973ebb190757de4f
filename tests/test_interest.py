from datetime import date
from decimal import ROUND_HALF_EVEN, Decimal

import pytest

from loan_amortisation.data_models import InterestMethod
from loan_amortisation.interest import (
    LEAP_YEAR_WEIGHT,
    calculate_period_interest,
    decompound_rate,
    get_daily_interest_rate,
)
from loan_amortisation.utils import round_decimal


class TestDailyRate:
    @pytest.mark.parametrize(
        "method, divisor",
        [
            (InterestMethod.Convention30_360, 360),
            (InterestMethod.Actual360, 360),
            (InterestMethod.Actual365, 365),
            (InterestMethod.ActualActual, 365),
        ],
    )
    def test_divisor_per_convention(self, method, divisor):
        rate = Decimal("0.073")
        assert get_daily_interest_rate(rate, method) == rate / Decimal(divisor)


class TestPeriodInterest:
    def test_30_360_uses_closed_form(self):
        daily = Decimal("0.05") / Decimal(360)
        interest, days = calculate_period_interest(
            date(2023, 2, 1), date(2023, 2, 28), date(2023, 3, 1),
            daily, Decimal("1000"), Decimal("0"), InterestMethod.Convention30_360,
        )
        assert interest == Decimal("4.17")
        assert days == 30

    def test_actual_365_walks_calendar_days(self):
        daily = Decimal("0.05") / Decimal(360)
        interest, days = calculate_period_interest(
            date(2023, 2, 1), date(2023, 2, 28), date(2023, 3, 1),
            daily, Decimal("1000"), Decimal("0"), InterestMethod.Actual365,
        )
        assert interest == Decimal("3.89")
        assert days == 28

    def test_payment_lands_at_start_of_day(self):
        daily = Decimal("0.036") / Decimal(360)  # exactly 0.0001
        interest, days = calculate_period_interest(
            date(2023, 5, 1), date(2023, 5, 10), date(2023, 5, 1),
            daily, Decimal("1000"), Decimal("400"), InterestMethod.Actual360,
        )
        assert interest == Decimal("0.60")
        assert days == 10

    def test_payment_mid_window_reduces_remaining_days(self):
        daily = Decimal("0.0001")
        interest, _ = calculate_period_interest(
            date(2023, 5, 1), date(2023, 5, 10), date(2023, 5, 6),
            daily, Decimal("1000"), Decimal("400"), InterestMethod.Actual360,
        )
        # five days on 1000, five days on 600
        assert interest == Decimal("0.80")

    def test_payment_outside_window_is_ignored(self):
        daily = Decimal("0.0001")
        interest, _ = calculate_period_interest(
            date(2023, 5, 1), date(2023, 5, 10), date(2023, 6, 1),
            daily, Decimal("1000"), Decimal("400"), InterestMethod.Actual360,
        )
        assert interest == Decimal("1.00")

    def test_actual_actual_leap_weight_carries_forward(self):
        daily = Decimal("0.0001")
        leap, _ = calculate_period_interest(
            date(2024, 2, 1), date(2024, 2, 10), date(2024, 3, 1),
            daily, Decimal("366000"), Decimal("0"), InterestMethod.ActualActual,
        )
        common, _ = calculate_period_interest(
            date(2023, 2, 1), date(2023, 2, 10), date(2023, 3, 1),
            daily, Decimal("366000"), Decimal("0"), InterestMethod.ActualActual,
        )
        rate = daily
        expected = Decimal(0)
        for _ in range(10):
            rate *= LEAP_YEAR_WEIGHT
            expected += Decimal("366000") * rate
        assert leap == round_decimal(expected, scale=2, rounding=ROUND_HALF_EVEN)
        assert leap < Decimal("365.00")
        assert common == Decimal("366.00")

    def test_two_leap_days_scale_twice(self):
        interest, days = calculate_period_interest(
            date(2024, 3, 1), date(2024, 3, 2), date(2024, 4, 1),
            Decimal("0.0001"), Decimal("366000"), Decimal("0"), InterestMethod.ActualActual,
        )
        # 36.5 on the first day, 36.5 * 365/366 on the second
        assert days == 2
        assert interest == Decimal("72.90")

    def test_actual_365_ignores_leap_years(self):
        interest, _ = calculate_period_interest(
            date(2024, 2, 1), date(2024, 2, 10), date(2024, 3, 1),
            Decimal("0.0001"), Decimal("366000"), Decimal("0"), InterestMethod.Actual365,
        )
        assert interest == Decimal("366.00")

    def test_window_spanning_new_year_weights_only_leap_days(self):
        interest, days = calculate_period_interest(
            date(2023, 12, 31), date(2024, 1, 1), date(2024, 2, 1),
            Decimal("0.0001"), Decimal("366000"), Decimal("0"), InterestMethod.ActualActual,
        )
        assert days == 2
        assert interest == Decimal("73.10")

    def test_interest_rounds_half_to_even(self):
        # 0.125 accrued in total: half-even keeps 0.12
        interest, _ = calculate_period_interest(
            date(2023, 5, 1), date(2023, 5, 1), date(2023, 6, 1),
            Decimal("0.0001"), Decimal("1250"), Decimal("0"), InterestMethod.Actual360,
        )
        assert interest == Decimal("0.12")

    def test_empty_window(self):
        interest, days = calculate_period_interest(
            date(2023, 5, 2), date(2023, 5, 1), date(2023, 5, 1),
            Decimal("0.0001"), Decimal("1000"), Decimal("0"), InterestMethod.Actual365,
        )
        assert interest == 0
        assert days == 0


class TestDecompound:
    def test_twelve_percent(self):
        assert decompound_rate(Decimal("0.12")) == Decimal("0.113866")

    def test_decompounded_rate_is_lower(self):
        assert decompound_rate(Decimal("0.089")) < Decimal("0.089")

    def test_zero_rate(self):
        assert decompound_rate(Decimal("0")) == 0
