"""Unit tests for repayment schedule generation"""

import pytest
from datetime import date
from decimal import Decimal
from stashbook.exceptions import ScheduleError
from stashbook.utils.helpers import (
    calculate_loan_terms,
    calculate_repayment_schedule,
    months_between,
    validate_repayment_params,
)


def test_four_month_flat_interest_schedule():
    """100,000 at 12% over four months"""
    schedule = calculate_repayment_schedule(Decimal("100000"), Decimal("12"), date(2025, 1, 15), date(2025, 5, 15))

    assert [s.amount_due for s in schedule] == [
        Decimal("3000.00"),
        Decimal("3000.00"),
        Decimal("3000.00"),
        Decimal("103000.00"),
    ]
    assert [s.due_date for s in schedule] == [
        date(2025, 2, 15),
        date(2025, 3, 15),
        date(2025, 4, 15),
        date(2025, 5, 15),
    ]
    assert [s.is_last_payment for s in schedule] == [False, False, False, True]


def test_single_month_loan_is_one_payment():
    schedule = calculate_repayment_schedule("5000", "10", date(2025, 3, 1), date(2025, 4, 1))
    assert len(schedule) == 1
    assert schedule[0].amount_due == Decimal("5500.00")
    assert schedule[0].due_date == date(2025, 4, 1)
    assert schedule[0].is_last_payment


def test_schedule_sums_to_principal_plus_interest():
    # 1,000 interest over 3 months does not split evenly
    schedule = calculate_repayment_schedule(Decimal("10000"), Decimal("10"), date(2025, 1, 1), date(2025, 4, 1))
    assert [s.amount_due for s in schedule[:-1]] == [Decimal("333.33"), Decimal("333.33")]
    assert schedule[-1].amount_due == Decimal("10333.34")
    assert sum(s.amount_due for s in schedule) == Decimal("11000.00")


def test_zero_interest_puts_everything_on_the_last_installment():
    schedule = calculate_repayment_schedule(Decimal("9000"), Decimal("0"), date(2025, 1, 1), date(2025, 4, 1))
    assert [s.amount_due for s in schedule] == [Decimal("0.00"), Decimal("0.00"), Decimal("9000.00")]


def test_month_end_start_dates_clamp_to_shorter_months():
    schedule = calculate_repayment_schedule(Decimal("1200"), Decimal("12"), date(2025, 1, 31), date(2025, 4, 30))
    assert [s.due_date for s in schedule] == [date(2025, 2, 28), date(2025, 3, 31), date(2025, 4, 30)]


def test_schedule_rejects_non_positive_term():
    with pytest.raises(ScheduleError):
        calculate_repayment_schedule(Decimal("1000"), Decimal("5"), date(2025, 5, 1), date(2025, 5, 20))


@pytest.mark.parametrize(
    "principal,rate,start,maturity,message",
    [
        (0, 5, date(2025, 1, 1), date(2025, 3, 1), "Principal amount must be greater than 0"),
        (1000, -1, date(2025, 1, 1), date(2025, 3, 1), "Interest rate cannot be negative"),
        (1000, 5, date(2025, 3, 1), date(2025, 1, 1), "Maturity date must be after start date"),
        (1000, 5, date(2025, 3, 1), date(2025, 3, 25), "Loan term must be at least 1 month"),
        (1000, 5, date(2025, 1, 1), date(2025, 3, 1), None),
    ],
)
def test_validate_repayment_params(principal, rate, start, maturity, message):
    assert validate_repayment_params(principal, rate, start, maturity) == message


def test_months_between_ignores_day_of_month():
    assert months_between(date(2025, 1, 31), date(2025, 2, 1)) == 1
    assert months_between(date(2024, 11, 15), date(2025, 2, 15)) == 3


@pytest.mark.parametrize(
    "start,maturity,expected",
    [
        (date(2025, 1, 1), date(2025, 1, 4), "3 days"),
        (date(2025, 1, 1), date(2025, 1, 24), "3 weeks and 2 days"),
        (date(2025, 1, 1), date(2025, 3, 2), "2 months"),
        (date(2024, 1, 1), date(2025, 3, 1), "1 year and 2 months"),
        (date(2025, 1, 1), date(2025, 1, 1), ""),
    ],
)
def test_calculate_loan_terms(start, maturity, expected):
    assert calculate_loan_terms(start, maturity) == expected
