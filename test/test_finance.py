"""Unit tests for the financial summary, repayment status and formatting"""

import pytest
from collections import namedtuple
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from stashbook.utils.finance import (
    RepaymentStatus,
    derive_status,
    format_compact,
    format_currency,
    money_str,
    summarize,
    to_decimal,
)

StashRow = namedtuple("StashRow", ["amount"])
LoanRow = namedtuple("LoanRow", ["principal"])


def test_empty_summary_is_all_zero():
    summary = summarize([], [], [])
    assert summary.total_contributions == 0
    assert summary.total_loans == 0
    assert summary.total_repayments == 0
    assert summary.amount_on_hand == 0
    assert summary.to_dict() == {
        "totalContributions": "0.00",
        "totalLoans": "0.00",
        "totalRepayments": "0.00",
        "amountOnHand": "0.00",
    }


def test_summary_accepts_objects_and_dicts():
    summary = summarize(
        [StashRow(Decimal("100000")), {"amount": "50000.50"}],
        [LoanRow(Decimal("120000"))],
        [{"amount_paid": Decimal("3000")}, {"amount_paid": None}],
    )
    assert summary.total_contributions == Decimal("150000.50")
    assert summary.total_loans == Decimal("120000")
    assert summary.total_repayments == Decimal("3000")
    assert summary.amount_on_hand == Decimal("33000.50")


def test_amount_on_hand_may_go_negative():
    summary = summarize([{"amount": 1000}], [{"principal": 5000}], [])
    assert summary.amount_on_hand == Decimal("-4000")
    assert summary.to_dict()["amountOnHand"] == "-4000.00"


def test_summary_is_order_independent():
    stashes = [{"amount": "0.10"}, {"amount": "0.20"}, {"amount": "0.30"}]
    loans = [{"principal": "0.15"}]
    forward = summarize(stashes, loans, [])
    backward = summarize(list(reversed(stashes)), loans, [])
    assert forward == backward
    assert forward.total_contributions == Decimal("0.60")


def test_malformed_amounts_count_as_zero():
    summary = summarize(
        [{"amount": "abc"}, {"amount": "100"}, {"amount": float("nan")}],
        [{"principal": "Infinity"}],
        [{"amount_paid": True}],
    )
    assert summary.total_contributions == Decimal("100")
    assert summary.total_loans == 0
    assert summary.total_repayments == 0
    assert summary.amount_on_hand == summary.total_contributions + summary.total_repayments - summary.total_loans


def test_to_decimal():
    assert to_decimal(" 12.50 ") == Decimal("12.50")
    assert to_decimal(None) == 0
    assert to_decimal("") == 0
    assert to_decimal("12,5x") == 0


def test_money_str_rounds_half_up():
    assert money_str(Decimal("2.005")) == "2.01"
    assert money_str(7) == "7.00"


def test_paid_wins_over_due_date():
    now = datetime(2025, 8, 22)
    assert derive_status(date(2025, 8, 20), date(2025, 8, 21), now=now) is RepaymentStatus.PAID
    # A payment dated after "now" still counts
    assert derive_status(date(2025, 8, 20), date(2025, 9, 1), now=now) is RepaymentStatus.PAID


def test_past_due_is_overdue():
    now = datetime(2025, 8, 22, 9, 30)
    assert derive_status(date(2025, 8, 20), None, now=now) is RepaymentStatus.OVERDUE


def test_future_due_is_pending():
    now = datetime(2025, 8, 22, 9, 30)
    assert derive_status(date(2025, 8, 30), None, now=now) is RepaymentStatus.PENDING


def test_due_today_is_pending():
    assert derive_status(date(2025, 8, 22), None, now=datetime(2025, 8, 22, 23, 59)) is RepaymentStatus.PENDING


def test_status_with_datetimes_and_timezones():
    due = datetime(2025, 8, 22, 10, 0, tzinfo=timezone.utc)
    now = datetime(2025, 8, 22, 19, 0, tzinfo=timezone(timedelta(hours=8)))  # 11:00 UTC
    assert derive_status(due, None, now=now) is RepaymentStatus.OVERDUE


def test_status_defaults_to_the_clock():
    assert derive_status(date.today() + timedelta(days=3)) is RepaymentStatus.PENDING
    assert derive_status(date.today() - timedelta(days=3)) is RepaymentStatus.OVERDUE


@pytest.mark.parametrize(
    "value,expected",
    [
        (1234.5, "PHP 1,234.50"),
        ("1000000", "PHP 1,000,000.00"),
        (Decimal("0.005"), "PHP 0.01"),
        (0, "PHP 0.00"),
        (-1234.5, "-PHP 1,234.50"),
        ("not-a-number", "PHP 0.00"),
        (None, "PHP 0.00"),
    ],
)
def test_format_currency(value, expected):
    assert format_currency(value, "PHP") == expected


def test_format_currency_uses_given_code():
    assert format_currency(99, "USD") == "USD 99.00"


@pytest.mark.parametrize(
    "value,expected",
    [
        (1500, "PHP 1.5K"),
        (2000000, "PHP 2M"),
        (2500000000, "PHP 2.5B"),
        (3000000000000, "PHP 3T"),
        (999, "PHP 999"),
        (12.34, "PHP 12.3"),
        (999950, "PHP 1M"),
        (-1500, "-PHP 1.5K"),
        (0, "PHP 0"),
        ("bad", "PHP 0"),
        (None, "PHP 0"),
    ],
)
def test_format_compact(value, expected):
    assert format_compact(value, "PHP") == expected


def test_compact_zero_is_the_same_for_malformed_input():
    assert format_compact("bad", "PHP") == format_compact(0, "PHP")


def test_large_amounts_format_without_error():
    assert format_currency("1e30", "PHP") == "PHP 1," + ",".join(["000"] * 10) + ".00"
    assert format_currency(Decimal("-123456789012345678901234567890.125")) == (
        "-PHP 123,456,789,012,345,678,901,234,567,890.13"
    )
    assert format_compact(Decimal("1e40"), "PHP") == "PHP 10," + ",".join(["000"] * 9) + "T"
    assert money_str("1e27") == "1" + "0" * 27 + ".00"


def test_large_summary_is_exact_and_serialisable():
    summary = summarize(
        [{"amount": "1e27"}, {"amount": "0.01"}],
        [{"principal": "1e27"}],
        [{"amount_paid": "0.02"}],
    )
    assert summary.total_contributions == Decimal("1000000000000000000000000000.01")
    assert summary.amount_on_hand == Decimal("0.03")
    assert summary.to_dict() == {
        "totalContributions": "1" + "0" * 27 + ".01",
        "totalLoans": "1" + "0" * 27 + ".00",
        "totalRepayments": "0.02",
        "amountOnHand": "0.03",
    }


def test_absurd_magnitudes_are_treated_as_malformed():
    assert to_decimal("1e500") == 0
    assert format_currency("1e500", "PHP") == "PHP 0.00"
    assert format_compact("1e500", "PHP") == "PHP 0"
    assert summarize([{"amount": "1e500"}, {"amount": "10"}], [], []).total_contributions == Decimal("10")
