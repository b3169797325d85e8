"""Tests for portfolio statistics."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from loan_tracker.loans import statistics
from loan_tracker.loans.statistics import filter_loans, summarize
from loan_tracker.models.loan import LoanFilter, LoanStatus

from tests.conftest import DUE, START, make_loan


NOW = date(2023, 6, 1)


@pytest.fixture
def portfolio():
    """Two active loans (one overdue), one paid, one defaulted."""
    return {
        "current": make_loan(),
        "overdue": make_loan(
            amount=Decimal("500"),
            interest_rate=Decimal("0"),
            due_date=START + timedelta(days=30),
        ),
        "paid": make_loan(
            amount=Decimal("2000"),
            interest_rate=Decimal("10"),
            status=LoanStatus.PAID,
            paid_date=date(2023, 3, 1),
            paid_amount=Decimal("2200"),
        ),
        "defaulted": make_loan(
            amount=Decimal("300"),
            interest_rate=Decimal("5"),
            due_date=START + timedelta(days=90),
            status=LoanStatus.DEFAULTED,
        ),
    }


class TestAggregates:
    """Tests for the individual aggregate functions."""

    def test_total_active_value(self, portfolio):
        """Test maturity totals are summed over active loans only."""
        loans = list(portfolio.values())
        assert statistics.total_active_value(loans, NOW) == Decimal("1620")

    def test_overdue_loans(self, portfolio):
        loans = list(portfolio.values())
        assert [loan.id for loan in statistics.overdue_loans(loans, NOW)] == [
            portfolio["overdue"].id
        ]

    def test_status_counts(self, portfolio):
        loans = list(portfolio.values())
        assert statistics.active_count(loans) == 2
        assert statistics.paid_count(loans) == 1
        assert statistics.defaulted_count(loans) == 1

    def test_total_interest_earned(self, portfolio):
        """Test earned interest is the scheduled interest of paid loans."""
        loans = list(portfolio.values())
        assert statistics.total_interest_earned(loans, NOW) == Decimal("200")

    def test_total_interest_earned_ignores_now(self, portfolio):
        loans = list(portfolio.values())
        later = DUE + timedelta(days=900)
        assert statistics.total_interest_earned(loans, later) == Decimal("200")

    def test_total_lent(self, portfolio):
        """Test principal is summed over every loan."""
        assert statistics.total_lent(portfolio.values()) == Decimal("3800")

    def test_averages(self, portfolio):
        loans = list(portfolio.values())
        assert statistics.average_interest_rate(loans) == Decimal("6.75")
        assert statistics.average_duration_days(loans) == Decimal("212.5")

    def test_empty_collection(self):
        """Test every aggregate is zero for no loans."""
        assert statistics.total_active_value([], NOW) == Decimal("0")
        assert statistics.total_interest_earned([], NOW) == Decimal("0")
        assert statistics.total_lent([]) == Decimal("0")
        assert statistics.average_interest_rate([]) == Decimal("0")
        assert statistics.average_duration_days([]) == Decimal("0")
        assert statistics.overdue_loans([], NOW) == []


class TestFilterLoans:
    """Tests for filter_loans."""

    @pytest.mark.parametrize(
        "loan_filter, expected",
        [
            (LoanFilter.ALL, {"current", "overdue", "paid", "defaulted"}),
            (LoanFilter.ACTIVE, {"current", "overdue"}),
            (LoanFilter.OVERDUE, {"overdue"}),
            (LoanFilter.PAID, {"paid"}),
            (LoanFilter.DEFAULTED, {"defaulted"}),
        ],
    )
    def test_filters(self, portfolio, loan_filter, expected):
        names = {loan.id: name for name, loan in portfolio.items()}
        result = filter_loans(portfolio.values(), loan_filter, NOW)
        assert {names[loan.id] for loan in result} == expected

    def test_filter_keeps_order(self, portfolio):
        loans = list(portfolio.values())
        assert filter_loans(loans, LoanFilter.ALL, NOW) == loans


class TestSummarize:
    """Tests for summarize."""

    def test_summary_fields(self, portfolio):
        summary = summarize(portfolio.values(), NOW)

        assert summary.as_of == NOW
        assert summary.loan_count == 4
        assert summary.active_count == 2
        assert summary.paid_count == 1
        assert summary.defaulted_count == 1
        assert summary.overdue_count == 1
        assert summary.total_lent == Decimal("3800")
        assert summary.total_active_value == Decimal("1620")
        assert summary.total_interest_earned == Decimal("200")
        assert summary.average_interest_rate == Decimal("6.75")
        assert summary.average_duration_days == Decimal("212.5")

    def test_summary_of_nothing(self):
        summary = summarize([], NOW)

        assert summary.loan_count == 0
        assert summary.total_active_value == Decimal("0")
        assert summary.average_duration_days == Decimal("0")
