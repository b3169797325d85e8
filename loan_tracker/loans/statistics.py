"""
Portfolio Statistics

Aggregate figures over a collection of loans at a given instant. All
functions are pure; interest figures come from the accrual engine.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Union

from loan_tracker.loans.engine import as_calendar_date, duration_days, snapshot
from loan_tracker.models.loan import Loan, LoanFilter, LoanStatus, PortfolioSummary


Moment = Union[date, datetime]

_ZERO = Decimal("0")


def _with_status(loans: Iterable[Loan], status: LoanStatus) -> list[Loan]:
    return [loan for loan in loans if loan.status == status]


def total_active_value(loans: Iterable[Loan], now: Moment) -> Decimal:
    """Sum of the total amount at maturity over active loans."""
    return sum(
        (snapshot(loan, now).total_amount_at_maturity
         for loan in _with_status(loans, LoanStatus.ACTIVE)),
        _ZERO,
    )


def overdue_loans(loans: Iterable[Loan], now: Moment) -> list[Loan]:
    """Loans flagged overdue by the accrual engine."""
    return [loan for loan in loans if snapshot(loan, now).is_overdue]


def active_count(loans: Iterable[Loan]) -> int:
    return len(_with_status(loans, LoanStatus.ACTIVE))


def paid_count(loans: Iterable[Loan]) -> int:
    return len(_with_status(loans, LoanStatus.PAID))


def defaulted_count(loans: Iterable[Loan]) -> int:
    return len(_with_status(loans, LoanStatus.DEFAULTED))


def total_interest_earned(loans: Iterable[Loan], now: Moment) -> Decimal:
    """
    Sum of total interest over paid loans.

    Recomputed from amount, rate and dates rather than read from
    paid_amount. Total interest does not depend on ``now``, so this
    matches the figure captured when each loan was paid.
    """
    return sum(
        (snapshot(loan, now).total_interest
         for loan in _with_status(loans, LoanStatus.PAID)),
        _ZERO,
    )


def total_lent(loans: Iterable[Loan]) -> Decimal:
    """Sum of principal over every loan, whatever its status."""
    return sum((loan.amount for loan in loans), _ZERO)


def average_interest_rate(loans: Iterable[Loan]) -> Decimal:
    """Mean annual rate; 0 for an empty collection."""
    rates = [loan.interest_rate for loan in loans]
    if not rates:
        return _ZERO
    return sum(rates, _ZERO) / len(rates)


def average_duration_days(loans: Iterable[Loan]) -> Decimal:
    """Mean scheduled term in days; 0 for an empty collection."""
    durations = [duration_days(loan) for loan in loans]
    if not durations:
        return _ZERO
    return Decimal(sum(durations)) / len(durations)


def filter_loans(
    loans: Iterable[Loan],
    loan_filter: LoanFilter,
    now: Moment,
) -> list[Loan]:
    """Apply one of the list filters shown above the loan list."""
    loans = list(loans)
    if loan_filter == LoanFilter.ALL:
        return loans
    if loan_filter == LoanFilter.OVERDUE:
        return overdue_loans(loans, now)
    return _with_status(loans, LoanStatus(loan_filter.value))


def summarize(loans: Iterable[Loan], now: Moment) -> PortfolioSummary:
    """Gather every aggregate into one PortfolioSummary."""
    loans = list(loans)
    return PortfolioSummary(
        as_of=as_calendar_date(now),
        loan_count=len(loans),
        active_count=active_count(loans),
        paid_count=paid_count(loans),
        defaulted_count=defaulted_count(loans),
        overdue_count=len(overdue_loans(loans, now)),
        total_lent=total_lent(loans),
        total_active_value=total_active_value(loans, now),
        total_interest_earned=total_interest_earned(loans, now),
        average_interest_rate=average_interest_rate(loans),
        average_duration_days=average_duration_days(loans),
    )
