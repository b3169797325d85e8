"""
Accrual Engine

Derives the time-dependent figures of a loan from its principal, rate,
and dates. Every function here is pure: no I/O, no clock access, no
mutation of the Loan passed in.

Interest is simple and non-compounding, accrued per whole calendar day:

    daily_rate = interest_rate / 365 / 100
    interest   = principal * daily_rate * days

This module is the only place daily-interest math exists. Callers that
need interest figures (LoanStore, statistics) go through snapshot().
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Union

from loan_tracker.models.loan import AccrualSnapshot, Loan, LoanStatus


DAYS_IN_YEAR = 365
PERCENT = 100

_ZERO = Decimal("0")
_DIVISOR = Decimal(DAYS_IN_YEAR * PERCENT)


def as_calendar_date(moment: Union[date, datetime]) -> date:
    """Truncate a timestamp to its calendar date."""
    if isinstance(moment, datetime):
        return moment.date()
    return moment


def days_between(start: date, end: date) -> int:
    """Whole days from ``start`` to ``end`` (negative if end is earlier)."""
    return (end - start).days


def calculate_interest(principal: Decimal, rate: Decimal, days: int) -> Decimal:
    """
    Simple interest on ``principal`` at ``rate`` percent per year for ``days``.

    Evaluated as ``principal * rate * days / 36500`` so that a full
    year at a whole-number rate comes out exact in Decimal arithmetic.
    """
    if days <= 0:
        return _ZERO
    return principal * rate * days / _DIVISOR


def progress_percentage(elapsed_days: int, total_days: int) -> float:
    """
    Share of the term elapsed, clamped to [0, 100].

    ``elapsed_days`` is the unclamped day count, negative before the start.
    """
    if total_days <= 0:
        # Same-day loans are fully elapsed as soon as they start
        return 100.0 if elapsed_days >= 0 else 0.0
    return min(100.0, max(0.0, elapsed_days / total_days * 100))


def snapshot(loan: Loan, now: Union[date, datetime]) -> AccrualSnapshot:
    """
    Compute the derived figures for ``loan`` as of ``now``.

    ``now`` may be a datetime or a date; either way only its calendar
    date is used. Calling this twice with the same inputs returns equal
    snapshots.
    """
    today = as_calendar_date(now)

    elapsed_days = days_between(loan.start_date, today)
    days_passed = max(0, elapsed_days)
    total_days = days_between(loan.start_date, loan.due_date)

    accrued_interest = calculate_interest(loan.amount, loan.interest_rate, days_passed)
    total_interest = calculate_interest(loan.amount, loan.interest_rate, total_days)

    is_overdue = today > loan.due_date and loan.status == LoanStatus.ACTIVE
    days_overdue = days_between(loan.due_date, today) if is_overdue else 0

    return AccrualSnapshot(
        loan_id=loan.id,
        as_of=today,
        days_passed=days_passed,
        total_days=total_days,
        accrued_interest=accrued_interest,
        total_interest=total_interest,
        current_amount_due=loan.amount + accrued_interest,
        total_amount_at_maturity=loan.amount + total_interest,
        is_overdue=is_overdue,
        days_overdue=days_overdue,
        progress_percentage=progress_percentage(elapsed_days, total_days),
    )


def duration_days(loan: Loan) -> int:
    """Length of the scheduled term in whole days."""
    return days_between(loan.start_date, loan.due_date)
