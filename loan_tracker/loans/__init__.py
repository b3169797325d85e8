"""
Loans Package

The accrual engine, the loan store and portfolio statistics.
"""

from loan_tracker.loans.clock import Clock, FixedClock, SystemClock
from loan_tracker.loans.engine import calculate_interest, snapshot
from loan_tracker.loans.errors import (
    InvalidTransitionError,
    LoanError,
    LoanNotFoundError,
    LoanValidationError,
)
from loan_tracker.loans.statistics import filter_loans, summarize
from loan_tracker.loans.store import LoanStore

__all__ = [
    # Clock
    "Clock",
    "FixedClock",
    "SystemClock",
    # Engine
    "calculate_interest",
    "snapshot",
    # Errors
    "InvalidTransitionError",
    "LoanError",
    "LoanNotFoundError",
    "LoanValidationError",
    # Store and statistics
    "LoanStore",
    "filter_loans",
    "summarize",
]
