"""Validation package."""

from loan_tracker.validation.validator import LoanValidator

__all__ = ["LoanValidator"]
