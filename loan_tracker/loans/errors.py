"""Exceptions raised by LoanStore operations."""

from typing import Optional
from uuid import UUID

from loan_tracker.models.loan import LoanStatus, ValidationIssue


class LoanError(Exception):
    """Base exception for loan operations."""
    pass


class LoanValidationError(LoanError):
    """
    Input failed validation. Raised before any state change.

    The individual problems are available on ``issues``.
    """

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        messages = "; ".join(issue.message for issue in issues) or "invalid input"
        super().__init__(f"Validation failed: {messages}")

    @property
    def fields(self) -> list[str]:
        return [issue.field for issue in self.issues]


class LoanNotFoundError(LoanError):
    """No loan with the given ID exists."""

    def __init__(self, loan_id: UUID):
        self.loan_id = loan_id
        super().__init__(f"Loan not found: {loan_id}")


class InvalidTransitionError(LoanError):
    """A status change was attempted from a state that does not allow it."""

    def __init__(
        self,
        loan_id: UUID,
        current: LoanStatus,
        target: LoanStatus,
        message: Optional[str] = None,
    ):
        self.loan_id = loan_id
        self.current = current
        self.target = target
        super().__init__(
            message
            or f"Loan {loan_id} is {current.value}; cannot mark it {target.value}"
        )
