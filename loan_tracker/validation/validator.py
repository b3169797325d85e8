"""
Two-Stage Loan Validation

STAGE 1 - REQUIRED FIELDS:
- borrower name, amount, interest rate and due date must be present

STAGE 2 - SEMANTIC CHECKS:
- amount must be positive
- interest rate must not be negative
- due date must not precede start date
- unusually high rates are flagged as warnings

Stage 2 only runs when stage 1 passes.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them; LoanStore refuses the operation when any is an error.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from loan_tracker.config import get_settings
from loan_tracker.models.loan import (
    LoanInput,
    ValidationIssue,
    ValidationResult,
)


class LoanValidator:
    """Validates loan inputs and payment amounts."""

    def __init__(
        self,
        high_interest_rate_warning: Optional[float] = None,
    ):
        """
        Initialize validator.

        Args:
            high_interest_rate_warning: Annual rate above which a warning
                is raised. Defaults to the configured app setting.
        """
        if high_interest_rate_warning is None:
            high_interest_rate_warning = get_settings().app.high_interest_rate_warning
        self._high_rate = Decimal(str(high_interest_rate_warning))

    def _validate_required(
        self,
        loan_input: LoanInput,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: required field presence.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        required = {
            "borrower_name": "Borrower name",
            "amount": "Loan amount",
            "interest_rate": "Interest rate",
            "due_date": "Due date",
        }
        for field, label in required.items():
            value = getattr(loan_input, field)
            if value is None or value == "":
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="missing",
                    message=f"{label} is required",
                    severity="error",
                ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def _validate_semantic(
        self,
        loan_input: LoanInput,
        start_date: date,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: value checks.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        if not loan_input.amount.is_finite() or loan_input.amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Loan amount must be greater than zero",
                severity="error",
            ))

        rate = loan_input.interest_rate
        if not rate.is_finite() or rate < 0:
            issues.append(ValidationIssue(
                field="interest_rate",
                issue_type="invalid_value",
                message="Interest rate cannot be negative",
                severity="error",
            ))
        elif rate > self._high_rate:
            issues.append(ValidationIssue(
                field="interest_rate",
                issue_type="suspicious_value",
                message=f"Interest rate ({rate}% per year) seems unusually high",
                severity="warning",
            ))

        if loan_input.due_date < start_date:
            issues.append(ValidationIssue(
                field="due_date",
                issue_type="inconsistent",
                message=(
                    f"Due date ({loan_input.due_date}) is before "
                    f"start date ({start_date})"
                ),
                severity="error",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def validate_input(
        self,
        loan_input: LoanInput,
        default_start_date: date,
    ) -> ValidationResult:
        """
        Run both validation stages on a loan input.

        Args:
            loan_input: Fields supplied for add or edit
            default_start_date: Start date to check against when the input
                has none (today for a new loan, the stored date on edit)

        Returns:
            ValidationResult with all issues found
        """
        all_issues = []

        required_valid, required_issues = self._validate_required(loan_input)
        all_issues.extend(required_issues)

        semantic_valid = False
        if required_valid:
            start_date = loan_input.start_date or default_start_date
            semantic_valid, semantic_issues = self._validate_semantic(loan_input, start_date)
            all_issues.extend(semantic_issues)

        return ValidationResult(
            is_valid=required_valid and semantic_valid,
            issues=all_issues,
        )

    def validate_payment(self, amount: Optional[Decimal]) -> ValidationResult:
        """A logged payment must be a positive amount."""
        issues = []

        if amount is None:
            issues.append(ValidationIssue(
                field="payment_amount",
                issue_type="missing",
                message="Payment amount is required",
                severity="error",
            ))
        elif not amount.is_finite() or amount <= 0:
            issues.append(ValidationIssue(
                field="payment_amount",
                issue_type="invalid_value",
                message="Payment amount must be greater than zero",
                severity="error",
            ))

        return ValidationResult(is_valid=not issues, issues=issues)
