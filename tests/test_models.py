"""
Tests for Loan Tracker

Test strategy:
1. Unit tests for individual components (models, engine, validator)
2. Store tests against in-memory storage and a fixed clock
3. No real API calls in tests (use fakes)
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

from loan_tracker.models.loan import (
    AccrualSnapshot,
    Loan,
    LoanFilter,
    LoanInput,
    LoanPayment,
    LoanStatus,
    PAYMENT_METHODS,
    PaymentSchedule,
    ValidationIssue,
    ValidationResult,
)
from loan_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

from tests.conftest import make_loan


class TestLoanModels:
    """Tests for loan-related Pydantic models."""

    def test_loan_creation(self):
        """Test Loan model creation with defaults."""
        loan = make_loan()
        assert loan.borrower_name == "Ravi Kumar"
        assert loan.status == LoanStatus.ACTIVE
        assert loan.payment_schedule == PaymentSchedule.MONTHLY
        assert loan.payment_method == "cash"
        assert loan.payments == []
        assert loan.paid_date is None
        assert loan.paid_amount is None

    def test_loan_ids_are_unique(self):
        """Test that each loan gets its own ID."""
        assert make_loan().id != make_loan().id

    def test_loan_strips_whitespace(self):
        """Test that whitespace is stripped from borrower name."""
        loan = make_loan(borrower_name="  Asha  ")
        assert loan.borrower_name == "Asha"

    def test_loan_rejects_zero_amount(self):
        """Test that a zero principal is rejected."""
        with pytest.raises(ValueError):
            make_loan(amount=Decimal("0"))

    def test_loan_rejects_negative_rate(self):
        """Test that a negative rate is rejected."""
        with pytest.raises(ValueError):
            make_loan(interest_rate=Decimal("-1"))

    def test_loan_accepts_zero_rate(self):
        """Test that an interest-free loan is allowed."""
        loan = make_loan(interest_rate=Decimal("0"))
        assert loan.interest_rate == Decimal("0")

    def test_loan_total_paid(self):
        """Test total_paid sums the payment ledger."""
        moment = datetime(2023, 2, 1, tzinfo=timezone.utc)
        loan = make_loan(payments=[
            LoanPayment(amount=Decimal("100.50"), date=moment),
            LoanPayment(amount=Decimal("49.50"), date=moment),
        ])
        assert loan.total_paid == Decimal("150.00")

    def test_loan_json_round_trip(self):
        """Test that a loan survives JSON serialization unchanged."""
        loan = make_loan(
            status=LoanStatus.PAID,
            paid_date=date(2023, 6, 1),
            paid_amount=Decimal("1120.00"),
            payments=[LoanPayment(
                amount=Decimal("10"),
                date=datetime(2023, 3, 1, tzinfo=timezone.utc),
            )],
        )
        restored = Loan.model_validate_json(loan.model_dump_json())
        assert restored.model_dump() == loan.model_dump()

    def test_loan_input_all_optional(self):
        """Test that LoanInput parses with required fields missing."""
        loan_input = LoanInput()
        assert loan_input.borrower_name is None
        assert loan_input.amount is None
        assert loan_input.payment_schedule == PaymentSchedule.MONTHLY

    def test_loan_input_parses_strings(self):
        """Test that form-style string values are coerced."""
        loan_input = LoanInput.model_validate({
            "borrower_name": " Meera ",
            "amount": "2500.75",
            "interest_rate": "9.5",
            "due_date": "2024-06-30",
            "payment_schedule": "lump-sum",
        })
        assert loan_input.borrower_name == "Meera"
        assert loan_input.amount == Decimal("2500.75")
        assert loan_input.due_date == date(2024, 6, 30)
        assert loan_input.payment_schedule == PaymentSchedule.LUMP_SUM

    def test_loan_input_rejects_unknown_schedule(self):
        """Test that schedules outside the enum are rejected."""
        with pytest.raises(ValueError):
            LoanInput(payment_schedule="fortnightly")

    def test_apply_input_overwrites_editable_fields(self):
        """Test apply_input copies editable fields and keeps lifecycle fields."""
        loan = make_loan(status=LoanStatus.DEFAULTED)
        loan.apply_input(LoanInput(
            borrower_name="Asha",
            amount=Decimal("50"),
            interest_rate=Decimal("1"),
            start_date=date(2023, 2, 1),
            due_date=date(2023, 3, 1),
            payment_method="online",
        ))
        assert loan.borrower_name == "Asha"
        assert loan.amount == Decimal("50")
        assert loan.payment_method == "online"
        assert loan.status == LoanStatus.DEFAULTED

    def test_snapshot_is_frozen(self):
        """Test that AccrualSnapshot cannot be modified."""
        result = AccrualSnapshot(
            loan_id=uuid4(),
            as_of=date(2023, 1, 1),
            days_passed=0,
            total_days=10,
            accrued_interest=Decimal("0"),
            total_interest=Decimal("1"),
            current_amount_due=Decimal("100"),
            total_amount_at_maturity=Decimal("101"),
            is_overdue=False,
            days_overdue=0,
            progress_percentage=0.0,
        )
        with pytest.raises(ValueError):
            result.days_passed = 5


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.LOAN_CREATED,
            description="Loan created",
        )
        assert event.event_type == AuditEventType.LOAN_CREATED
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.LOAN_PAID,
            description="Loan paid",
            details={"paid_amount": "1120.00"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "loan_paid"
        assert log_dict["details"]["paid_amount"] == "1120.00"

    def test_audit_event_to_sheets_row(self):
        """Test conversion to sheets row."""
        event = AuditEvent(
            event_type=AuditEventType.LOAN_DELETED,
            description="Loan deleted",
            is_user_action=True,
        )
        row = event.to_sheets_row()
        assert len(row) == 10  # Expected number of columns
        assert row[2] == "loan_deleted"  # event_type
        assert row[9] == "True"  # is_user_action

    def test_audit_event_builder_loan_created(self):
        """Test AuditEventBuilder.loan_created."""
        loan_id = uuid4()
        event = AuditEventBuilder.loan_created(loan_id, "Ravi", Decimal("1000"))

        assert event.event_type == AuditEventType.LOAN_CREATED
        assert event.entity_id == loan_id
        assert event.details["amount"] == "1000.00"
        assert event.is_user_action is True

    def test_audit_event_builder_save_failed(self):
        """Test AuditEventBuilder.save_failed."""
        event = AuditEventBuilder.save_failed("disk full", loan_count=3)

        assert event.event_type == AuditEventType.SAVE_FAILED
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"
        assert event.details["loan_count"] == 3

    def test_audit_event_builder_transition_rejected(self):
        """Test AuditEventBuilder.transition_rejected."""
        loan_id = uuid4()
        event = AuditEventBuilder.transition_rejected(loan_id, "paid", "defaulted")

        assert event.event_type == AuditEventType.TRANSITION_REJECTED
        assert event.details == {"current": "paid", "target": "defaulted"}
        assert event.is_user_action is False


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="missing",
                    message="Loan amount is required",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            is_valid=True,
            issues=[
                ValidationIssue(
                    field="interest_rate",
                    issue_type="suspicious_value",
                    message="Rate seems high",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0

    def test_validation_issue_rejects_unknown_severity(self):
        """Test severity must be error, warning or info."""
        with pytest.raises(ValueError):
            ValidationIssue(
                field="amount",
                issue_type="missing",
                message="x",
                severity="fatal",
            )


class TestLoanEnums:
    """Tests for loan enums."""

    def test_terminal_statuses(self):
        """Test that only ACTIVE is non-terminal."""
        assert LoanStatus.ACTIVE.is_terminal is False
        assert LoanStatus.PAID.is_terminal is True
        assert LoanStatus.DEFAULTED.is_terminal is True

    def test_all_schedules_exist(self):
        """Test that expected schedules exist."""
        expected = ["weekly", "monthly", "quarterly", "yearly", "lump-sum"]
        for schedule in expected:
            assert PaymentSchedule(schedule) is not None

    def test_filter_values(self):
        """Test filter string values."""
        assert [f.value for f in LoanFilter] == [
            "all", "active", "overdue", "paid", "defaulted",
        ]

    def test_payment_methods(self):
        """Test the offered payment methods."""
        assert "cash" in PAYMENT_METHODS
        assert "bank-transfer" in PAYMENT_METHODS


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
