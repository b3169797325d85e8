"""
Loan Data Models

These models define the schemas for every loan record the tracker keeps.
They are designed to:
1. Enforce types at the boundary (Decimal money, calendar dates, UUID ids)
2. Be serializable for JSON and spreadsheet storage
3. Keep derived figures separate from stored figures

DESIGN DECISION: Derived values (interest, amount due, progress) are NEVER
stored on the Loan. They live in AccrualSnapshot and are recomputed on demand.
The only frozen figure is paid_amount, captured at the moment of payoff.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class LoanStatus(str, Enum):
    """
    Loan lifecycle state.

    ACTIVE is the only non-terminal state. PAID and DEFAULTED are final.
    """
    ACTIVE = "active"
    PAID = "paid"
    DEFAULTED = "defaulted"

    @property
    def is_terminal(self) -> bool:
        return self is not LoanStatus.ACTIVE


class PaymentSchedule(str, Enum):
    """How often the borrower is expected to pay. Informational only."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    LUMP_SUM = "lump-sum"


class LoanFilter(str, Enum):
    """List filters offered to the display layer."""
    ALL = "all"
    ACTIVE = "active"
    OVERDUE = "overdue"
    PAID = "paid"
    DEFAULTED = "defaulted"


# Payment methods offered by the entry form. The field itself is free text.
PAYMENT_METHODS = ("cash", "bank-transfer", "check", "online", "other")


# =============================================================================
# CORE LOAN MODELS
# =============================================================================

class LoanPayment(BaseModel):
    """
    A single partial payment logged against a loan.

    Payments are an informational ledger. They are never subtracted from
    the principal or from the accrued interest.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique payment ID"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount received"
    )
    date: datetime = Field(
        ...,
        description="When the payment was recorded"
    )


class LoanInput(BaseModel):
    """
    Editable loan fields as supplied by a caller (add or edit).

    Every required field is Optional here so that a missing value is
    reported by LoanValidator as a validation issue rather than failing
    while the input is being parsed.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    borrower_name: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Borrower's full name (required)"
    )
    amount: Optional[Decimal] = Field(
        default=None,
        description="Principal lent (required, > 0)"
    )
    interest_rate: Optional[Decimal] = Field(
        default=None,
        description="Annual interest rate in percent (required, >= 0)"
    )
    start_date: Optional[date] = Field(
        default=None,
        description="Origination date; today when omitted"
    )
    due_date: Optional[date] = Field(
        default=None,
        description="Maturity date (required)"
    )
    payment_schedule: PaymentSchedule = Field(
        default=PaymentSchedule.MONTHLY,
        description="Expected repayment cadence"
    )
    payment_method: str = Field(
        default="cash",
        max_length=50,
        description="How the money changes hands"
    )
    collateral: Optional[str] = Field(
        default=None,
        max_length=500,
    )
    contact_info: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Phone, email, or address"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Free-form notes"
    )


class Loan(BaseModel):
    """
    A loan record owned by LoanStore.

    Invariants (checked by LoanValidator before a Loan is built):
    - amount > 0
    - interest_rate >= 0
    - due_date >= start_date
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    # Identity
    id: UUID = Field(
        default_factory=uuid4,
        description="Unique loan ID"
    )

    # Borrower
    borrower_name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Borrower's full name"
    )
    contact_info: Optional[str] = None

    # Terms
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Principal lent"
    )
    interest_rate: Decimal = Field(
        ...,
        ge=0,
        description="Annual interest rate in percent"
    )
    start_date: date
    due_date: date
    payment_schedule: PaymentSchedule = PaymentSchedule.MONTHLY
    payment_method: str = "cash"
    collateral: Optional[str] = None
    description: Optional[str] = None

    # Lifecycle
    status: LoanStatus = Field(
        default=LoanStatus.ACTIVE,
        description="Lifecycle state"
    )
    payments: list[LoanPayment] = Field(default_factory=list)
    paid_date: Optional[date] = None
    paid_amount: Optional[Decimal] = Field(
        default=None,
        description="Total amount at maturity, frozen when marked paid"
    )

    # Timestamps
    created_at: datetime
    updated_at: datetime

    @property
    def total_paid(self) -> Decimal:
        """Sum of the logged partial payments."""
        return sum((payment.amount for payment in self.payments), Decimal("0"))

    def apply_input(self, loan_input: LoanInput) -> None:
        """Overwrite every editable field from a validated LoanInput."""
        self.borrower_name = loan_input.borrower_name
        self.amount = loan_input.amount
        self.interest_rate = loan_input.interest_rate
        self.start_date = loan_input.start_date
        self.due_date = loan_input.due_date
        self.payment_schedule = loan_input.payment_schedule
        self.payment_method = loan_input.payment_method
        self.collateral = loan_input.collateral
        self.contact_info = loan_input.contact_info
        self.description = loan_input.description


# =============================================================================
# DERIVED VALUE MODELS (never persisted)
# =============================================================================

class AccrualSnapshot(BaseModel):
    """
    Time-dependent figures for one loan at one instant.

    Produced by loan_tracker.loans.engine.snapshot(). Frozen: a snapshot
    describes a moment and is never edited.
    """
    model_config = ConfigDict(frozen=True)

    loan_id: UUID
    as_of: date = Field(
        ...,
        description="Calendar date the figures were computed for"
    )
    days_passed: int = Field(ge=0)
    total_days: int
    accrued_interest: Decimal
    total_interest: Decimal
    current_amount_due: Decimal
    total_amount_at_maturity: Decimal
    is_overdue: bool
    days_overdue: int = Field(ge=0)
    progress_percentage: float = Field(ge=0.0, le=100.0)


class PortfolioSummary(BaseModel):
    """Aggregate figures across every loan at one instant."""
    model_config = ConfigDict(frozen=True)

    as_of: date
    loan_count: int = Field(ge=0)
    active_count: int = Field(ge=0)
    paid_count: int = Field(ge=0)
    defaulted_count: int = Field(ge=0)
    overdue_count: int = Field(ge=0)
    total_lent: Decimal
    total_active_value: Decimal
    total_interest_earned: Decimal
    average_interest_rate: Decimal
    average_duration_days: Decimal


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'inconsistent')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of validating a loan input or a payment."""

    is_valid: bool = Field(
        ...,
        description="True when no error-level issue was found"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
