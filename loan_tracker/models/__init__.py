"""
Data Models Package

This package contains all Pydantic models used in the Loan Tracker.
All data flowing through the system must conform to these schemas.
"""

from loan_tracker.models.loan import (
    PAYMENT_METHODS,
    AccrualSnapshot,
    Loan,
    LoanFilter,
    LoanInput,
    LoanPayment,
    LoanStatus,
    PaymentSchedule,
    PortfolioSummary,
    ValidationIssue,
    ValidationResult,
)
from loan_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Loan models
    "PAYMENT_METHODS",
    "AccrualSnapshot",
    "Loan",
    "LoanFilter",
    "LoanInput",
    "LoanPayment",
    "LoanStatus",
    "PaymentSchedule",
    "PortfolioSummary",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
