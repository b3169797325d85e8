"""
Audit Models for Loan Tracker

Every loan mutation and every persistence failure is recorded as an
AuditEvent. This provides:
1. A history of each loan (created, edited, paid, defaulted, deleted)
2. Debugging information when storage misbehaves
3. The ability to reconstruct what the user did

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Loan lifecycle
    LOAN_CREATED = "loan_created"
    LOAN_UPDATED = "loan_updated"
    LOAN_DELETED = "loan_deleted"
    LOAN_PAID = "loan_paid"
    LOAN_DEFAULTED = "loan_defaulted"
    PAYMENT_RECORDED = "payment_recorded"

    # Rejections
    VALIDATION_FAILED = "validation_failed"
    TRANSITION_REJECTED = "transition_rejected"

    # Persistence
    LOANS_LOADED = "loans_loaded"
    LOAD_FAILED = "load_failed"
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'loan', 'payment')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, entity_type, entity_id,
         description, details_json, error_message, is_user_action]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            str(self.entity_id) if self.entity_id else "",
            self.description,
            json.dumps(self.details) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]


def _money(value: Decimal) -> str:
    return f"{value:.2f}"


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.loan_created(loan_id, borrower, amount)
        event = AuditEventBuilder.save_failed("disk full", loan_count=3)
    """

    @staticmethod
    def loan_created(
        loan_id: UUID,
        borrower_name: str,
        amount: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAN_CREATED,
            entity_type="loan",
            entity_id=loan_id,
            description=f"Loan created: {borrower_name} - {_money(amount)}",
            details={
                "borrower_name": borrower_name,
                "amount": _money(amount),
            },
            is_user_action=True,
        )

    @staticmethod
    def loan_updated(
        loan_id: UUID,
        borrower_name: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAN_UPDATED,
            entity_type="loan",
            entity_id=loan_id,
            description=f"Loan updated: {borrower_name}",
            details={"borrower_name": borrower_name},
            is_user_action=True,
        )

    @staticmethod
    def loan_deleted(
        loan_id: UUID,
        borrower_name: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAN_DELETED,
            severity=AuditSeverity.WARNING,
            entity_type="loan",
            entity_id=loan_id,
            description=f"Loan deleted: {borrower_name}",
            details={"borrower_name": borrower_name},
            is_user_action=True,
        )

    @staticmethod
    def loan_paid(
        loan_id: UUID,
        paid_amount: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAN_PAID,
            entity_type="loan",
            entity_id=loan_id,
            description=f"Loan marked paid: {_money(paid_amount)}",
            details={"paid_amount": _money(paid_amount)},
            is_user_action=True,
        )

    @staticmethod
    def loan_defaulted(loan_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAN_DEFAULTED,
            severity=AuditSeverity.WARNING,
            entity_type="loan",
            entity_id=loan_id,
            description="Loan marked defaulted",
            is_user_action=True,
        )

    @staticmethod
    def payment_recorded(
        loan_id: UUID,
        payment_id: UUID,
        amount: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_RECORDED,
            entity_type="loan",
            entity_id=loan_id,
            description=f"Payment recorded: {_money(amount)}",
            details={
                "payment_id": str(payment_id),
                "amount": _money(amount),
            },
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        issues: list[dict],
        loan_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="loan",
            entity_id=loan_id,
            description=f"Validation failed with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def transition_rejected(
        loan_id: UUID,
        current: str,
        target: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSITION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="loan",
            entity_id=loan_id,
            description=f"Cannot move loan from {current} to {target}",
            details={"current": current, "target": target},
        )

    @staticmethod
    def loans_loaded(loan_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOANS_LOADED,
            severity=AuditSeverity.DEBUG,
            description=f"Loaded {loan_count} loans from storage",
            details={"loan_count": loan_count},
        )

    @staticmethod
    def load_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            description="Could not load loans; continuing in memory only",
            error_message=error_message,
        )

    @staticmethod
    def save_failed(
        error_message: str,
        loan_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            description="Could not save loans; continuing in memory only",
            error_message=error_message,
            details={"loan_count": loan_count},
        )
