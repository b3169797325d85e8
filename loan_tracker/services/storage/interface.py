"""
Abstract Storage Interface

DESIGN DECISION: LoanStore talks to persistence only through these
interfaces. This allows us to:
1. Keep loans in a local JSON file, a spreadsheet, or memory
2. Use in-memory storage for testing
3. Keep lifecycle rules decoupled from storage mechanics

Loan storage is deliberately whole-collection: load everything once at
startup, save everything after each change.
"""

from abc import ABC, abstractmethod
from typing import Sequence
from uuid import UUID

from loan_tracker.models.audit import AuditEvent
from loan_tracker.models.loan import Loan


class LoanStorageInterface(ABC):
    """
    Abstract interface for loan persistence.

    Any storage implementation (JSON file, Google Sheets, etc.)
    must implement these methods.
    """

    @abstractmethod
    def load(self) -> list[Loan]:
        """
        Load the full loan collection.

        Returns:
            Every stored loan; an empty list when nothing is stored yet

        Raises:
            StorageError: If the stored data cannot be read or parsed
        """
        pass

    @abstractmethod
    def save(self, loans: Sequence[Loan]) -> bool:
        """
        Replace the stored collection with ``loans``.

        Args:
            loans: The complete collection, in store order

        Returns:
            True if saved successfully

        Raises:
            StorageError: If save fails
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity, in chronological order.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Storage location (file, spreadsheet, worksheet) not found."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
