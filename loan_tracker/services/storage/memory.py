"""
In-Memory Storage

Used by tests and by memory-only sessions. Loans are deep-copied on the
way in and out so the caller never shares objects with the stored
collection.
"""

from typing import Optional, Sequence
from uuid import UUID

from loan_tracker.models.audit import AuditEvent
from loan_tracker.models.loan import Loan
from loan_tracker.services.storage.interface import (
    AuditStorageInterface,
    LoanStorageInterface,
)


class InMemoryLoanStorage(LoanStorageInterface):
    """Keeps the saved collection in a Python list."""

    def __init__(self, loans: Optional[Sequence[Loan]] = None):
        self._loans = [loan.model_copy(deep=True) for loan in loans or []]
        self.save_count = 0

    def load(self) -> list[Loan]:
        return [loan.model_copy(deep=True) for loan in self._loans]

    def save(self, loans: Sequence[Loan]) -> bool:
        self._loans = [loan.model_copy(deep=True) for loan in loans]
        self.save_count += 1
        return True


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only event list."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: UUID,
    ) -> list[AuditEvent]:
        events = [
            event for event in self._events
            if event.entity_type == entity_type and event.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = sorted(self._events, key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
