"""
Storage Services Package

Provides abstract interfaces and concrete implementations for loan and
audit storage: in memory, a local JSON file, or Google Sheets.
"""

from loan_tracker.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    LoanStorageInterface,
    NotFoundError,
    StorageError,
)
from loan_tracker.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryLoanStorage,
)
from loan_tracker.services.storage.json_file import JsonFileLoanStorage
from loan_tracker.services.storage.google_sheets import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsLoanStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LoanStorageInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsLoanStorage",
    "InMemoryAuditStorage",
    "InMemoryLoanStorage",
    "JsonFileLoanStorage",
]
