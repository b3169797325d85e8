"""Services package."""

from loan_tracker.services.storage import (
    AuditStorageInterface,
    ConnectionError,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsLoanStorage,
    InMemoryAuditStorage,
    InMemoryLoanStorage,
    JsonFileLoanStorage,
    LoanStorageInterface,
    NotFoundError,
    StorageError,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "ConnectionError",
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsLoanStorage",
    "InMemoryAuditStorage",
    "InMemoryLoanStorage",
    "JsonFileLoanStorage",
    "LoanStorageInterface",
    "NotFoundError",
    "StorageError",
]
