"""
Application Wiring for Loan Tracker

Builds a ready-to-use LoanStore from settings: picks the storage backend,
configures logging and attaches the audit logger.

DESIGN DECISION: Nothing here is a module-level singleton. Each call
returns a fresh store with its own collaborators, so a display layer (or a
test) can hold as many independent stores as it likes.
"""

from typing import Optional

import structlog

from loan_tracker.audit import AuditLogger, configure_logging
from loan_tracker.config import Settings, get_settings
from loan_tracker.loans import Clock, LoanStore, SystemClock
from loan_tracker.services.storage import (
    AuditStorageInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsLoanStorage,
    InMemoryAuditStorage,
    InMemoryLoanStorage,
    JsonFileLoanStorage,
    LoanStorageInterface,
    StorageError,
)
from loan_tracker.validation import LoanValidator


logger = structlog.get_logger(__name__)


def create_storage(
    settings: Settings,
) -> tuple[LoanStorageInterface, Optional[AuditStorageInterface]]:
    """
    Build the loan storage (and matching audit storage) named in settings.

    Returns:
        (loan_storage, audit_storage); audit_storage is None for the JSON
        backend, where audit events only go to the local log.
    """
    backend = settings.storage.backend

    if backend == "memory":
        return InMemoryLoanStorage(), InMemoryAuditStorage()

    if backend == "json":
        return JsonFileLoanStorage(settings.storage.data_file), None

    sheets_client = GoogleSheetsClient(settings.google_sheets)
    return (
        GoogleSheetsLoanStorage(sheets_client),
        GoogleSheetsAuditStorage(sheets_client),
    )


def create_loan_store(
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
    configure_logs: bool = True,
) -> LoanStore:
    """
    Factory function to create a LoanStore with all its collaborators.

    Args:
        settings: Settings to use; the cached application settings if None
        clock: Clock to use; the system clock if None
        configure_logs: Whether to (re)configure structlog from settings

    Returns:
        A LoanStore that has already loaded its collection
    """
    settings = settings or get_settings()
    app_settings = settings.app

    if configure_logs:
        if app_settings.debug_mode:
            configure_logging("DEBUG", json_output=False)
        else:
            configure_logging(app_settings.log_level, app_settings.log_json)

    try:
        loan_storage, audit_storage = create_storage(settings)
    except (StorageError, ValueError) as e:
        # Storage not configured - continue without it
        logger.warning("storage_unavailable", error=str(e))
        loan_storage, audit_storage = InMemoryLoanStorage(), InMemoryAuditStorage()

    return LoanStore(
        storage=loan_storage,
        clock=clock or SystemClock(),
        audit_logger=AuditLogger(audit_storage),
        validator=LoanValidator(app_settings.high_interest_rate_warning),
    )
