"""
Google Sheets Storage Implementation

Loans are kept one per row in a worksheet so the lender can open the
spreadsheet and read their book directly. The payment ledger does not
fit in flat columns and is JSON-encoded in a single cell.

TRADEOFFS:
- Every save rewrites the worksheet (fine for a personal loan book)
- No transactions (a failed save leaves the previous contents in place
  only if the failure happens before the clear)

Network calls are retried with tenacity on API errors; anything that
still fails is surfaced as StorageError.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence
from uuid import UUID

import gspread
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from loan_tracker.config import GoogleSheetsSettings, get_settings
from loan_tracker.models.audit import AuditEvent, AuditEventType, AuditSeverity
from loan_tracker.models.loan import (
    Loan,
    LoanPayment,
    LoanStatus,
    PaymentSchedule,
)
from loan_tracker.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    LoanStorageInterface,
    NotFoundError,
    StorageError,
)


# Column mappings for Loans sheet
LOAN_COLUMNS = [
    "id",
    "borrower_name",
    "amount",
    "interest_rate",
    "start_date",
    "due_date",
    "status",
    "payment_schedule",
    "payment_method",
    "collateral",
    "contact_info",
    "description",
    "created_at",
    "updated_at",
    "paid_date",
    "paid_amount",
    "payments_json",
]

# Column mappings for Audit sheet
AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]

_api_retry = retry(
    retry=retry_if_exception_type(gspread.exceptions.APIError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    reraise=True,
)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and worksheet lookup.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @_api_retry
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError as e:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                ) from e
            except ValueError as e:
                raise ConnectionError(f"Invalid Google credentials: {e}") from e

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound as e:
                raise NotFoundError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                ) from e
        return self._spreadsheet

    def _get_or_create_sheet(
        self,
        title: str,
        columns: list[str],
        rows: int,
    ) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_loans_sheet(self) -> gspread.Worksheet:
        """Get or create the Loans worksheet."""
        return self._get_or_create_sheet(
            self._settings.loans_sheet_name, LOAN_COLUMNS, rows=1000
        )

    def get_audit_sheet(self) -> gspread.Worksheet:
        """Get or create the Audit worksheet."""
        return self._get_or_create_sheet(
            self._settings.audit_sheet_name, AUDIT_COLUMNS, rows=5000
        )


def _safe_getter(row: list):
    """Return a getter that tolerates short rows and empty cells."""
    def safe_get(index: int, default: str = "") -> str:
        try:
            return row[index] if row[index] else default
        except IndexError:
            return default
    return safe_get


class GoogleSheetsLoanStorage(LoanStorageInterface):
    """
    Google Sheets implementation of loan storage.

    Row 1 holds the column headers; every following non-empty row is a loan.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _loan_to_row(self, loan: Loan) -> list:
        """Convert a Loan to a spreadsheet row."""
        return [
            str(loan.id),
            loan.borrower_name,
            str(loan.amount),
            str(loan.interest_rate),
            loan.start_date.isoformat(),
            loan.due_date.isoformat(),
            loan.status.value,
            loan.payment_schedule.value,
            loan.payment_method,
            loan.collateral or "",
            loan.contact_info or "",
            loan.description or "",
            loan.created_at.isoformat(),
            loan.updated_at.isoformat(),
            loan.paid_date.isoformat() if loan.paid_date else "",
            str(loan.paid_amount) if loan.paid_amount is not None else "",
            json.dumps([p.model_dump(mode="json") for p in loan.payments]),
        ]

    def _row_to_loan(self, row: list) -> Loan:
        """Convert a spreadsheet row to a Loan."""
        safe_get = _safe_getter(row)

        payments = []
        payments_json = safe_get(16)
        if payments_json:
            payments = [LoanPayment(**item) for item in json.loads(payments_json)]

        return Loan(
            id=UUID(safe_get(0)),
            borrower_name=safe_get(1),
            amount=Decimal(safe_get(2)),
            interest_rate=Decimal(safe_get(3)),
            start_date=date.fromisoformat(safe_get(4)),
            due_date=date.fromisoformat(safe_get(5)),
            status=LoanStatus(safe_get(6)),
            payment_schedule=PaymentSchedule(safe_get(7, PaymentSchedule.MONTHLY.value)),
            payment_method=safe_get(8, "cash"),
            collateral=safe_get(9) or None,
            contact_info=safe_get(10) or None,
            description=safe_get(11) or None,
            created_at=datetime.fromisoformat(safe_get(12)),
            updated_at=datetime.fromisoformat(safe_get(13)),
            paid_date=date.fromisoformat(safe_get(14)) if safe_get(14) else None,
            paid_amount=Decimal(safe_get(15)) if safe_get(15) else None,
            payments=payments,
        )

    @_api_retry
    def _read_rows(self) -> list[list]:
        sheet = self._client.get_loans_sheet()
        return sheet.get_all_values()[1:]  # Skip header

    @_api_retry
    def _write_rows(self, rows: list[list]) -> None:
        sheet = self._client.get_loans_sheet()
        sheet.clear()
        sheet.update(
            values=[LOAN_COLUMNS] + rows,
            range_name="A1",
            value_input_option="RAW",
        )

    def load(self) -> list[Loan]:
        """Read every loan row from the worksheet."""
        try:
            rows = self._read_rows()
        except StorageError:
            raise
        except (gspread.exceptions.GSpreadException, GoogleAuthError, OSError) as e:
            raise StorageError(f"Failed to read loans: {e}") from e

        loans = []
        for line, row in enumerate(rows, start=2):
            if not row or not row[0]:  # Skip empty rows
                continue
            try:
                loans.append(self._row_to_loan(row))
            except (ValueError, KeyError, TypeError, ArithmeticError) as e:
                raise StorageError(f"Malformed loan in row {line}: {e}") from e
        return loans

    def save(self, loans: Sequence[Loan]) -> bool:
        """Rewrite the worksheet with the full collection."""
        rows = [self._loan_to_row(loan) for loan in loans]
        try:
            self._write_rows(rows)
        except StorageError:
            raise
        except (gspread.exceptions.GSpreadException, GoogleAuthError, OSError) as e:
            raise StorageError(f"Failed to save loans: {e}") from e
        return True


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_to_event(self, row: list) -> AuditEvent:
        """Convert a spreadsheet row to an AuditEvent."""
        safe_get = _safe_getter(row)

        return AuditEvent(
            event_id=UUID(safe_get(0)),
            timestamp=datetime.fromisoformat(safe_get(1)),
            event_type=AuditEventType(safe_get(2)),
            severity=AuditSeverity(safe_get(3)),
            entity_type=safe_get(4) or None,
            entity_id=UUID(safe_get(5)) if safe_get(5) else None,
            description=safe_get(6),
            details=json.loads(safe_get(7)) if safe_get(7) else {},
            error_message=safe_get(8) or None,
            is_user_action=safe_get(9).lower() == "true",
        )

    @_api_retry
    def _append_row(self, row: list) -> None:
        sheet = self._client.get_audit_sheet()
        sheet.append_row(row, value_input_option="RAW")

    def _all_events(self) -> list[AuditEvent]:
        try:
            rows = self._client.get_audit_sheet().get_all_values()[1:]
        except (gspread.exceptions.GSpreadException, GoogleAuthError, OSError) as e:
            raise StorageError(f"Failed to get audit events: {e}") from e

        events = []
        for row in rows:
            if not row or not row[0]:
                continue
            try:
                events.append(self._row_to_event(row))
            except (ValueError, KeyError) as e:
                raise StorageError(f"Malformed audit row: {e}") from e
        return events

    def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            self._append_row(event.to_sheets_row())
        except (StorageError, gspread.exceptions.GSpreadException, GoogleAuthError, OSError) as e:
            raise StorageError(f"Failed to write audit event: {e}") from e
        return True

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: UUID,
    ) -> list[AuditEvent]:
        """Get events by entity."""
        events = [
            event for event in self._all_events()
            if event.entity_type == entity_type and event.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get recent events, newest first."""
        events = self._all_events()
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
