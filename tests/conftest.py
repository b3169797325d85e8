"""Shared fixtures for Loan Tracker tests."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from loan_tracker.audit import AuditLogger
from loan_tracker.loans import FixedClock, LoanStore
from loan_tracker.models.loan import Loan, LoanInput, LoanStatus
from loan_tracker.services.storage import InMemoryAuditStorage, InMemoryLoanStorage
from loan_tracker.services.storage.google_sheets import AUDIT_COLUMNS, LOAN_COLUMNS
from loan_tracker.validation import LoanValidator


START = date(2023, 1, 1)
DUE = date(2024, 1, 1)  # 365 days after START
CREATED = datetime(2023, 1, 1, 9, 0, 0, tzinfo=timezone.utc)


def make_loan(**overrides) -> Loan:
    """A 1000.00 loan at 12% per year over a 365-day term."""
    fields = dict(
        borrower_name="Ravi Kumar",
        amount=Decimal("1000.00"),
        interest_rate=Decimal("12"),
        start_date=START,
        due_date=DUE,
        status=LoanStatus.ACTIVE,
        created_at=CREATED,
        updated_at=CREATED,
    )
    fields.update(overrides)
    return Loan(**fields)


def make_input(**overrides) -> LoanInput:
    fields = dict(
        borrower_name="Ravi Kumar",
        amount=Decimal("1000.00"),
        interest_rate=Decimal("12"),
        start_date=START,
        due_date=DUE,
    )
    fields.update(overrides)
    return LoanInput(**fields)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2023, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def storage() -> InMemoryLoanStorage:
    return InMemoryLoanStorage()


@pytest.fixture
def audit_storage() -> InMemoryAuditStorage:
    return InMemoryAuditStorage()


@pytest.fixture
def validator() -> LoanValidator:
    return LoanValidator(high_interest_rate_warning=100.0)


@pytest.fixture
def store(storage, clock, audit_storage, validator) -> LoanStore:
    return LoanStore(
        storage=storage,
        clock=clock,
        audit_logger=AuditLogger(audit_storage),
        validator=validator,
    )


# =============================================================================
# GOOGLE SHEETS FAKES
# =============================================================================

class FakeWorksheet:
    """Just enough of gspread.Worksheet for the storage classes."""

    def __init__(self, header, fail_with=None):
        self.rows = [list(header)]
        self.fail_with = fail_with

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    def get_all_values(self):
        self._check()
        return [list(row) for row in self.rows]

    def clear(self):
        self._check()
        self.rows = []

    def update(self, values, range_name=None, value_input_option=None):
        self._check()
        assert range_name == "A1"
        self.rows = [list(row) for row in values]

    def append_row(self, row, value_input_option=None):
        self._check()
        self.rows.append(list(row))


class FakeSheetsClient:
    def __init__(self, fail_with=None):
        self.loans_sheet = FakeWorksheet(LOAN_COLUMNS, fail_with)
        self.audit_sheet = FakeWorksheet(AUDIT_COLUMNS, fail_with)

    def get_loans_sheet(self):
        return self.loans_sheet

    def get_audit_sheet(self):
        return self.audit_sheet
