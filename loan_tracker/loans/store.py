"""
Loan Store

Owns the loan collection and is the only component allowed to change it.

Lifecycle:

    active ──mark_paid──────▶ paid       (terminal)
       └────mark_defaulted──▶ defaulted  (terminal)

Transitions are checked here, against _TRANSITIONS, and nowhere else.

Persistence: the collection is loaded once when the store is built and
saved after every successful mutation. A storage failure never undoes the
in-memory change. Instead the store records the failure, stops saving and
carries on in memory for the rest of the session (``memory_only``).
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union
from uuid import UUID, uuid4

import structlog
from pydantic import ValidationError

from loan_tracker.audit import AuditLogger
from loan_tracker.loans import engine, statistics
from loan_tracker.loans.clock import Clock, SystemClock
from loan_tracker.loans.errors import (
    InvalidTransitionError,
    LoanNotFoundError,
    LoanValidationError,
)
from loan_tracker.models.audit import AuditEventBuilder
from loan_tracker.models.loan import (
    AccrualSnapshot,
    Loan,
    LoanFilter,
    LoanInput,
    LoanPayment,
    LoanStatus,
    PortfolioSummary,
    ValidationIssue,
    ValidationResult,
)
from loan_tracker.services.storage import LoanStorageInterface, StorageError
from loan_tracker.validation import LoanValidator


LoanId = Union[UUID, str]

_TRANSITIONS: dict[LoanStatus, frozenset[LoanStatus]] = {
    LoanStatus.ACTIVE: frozenset({LoanStatus.PAID, LoanStatus.DEFAULTED}),
    LoanStatus.PAID: frozenset(),
    LoanStatus.DEFAULTED: frozenset(),
}


def _issues_from_pydantic(error: ValidationError) -> list[ValidationIssue]:
    issues = []
    for err in error.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or "input"
        issues.append(ValidationIssue(
            field=field,
            issue_type="invalid_format",
            message=f"{field}: {err.get('msg', 'invalid value')}",
            severity="error",
        ))
    return issues


class LoanStore:
    """
    The loan collection plus the operations that may change it.

    Every operation runs to completion synchronously. Returned loans are
    copies; changing them has no effect on the store.
    """

    def __init__(
        self,
        storage: LoanStorageInterface,
        clock: Optional[Clock] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[LoanValidator] = None,
    ):
        self._storage = storage
        self._clock = clock or SystemClock()
        self._audit = audit_logger or AuditLogger()
        self._validator = validator or LoanValidator()
        self._logger = structlog.get_logger(__name__)

        self._loans: list[Loan] = []
        self.memory_only = False
        self.last_save_ok = True
        self.last_save_error: Optional[str] = None

        self._load()

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _load(self) -> None:
        try:
            self._loans = list(self._storage.load())
        except StorageError as e:
            # Saving over unreadable data would destroy it
            self.memory_only = True
            self._loans = []
            self._audit.log(AuditEventBuilder.load_failed(str(e)))
            return
        self._audit.log(AuditEventBuilder.loans_loaded(len(self._loans)))

    def _persist(self) -> bool:
        if self.memory_only:
            self.last_save_ok = False
            return False

        error: Optional[str] = None
        try:
            saved = self._storage.save(list(self._loans))
        except StorageError as e:
            saved = False
            error = str(e)

        if not saved:
            self.memory_only = True
            self.last_save_ok = False
            self.last_save_error = error or "storage reported failure"
            self._audit.log(
                AuditEventBuilder.save_failed(self.last_save_error, len(self._loans))
            )
            return False

        self.last_save_ok = True
        return True

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _find(self, loan_id: LoanId) -> Loan:
        try:
            key = loan_id if isinstance(loan_id, UUID) else UUID(str(loan_id))
        except ValueError:
            raise LoanNotFoundError(loan_id)
        for loan in self._loans:
            if loan.id == key:
                return loan
        raise LoanNotFoundError(key)

    def _raise_if_invalid(
        self,
        result: ValidationResult,
        loan_id: Optional[UUID] = None,
    ) -> None:
        for issue in result.issues:
            if issue.severity == "warning":
                self._logger.warning(
                    "loan_validation_warning",
                    field=issue.field,
                    message=issue.message,
                    loan_id=str(loan_id) if loan_id else None,
                )
        if result.has_errors:
            errors = [issue for issue in result.issues if issue.severity == "error"]
            self._audit.log(AuditEventBuilder.validation_failed(
                [issue.model_dump() for issue in errors], loan_id=loan_id
            ))
            raise LoanValidationError(errors)

    def _coerce_input(self, loan_input: Union[LoanInput, dict[str, Any]]) -> LoanInput:
        if isinstance(loan_input, LoanInput):
            return loan_input
        try:
            return LoanInput.model_validate(loan_input)
        except ValidationError as e:
            issues = _issues_from_pydantic(e)
            self._audit.log(AuditEventBuilder.validation_failed(
                [issue.model_dump() for issue in issues]
            ))
            raise LoanValidationError(issues) from e

    def _transition(self, loan: Loan, target: LoanStatus) -> None:
        if target not in _TRANSITIONS[loan.status]:
            self._audit.log(AuditEventBuilder.transition_rejected(
                loan.id, loan.status.value, target.value
            ))
            raise InvalidTransitionError(loan.id, loan.status, target)
        loan.status = target

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(self, loan_input: Union[LoanInput, dict[str, Any]]) -> Loan:
        """
        Create a new active loan.

        Raises:
            LoanValidationError: If required fields are missing or invalid
        """
        loan_input = self._coerce_input(loan_input)
        now = self._clock.now()
        today = now.date()

        self._raise_if_invalid(self._validator.validate_input(loan_input, today))

        loan = Loan(
            borrower_name=loan_input.borrower_name,
            amount=loan_input.amount,
            interest_rate=loan_input.interest_rate,
            start_date=loan_input.start_date or today,
            due_date=loan_input.due_date,
            payment_schedule=loan_input.payment_schedule,
            payment_method=loan_input.payment_method,
            collateral=loan_input.collateral,
            contact_info=loan_input.contact_info,
            description=loan_input.description,
            status=LoanStatus.ACTIVE,
            payments=[],
            created_at=now,
            updated_at=now,
        )
        self._loans.append(loan)

        self._audit.log(AuditEventBuilder.loan_created(
            loan.id, loan.borrower_name, loan.amount
        ))
        self._persist()
        return loan.model_copy(deep=True)

    def edit(
        self,
        loan_id: LoanId,
        loan_input: Union[LoanInput, dict[str, Any]],
    ) -> Loan:
        """
        Replace the editable fields of an existing loan.

        Identity, creation time, status, payments and payoff figures are
        kept. A missing start date keeps the stored one.

        Raises:
            LoanNotFoundError: If no loan has this ID
            LoanValidationError: If required fields are missing or invalid
        """
        loan = self._find(loan_id)
        loan_input = self._coerce_input(loan_input)

        self._raise_if_invalid(
            self._validator.validate_input(loan_input, loan.start_date),
            loan_id=loan.id,
        )

        if loan_input.start_date is None:
            loan_input = loan_input.model_copy(update={"start_date": loan.start_date})
        loan.apply_input(loan_input)
        loan.updated_at = self._clock.now()

        self._audit.log(AuditEventBuilder.loan_updated(loan.id, loan.borrower_name))
        self._persist()
        return loan.model_copy(deep=True)

    def mark_paid(self, loan_id: LoanId) -> Loan:
        """
        Close an active loan as repaid.

        paid_amount is the total amount at maturity at this moment and
        is never recomputed afterwards.

        Raises:
            LoanNotFoundError: If no loan has this ID
            InvalidTransitionError: If the loan is not active
        """
        loan = self._find(loan_id)
        now = self._clock.now()
        figures = engine.snapshot(loan, now)

        self._transition(loan, LoanStatus.PAID)
        loan.paid_date = now.date()
        loan.paid_amount = figures.total_amount_at_maturity
        loan.updated_at = now

        self._audit.log(AuditEventBuilder.loan_paid(loan.id, loan.paid_amount))
        self._persist()
        return loan.model_copy(deep=True)

    def mark_defaulted(self, loan_id: LoanId) -> Loan:
        """
        Close an active loan as defaulted.

        Raises:
            LoanNotFoundError: If no loan has this ID
            InvalidTransitionError: If the loan is not active
        """
        loan = self._find(loan_id)

        self._transition(loan, LoanStatus.DEFAULTED)
        loan.updated_at = self._clock.now()

        self._audit.log(AuditEventBuilder.loan_defaulted(loan.id))
        self._persist()
        return loan.model_copy(deep=True)

    def record_payment(
        self,
        loan_id: LoanId,
        payment_amount: Union[Decimal, int, float, str],
    ) -> Loan:
        """
        Log a partial payment against a loan, in any status.

        The payment is informational: status, principal and the accrual
        figures are left as they are.

        Raises:
            LoanNotFoundError: If no loan has this ID
            LoanValidationError: If the amount is not a positive number
        """
        loan = self._find(loan_id)

        amount: Optional[Decimal]
        if payment_amount is None:
            amount = None
        else:
            try:
                amount = Decimal(str(payment_amount))
            except InvalidOperation:
                amount = Decimal("NaN")
        self._raise_if_invalid(self._validator.validate_payment(amount), loan_id=loan.id)

        now = self._clock.now()
        payment = LoanPayment(id=uuid4(), amount=amount, date=now)
        loan.payments.append(payment)
        loan.updated_at = now

        self._audit.log(AuditEventBuilder.payment_recorded(loan.id, payment.id, amount))
        self._persist()
        return loan.model_copy(deep=True)

    def remove(self, loan_id: LoanId) -> None:
        """
        Delete a loan, whatever its status.

        Raises:
            LoanNotFoundError: If no loan has this ID
        """
        loan = self._find(loan_id)
        self._loans.remove(loan)

        self._audit.log(AuditEventBuilder.loan_deleted(loan.id, loan.borrower_name))
        self._persist()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._loans)

    def get(self, loan_id: LoanId) -> Loan:
        """
        Raises:
            LoanNotFoundError: If no loan has this ID
        """
        return self._find(loan_id).model_copy(deep=True)

    def list_loans(self, loan_filter: LoanFilter = LoanFilter.ALL) -> list[Loan]:
        """Loans matching ``loan_filter``, most recently created first."""
        matching = statistics.filter_loans(self._loans, loan_filter, self._clock.now())
        # Ties on created_at fall back to reverse insertion order
        ordered = sorted(reversed(matching), key=lambda loan: loan.created_at, reverse=True)
        return [loan.model_copy(deep=True) for loan in ordered]

    def snapshot(self, loan_id: LoanId) -> AccrualSnapshot:
        """Accrual figures for one loan as of now."""
        return engine.snapshot(self._find(loan_id), self._clock.now())

    def summary(self) -> PortfolioSummary:
        """Portfolio aggregates as of now."""
        return statistics.summarize(self._loans, self._clock.now())
