"""
LedgerAPI -- the call/result boundary of the ledger.

Responsibility:
    Turns an external call (auth id + loosely-typed input) into exactly one
    store transaction and an ``OperationResult``.  For every call:

        1. resolve the caller's identity (UnauthorizedError if unknown)
        2. validate input (ValidationError, before any store transaction)
        3. run the kernel services inside one session_scope()
        4. convert the result to JSON-ready data inside that scope

Architecture position:
    Services -- outermost layer.  May import from ledger_kernel and
    ledger_config.  The kernel never imports from here.

Invariants enforced:
    - Exceptions never cross this boundary.  Kernel errors map to their
      ``code``; SQLAlchemy errors map to STORE_FAILURE with the driver
      message; anything else is logged and reported as INTERNAL_ERROR.
    - A failed call has persisted nothing: the session scope rolled back.
    - No automatic retries.

Audit relevance:
    Every call runs under a fresh correlation_id bound into LogContext, so
    all kernel log lines of one call can be joined.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledger_config import LedgerConfig
from ledger_kernel.db.engine import get_session, init_engine_from_url, session_scope
from ledger_kernel.domain.budget import BudgetThresholds, compute_usage
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.dtos import (
    AccountSnapshot,
    BudgetSnapshot,
    DashboardSummary,
    TransactionSnapshot,
)
from ledger_kernel.domain.schemas import (
    parse_id,
    parse_ids,
    parse_optional_date,
    validate_account_input,
    validate_budget_amount,
    validate_transaction_input,
)
from ledger_kernel.exceptions import (
    AccountNotFoundError,
    LedgerKernelError,
    StoreFailureError,
)
from ledger_kernel.logging_config import LogContext, configure_logging, get_logger
from ledger_kernel.selectors.account_selector import AccountSelector
from ledger_kernel.selectors.transaction_selector import TransactionSelector
from ledger_kernel.services.account_registry import AccountRegistry
from ledger_kernel.services.budget_service import BudgetService
from ledger_kernel.services.bulk_delete import BulkDeleteCoordinator
from ledger_kernel.services.recurring_service import RecurringService
from ledger_kernel.services.transaction_mutator import TransactionMutator
from ledger_kernel.services.user_service import UserService
from ledger_services.serialization import serialize_usage, to_jsonable

logger = get_logger("services.api")

INTERNAL_ERROR_CODE = "INTERNAL_ERROR"


@dataclass(frozen=True)
class OperationResult:
    """Stable result envelope: ``{success, data}`` or ``{success, error}``."""

    success: bool
    data: Any = None
    error: str | None = None
    code: str | None = None
    field_errors: tuple[dict[str, Any], ...] = ()

    @classmethod
    def ok(cls, data: Any = None) -> OperationResult:
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, exc: LedgerKernelError) -> OperationResult:
        return cls(
            success=False,
            error=str(exc),
            code=exc.code,
            field_errors=tuple(getattr(exc, "field_errors", ())),
        )

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        payload: dict[str, Any] = {"success": False, "error": self.error, "code": self.code}
        if self.field_errors:
            payload["field_errors"] = list(self.field_errors)
        return payload


def _store_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class LedgerAPI:
    """
    Facade over the ledger kernel.

    Contract:
        Every public method returns an OperationResult and never raises.
        ``external_auth_id`` is the identity provider's opaque user key,
        already authenticated by the caller.

    Non-goals:
        - Does NOT authenticate.  It only maps an id to a User.
        - Does NOT schedule recurring processing; ``process_recurring`` is
          invoked by an external job runner.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        thresholds: BudgetThresholds | None = None,
        recent_limit: int = 5,
    ):
        self.clock = clock or SystemClock()
        self.thresholds = thresholds or BudgetThresholds()
        self.recent_limit = recent_limit

    @classmethod
    def from_config(cls, config: LedgerConfig, clock: Clock | None = None) -> LedgerAPI:
        """Configure logging and the engine from ``config`` and build an API."""
        configure_logging(level=config.logging.level)
        db = config.database
        init_engine_from_url(
            db.url,
            echo=db.echo,
            pool_size=db.pool_size,
            max_overflow=db.max_overflow,
            pool_timeout=db.pool_timeout,
            pool_recycle=db.pool_recycle,
            statement_timeout_ms=db.statement_timeout_ms,
        )
        return cls(
            clock=clock,
            thresholds=BudgetThresholds(
                warning_percent=config.budget.warning_percent,
                critical_percent=config.budget.critical_percent,
            ),
            recent_limit=config.dashboard.recent_limit,
        )

    # ------------------------------------------------------------------
    # Call plumbing
    # ------------------------------------------------------------------

    def _resolve_user(self, external_auth_id: str | None) -> UUID:
        session = get_session()
        try:
            return UserService(session, self.clock).resolve(external_auth_id).id
        finally:
            session.close()

    def _execute(
        self,
        operation: str,
        external_auth_id: str | None,
        work: Callable[[Session, UUID, Any], Any],
        validate: Callable[[], Any] | None = None,
        resolve_identity: bool = True,
    ) -> OperationResult:
        with LogContext.bind(correlation_id=str(uuid4()), operation=operation):
            try:
                user_id = self._resolve_user(external_auth_id) if resolve_identity else None
                payload = validate() if validate is not None else None
                with LogContext.bind(user_id=user_id):
                    with session_scope() as session:
                        data = work(session, user_id, payload)
                logger.info("operation_succeeded")
                return OperationResult.ok(data)
            except LedgerKernelError as exc:
                logger.info(
                    "operation_failed",
                    extra={"error_code": exc.code, "error": str(exc)},
                )
                return OperationResult.failure(exc)
            except SQLAlchemyError as exc:
                failure = StoreFailureError(_store_message(exc), operation)
                logger.error(
                    "operation_store_failure",
                    extra={"error_code": failure.code, "error": failure.message},
                )
                return OperationResult.failure(failure)
            except Exception as exc:
                logger.exception("operation_internal_error")
                return OperationResult(success=False, error=str(exc), code=INTERNAL_ERROR_CODE)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def register_user(
        self,
        external_auth_id: str | None,
        email: str | None = None,
        name: str | None = None,
    ) -> OperationResult:
        """Provision the User for an authenticated identity (idempotent)."""

        def work(session, _user_id, _payload):
            user = UserService(session, self.clock).ensure_user(
                external_auth_id, email=email, name=name
            )
            return {
                "id": str(user.id),
                "external_auth_id": user.external_auth_id,
                "email": user.email,
                "name": user.name,
            }

        return self._execute(
            "register_user", external_auth_id, work, resolve_identity=False
        )

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def create_transaction(
        self, external_auth_id: str | None, data: Mapping[str, Any]
    ) -> OperationResult:
        def work(session, user_id, tx_input):
            row = TransactionMutator(session, self.clock).create(user_id, tx_input)
            return to_jsonable(TransactionSnapshot.from_model(row))

        return self._execute(
            "create_transaction", external_auth_id, work,
            validate=lambda: validate_transaction_input(data),
        )

    def update_transaction(
        self,
        external_auth_id: str | None,
        transaction_id: Any,
        data: Mapping[str, Any],
    ) -> OperationResult:
        def work(session, user_id, payload):
            tx_id, tx_input = payload
            row = TransactionMutator(session, self.clock).update(user_id, tx_id, tx_input)
            return to_jsonable(TransactionSnapshot.from_model(row))

        return self._execute(
            "update_transaction", external_auth_id, work,
            validate=lambda: (
                parse_id(transaction_id, "transaction_id"),
                validate_transaction_input(data),
            ),
        )

    def delete_transaction(
        self, external_auth_id: str | None, transaction_id: Any
    ) -> OperationResult:
        def work(session, user_id, tx_id):
            row = TransactionMutator(session, self.clock).delete(user_id, tx_id)
            return to_jsonable(TransactionSnapshot.from_model(row))

        return self._execute(
            "delete_transaction", external_auth_id, work,
            validate=lambda: parse_id(transaction_id, "transaction_id"),
        )

    def bulk_delete_transactions(
        self, external_auth_id: str | None, transaction_ids: Iterable[Any]
    ) -> OperationResult:
        def work(session, user_id, ids):
            BulkDeleteCoordinator(session, self.clock).delete_many(user_id, ids)
            return None

        return self._execute(
            "bulk_delete_transactions", external_auth_id, work,
            validate=lambda: parse_ids(transaction_ids),
        )

    def process_recurring(
        self, external_auth_id: str | None, as_of: date | str | None = None
    ) -> OperationResult:
        def work(session, user_id, when):
            created = RecurringService(session, self.clock).process_due(user_id, when)
            return [to_jsonable(TransactionSnapshot.from_model(row)) for row in created]

        return self._execute(
            "process_recurring", external_auth_id, work,
            validate=lambda: parse_optional_date(as_of),
        )

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def create_account(
        self, external_auth_id: str | None, data: Mapping[str, Any]
    ) -> OperationResult:
        def work(session, user_id, account_input):
            account = AccountRegistry(session, self.clock).create_account(user_id, account_input)
            return to_jsonable(AccountSnapshot.from_model(account))

        return self._execute(
            "create_account", external_auth_id, work,
            validate=lambda: validate_account_input(data),
        )

    def set_default_account(
        self, external_auth_id: str | None, account_id: Any
    ) -> OperationResult:
        def work(session, user_id, acct_id):
            account = AccountRegistry(session, self.clock).set_default(user_id, acct_id)
            return to_jsonable(AccountSnapshot.from_model(account))

        return self._execute(
            "set_default_account", external_auth_id, work,
            validate=lambda: parse_id(account_id, "account_id"),
        )

    def get_account_view(
        self, external_auth_id: str | None, account_id: Any
    ) -> OperationResult:
        """Account with transactions; ``data`` is None when not found."""

        def work(session, user_id, acct_id):
            return to_jsonable(AccountSelector(session).get_account_view(user_id, acct_id))

        return self._execute(
            "get_account_view", external_auth_id, work,
            validate=lambda: parse_id(account_id, "account_id"),
        )

    def list_accounts(self, external_auth_id: str | None) -> OperationResult:
        def work(session, user_id, _):
            return to_jsonable(AccountSelector(session).list_accounts(user_id))

        return self._execute("list_accounts", external_auth_id, work)

    # ------------------------------------------------------------------
    # Budgets
    # ------------------------------------------------------------------

    def compute_budget_usage(self, budget_amount: Any, current_expenses: Any) -> OperationResult:
        """Pure usage computation; needs no identity and opens no session."""
        usage = compute_usage(budget_amount, current_expenses, self.thresholds)
        return OperationResult.ok(serialize_usage(usage))

    def update_budget(self, external_auth_id: str | None, amount: Any) -> OperationResult:
        def work(session, user_id, value):
            budget = BudgetService(session, self.clock, self.thresholds).upsert_budget(
                user_id, value
            )
            return to_jsonable(BudgetSnapshot.from_model(budget))

        return self._execute(
            "update_budget", external_auth_id, work,
            validate=lambda: validate_budget_amount(amount),
        )

    def get_current_budget(
        self, external_auth_id: str | None, as_of: date | str | None = None
    ) -> OperationResult:
        """Budget with usage for the month of ``as_of``; ``data`` is None when unset."""

        def work(session, user_id, when):
            service = BudgetService(session, self.clock, self.thresholds)
            return to_jsonable(service.get_current_budget(user_id, when))

        return self._execute(
            "get_current_budget", external_auth_id, work,
            validate=lambda: parse_optional_date(as_of),
        )

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    def get_dashboard(
        self,
        external_auth_id: str | None,
        account_id: Any = None,
        as_of: date | str | None = None,
    ) -> OperationResult:
        """
        Recent transactions and this month's expense breakdown.

        Uses the default account when ``account_id`` is omitted.
        """

        def work(session, user_id, payload):
            acct_id, when = payload
            when = when or self.clock.today()
            accounts = AccountSelector(session).list_accounts(user_id)
            if acct_id is None:
                chosen = next((a for a in accounts if a.is_default), None)
            else:
                chosen = next((a for a in accounts if a.id == acct_id), None)
                if chosen is None:
                    raise AccountNotFoundError(str(acct_id))
            if chosen is None:
                return to_jsonable(DashboardSummary(account_id=None))

            selector = TransactionSelector(session)
            summary = DashboardSummary(
                account_id=chosen.id,
                recent=tuple(selector.recent(user_id, chosen.id, self.recent_limit)),
                expense_breakdown=tuple(selector.expense_breakdown(user_id, chosen.id, when)),
            )
            return to_jsonable(summary)

        return self._execute(
            "get_dashboard", external_auth_id, work,
            validate=lambda: (
                parse_id(account_id, "account_id") if account_id not in (None, "") else None,
                parse_optional_date(as_of),
            ),
        )
