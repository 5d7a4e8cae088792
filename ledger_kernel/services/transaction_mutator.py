"""
TransactionMutator -- single-transaction create, update and delete.

Responsibility:
    Inserts, rewrites and removes Transaction rows, applying the matching
    balance delta to the owning account in the same store transaction.

Architecture position:
    Kernel > Services.  Input arrives as a validated TransactionInput;
    this module never sees raw caller data.

Invariants enforced:
    - Reconciliation: after every call, each touched account's balance
      still equals the signed sum of its transactions.
    - Reversal law: delete and the "old" half of update apply exactly
      ``reversal_delta`` of the stored row.
    - Ownership: accounts and transactions are looked up by (id, user_id).
      Transaction.user_id is copied from the verified account.
    - Rows being rewritten or removed are locked FOR UPDATE first, so two
      concurrent updates of one row cannot both reverse the same old value.

Failure modes:
    - AccountNotFoundError / TransactionNotFoundError before any write.
    - Any store error propagates; the caller's scope rolls back both the
      row change and the balance increment.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import select

from ledger_kernel.domain.clock import Clock
from ledger_kernel.domain.deltas import reversal_delta, signed_delta
from ledger_kernel.domain.recurrence import next_occurrence
from ledger_kernel.domain.schemas import TransactionInput
from ledger_kernel.exceptions import AccountNotFoundError, TransactionNotFoundError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.account import Account
from ledger_kernel.models.transaction import Transaction
from ledger_kernel.services.balance_writer import BalanceWriter
from ledger_kernel.services.base import BaseService

logger = get_logger("services.transaction_mutator")


class TransactionMutator(BaseService[Transaction]):
    """
    Balance-consistent transaction writes.

    Contract:
        Stateless per call.  Each method performs its row write and its
        balance increment(s) inside the caller's transaction and flushes.

    Guarantees:
        - create applies ``signed_delta`` once.
        - update on the same account applies one net increment
          (new - old); across accounts it reverses on the old account and
          applies on the new one.
        - delete applies ``reversal_delta`` once and removes the row.

    Non-goals:
        - Does NOT validate input; see ledger_kernel.domain.schemas.
    """

    def __init__(self, session, clock: Clock | None = None):
        super().__init__(session, clock)
        self._balances = BalanceWriter(session, self.clock)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _get_owned_account(self, user_id: UUID, account_id: UUID) -> Account:
        account = self.session.execute(
            select(Account).where(Account.id == account_id, Account.user_id == user_id)
        ).scalar_one_or_none()
        if account is None:
            raise AccountNotFoundError(str(account_id))
        return account

    def _lock_owned_transaction(self, user_id: UUID, transaction_id: UUID) -> Transaction:
        row = self.session.execute(
            select(Transaction)
            .where(Transaction.id == transaction_id, Transaction.user_id == user_id)
            .with_for_update()
        ).scalar_one_or_none()
        if row is None:
            raise TransactionNotFoundError(str(transaction_id))
        return row

    @staticmethod
    def _apply_fields(row: Transaction, data: TransactionInput) -> None:
        row.account_id = data.account_id
        row.transaction_type = data.transaction_type
        row.amount = data.amount
        row.date = data.date
        row.category = data.category
        row.description = data.description
        row.is_recurring = data.is_recurring
        row.recurring_interval = data.recurring_interval if data.is_recurring else None
        row.next_recurring_date = (
            next_occurrence(data.date, data.recurring_interval)
            if data.is_recurring
            else None
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create(self, user_id: UUID, data: TransactionInput) -> Transaction:
        """
        Insert a transaction and apply its signed delta.

        Raises:
            AccountNotFoundError: If the account is absent or foreign.
        """
        account = self._get_owned_account(user_id, data.account_id)

        row = Transaction(user_id=account.user_id)
        self._apply_fields(row, data)
        self.session.add(row)
        self.session.flush()

        delta = signed_delta(data.transaction_type, data.amount)
        new_balance = self._balances.apply_delta(user_id, account.id, delta)

        logger.info(
            "transaction_created",
            extra={
                "transaction_id": str(row.id),
                "account_id": str(account.id),
                "transaction_type": data.transaction_type.value,
                "amount": data.amount,
                "new_balance": new_balance,
            },
        )
        return row

    def update(
        self, user_id: UUID, transaction_id: UUID, data: TransactionInput
    ) -> Transaction:
        """
        Rewrite a transaction, moving its balance effect as needed.

        Raises:
            TransactionNotFoundError: If the row is absent or foreign.
            AccountNotFoundError: If the target account is absent or foreign.
        """
        row = self._lock_owned_transaction(user_id, transaction_id)
        self._get_owned_account(user_id, data.account_id)

        old_account_id = row.account_id
        old_reversal = reversal_delta(row.transaction_type, row.amount)
        new_delta = signed_delta(data.transaction_type, data.amount)

        self._apply_fields(row, data)
        self.session.flush()

        if old_account_id == data.account_id:
            net = old_reversal + new_delta
            if net != Decimal("0"):
                self._balances.apply_delta(user_id, old_account_id, net)
        else:
            # Lower id first: the same lock order bulk delete uses
            moves = sorted(
                [(old_account_id, old_reversal), (data.account_id, new_delta)],
                key=lambda move: str(move[0]),
            )
            for account_id, delta in moves:
                self._balances.apply_delta(user_id, account_id, delta)

        logger.info(
            "transaction_updated",
            extra={
                "transaction_id": str(row.id),
                "old_account_id": str(old_account_id),
                "account_id": str(data.account_id),
                "reversed": old_reversal,
                "applied": new_delta,
            },
        )
        return row

    def delete(self, user_id: UUID, transaction_id: UUID) -> Transaction:
        """
        Remove a transaction and apply its reversal delta.

        Returns the deleted (detached-state) row for reporting.

        Raises:
            TransactionNotFoundError: If the row is absent or foreign.
        """
        row = self._lock_owned_transaction(user_id, transaction_id)
        delta = reversal_delta(row.transaction_type, row.amount)

        self.session.delete(row)
        self.session.flush()
        new_balance = self._balances.apply_delta(user_id, row.account_id, delta)

        logger.info(
            "transaction_deleted",
            extra={
                "transaction_id": str(transaction_id),
                "account_id": str(row.account_id),
                "reversed": delta,
                "new_balance": new_balance,
            },
        )
        return row
