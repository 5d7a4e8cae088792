"""
BalanceWriter -- the single write path for Account.balance.

Responsibility:
    Applies a signed Decimal delta to one account's cached balance as a
    store-evaluated increment:

        UPDATE accounts SET balance = balance + :delta
        WHERE id = :account_id AND user_id = :user_id
        RETURNING balance

Architecture position:
    Kernel > Services.  Called by TransactionMutator, BulkDeleteCoordinator
    and RecurringService.  Nothing else writes balance after creation.

Invariants enforced:
    - No read-modify-write.  The new balance is computed by the store while
      it holds the row's write lock, so concurrent writers on the same
      account serialise and every delta lands exactly once.
    - The increment joins the caller's transaction; a later failure rolls
      it back with everything else.

Failure modes:
    - AccountNotFoundError if no row matched (absent or foreign account).
      Callers verify ownership first, so this indicates a concurrent delete
      or a programming error.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.orm.attributes import set_committed_value

from ledger_kernel.exceptions import AccountNotFoundError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.account import Account
from ledger_kernel.services.base import BaseService

logger = get_logger("services.balance_writer")


class BalanceWriter(BaseService[Account]):
    """
    Atomic balance increments.

    Contract:
        ``apply_delta(user_id, account_id, delta)`` adds ``delta`` to the
        stored balance and returns the balance the store computed.

    Guarantees:
        - Exactly one UPDATE statement per call.
        - An Account instance already loaded in this session is refreshed
          with the returned balance without being marked dirty.

    Non-goals:
        - Does NOT validate the sign of the resulting balance.  Overdrawn
          accounts are allowed.
    """

    def apply_delta(self, user_id: UUID, account_id: UUID, delta: Decimal) -> Decimal:
        """
        Increment an account balance by ``delta`` inside the caller's transaction.

        Raises:
            AccountNotFoundError: If (account_id, user_id) matched no row.
        """
        stmt = (
            update(Account)
            .where(Account.id == account_id, Account.user_id == user_id)
            .values(balance=Account.balance + delta)
            .returning(Account.balance)
            .execution_options(synchronize_session=False)
        )
        new_balance = self.session.execute(stmt).scalar_one_or_none()
        if new_balance is None:
            raise AccountNotFoundError(str(account_id))

        cached = self.session.identity_map.get(
            self.session.identity_key(Account, account_id)
        )
        if cached is not None:
            set_committed_value(cached, "balance", new_balance)

        logger.debug(
            "balance_delta_applied",
            extra={
                "account_id": str(account_id),
                "delta": delta,
                "new_balance": new_balance,
            },
        )
        return new_balance
