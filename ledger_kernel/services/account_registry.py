"""
AccountRegistry -- account creation and default-account transitions.

Responsibility:
    Sole writer of ``Account.is_default``.  Creates accounts (setting the
    initial balance once) and moves the default flag between a user's
    accounts.

Architecture position:
    Kernel > Services.  Called by LedgerAPI inside one session_scope().

Invariants enforced:
    - At most one default account per user at every commit point, and
      exactly one once the user owns any account.
    - Transitions lock all of the user's account rows (FOR UPDATE, id
      order), clear every flag, then set the target.  Two concurrent
      set_default calls serialise on the first locked row, so the last
      committer wins and the other's writes are never interleaved.

Failure modes:
    - AccountNotFoundError when the target is absent or owned by another
      user.  Nothing has been written at that point.
    - IntegrityError from uq_account_user_default only if a writer
      bypasses this service.
"""

from uuid import UUID

from sqlalchemy import select, update

from ledger_kernel.domain.schemas import AccountInput
from ledger_kernel.exceptions import AccountNotFoundError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.account import Account
from ledger_kernel.services.base import BaseService

logger = get_logger("services.account_registry")


class AccountRegistry(BaseService[Account]):
    """
    Account lifecycle and default selection.

    Contract:
        Every method takes the already-resolved internal ``user_id``; no
        method accepts an id without its owner.

    Guarantees:
        - The first account a user creates becomes the default regardless
          of the requested flag.
        - ``set_default`` is idempotent.
    """

    def _lock_user_accounts(self, user_id: UUID) -> list[Account]:
        return list(
            self.session.execute(
                select(Account)
                .where(Account.user_id == user_id)
                .order_by(Account.id)
                .with_for_update()
            ).scalars()
        )

    def _clear_defaults(self, user_id: UUID) -> None:
        self.session.execute(
            update(Account)
            .where(Account.user_id == user_id, Account.is_default.is_(True))
            .values(is_default=False)
            .execution_options(synchronize_session="fetch")
        )

    def set_default(self, user_id: UUID, account_id: UUID) -> Account:
        """
        Make ``account_id`` the user's only default account.

        Raises:
            AccountNotFoundError: If the account is absent or foreign.
        """
        accounts = self._lock_user_accounts(user_id)
        target = next((a for a in accounts if a.id == account_id), None)
        if target is None:
            raise AccountNotFoundError(str(account_id))

        # Clear before set: the partial unique index never sees two defaults
        self._clear_defaults(user_id)
        self.session.flush()
        target.is_default = True
        self.session.flush()

        logger.info(
            "default_account_set",
            extra={"user_id": str(user_id), "account_id": str(account_id)},
        )
        return target

    def create_account(self, user_id: UUID, data: AccountInput) -> Account:
        """
        Create an account for ``user_id`` with its opening balance.

        The new account is the default when requested or when it is the
        user's first account.
        """
        existing = self._lock_user_accounts(user_id)
        make_default = data.is_default or not existing

        if make_default and existing:
            self._clear_defaults(user_id)
            self.session.flush()

        account = Account(
            user_id=user_id,
            name=data.name,
            account_type=data.account_type,
            balance=data.balance,
            is_default=make_default,
        )
        self.session.add(account)
        self.session.flush()

        logger.info(
            "account_created",
            extra={
                "user_id": str(user_id),
                "account_id": str(account.id),
                "account_type": data.account_type.value,
                "is_default": make_default,
            },
        )
        return account
