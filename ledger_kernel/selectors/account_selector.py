"""
Module: ledger_kernel.selectors.account_selector
Responsibility: Read models for a user's accounts.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - get_account_view filters on (id, user_id) in a single query; absent
      and foreign accounts both return None.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ledger_kernel.domain.dtos import AccountSnapshot, AccountView, TransactionSnapshot
from ledger_kernel.models.account import Account
from ledger_kernel.selectors.base import BaseSelector


class AccountSelector(BaseSelector[Account]):
    """Queries over Account rows."""

    def get_account_view(self, user_id: UUID, account_id: UUID) -> AccountView | None:
        """
        Return the account with its transactions (newest first), or None.

        Returns:
            AccountView, or None when the account does not exist or belongs
            to another user.
        """
        account = self.session.execute(
            select(Account)
            .where(Account.id == account_id, Account.user_id == user_id)
            .options(selectinload(Account.transactions))
        ).scalar_one_or_none()
        if account is None:
            return None

        ordered = sorted(
            account.transactions,
            key=lambda t: (t.created_at, t.date),
            reverse=True,
        )
        return AccountView(
            account=AccountSnapshot.from_model(account),
            transactions=tuple(TransactionSnapshot.from_model(t) for t in ordered),
        )

    def list_accounts(self, user_id: UUID) -> list[AccountSnapshot]:
        """The user's accounts, default first, then by name."""
        rows = self.session.execute(
            select(Account)
            .where(Account.user_id == user_id)
            .order_by(Account.is_default.desc(), Account.name, Account.id)
        ).scalars()
        return [AccountSnapshot.from_model(row) for row in rows]

    def get_default_account(self, user_id: UUID) -> AccountSnapshot | None:
        """The user's default account, or None if the user has no accounts."""
        row = self.session.execute(
            select(Account).where(Account.user_id == user_id, Account.is_default.is_(True))
        ).scalar_one_or_none()
        return AccountSnapshot.from_model(row) if row is not None else None
