"""
Module: ledger_kernel.models.transaction
Responsibility: ORM persistence for income/expense transactions.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - amount > 0 (ck_transaction_amount_positive).  The sign lives in
      transaction_type, never in amount.
    - recurring_interval is non-null iff is_recurring (ck_transaction_recurring).
    - user_id equals the owning account's user_id.  Set by TransactionMutator
      from the verified account; never accepted from input.

Audit relevance:
    Rows are created, updated and deleted only through TransactionMutator,
    BulkDeleteCoordinator and RecurringService, each of which adjusts the
    owning account's balance in the same store transaction.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TrackedBase, UUIDString
from ledger_kernel.db.types import Money

if TYPE_CHECKING:
    from ledger_kernel.models.account import Account


class TransactionType(str, Enum):
    """Direction of a transaction's effect on its account."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class RecurringInterval(str, Enum):
    """Cadence at which a recurring transaction regenerates."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class Transaction(TrackedBase):
    """
    A single income or expense on one account.

    Contract:
        Ownership is (id, user_id).  Every lookup filters on both.
    """

    __tablename__ = "transactions"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),
        CheckConstraint(
            "(is_recurring AND recurring_interval IS NOT NULL)"
            " OR (NOT is_recurring AND recurring_interval IS NULL)",
            name="ck_transaction_recurring",
        ),
        Index("idx_transaction_user", "user_id"),
        Index("idx_transaction_account_date", "account_id", "date"),
        Index("idx_transaction_next_recurring", "user_id", "next_recurring_date"),
    )

    account_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("accounts.id"),
        nullable=False,
    )

    user_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("users.id"),
        nullable=False,
    )

    transaction_type: Mapped[TransactionType] = mapped_column(
        "type",
        SAEnum(TransactionType, native_enum=False, length=20, name="transaction_type"),
        nullable=False,
    )

    amount: Mapped[Money] = mapped_column(nullable=False)

    date: Mapped[dt.date] = mapped_column(nullable=False)

    description: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    category: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    is_recurring: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    recurring_interval: Mapped[RecurringInterval | None] = mapped_column(
        SAEnum(RecurringInterval, native_enum=False, length=20, name="recurring_interval"),
        nullable=True,
    )

    # Scheduling metadata for recurring templates
    next_recurring_date: Mapped[dt.date | None] = mapped_column(nullable=True)
    last_processed: Mapped[dt.date | None] = mapped_column(nullable=True)

    account: Mapped["Account"] = relationship(back_populates="transactions")

    def __repr__(self) -> str:
        return (
            f"<Transaction {self.transaction_type} {self.amount} "
            f"on {self.date} account={self.account_id}>"
        )

    @property
    def signed_amount(self) -> Decimal:
        """Balance effect of this row: +amount for INCOME, -amount for EXPENSE."""
        from ledger_kernel.domain.deltas import signed_delta

        return signed_delta(self.transaction_type, self.amount)
