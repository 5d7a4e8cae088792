"""
Module: ledger_kernel.models.account
Responsibility: ORM persistence for user accounts and their cached balance.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - balance equals the signed sum of the account's transactions after every
      committed operation.  The column is written only by
      services/balance_writer.py (store-evaluated increments) and once at
      creation time.
    - At most one is_default row per user.  Enforced by AccountRegistry's
      locked clear-then-set and, at the store level, by the partial unique
      index uq_account_user_default.

Failure modes:
    - IntegrityError on a second default account for the same user.  The
      registry orders its writes so this only fires on a bypassing writer.
"""

from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TrackedBase, UUIDString
from ledger_kernel.db.types import Money

if TYPE_CHECKING:
    from ledger_kernel.models.transaction import Transaction
    from ledger_kernel.models.user import User


class AccountType(str, Enum):
    """Kinds of user accounts."""

    CURRENT = "CURRENT"
    SAVINGS = "SAVINGS"


class Account(TrackedBase):
    """
    A user-owned account holding a cached balance.

    Contract:
        Ownership is (id, user_id).  Lookups MUST filter on both; an id
        alone never proves ownership.

    Guarantees:
        - balance is a Decimal (Numeric(38, 9)); never float.
        - account_type is CURRENT or SAVINGS.
    """

    __tablename__ = "accounts"

    __table_args__ = (
        Index("idx_account_user", "user_id"),
        Index(
            "uq_account_user_default",
            "user_id",
            unique=True,
            postgresql_where=text("is_default"),
            sqlite_where=text("is_default = 1"),
        ),
    )

    user_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("users.id"),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    account_type: Mapped[AccountType] = mapped_column(
        "type",
        SAEnum(AccountType, native_enum=False, length=20, name="account_type"),
        nullable=False,
    )

    balance: Mapped[Money] = mapped_column(
        nullable=False,
        default=Decimal("0"),
    )

    is_default: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    user: Mapped["User"] = relationship(back_populates="accounts")

    transactions: Mapped[list["Transaction"]] = relationship(
        back_populates="account",
        lazy="select",
    )

    def __repr__(self) -> str:
        return f"<Account {self.name} ({self.account_type}) balance={self.balance}>"
