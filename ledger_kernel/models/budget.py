"""
Module: ledger_kernel.models.budget
Responsibility: ORM persistence for monthly spending budgets.
Architecture position: Kernel > Models.  May import from db/ only.

One active budget per user (uq_budget_user).  The budget applies to the
user's default account over the calendar month being reported; the period
itself is not stored.
"""

from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TrackedBase, UUIDString
from ledger_kernel.db.types import Money


class Budget(TrackedBase):
    """A user's monthly budget amount."""

    __tablename__ = "budgets"

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_budget_user"),
        CheckConstraint("amount > 0", name="ck_budget_amount_positive"),
    )

    user_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("users.id"),
        nullable=False,
    )

    amount: Mapped[Money] = mapped_column(nullable=False)

    def __repr__(self) -> str:
        return f"<Budget user={self.user_id} amount={self.amount}>"
