"""
Module: ledger_kernel.selectors.transaction_selector
Responsibility: Read models over Transaction rows: monthly expense totals,
    expense breakdown by category, recent activity and recurring templates
    that have come due.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Totals are summed by the store and returned as Decimal.  An empty
      period totals Decimal("0"), never None.
    - A budget period is the calendar month containing ``as_of``.
"""

import calendar
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Select, func, select

from ledger_kernel.domain.dtos import CategoryTotal, TransactionSnapshot
from ledger_kernel.models.transaction import Transaction, TransactionType
from ledger_kernel.selectors.base import BaseSelector

UNCATEGORIZED = "Uncategorized"
DEFAULT_RECENT_LIMIT = 5


def due_recurring_query(user_id: UUID, as_of: date) -> Select:
    """Recurring templates of ``user_id`` due on or before ``as_of``, oldest due first."""
    return (
        select(Transaction)
        .where(
            Transaction.user_id == user_id,
            Transaction.is_recurring.is_(True),
            Transaction.next_recurring_date.is_not(None),
            Transaction.next_recurring_date <= as_of,
        )
        .order_by(Transaction.next_recurring_date, Transaction.id)
    )


def month_bounds(as_of: date) -> tuple[date, date]:
    """First and last calendar day of the month containing ``as_of``."""
    last_day = calendar.monthrange(as_of.year, as_of.month)[1]
    return as_of.replace(day=1), as_of.replace(day=last_day)


class TransactionSelector(BaseSelector[Transaction]):
    """Queries over Transaction rows."""

    def monthly_expense_total(self, user_id: UUID, account_id: UUID, as_of: date) -> Decimal:
        """Sum of EXPENSE amounts on the account in the month containing as_of."""
        start, end = month_bounds(as_of)
        total = self.session.execute(
            select(func.sum(Transaction.amount)).where(
                Transaction.user_id == user_id,
                Transaction.account_id == account_id,
                Transaction.transaction_type == TransactionType.EXPENSE,
                Transaction.date >= start,
                Transaction.date <= end,
            )
        ).scalar()
        return total if total is not None else Decimal("0")

    def expense_breakdown(
        self, user_id: UUID, account_id: UUID, as_of: date
    ) -> list[CategoryTotal]:
        """
        EXPENSE totals per category for the month containing as_of.

        Blank categories are reported under "Uncategorized".  Ordered by
        total descending, then category.
        """
        start, end = month_bounds(as_of)
        rows = self.session.execute(
            select(Transaction.category, func.sum(Transaction.amount).label("total"))
            .where(
                Transaction.user_id == user_id,
                Transaction.account_id == account_id,
                Transaction.transaction_type == TransactionType.EXPENSE,
                Transaction.date >= start,
                Transaction.date <= end,
            )
            .group_by(Transaction.category)
        ).all()

        totals: dict[str, Decimal] = {}
        for row in rows:
            category = (row.category or "").strip() or UNCATEGORIZED
            totals[category] = totals.get(category, Decimal("0")) + (row.total or Decimal("0"))

        return [
            CategoryTotal(category=category, total=total)
            for category, total in sorted(totals.items(), key=lambda kv: (-kv[1], kv[0]))
        ]

    def recent(
        self, user_id: UUID, account_id: UUID, limit: int = DEFAULT_RECENT_LIMIT
    ) -> list[TransactionSnapshot]:
        """The account's latest transactions by date, newest first."""
        rows = self.session.execute(
            select(Transaction)
            .where(Transaction.user_id == user_id, Transaction.account_id == account_id)
            .order_by(Transaction.date.desc(), Transaction.created_at.desc(), Transaction.id)
            .limit(limit)
        ).scalars()
        return [TransactionSnapshot.from_model(row) for row in rows]
