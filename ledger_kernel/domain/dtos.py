"""
Data Transfer Objects -- immutable snapshots of ledger rows.

Selectors return these instead of ORM instances, and LedgerAPI converts
service results into them before the session closes.  Money stays Decimal
here; conversion to JSON numbers happens only in ledger_services.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from ledger_kernel.domain.budget import BudgetUsage
from ledger_kernel.models.account import AccountType
from ledger_kernel.models.transaction import RecurringInterval, TransactionType


@dataclass(frozen=True)
class TransactionSnapshot:
    """Point-in-time copy of a Transaction row."""

    id: UUID
    account_id: UUID
    user_id: UUID
    type: TransactionType
    amount: Decimal
    date: date
    category: str
    description: str | None
    is_recurring: bool
    recurring_interval: RecurringInterval | None
    next_recurring_date: date | None
    last_processed: date | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, row: Any) -> "TransactionSnapshot":
        return cls(
            id=row.id,
            account_id=row.account_id,
            user_id=row.user_id,
            type=TransactionType(row.transaction_type),
            amount=row.amount,
            date=row.date,
            category=row.category,
            description=row.description,
            is_recurring=row.is_recurring,
            recurring_interval=row.recurring_interval,
            next_recurring_date=row.next_recurring_date,
            last_processed=row.last_processed,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


@dataclass(frozen=True)
class AccountSnapshot:
    """Point-in-time copy of an Account row."""

    id: UUID
    user_id: UUID
    name: str
    type: AccountType
    balance: Decimal
    is_default: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, row: Any) -> "AccountSnapshot":
        return cls(
            id=row.id,
            user_id=row.user_id,
            name=row.name,
            type=AccountType(row.account_type),
            balance=row.balance,
            is_default=row.is_default,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


@dataclass(frozen=True)
class AccountView:
    """An account with its transactions, newest first."""

    account: AccountSnapshot
    transactions: tuple[TransactionSnapshot, ...] = ()

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)


@dataclass(frozen=True)
class BudgetSnapshot:
    """Point-in-time copy of a Budget row."""

    id: UUID
    user_id: UUID
    amount: Decimal
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, row: Any) -> "BudgetSnapshot":
        return cls(
            id=row.id,
            user_id=row.user_id,
            amount=row.amount,
            updated_at=row.updated_at,
        )


@dataclass(frozen=True)
class CurrentBudget:
    """A budget together with its usage for the period containing as_of."""

    budget: BudgetSnapshot
    account_id: UUID | None
    period_start: date
    period_end: date
    usage: BudgetUsage


@dataclass(frozen=True)
class CategoryTotal:
    """Expense total for one category in a period."""

    category: str
    total: Decimal


@dataclass(frozen=True)
class DashboardSummary:
    """Recent activity and monthly breakdown for one account."""

    account_id: UUID | None
    recent: tuple[TransactionSnapshot, ...] = ()
    expense_breakdown: tuple[CategoryTotal, ...] = field(default_factory=tuple)
