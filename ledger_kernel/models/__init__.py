"""Persistence models for the ledger kernel."""

from ledger_kernel.models.account import Account, AccountType
from ledger_kernel.models.budget import Budget
from ledger_kernel.models.transaction import (
    RecurringInterval,
    Transaction,
    TransactionType,
)
from ledger_kernel.models.user import User

__all__ = [
    "Account",
    "AccountType",
    "Budget",
    "RecurringInterval",
    "Transaction",
    "TransactionType",
    "User",
]
