"""Read-only query selectors for the ledger kernel."""

from ledger_kernel.selectors.account_selector import AccountSelector
from ledger_kernel.selectors.base import BaseSelector
from ledger_kernel.selectors.transaction_selector import TransactionSelector, month_bounds

__all__ = [
    "AccountSelector",
    "BaseSelector",
    "TransactionSelector",
    "month_bounds",
]
