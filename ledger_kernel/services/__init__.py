"""Write services for the ledger kernel.  Services flush; callers commit."""

from ledger_kernel.services.account_registry import AccountRegistry
from ledger_kernel.services.balance_writer import BalanceWriter
from ledger_kernel.services.base import BaseService
from ledger_kernel.services.budget_service import BudgetService
from ledger_kernel.services.bulk_delete import BulkDeleteCoordinator, BulkDeleteResult
from ledger_kernel.services.recurring_service import RecurringService
from ledger_kernel.services.transaction_mutator import TransactionMutator
from ledger_kernel.services.user_service import UserService

__all__ = [
    "AccountRegistry",
    "BalanceWriter",
    "BaseService",
    "BudgetService",
    "BulkDeleteCoordinator",
    "BulkDeleteResult",
    "RecurringService",
    "TransactionMutator",
    "UserService",
]
