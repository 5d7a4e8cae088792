"""
BudgetService -- budget upsert and current-period usage.

Responsibility:
    Stores the user's single monthly budget and reports it against the
    default account's expenses for the calendar month being viewed.

Architecture position:
    Kernel > Services.  Usage math is delegated to the pure
    ``compute_usage``; expense totals come from TransactionSelector.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select

from ledger_kernel.domain.budget import BudgetThresholds, compute_usage
from ledger_kernel.domain.clock import Clock
from ledger_kernel.domain.dtos import BudgetSnapshot, CurrentBudget
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.budget import Budget
from ledger_kernel.selectors.account_selector import AccountSelector
from ledger_kernel.selectors.transaction_selector import TransactionSelector, month_bounds
from ledger_kernel.services.base import BaseService

logger = get_logger("services.budget")


class BudgetService(BaseService[Budget]):
    """
    One budget per user, applied to the default account.

    Guarantees:
        - upsert_budget never creates a second row for a user.
        - get_current_budget returns None when no budget is set; with no
          default account the expense total is 0.
    """

    def __init__(
        self,
        session,
        clock: Clock | None = None,
        thresholds: BudgetThresholds | None = None,
    ):
        super().__init__(session, clock)
        self.thresholds = thresholds

    def _get(self, user_id: UUID, lock: bool = False) -> Budget | None:
        stmt = select(Budget).where(Budget.user_id == user_id)
        if lock:
            stmt = stmt.with_for_update()
        return self.session.execute(stmt).scalar_one_or_none()

    def upsert_budget(self, user_id: UUID, amount: Decimal) -> Budget:
        """Set the user's budget amount, creating the row on first use."""
        budget = self._get(user_id, lock=True)
        if budget is None:
            budget = Budget(user_id=user_id, amount=amount)
            self.session.add(budget)
        else:
            budget.amount = amount
        self.session.flush()

        logger.info(
            "budget_updated",
            extra={"user_id": str(user_id), "budget_id": str(budget.id), "amount": amount},
        )
        return budget

    def get_current_budget(self, user_id: UUID, as_of: date | None = None) -> CurrentBudget | None:
        as_of = as_of or self.clock.today()
        budget = self._get(user_id)
        if budget is None:
            return None

        period_start, period_end = month_bounds(as_of)
        default = AccountSelector(self.session).get_default_account(user_id)
        expenses = (
            TransactionSelector(self.session).monthly_expense_total(user_id, default.id, as_of)
            if default is not None
            else Decimal("0")
        )

        return CurrentBudget(
            budget=BudgetSnapshot.from_model(budget),
            account_id=default.id if default is not None else None,
            period_start=period_start,
            period_end=period_end,
            usage=compute_usage(budget.amount, expenses, self.thresholds),
        )
