"""
Tests for BudgetService: upsert and current-month usage on the default account.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import func, select

from ledger_kernel.domain.budget import BudgetThresholds, UsageBand
from ledger_kernel.models.budget import Budget
from ledger_kernel.models.transaction import TransactionType
from ledger_kernel.services.budget_service import BudgetService

EXPENSE = TransactionType.EXPENSE
INCOME = TransactionType.INCOME


class TestUpsert:

    def test_creates_then_updates_single_row(self, session, make_user, budget_service):
        user = make_user()

        first = budget_service.upsert_budget(user.id, Decimal("1000"))
        second = budget_service.upsert_budget(user.id, Decimal("1200"))

        assert first.id == second.id
        assert second.amount == Decimal("1200")
        count = session.execute(select(func.count()).select_from(Budget)).scalar_one()
        assert count == 1


class TestCurrentBudget:

    def test_none_without_budget(self, make_user, budget_service):
        assert budget_service.get_current_budget(make_user().id) is None

    def test_usage_counts_only_this_months_expenses(
        self, make_user, make_account, make_transaction, budget_service
    ):
        user = make_user()
        account = make_account(user, balance="5000")
        budget_service.upsert_budget(user.id, Decimal("1000"))
        make_transaction(user, account, transaction_type=EXPENSE, amount="900", on=date(2024, 1, 3))
        make_transaction(user, account, transaction_type=EXPENSE, amount="50", on=date(2024, 1, 31))
        make_transaction(user, account, transaction_type=INCOME, amount="700", on=date(2024, 1, 5))
        make_transaction(user, account, transaction_type=EXPENSE, amount="400", on=date(2023, 12, 31))

        current = budget_service.get_current_budget(user.id, date(2024, 1, 20))

        assert current.account_id == account.id
        assert current.period_start == date(2024, 1, 1)
        assert current.period_end == date(2024, 1, 31)
        assert current.usage.percent_used == Decimal("95")
        assert current.usage.remaining == Decimal("50")
        assert current.usage.band is UsageBand.CRITICAL

    def test_defaults_to_clock_month(
        self, make_user, make_account, make_transaction, budget_service
    ):
        # DeterministicClock is fixed at 2024-01-15
        user = make_user()
        account = make_account(user)
        budget_service.upsert_budget(user.id, Decimal("200"))
        make_transaction(user, account, transaction_type=EXPENSE, amount="100", on=date(2024, 1, 2))

        current = budget_service.get_current_budget(user.id)

        assert current.usage.percent_used == Decimal("50")
        assert current.usage.band is UsageBand.NORMAL

    def test_only_default_account_counts(
        self, make_user, make_account, make_transaction, budget_service
    ):
        user = make_user()
        default = make_account(user, name="Default")
        other = make_account(user, name="Other")
        budget_service.upsert_budget(user.id, Decimal("100"))
        make_transaction(user, other, transaction_type=EXPENSE, amount="80", on=date(2024, 1, 2))
        make_transaction(user, default, transaction_type=EXPENSE, amount="10", on=date(2024, 1, 2))

        current = budget_service.get_current_budget(user.id, date(2024, 1, 10))

        assert current.account_id == default.id
        assert current.usage.current_expenses == Decimal("10")

    def test_no_accounts_means_zero_expenses(self, make_user, budget_service):
        user = make_user()
        budget_service.upsert_budget(user.id, Decimal("100"))

        current = budget_service.get_current_budget(user.id, date(2024, 1, 10))

        assert current.account_id is None
        assert current.usage.percent_used == Decimal("0")

    def test_configured_thresholds(
        self, session, deterministic_clock, make_user, make_account, make_transaction
    ):
        user = make_user()
        account = make_account(user)
        service = BudgetService(
            session,
            deterministic_clock,
            BudgetThresholds(warning_percent=Decimal("40"), critical_percent=Decimal("60")),
        )
        service.upsert_budget(user.id, Decimal("100"))
        make_transaction(user, account, transaction_type=EXPENSE, amount="50", on=date(2024, 1, 2))

        assert service.get_current_budget(user.id).usage.band is UsageBand.WARNING
