"""
Unit tests for budget usage computation.

Verifies:
- Reference scenarios (95% critical, zero budget)
- Band boundaries at 75% and 90%
- Clamping of percent_used to [0, 100] and remaining to >= 0
- NaN / Infinity never escape, for Decimal and float inputs alike
"""

from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ledger_kernel.domain.budget import BudgetThresholds, UsageBand, compute_usage

any_number = st.one_of(
    st.decimals(allow_nan=True, allow_infinity=True),
    st.floats(allow_nan=True, allow_infinity=True),
    st.integers(min_value=-(10**30), max_value=10**30),
    st.none(),
)


class TestScenarios:

    def test_ninety_five_percent_is_critical(self):
        usage = compute_usage(Decimal("1000"), Decimal("950"))

        assert usage.percent_used == Decimal("95")
        assert usage.remaining == Decimal("50")
        assert usage.band is UsageBand.CRITICAL

    def test_zero_budget_is_zero_percent(self):
        usage = compute_usage(Decimal("0"), Decimal("200"))

        assert usage.percent_used == Decimal("0")
        assert usage.remaining == Decimal("0")
        assert usage.band is UsageBand.NORMAL

    def test_overspend_clamps_to_hundred(self):
        usage = compute_usage(Decimal("100"), Decimal("250"))

        assert usage.percent_used == Decimal("100")
        assert usage.remaining == Decimal("0")

    def test_negative_budget_is_zero_percent(self):
        assert compute_usage(Decimal("-50"), Decimal("10")).percent_used == Decimal("0")

    def test_no_expenses(self):
        usage = compute_usage(Decimal("500"), Decimal("0"))
        assert usage.percent_used == Decimal("0")
        assert usage.remaining == Decimal("500")


class TestBands:

    @pytest.mark.parametrize(
        "expenses, band",
        [
            ("74.99", UsageBand.NORMAL),
            ("75", UsageBand.WARNING),
            ("89.99", UsageBand.WARNING),
            ("90", UsageBand.CRITICAL),
            ("100", UsageBand.CRITICAL),
        ],
    )
    def test_default_boundaries(self, expenses, band):
        assert compute_usage(Decimal("100"), Decimal(expenses)).band is band

    def test_custom_thresholds(self):
        thresholds = BudgetThresholds(
            warning_percent=Decimal("50"), critical_percent=Decimal("80")
        )
        assert compute_usage(Decimal("100"), Decimal("60"), thresholds).band is UsageBand.WARNING


class TestDegenerateInputs:

    @pytest.mark.parametrize(
        "budget, expenses",
        [
            (Decimal("NaN"), Decimal("10")),
            (Decimal("100"), Decimal("NaN")),
            (Decimal("Infinity"), Decimal("10")),
            (Decimal("100"), Decimal("-Infinity")),
            (float("nan"), 10.0),
            (100.0, float("inf")),
            (Decimal("sNaN"), Decimal("1")),
            ("not a number", "12"),
            (None, None),
        ],
    )
    def test_non_finite_collapses_to_zero(self, budget, expenses):
        usage = compute_usage(budget, expenses)

        assert usage.percent_used.is_finite()
        assert usage.remaining.is_finite()
        assert Decimal("0") <= usage.percent_used <= Decimal("100")
        assert usage.remaining >= Decimal("0")

    def test_nan_budget_treated_as_zero(self):
        usage = compute_usage(Decimal("NaN"), Decimal("10"))
        assert usage.budget_amount == Decimal("0")
        assert usage.percent_used == Decimal("0")

    def test_overflowing_ratio_collapses_to_zero(self):
        usage = compute_usage(Decimal("1E-999999"), Decimal("9E+999999"))

        assert usage.percent_used == Decimal("0")
        assert usage.remaining == Decimal("0")

    def test_float_inputs_accepted(self):
        usage = compute_usage(1000.0, 950.0)
        assert usage.percent_used == Decimal("95")


class TestBudgetSafetyProperty:

    @given(budget=any_number, expenses=any_number)
    def test_percent_always_in_range(self, budget, expenses):
        usage = compute_usage(budget, expenses)

        assert usage.percent_used.is_finite()
        assert Decimal("0") <= usage.percent_used <= Decimal("100")
        assert usage.remaining.is_finite()
        assert usage.remaining >= Decimal("0")
        assert usage.band in set(UsageBand)
