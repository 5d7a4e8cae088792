"""
BudgetTracker -- budget usage computation.

Responsibility:
    Turns a budget amount and the expense total for its period into
    ``percent_used``, ``remaining`` and a presentation band.

Architecture position:
    Kernel > Domain -- pure function, no store access.  The expense total is
    supplied by TransactionSelector.monthly_expense_total().

Invariants enforced:
    - percent_used is always within [0, 100]; NaN and Infinity never escape.
    - budget_amount <= 0 yields percent_used == 0 (no division).
    - remaining is never negative.

Degenerate inputs:
    Non-finite inputs (NaN, +/-Infinity, from Decimal or float) are treated
    as 0 before any arithmetic.  Unparseable inputs are treated the same way.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, Overflow, localcontext
from enum import Enum
from typing import Any

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


class UsageBand(str, Enum):
    """Presentation hint for budget usage; never stored."""

    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class BudgetThresholds:
    """Band boundaries, in percent.  warning <= p < critical is WARNING."""

    warning_percent: Decimal = Decimal("75")
    critical_percent: Decimal = Decimal("90")

    def band_for(self, percent_used: Decimal) -> UsageBand:
        if percent_used >= self.critical_percent:
            return UsageBand.CRITICAL
        if percent_used >= self.warning_percent:
            return UsageBand.WARNING
        return UsageBand.NORMAL


DEFAULT_THRESHOLDS = BudgetThresholds()


@dataclass(frozen=True)
class BudgetUsage:
    """Result of compute_usage()."""

    budget_amount: Decimal
    current_expenses: Decimal
    percent_used: Decimal
    remaining: Decimal
    band: UsageBand


def _finite_decimal(value: Any) -> Decimal:
    if value is None:
        return _ZERO
    if isinstance(value, float):
        if not math.isfinite(value):
            return _ZERO
        return Decimal(str(value))
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return _ZERO
    if not result.is_finite():
        return _ZERO
    return result


def compute_usage(
    budget_amount: Any,
    current_expenses: Any,
    thresholds: BudgetThresholds | None = None,
) -> BudgetUsage:
    """
    Compute budget usage for one period.

    Args:
        budget_amount: Budget for the period (Decimal preferred).
        current_expenses: Expense total for the same period.
        thresholds: Band boundaries; defaults to 75% / 90%.

    Returns:
        BudgetUsage with percent_used in [0, 100] and remaining >= 0.
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS
    budget = _finite_decimal(budget_amount)
    expenses = _finite_decimal(current_expenses)

    with localcontext() as ctx:
        # Overflow yields Infinity instead of raising; collapsed below
        ctx.traps[Overflow] = False
        raw_percent = expenses / budget * _HUNDRED if budget > _ZERO else _ZERO
        remaining = budget - expenses

    if not raw_percent.is_finite():
        raw_percent = _ZERO
    if not remaining.is_finite():
        remaining = _ZERO

    percent_used = min(max(raw_percent, _ZERO), _HUNDRED)
    remaining = max(_ZERO, remaining)

    return BudgetUsage(
        budget_amount=budget,
        current_expenses=expenses,
        percent_used=percent_used,
        remaining=remaining,
        band=thresholds.band_for(percent_used),
    )
