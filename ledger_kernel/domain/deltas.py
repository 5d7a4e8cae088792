"""
Balance deltas -- the apply/reverse pair behind every balance write.

Responsibility:
    Defines the signed effect a transaction has on its account
    (``signed_delta``) and its algebraic inverse (``reversal_delta``).
    Creation applies the former; deletion (single or bulk) applies the
    latter; update applies the inverse of the old row and the effect of the
    new one.

Architecture position:
    Kernel > Domain -- pure functions, no I/O.

Invariants enforced:
    - reversal_delta(t, a) == -signed_delta(t, a) for every type and amount,
      so balance + signed_delta + reversal_delta == balance exactly.
    - Decimal in, Decimal out.  Float amounts are rejected.
"""

from collections import defaultdict
from collections.abc import Iterable
from decimal import Decimal
from typing import Any
from uuid import UUID

from ledger_kernel.models.transaction import TransactionType


def _require_decimal(amount: Any) -> Decimal:
    if not isinstance(amount, Decimal):
        raise TypeError(f"amount must be Decimal, not {type(amount).__name__}")
    return amount


def signed_delta(transaction_type: TransactionType | str, amount: Decimal) -> Decimal:
    """Balance change caused by a transaction: +amount INCOME, -amount EXPENSE."""
    amount = _require_decimal(amount)
    if TransactionType(transaction_type) is TransactionType.INCOME:
        return amount
    return -amount


def reversal_delta(transaction_type: TransactionType | str, amount: Decimal) -> Decimal:
    """Balance change that undoes a transaction: -amount INCOME, +amount EXPENSE."""
    return -signed_delta(transaction_type, amount)


def aggregate_reversals(rows: Iterable[Any]) -> dict[UUID, Decimal]:
    """
    Sum the reversal deltas of ``rows`` per account.

    Each row must expose ``account_id``, ``transaction_type`` and ``amount``.
    Returns a mapping account_id -> aggregated delta with one entry per
    distinct account touched.
    """
    totals: dict[UUID, Decimal] = defaultdict(lambda: Decimal("0"))
    for row in rows:
        totals[row.account_id] += reversal_delta(row.transaction_type, row.amount)
    return dict(totals)
