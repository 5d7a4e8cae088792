"""
JSON-ready conversion of kernel DTOs.

This is the only place money leaves Decimal: amounts and balances become
JSON numbers (float) here, at the outer boundary.  Dates and datetimes
become ISO-8601 strings, UUIDs strings, enums their values.
"""

from __future__ import annotations

import dataclasses
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from ledger_kernel.domain.budget import BudgetUsage
from ledger_kernel.domain.dtos import AccountView


def to_jsonable(value: Any) -> Any:
    """Recursively convert DTOs and scalar types to JSON-compatible values."""
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, AccountView):
        return serialize_account_view(value)
    if isinstance(value, BudgetUsage):
        return serialize_usage(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)
        }
    if isinstance(value, dict):
        return {str(to_jsonable(k)): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in value]
    return value


def serialize_usage(usage: BudgetUsage) -> dict[str, Any]:
    return {
        "budget_amount": float(usage.budget_amount),
        "current_expenses": float(usage.current_expenses),
        "percent_used": float(usage.percent_used),
        "remaining": float(usage.remaining),
        "band": usage.band.value,
    }


def serialize_account_view(view: AccountView) -> dict[str, Any]:
    data = to_jsonable(view.account)
    data["transactions"] = [to_jsonable(t) for t in view.transactions]
    data["transaction_count"] = view.transaction_count
    return data
