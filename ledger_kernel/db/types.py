"""
Module: ledger_kernel.db.types
Responsibility: Annotated type aliases and helpers for money columns.
    Centralizes precision and rounding so every model and service uses the
    same definitions.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    services/ and selectors/.  MUST NOT import from any of those layers.

Invariants enforced:
    CRITICAL: No floats for money inside the kernel.  Amounts and balances
    are Decimal with explicit precision; float conversion happens only at
    the serialization boundary in ledger_services.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from sqlalchemy import Numeric

MONEY_DECIMAL_PLACES = 9

# 38 digits total, MONEY_DECIMAL_PLACES after the point
Money = Annotated[Decimal, Numeric(38, MONEY_DECIMAL_PLACES)]

DISPLAY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP

ZERO = Decimal("0")


def round_money(
    value: Decimal,
    decimal_places: int = DISPLAY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to the given number of decimal places.

    The only sanctioned rounding function for money values.
    """
    quantum = Decimal(1).scaleb(-decimal_places)
    return value.quantize(quantum, rounding=rounding)
