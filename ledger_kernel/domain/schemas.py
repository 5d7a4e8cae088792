"""
Input schemas -- pure validation of caller-supplied fields.

Responsibility:
    Converts loosely-typed caller mappings (strings, numbers, dates as ISO
    strings) into frozen, fully-typed input DTOs, or raises ValidationError
    listing every failed field.  Runs before any store transaction opens.

Architecture position:
    Kernel > Domain -- pure functions, no I/O.

Rules (transactions):
    - type in {INCOME, EXPENSE}
    - amount parses as a finite Decimal and is > 0
    - date is a date, datetime or ISO-8601 string
    - account_id is a UUID (or UUID string)
    - category is a non-empty string
    - is_recurring is a boolean (absent means false)
    - recurring_interval is required iff is_recurring, and must be one of
      DAILY/WEEKLY/MONTHLY/YEARLY when given

Rules (accounts):
    - name is a non-empty string of at most 100 characters
    - type in {CURRENT, SAVINGS}
    - balance parses as a finite Decimal and is >= 0
    - is_default is a boolean (absent means false)
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID

from ledger_kernel.db.types import ZERO
from ledger_kernel.exceptions import ValidationError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.account import AccountType
from ledger_kernel.models.transaction import RecurringInterval, TransactionType

logger = get_logger("domain.schemas")

MAX_NAME_LENGTH = 100
MAX_CATEGORY_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500


@dataclass(frozen=True)
class FieldError:
    """A single failed field check."""

    field: str
    code: str
    message: str


@dataclass(frozen=True)
class TransactionInput:
    """Validated transaction fields, ready for TransactionMutator."""

    transaction_type: TransactionType
    amount: Decimal
    date: date
    account_id: UUID
    category: str
    description: str | None = None
    is_recurring: bool = False
    recurring_interval: RecurringInterval | None = None


@dataclass(frozen=True)
class AccountInput:
    """Validated account fields, ready for AccountRegistry."""

    name: str
    account_type: AccountType
    balance: Decimal = ZERO
    is_default: bool = False


# ---------------------------------------------------------------------------
# Field parsers: each returns (value, errors)
# ---------------------------------------------------------------------------


def _parse_decimal(
    value: Any, field: str, *, allow_zero: bool
) -> tuple[Decimal | None, list[FieldError]]:
    if value is None or value == "":
        return None, [FieldError(field, "REQUIRED", f"{field} is required")]
    if isinstance(value, bool):
        return None, [FieldError(field, "INVALID_NUMBER", f"{field} must be a number")]
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None, [FieldError(field, "INVALID_NUMBER", f"{field} must be a number")]
    if not number.is_finite():
        return None, [FieldError(field, "INVALID_NUMBER", f"{field} must be finite")]
    if allow_zero and number < ZERO:
        return None, [FieldError(field, "NEGATIVE", f"{field} must be a non-negative number")]
    if not allow_zero and number <= ZERO:
        return None, [FieldError(field, "NOT_POSITIVE", f"{field} must be a positive number")]
    return number, []


def _parse_enum(value: Any, field: str, enum_cls: type) -> tuple[Any, list[FieldError]]:
    if value is None or value == "":
        return None, [FieldError(field, "REQUIRED", f"{field} is required")]
    try:
        return enum_cls(value.upper() if isinstance(value, str) else value), []
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        return None, [FieldError(field, "INVALID_CHOICE", f"{field} must be one of {allowed}")]


def _parse_date(value: Any, field: str) -> tuple[date | None, list[FieldError]]:
    if value is None or value == "":
        return None, [FieldError(field, "REQUIRED", f"{field} is required")]
    if isinstance(value, datetime):
        return value.date(), []
    if isinstance(value, date):
        return value, []
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip()).date(), []
        except ValueError:
            pass
    return None, [FieldError(field, "INVALID_DATE", "Invalid date")]


def _parse_uuid(value: Any, field: str) -> tuple[UUID | None, list[FieldError]]:
    if value is None or value == "":
        return None, [FieldError(field, "REQUIRED", f"{field} is required")]
    if isinstance(value, UUID):
        return value, []
    try:
        return UUID(str(value)), []
    except ValueError:
        return None, [FieldError(field, "INVALID_ID", f"{field} is not a valid id")]


def _parse_text(
    value: Any, field: str, *, max_length: int, required: bool
) -> tuple[str | None, list[FieldError]]:
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            return None, [FieldError(field, "REQUIRED", f"{field} is required")]
        return None, []
    if not isinstance(value, str):
        return None, [FieldError(field, "INVALID_TEXT", f"{field} must be text")]
    text = value.strip()
    if len(text) > max_length:
        return None, [
            FieldError(field, "TOO_LONG", f"{field} must be at most {max_length} characters")
        ]
    return text, []


def _parse_bool(value: Any, field: str) -> tuple[bool, list[FieldError]]:
    if value is None:
        return False, []
    if isinstance(value, bool):
        return value, []
    return False, [FieldError(field, "INVALID_BOOLEAN", f"{field} must be true or false")]


def _raise_if_errors(schema: str, errors: list[FieldError]) -> None:
    if not errors:
        return
    logger.warning(
        "validation_failed",
        extra={
            "schema": schema,
            "error_count": len(errors),
            "fields": [e.field for e in errors],
        },
    )
    raise ValidationError([asdict(e) for e in errors])


# ---------------------------------------------------------------------------
# Public validators
# ---------------------------------------------------------------------------


def validate_transaction_input(data: Mapping[str, Any]) -> TransactionInput:
    """
    Validate transaction fields.

    Accepts ``type`` or ``transaction_type`` for the direction.

    Raises:
        ValidationError: listing every failed field.
    """
    errors: list[FieldError] = []

    tx_type, e = _parse_enum(
        data.get("type") or data.get("transaction_type"), "type", TransactionType
    )
    errors += e
    amount, e = _parse_decimal(data.get("amount"), "amount", allow_zero=False)
    errors += e
    tx_date, e = _parse_date(data.get("date"), "date")
    errors += e
    account_id, e = _parse_uuid(data.get("account_id"), "account_id")
    errors += e
    category, e = _parse_text(
        data.get("category"), "category", max_length=MAX_CATEGORY_LENGTH, required=True
    )
    errors += e
    description, e = _parse_text(
        data.get("description"), "description",
        max_length=MAX_DESCRIPTION_LENGTH, required=False,
    )
    errors += e

    is_recurring, e = _parse_bool(data.get("is_recurring"), "is_recurring")
    errors += e
    raw_interval = data.get("recurring_interval")
    interval = None
    if is_recurring:
        if raw_interval in (None, ""):
            errors.append(
                FieldError(
                    "recurring_interval",
                    "REQUIRED",
                    "Recurring interval is required for recurring transactions",
                )
            )
        else:
            interval, e = _parse_enum(raw_interval, "recurring_interval", RecurringInterval)
            errors += e
    elif raw_interval not in (None, ""):
        # Checked, then dropped: one-off rows never carry an interval
        _, e = _parse_enum(raw_interval, "recurring_interval", RecurringInterval)
        errors += e

    _raise_if_errors("transaction", errors)

    return TransactionInput(
        transaction_type=tx_type,
        amount=amount,
        date=tx_date,
        account_id=account_id,
        category=category,
        description=description,
        is_recurring=is_recurring,
        recurring_interval=interval,
    )


def validate_account_input(data: Mapping[str, Any]) -> AccountInput:
    """
    Validate account fields.  A missing balance defaults to 0.

    Raises:
        ValidationError: listing every failed field.
    """
    errors: list[FieldError] = []

    name, e = _parse_text(data.get("name"), "name", max_length=MAX_NAME_LENGTH, required=True)
    errors += e
    account_type, e = _parse_enum(
        data.get("type") or data.get("account_type"), "type", AccountType
    )
    errors += e

    raw_balance = data.get("balance")
    balance = ZERO
    if raw_balance not in (None, ""):
        balance, e = _parse_decimal(raw_balance, "balance", allow_zero=True)
        errors += e

    is_default, e = _parse_bool(data.get("is_default"), "is_default")
    errors += e

    _raise_if_errors("account", errors)

    return AccountInput(
        name=name,
        account_type=account_type,
        balance=balance,
        is_default=is_default,
    )


def validate_budget_amount(value: Any) -> Decimal:
    """
    Validate a budget amount (> 0).

    Raises:
        ValidationError: If the amount is missing, not numeric or not positive.
    """
    amount, errors = _parse_decimal(value, "amount", allow_zero=False)
    _raise_if_errors("budget", errors)
    return amount


def parse_id(value: Any, field: str = "id") -> UUID:
    """
    Parse a record id supplied by a caller.

    Raises:
        ValidationError: If the value is missing or not a UUID.
    """
    parsed, errors = _parse_uuid(value, field)
    _raise_if_errors("id", errors)
    return parsed


def parse_ids(values: Any, field: str = "transaction_ids") -> list[UUID]:
    """
    Parse a list of record ids.  An empty list is valid.

    Raises:
        ValidationError: If the value is not a list or any element is not a UUID.
    """
    if values is None or isinstance(values, (str, bytes)) or not hasattr(values, "__iter__"):
        _raise_if_errors(
            "ids", [FieldError(field, "INVALID_LIST", f"{field} must be a list of ids")]
        )
    parsed: list[UUID] = []
    errors: list[FieldError] = []
    for index, value in enumerate(values):
        one, e = _parse_uuid(value, f"{field}[{index}]")
        errors += e
        if one is not None:
            parsed.append(one)
    _raise_if_errors("ids", errors)
    return parsed


def parse_optional_date(value: Any, field: str = "as_of") -> date | None:
    """
    Parse an optional date (date, datetime or ISO string).

    Raises:
        ValidationError: If a value is given but is not a date.
    """
    if value is None or value == "":
        return None
    parsed, errors = _parse_date(value, field)
    _raise_if_errors("date", errors)
    return parsed
