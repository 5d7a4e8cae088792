"""
Typed Exception Hierarchy for the Ledger Kernel.

Every error raised by the kernel is a subclass of LedgerKernelError with:
  1. a TYPED class, so callers catch by type and never parse messages;
  2. a class-level CODE, machine-readable and stable across releases;
  3. structured ATTRIBUTES carrying the data needed to act on the error.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LedgerKernelError (base)
    |
    +-- UnauthorizedError
    |
    +-- NotFoundError
    |   +-- AccountNotFoundError
    |   +-- TransactionNotFoundError
    |
    +-- ValidationError
    |   +-- InvalidRecurringIntervalError
    |
    +-- StoreFailureError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                        | When Raised
-------------|-----------------------------|------------------------------------------
Identity     | UNAUTHORIZED                | Caller identity missing or unknown
-------------|-----------------------------|------------------------------------------
Not found    | ACCOUNT_NOT_FOUND           | Account absent OR owned by another user
             | TRANSACTION_NOT_FOUND       | Transaction absent OR owned by another user
-------------|-----------------------------|------------------------------------------
Validation   | VALIDATION_ERROR            | Input failed schema checks (pre-store)
             | INVALID_RECURRING_INTERVAL  | Interval is not DAILY/WEEKLY/MONTHLY/YEARLY
-------------|-----------------------------|------------------------------------------
Store        | STORE_FAILURE               | Store transaction aborted and rolled back

===============================================================================
DESIGN DECISIONS
===============================================================================

1. NOT FOUND INSTEAD OF FORBIDDEN
   Ownership is part of every lookup predicate.  A row owned by another user
   is indistinguishable from a missing row, so existence never leaks.

2. STORE FAILURES CARRY THE STORE MESSAGE
   StoreFailureError.message is the underlying driver message, surfaced
   as-is.  Nothing in the kernel retries; retry is a caller decision.

===============================================================================
"""


class LedgerKernelError(Exception):
    """
    Base exception for all ledger kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_KERNEL_ERROR"


# Identity


class UnauthorizedError(LedgerKernelError):
    """Caller identity could not be resolved."""

    code: str = "UNAUTHORIZED"

    def __init__(self, reason: str = "Unauthorized"):
        self.reason = reason
        super().__init__(reason)


# Not found


class NotFoundError(LedgerKernelError):
    """Base exception for absent or foreign-owned records."""

    code: str = "NOT_FOUND"


class AccountNotFoundError(NotFoundError):
    """Account was not found for this user."""

    code: str = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account not found: {account_id}")


class TransactionNotFoundError(NotFoundError):
    """Transaction was not found for this user."""

    code: str = "TRANSACTION_NOT_FOUND"

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")


# Validation


class ValidationError(LedgerKernelError):
    """
    Input failed schema validation.

    Raised before any store access.  field_errors is a list of
    {"field": ..., "message": ...} dicts, one per failed check.
    """

    code: str = "VALIDATION_ERROR"

    def __init__(self, field_errors: list[dict]):
        self.field_errors = field_errors
        summary = "; ".join(
            f"{e['field']}: {e['message']}" for e in field_errors
        )
        super().__init__(f"Validation failed: {summary}")


class InvalidRecurringIntervalError(ValidationError):
    """Recurring interval is not one of the supported cadences."""

    code: str = "INVALID_RECURRING_INTERVAL"

    def __init__(self, interval: str):
        self.interval = interval
        super().__init__(
            [{"field": "recurring_interval", "message": f"Invalid interval: {interval!r}"}]
        )


# Store


class StoreFailureError(LedgerKernelError):
    """The store transaction aborted; no partial effect persisted."""

    code: str = "STORE_FAILURE"

    def __init__(self, message: str, operation: str | None = None):
        self.message = message
        self.operation = operation
        super().__init__(message)
