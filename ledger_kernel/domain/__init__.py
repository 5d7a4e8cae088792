"""Pure functional core of the ledger kernel: no sessions, no I/O."""

from ledger_kernel.domain.budget import BudgetThresholds, BudgetUsage, UsageBand, compute_usage
from ledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ledger_kernel.domain.deltas import aggregate_reversals, reversal_delta, signed_delta
from ledger_kernel.domain.recurrence import next_occurrence
from ledger_kernel.domain.schemas import (
    AccountInput,
    FieldError,
    TransactionInput,
    parse_id,
    parse_ids,
    parse_optional_date,
    validate_account_input,
    validate_budget_amount,
    validate_transaction_input,
)

__all__ = [
    "AccountInput",
    "BudgetThresholds",
    "BudgetUsage",
    "Clock",
    "DeterministicClock",
    "FieldError",
    "SystemClock",
    "TransactionInput",
    "UsageBand",
    "aggregate_reversals",
    "compute_usage",
    "next_occurrence",
    "parse_id",
    "parse_ids",
    "parse_optional_date",
    "reversal_delta",
    "signed_delta",
    "validate_account_input",
    "validate_budget_amount",
    "validate_transaction_input",
]
