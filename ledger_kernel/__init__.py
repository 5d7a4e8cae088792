"""
Ledger Kernel

Consistency engine for a personal-finance ledger:
- Cached account balances that always equal the signed sum of transactions
- Atomic create/update/delete and multi-account bulk delete
- Single default account per user
- Degenerate-input-safe budget usage
- Deterministic recurring schedules
"""

__version__ = "0.1.0"
