"""
ledger_services -- the external call/result boundary.

Dependency direction:
    ledger_services -> ledger_kernel  (allowed)
    ledger_services -> ledger_config  (allowed)
    ledger_kernel   -> ledger_services (FORBIDDEN)
"""

from ledger_services.api import LedgerAPI, OperationResult
from ledger_services.serialization import to_jsonable

__all__ = [
    "LedgerAPI",
    "OperationResult",
    "to_jsonable",
]
