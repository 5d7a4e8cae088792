"""
BulkDeleteCoordinator -- atomic multi-account transaction deletion.

Responsibility:
    Deletes a caller-chosen set of transactions, possibly spanning several
    accounts, and restores every affected balance with one increment per
    account.

Architecture position:
    Kernel > Services.  Runs inside the caller's single session_scope().

Invariants enforced:
    - Atomicity: either every owned id is deleted and every affected
      balance is adjusted, or nothing is.  There is no per-account commit.
    - One increment per account: the sum of ``reversal_delta`` over that
      account's deleted rows, computed in Decimal.
    - Lock order: rows are locked FOR UPDATE, and account increments are
      issued in ascending account id order, so two overlapping bulk deletes
      cannot deadlock on accounts.
    - Ids not owned by the caller (or unknown) are ignored, not reported.

Failure modes:
    - Any store error propagates; the caller's scope rolls back deletions
      and increments together.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from sqlalchemy import delete, select

from ledger_kernel.domain.deltas import aggregate_reversals
from ledger_kernel.domain.clock import Clock
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.transaction import Transaction
from ledger_kernel.services.balance_writer import BalanceWriter
from ledger_kernel.services.base import BaseService

logger = get_logger("services.bulk_delete")


@dataclass(frozen=True)
class BulkDeleteResult:
    """Outcome of delete_many()."""

    deleted_ids: tuple[UUID, ...] = ()
    account_deltas: dict[UUID, Decimal] = field(default_factory=dict)
    ignored_count: int = 0

    @property
    def deleted_count(self) -> int:
        return len(self.deleted_ids)


class BulkDeleteCoordinator(BaseService[Transaction]):
    """
    Deletes many transactions in one atomic unit.

    Contract:
        ``delete_many(user_id, ids)`` with any iterable of ids.  Duplicates
        collapse; an empty selection is a no-op that still succeeds.
    """

    def __init__(self, session, clock: Clock | None = None):
        super().__init__(session, clock)
        self._balances = BalanceWriter(session, self.clock)

    def delete_many(
        self, user_id: UUID, transaction_ids: Iterable[UUID]
    ) -> BulkDeleteResult:
        requested = set(transaction_ids)
        if not requested:
            return BulkDeleteResult()

        rows = list(
            self.session.execute(
                select(Transaction)
                .where(Transaction.id.in_(requested), Transaction.user_id == user_id)
                .order_by(Transaction.id)
                .with_for_update()
            ).scalars()
        )
        if not rows:
            logger.info(
                "bulk_delete_nothing_owned",
                extra={"user_id": str(user_id), "requested": len(requested)},
            )
            return BulkDeleteResult(ignored_count=len(requested))

        deltas = aggregate_reversals(rows)
        deleted_ids = tuple(row.id for row in rows)

        self.session.execute(
            delete(Transaction)
            .where(Transaction.id.in_(deleted_ids), Transaction.user_id == user_id)
            .execution_options(synchronize_session="fetch")
        )

        for account_id in sorted(deltas, key=str):
            self._balances.apply_delta(user_id, account_id, deltas[account_id])

        self.session.flush()

        result = BulkDeleteResult(
            deleted_ids=deleted_ids,
            account_deltas=deltas,
            ignored_count=len(requested) - len(deleted_ids),
        )
        logger.info(
            "bulk_delete_completed",
            extra={
                "user_id": str(user_id),
                "deleted_count": result.deleted_count,
                "accounts_touched": len(deltas),
                "ignored_count": result.ignored_count,
            },
        )
        return result
