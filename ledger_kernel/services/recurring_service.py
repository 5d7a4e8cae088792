"""
RecurringService -- on-demand materialisation of due recurring transactions.

Responsibility:
    For each recurring template of a user whose ``next_recurring_date`` is
    on or before ``as_of``, inserts one non-recurring occurrence dated
    ``next_recurring_date`` (with its balance delta), then advances the
    template's schedule.

Architecture position:
    Kernel > Services.  The cadence at which this runs belongs to an
    external job runner; the kernel only supplies the unit of work.

Invariants enforced:
    - Occurrences go through the same insert + BalanceWriter path as
      TransactionMutator.create, so reconciliation holds.
    - Templates are locked FOR UPDATE, so two concurrent runs cannot both
      materialise the same occurrence.
    - One occurrence per template per call.  A template that is several
      periods behind catches up over successive runs.
"""

from datetime import date
from uuid import UUID

from ledger_kernel.domain.recurrence import next_occurrence
from ledger_kernel.domain.schemas import TransactionInput
from ledger_kernel.domain.clock import Clock
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.transaction import Transaction
from ledger_kernel.selectors.transaction_selector import due_recurring_query
from ledger_kernel.services.base import BaseService
from ledger_kernel.services.transaction_mutator import TransactionMutator

logger = get_logger("services.recurring")


class RecurringService(BaseService[Transaction]):
    """Materialises due occurrences of recurring transactions."""

    def __init__(self, session, clock: Clock | None = None):
        super().__init__(session, clock)
        self._mutator = TransactionMutator(session, self.clock)

    def process_due(self, user_id: UUID, as_of: date | None = None) -> list[Transaction]:
        """
        Materialise every due template of ``user_id`` once.

        Returns:
            The created occurrences, in due-date order.
        """
        as_of = as_of or self.clock.today()
        templates = list(
            self.session.execute(due_recurring_query(user_id, as_of).with_for_update()).scalars()
        )

        created: list[Transaction] = []
        for template in templates:
            due = template.next_recurring_date
            occurrence = self._mutator.create(
                user_id,
                TransactionInput(
                    transaction_type=template.transaction_type,
                    amount=template.amount,
                    date=due,
                    account_id=template.account_id,
                    category=template.category,
                    description=template.description,
                ),
            )
            template.last_processed = due
            template.next_recurring_date = next_occurrence(due, template.recurring_interval)
            created.append(occurrence)

            logger.info(
                "recurring_occurrence_created",
                extra={
                    "template_id": str(template.id),
                    "transaction_id": str(occurrence.id),
                    "due_date": due,
                    "next_recurring_date": template.next_recurring_date,
                },
            )

        self.session.flush()
        logger.info(
            "recurring_run_completed",
            extra={"user_id": str(user_id), "as_of": as_of, "created_count": len(created)},
        )
        return created
