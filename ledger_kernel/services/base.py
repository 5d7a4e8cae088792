"""
BaseService -- abstract base for all ledger write services.

Responsibility:
    Provides the common constructor and session-handling contract for
    every write service.  Services receive a SQLAlchemy ``Session`` and
    use ``session.flush()``, never ``session.commit()``.

Architecture position:
    Kernel > Services -- imperative shell.  Every class in
    ``ledger_kernel/services/`` that mutates rows extends this class.

Invariants enforced:
    - Services flush within the caller's transaction and never commit or
      roll back.  ``session_scope()`` (or the test harness) owns the
      boundary, so a multi-step operation is all-or-nothing.

Failure modes:
    - A subclass that commits on its own breaks atomicity of the
      operation it is part of (e.g. a bulk delete could half-apply).
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from ledger_kernel.db.base import Base
from ledger_kernel.domain.clock import Clock, SystemClock

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for all ledger services.

    Contract:
        Accepts a ``Session`` from the caller and persists through
        ``session.flush()`` within the active transaction.

    Guarantees:
        - Never calls ``session.commit()`` or ``session.rollback()``.
        - ``self.clock`` is always set; SystemClock unless injected.

    Non-goals:
        - Does NOT manage transaction lifecycle.
        - Does NOT provide read models; those belong in
          ``ledger_kernel/selectors/``.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        """
        Initialize the service.

        Args:
            session: SQLAlchemy session for database operations.
            clock: Time source.  Tests inject a DeterministicClock.
        """
        self.session = session
        self.clock = clock or SystemClock()
