"""
Pointman public API.

CORE (essential):
    LedgerService.grant(payer, points) - Append a grant
    LedgerService.spend(points)        - Spend oldest points first
    LedgerService.balances()           - Balance per payer

CONVENIENCE (helpers):
    LedgerService.balance(payer)       - One payer's balance
    LedgerService.statements()         - Granted/balance/spent per payer
    LedgerService.history(...)         - Grant rows, newest first
"""

import logging
from functools import partial

from django.db import DatabaseError, DataError, IntegrityError, connections, transaction

from pointman.conf import PointmanSettings, get_pointman_settings
from pointman.exceptions import PersistenceError, StoreUnavailable
from pointman.models import GrantRecord
from pointman.services import allocator, balances, grants
from pointman.services.allocator import Deduction
from pointman.services.balances import PayerStatement
from pointman.signals import points_granted, points_spent
from pointman.validation import (
    validate_limit,
    validate_payer,
    validate_points,
    validate_spend_amount,
)

logger = logging.getLogger(__name__)


def _store_error(exc: DatabaseError, **data):
    """Integrity and value errors are permanent; anything else from the driver is retryable."""
    if isinstance(exc, (IntegrityError, DataError)):
        return PersistenceError(str(exc), **data)
    return StoreUnavailable(str(exc), **data)


class LedgerService:
    """
    Composition root for the point ledger.

    Holds an immutable PointmanSettings. Every mutation runs in its own
    transaction.atomic() block. Database failures surface after rollback as
    StoreUnavailable (transient) or PersistenceError (rejected data).
    Nothing is retried here: a retry racing a still-running transaction
    could spend twice.
    """

    def __init__(self, config: PointmanSettings | None = None):
        self.config = config or get_pointman_settings()

    @property
    def using(self) -> str:
        return self.config.DATABASE_ALIAS

    # ======================================================================
    # CORE API
    # ======================================================================

    def grant(self, payer: str, points: int) -> GrantRecord:
        """
        Append a grant for ``payer``.

        Args:
            payer: Partner identifier (non-empty, stored stripped)
            points: Signed amount; a negative grant is a correction with
                remainder 0

        Returns:
            The created GrantRecord

        Raises:
            InvalidRequest: Empty payer or non-integer points (no query issued)
            StoreUnavailable: Database failure
            PersistenceError: The store rejected the row
        """
        payer = validate_payer(payer)
        points = validate_points(points)

        try:
            with transaction.atomic(using=self.using):
                record = grants.grant(payer, points, using=self.using)
                transaction.on_commit(
                    partial(points_granted.send, sender=GrantRecord, record=record),
                    using=self.using,
                )
        except DatabaseError as exc:
            logger.warning("Grant for %s failed: %s", payer, exc)
            raise _store_error(exc, operation="grant") from exc

        logger.info("Granted %s points to %s (id=%s)", points, payer, record.pk)
        return record

    def spend(self, points: int) -> list[Deduction]:
        """
        Spend ``points`` from the oldest unspent grants, across all payers.

        All-or-nothing: either every deduction commits or none does.

        Returns:
            One Deduction per payer, in order of first draw, points negative

        Raises:
            InvalidRequest: points is not a positive integer (no query issued)
            InsufficientFunds: Total balance below ``points``; store unchanged
            StoreUnavailable: Database failure, lock/statement timeout or
                serialization conflict; store unchanged
            PersistenceError: Integrity or data error; store unchanged
        """
        points = validate_spend_amount(points)

        try:
            with transaction.atomic(using=self.using):
                self._apply_timeouts()
                deductions = allocator.spend(
                    points,
                    using=self.using,
                    chunk_size=self.config.SPEND_CHUNK_SIZE,
                )
                transaction.on_commit(
                    partial(
                        points_spent.send,
                        sender=GrantRecord,
                        points=points,
                        deductions=deductions,
                    ),
                    using=self.using,
                )
        except DatabaseError as exc:
            logger.warning("Spend of %s points failed: %s", points, exc)
            raise _store_error(exc, operation="spend") from exc

        logger.info("Spent %s points across %s payer(s)", points, len(deductions))
        return deductions

    def balances(self) -> dict[str, int]:
        """Current balance per payer. Raises StoreUnavailable on database failure."""
        return self._read(balances.balances)

    # ======================================================================
    # CONVENIENCE API
    # ======================================================================

    def balance(self, payer: str) -> int:
        """Balance for one payer; 0 if the payer has no grants."""
        payer = validate_payer(payer)
        return self._read(partial(balances.balance, payer))

    def statements(self) -> list[PayerStatement]:
        return self._read(balances.statements)

    def history(self, payer: str | None = None, limit: int | None = None) -> list[GrantRecord]:
        """Grant rows, newest first."""
        if payer is not None:
            payer = validate_payer(payer)
        limit = self.config.HISTORY_LIMIT if limit is None else validate_limit(limit)
        return self._read(partial(grants.history, payer, limit))

    # ======================================================================
    # Internals
    # ======================================================================

    def _read(self, query):
        try:
            return query(using=self.using)
        except DatabaseError as exc:
            logger.warning("Ledger read failed: %s", exc)
            raise _store_error(exc, operation="read") from exc

    def _apply_timeouts(self) -> None:
        """
        Bound lock waits and statement time for the current spend.

        PostgreSQL only; local set_config() values are discarded when the transaction ends.
        """
        connection = connections[self.using]
        if connection.vendor != "postgresql":
            return
        with connection.cursor() as cursor:
            if self.config.SPEND_LOCK_TIMEOUT_MS:
                cursor.execute(
                    "SELECT set_config('lock_timeout', %s, true)",
                    [f"{int(self.config.SPEND_LOCK_TIMEOUT_MS)}ms"],
                )
            if self.config.SPEND_STATEMENT_TIMEOUT_MS:
                cursor.execute(
                    "SELECT set_config('statement_timeout', %s, true)",
                    [f"{int(self.config.SPEND_STATEMENT_TIMEOUT_MS)}ms"],
                )
