"""FIFO allocator - drains the oldest unspent grants first, across all payers.

MUST be called inside transaction.atomic(). The candidate rows are locked
with SELECT ... FOR UPDATE while they are scanned, so concurrent spends
serialize on the rows they share instead of allocating the same remainder
twice. Nothing is written until the full amount is covered.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from django.utils import timezone

from pointman.exceptions import InsufficientFunds
from pointman.models import GrantRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Deduction:
    """Points taken from one payer by a spend. ``points`` is negative."""

    payer: str
    points: int

    def as_dict(self) -> dict:
        return {"payer": self.payer, "points": self.points}


def lock_candidates(using: str = "default", chunk_size: int = 100):
    """
    Stream spendable rows in FIFO order, locking each chunk as it is fetched.

    On backends with server-side cursors only the scanned rows are locked,
    not the whole spendable set.
    """
    return (
        GrantRecord.objects.using(using)
        .select_for_update()
        .spendable()
        .iterator(chunk_size=chunk_size)
    )


def spend(
    points: int,
    using: str = "default",
    chunk_size: int = 100,
    now: datetime | None = None,
) -> list[Deduction]:
    """
    Deduct ``points`` from the oldest grants first.

    Args:
        points: Amount to spend (validated positive by the caller)
        using: Database alias
        chunk_size: Rows per fetch during the scan
        now: Timestamp written to updated_at of every touched row

    Returns:
        One Deduction per payer drawn from, in order of first draw

    Raises:
        InsufficientFunds: If all spendable rows together cover less than
            ``points``. No row has been written when this is raised.
    """
    now = now or timezone.now()
    needed = points
    deducted: dict[str, int] = {}
    touched: list[GrantRecord] = []

    rows = lock_candidates(using=using, chunk_size=chunk_size)
    try:
        for record in rows:
            take = min(record.remainder, needed)
            record.remainder -= take
            record.updated_at = now
            touched.append(record)

            deducted[record.payer] = deducted.get(record.payer, 0) - take
            needed -= take
            if needed == 0:
                break
    finally:
        rows.close()

    if needed > 0:
        available = points - needed
        logger.warning(
            "Spend of %s points rejected: only %s available", points, available
        )
        raise InsufficientFunds(requested=points, available=available)

    GrantRecord.objects.using(using).bulk_update(touched, ["remainder", "updated_at"])

    return [Deduction(payer, amount) for payer, amount in deducted.items()]
