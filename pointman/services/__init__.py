"""Pointman services.

- allocator: FIFO spend across payers (call inside transaction.atomic())
- balances: read-side aggregates
- grants: grant inserts and history

Callers outside the app should go through pointman.service.LedgerService,
which owns transactions and error translation.
"""

from pointman.services import allocator
from pointman.services import balances
from pointman.services import grants

__all__ = ["allocator", "balances", "grants"]
