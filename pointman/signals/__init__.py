"""
Pointman signals - public event API.

Emitted signals (always after the surrounding transaction commits):
- points_granted: Emitted by LedgerService.grant()
- points_spent: Emitted by LedgerService.spend()
"""

from django.dispatch import Signal

points_granted = Signal()  # sender=GrantRecord, record=GrantRecord
points_spent = Signal()  # sender=GrantRecord, points=int, deductions=list[Deduction]
