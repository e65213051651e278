"""Pytest fixtures for Pointman tests."""

from datetime import timedelta

import pytest
from django.utils import timezone

from pointman.conf import PointmanSettings
from pointman.models import GrantRecord
from pointman.service import LedgerService


@pytest.fixture
def ledger():
    """LedgerService with a small scan chunk so multi-chunk scans are exercised."""
    return LedgerService(PointmanSettings(SPEND_CHUNK_SIZE=2))


@pytest.fixture
def make_grant(db):
    """
    Create a GrantRecord at an explicit offset (minutes) from a fixed base time.

    Lets tests control FIFO order independently of insertion order.
    """
    base = timezone.now() - timedelta(days=1)

    def _make(payer: str, points: int, minute: int = 0) -> GrantRecord:
        return GrantRecord.objects.create(
            payer=payer,
            points=points,
            remainder=max(points, 0),
            created_at=base + timedelta(minutes=minute),
        )

    return _make


@pytest.fixture
def sample_ledger(make_grant):
    """Five grants over three payers, including a negative correction."""
    return [
        make_grant("DANNON", 300, minute=10),
        make_grant("UNILEVER", 200, minute=20),
        make_grant("DANNON", -200, minute=30),
        make_grant("MILLER COORS", 10000, minute=40),
        make_grant("DANNON", 1000, minute=50),
    ]
