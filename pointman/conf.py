"""
Pointman configuration.

Usage in settings.py:
    POINTMAN = {
        "DATABASE_ALIAS": "default",
        "SPEND_LOCK_TIMEOUT_MS": 5000,
    }

Settings are read once into an immutable PointmanSettings and handed to
LedgerService. Connection pooling and idle time belong to DATABASES
(CONN_MAX_AGE, pool OPTIONS), not here.
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass(frozen=True)
class PointmanSettings:
    """Pointman configuration settings."""

    # Database connection used for every ledger query
    DATABASE_ALIAS: str = "default"

    # Rows fetched (and locked) per round trip during a spend scan
    SPEND_CHUNK_SIZE: int = 100

    # PostgreSQL only: SET LOCAL lock_timeout / statement_timeout (0 disables)
    SPEND_LOCK_TIMEOUT_MS: int = 5000
    SPEND_STATEMENT_TIMEOUT_MS: int = 15000

    # Default page size for LedgerService.history()
    HISTORY_LIMIT: int = 50


def get_pointman_settings() -> PointmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "POINTMAN", {})
    return PointmanSettings(**user_settings)
