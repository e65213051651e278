"""Pointman models."""

from pointman.models.grant import GrantRecord, GrantRecordQuerySet

__all__ = [
    "GrantRecord",
    "GrantRecordQuerySet",
]
