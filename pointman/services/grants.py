"""Grant writes and ledger history."""

from pointman.models import GrantRecord


def grant(payer: str, points: int, using: str = "default") -> GrantRecord:
    """Append one grant row. Negative grants are recorded with remainder 0."""
    return GrantRecord.objects.using(using).create(
        payer=payer,
        points=points,
        remainder=max(points, 0),
    )


def history(
    payer: str | None = None,
    limit: int = 50,
    using: str = "default",
) -> list[GrantRecord]:
    """Grant rows, newest first, optionally for one payer."""
    qs = GrantRecord.objects.using(using)
    if payer is not None:
        qs = qs.for_payer(payer)
    return list(qs.order_by("-created_at", "-id")[:limit])
