"""Balance aggregation - read-only sums over the grant ledger.

Each function issues a single aggregate statement, so it always reads a
committed snapshot and never a spend that is still in flight.
"""

from dataclasses import dataclass

from django.db.models import Case, F, IntegerField, Sum, Value, When
from django.db.models.functions import Coalesce

from pointman.models import GrantRecord


@dataclass(frozen=True)
class PayerStatement:
    """Gross and net point totals for one payer."""

    payer: str
    granted: int
    balance: int
    corrections: int = 0

    @property
    def spent(self) -> int:
        return self.granted - self.balance

    def as_dict(self) -> dict:
        return {
            "payer": self.payer,
            "granted": self.granted,
            "balance": self.balance,
            "spent": self.spent,
            "corrections": self.corrections,
        }


def balances(using: str = "default") -> dict[str, int]:
    """Current spendable balance per payer, one entry per payer with any grant."""
    rows = GrantRecord.objects.using(using).balances()
    return {row["payer"]: row["balance"] for row in rows}


def balance(payer: str, using: str = "default") -> int:
    """Balance for one payer. Returns 0 for an unknown payer."""
    result = GrantRecord.objects.using(using).for_payer(payer).aggregate(
        balance=Coalesce(Sum("remainder"), 0)
    )
    return result["balance"]


def statements(using: str = "default") -> list[PayerStatement]:
    """Per-payer granted/balance/corrections totals, ordered by payer."""
    positive = Case(When(points__gt=0, then=F("points")), default=Value(0), output_field=IntegerField())
    negative = Case(When(points__lt=0, then=F("points")), default=Value(0), output_field=IntegerField())
    rows = (
        GrantRecord.objects.using(using)
        .order_by()
        .values("payer")
        .annotate(
            granted=Coalesce(Sum(positive), 0),
            balance=Coalesce(Sum("remainder"), 0),
            corrections=Coalesce(Sum(negative), 0),
        )
        .order_by("payer")
    )
    return [
        PayerStatement(
            payer=row["payer"],
            granted=row["granted"],
            balance=row["balance"],
            corrections=row["corrections"],
        )
        for row in rows
    ]
