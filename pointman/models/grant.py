"""GrantRecord model - one ledger row per point grant.

Data architecture:
    GrantRecord.points
        Signed amount of the original grant. Negative values are
        corrections: they are reported in statements but never spendable.

    GrantRecord.remainder
        Unspent part of the grant. Set once at creation to max(points, 0)
        and only ever decreased by the allocator during a spend.
        0 <= remainder <= max(points, 0), enforced by check constraints.

    A payer's balance is the sum of remainder over their rows. Rows are
    never deleted.
"""

from django.db import models
from django.db.models import Q, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class GrantRecordQuerySet(models.QuerySet):
    def spendable(self):
        """Rows with unspent points, oldest first (FIFO order)."""
        return self.filter(remainder__gt=0).order_by("created_at", "id")

    def for_payer(self, payer: str):
        return self.filter(payer=payer)

    def balances(self):
        """SELECT payer, SUM(remainder) ... GROUP BY payer."""
        return (
            self.order_by()
            .values("payer")
            .annotate(balance=Coalesce(Sum("remainder"), 0))
        )


class GrantRecord(models.Model):
    """
    Immutable record of a point grant.

    Only remainder/updated_at change after creation, and only through
    pointman.services.allocator.
    """

    payer = models.CharField(
        _("payer"),
        max_length=255,
        db_index=True,
        help_text=_("Partner that issued the points"),
    )
    points = models.IntegerField(
        _("points granted"),
        help_text=_("Signed amount; negative for corrections"),
    )
    remainder = models.IntegerField(
        _("remainder"),
        help_text=_("Points from this grant not yet spent"),
    )

    created_at = models.DateTimeField(_("created at"), default=timezone.now)
    updated_at = models.DateTimeField(_("updated at"), null=True, blank=True)

    objects = GrantRecordQuerySet.as_manager()

    class Meta:
        db_table = "pointman_grant"
        verbose_name = _("grant record")
        verbose_name_plural = _("grant records")
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["created_at", "id"],
                condition=Q(remainder__gt=0),
                name="pointman_grant_fifo_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(remainder__gte=0),
                name="pointman_grant_remainder_gte_0",
            ),
            models.CheckConstraint(
                condition=Q(remainder__lte=models.F("points")) | Q(remainder=0),
                name="pointman_grant_remainder_lte_points",
            ),
        ]

    def __str__(self):
        sign = "+" if self.points > 0 else ""
        return f"{self.payer}: {sign}{self.points}pts ({self.remainder} left)"

    @property
    def spent(self) -> int:
        """Points already drawn from this grant."""
        return max(self.points, 0) - self.remainder

    @property
    def is_exhausted(self) -> bool:
        return self.remainder == 0
