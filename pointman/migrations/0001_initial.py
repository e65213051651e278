# Initial migration for the grant ledger

import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="GrantRecord",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "payer",
                    models.CharField(
                        db_index=True,
                        help_text="Partner that issued the points",
                        max_length=255,
                        verbose_name="payer",
                    ),
                ),
                (
                    "points",
                    models.IntegerField(
                        help_text="Signed amount; negative for corrections",
                        verbose_name="points granted",
                    ),
                ),
                (
                    "remainder",
                    models.IntegerField(
                        help_text="Points from this grant not yet spent",
                        verbose_name="remainder",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now,
                        verbose_name="created at",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="updated at"),
                ),
            ],
            options={
                "verbose_name": "grant record",
                "verbose_name_plural": "grant records",
                "db_table": "pointman_grant",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        condition=models.Q(("remainder__gt", 0)),
                        fields=["created_at", "id"],
                        name="pointman_grant_fifo_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("remainder__gte", 0)),
                        name="pointman_grant_remainder_gte_0",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("remainder__lte", models.F("points")),
                            ("remainder", 0),
                            _connector="OR",
                        ),
                        name="pointman_grant_remainder_lte_points",
                    ),
                ],
            },
        ),
    ]
