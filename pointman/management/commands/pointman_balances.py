"""Management command to print payer balances."""

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError

from pointman.exceptions import StoreUnavailable


class Command(BaseCommand):
    help = "Print the current point balance of every payer"

    def add_arguments(self, parser):
        parser.add_argument(
            "--statements",
            action="store_true",
            help="Also show granted, spent and correction totals",
        )

    def handle(self, *args, **options):
        ledger = apps.get_app_config("pointman").ledger
        try:
            if options["statements"]:
                rows = [
                    f"{s.payer}: balance={s.balance} granted={s.granted} "
                    f"spent={s.spent} corrections={s.corrections}"
                    for s in ledger.statements()
                ]
            else:
                rows = [
                    f"{payer}: {points}"
                    for payer, points in sorted(ledger.balances().items())
                ]
        except StoreUnavailable as exc:
            raise CommandError(exc.message) from exc

        if not rows:
            self.stdout.write("No grants recorded.")
            return
        for row in rows:
            self.stdout.write(row)
        self.stdout.write(self.style.SUCCESS(f"{len(rows)} payer(s)."))
