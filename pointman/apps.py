from django.apps import AppConfig


class PointmanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pointman"
    verbose_name = "Pointman - Payer Point Ledger"

    def ready(self):
        from pointman.conf import get_pointman_settings
        from pointman.service import LedgerService

        # Built once per process; views and commands share this instance.
        self.ledger = LedgerService(get_pointman_settings())
