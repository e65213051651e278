"""
Django Pointman - Payer point ledger.

Usage:
    from pointman import LedgerService, InsufficientFunds

    ledger = LedgerService()
    ledger.grant("DANNON", 1000)
    ledger.grant("UNILEVER", 200)
    deductions = ledger.spend(1100)   # oldest grants first
    balances = ledger.balances()      # {"DANNON": 0, "UNILEVER": 100}
"""


def __getattr__(name):
    if name == "LedgerService":
        from pointman.service import LedgerService

        return LedgerService
    if name in (
        "PointmanError",
        "InvalidRequest",
        "InsufficientFunds",
        "StoreUnavailable",
        "PersistenceError",
    ):
        from pointman import exceptions

        return getattr(exceptions, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "LedgerService",
    "PointmanError",
    "InvalidRequest",
    "InsufficientFunds",
    "StoreUnavailable",
    "PersistenceError",
]
__version__ = "0.1.0"
