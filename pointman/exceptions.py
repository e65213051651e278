"""Pointman exceptions."""


class PointmanError(Exception):
    """
    Structured exception for ledger operations.

    Carries a stable ``code``, a human message and arbitrary context data.

    Usage:
        try:
            ledger.spend(500)
        except PointmanError as e:
            if e.code == "INSUFFICIENT_FUNDS":
                handle_shortfall(e.data["available"])
    """

    retryable = False

    _default_messages = {
        "INVALID_REQUEST": "Invalid request",
        "INSUFFICIENT_FUNDS": "Not enough available points",
        "STORE_UNAVAILABLE": "Ledger store unavailable",
        "PERSISTENCE_ERROR": "Ledger write rejected by the store",
    }

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "data": self.data,
        }


class InvalidRequest(PointmanError):
    """Malformed or semantically invalid input. Never reaches the store."""

    def __init__(self, message: str | None = None, **data):
        super().__init__("INVALID_REQUEST", message, **data)


class InsufficientFunds(PointmanError):
    """Total unspent remainder is below the requested amount. Store unchanged."""

    def __init__(self, message: str | None = None, **data):
        super().__init__("INSUFFICIENT_FUNDS", message, **data)


class StoreUnavailable(PointmanError):
    """The database could not complete the transaction. Safe to retry."""

    retryable = True

    def __init__(self, message: str | None = None, **data):
        super().__init__("STORE_UNAVAILABLE", message, **data)


class PersistenceError(PointmanError):
    """The store rejected the data itself (integrity or value error). Retrying cannot help."""

    def __init__(self, message: str | None = None, **data):
        super().__init__("PERSISTENCE_ERROR", message, **data)
