"""
Pointman HTTP endpoints.

Thin JSON adapter over LedgerService:
    POST add-points/    {"payer": "DANNON", "points": 300}  -> 201
    POST spend-points/  {"points": 5000}                    -> 200 [{"payer", "points"}]
    GET  balances/                                          -> 200 {"DANNON": 1000}
    GET  statements/                                        -> 200 [{"payer", "granted", ...}]

Error body: {"success": false, "error": <message>, "code": <CODE>}
"""

from __future__ import annotations

import logging

from django.apps import apps
from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from pointman.exceptions import (
    InsufficientFunds,
    InvalidRequest,
    PersistenceError,
    PointmanError,
    StoreUnavailable,
)
from pointman.validation import parse_grant_payload, parse_spend_payload

logger = logging.getLogger("pointman.http")

_STATUS_BY_ERROR = [
    (InvalidRequest, 400),
    (InsufficientFunds, 403),
    (StoreUnavailable, 503),
    (PersistenceError, 500),
]


def get_ledger():
    """The process-wide LedgerService built by PointmanConfig.ready()."""
    return apps.get_app_config("pointman").ledger


def error_response(exc: PointmanError) -> JsonResponse:
    status = 500
    for error_class, error_status in _STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            status = error_status
            break
    response = JsonResponse(
        {"success": False, "error": exc.message, "code": exc.code},
        status=status,
    )
    if exc.retryable:
        response["Retry-After"] = "1"
    return response


def internal_error() -> JsonResponse:
    return JsonResponse(
        {"success": False, "error": "Internal error", "code": "INTERNAL_ERROR"},
        status=500,
    )


class LedgerView(View):
    """Base view: resolves the ledger and maps PointmanError to JSON errors."""

    ledger = None

    def get_ledger(self):
        return self.ledger or get_ledger()

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except PointmanError as exc:
            if isinstance(exc, StoreUnavailable):
                logger.warning("%s %s: store unavailable - %s", request.method, request.path, exc.message)
            elif isinstance(exc, PersistenceError):
                logger.error("%s %s: write rejected - %s", request.method, request.path, exc.message)
            return error_response(exc)
        except Exception:
            logger.exception("%s %s: unexpected error", request.method, request.path)
            return internal_error()


@method_decorator(csrf_exempt, name="dispatch")
class AddPointsView(LedgerView):
    def post(self, request):
        payer, points = parse_grant_payload(request.body)
        record = self.get_ledger().grant(payer, points)
        return JsonResponse({"success": True, "id": record.pk}, status=201)


@method_decorator(csrf_exempt, name="dispatch")
class SpendPointsView(LedgerView):
    def post(self, request):
        points = parse_spend_payload(request.body)
        deductions = self.get_ledger().spend(points)
        return JsonResponse([d.as_dict() for d in deductions], safe=False)


class BalancesView(LedgerView):
    def get(self, request):
        return JsonResponse(self.get_ledger().balances())


class StatementsView(LedgerView):
    def get(self, request):
        statements = self.get_ledger().statements()
        return JsonResponse([s.as_dict() for s in statements], safe=False)
