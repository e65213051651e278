"""
Tests for the JSON endpoints.

RequestFactory tests inject a ledger through as_view(ledger=...);
client tests go through pointman.urls and the app-wide ledger.
"""

import json
from unittest.mock import MagicMock

import pytest
from django.test import RequestFactory

from pointman.exceptions import InsufficientFunds, PersistenceError, StoreUnavailable
from pointman.views import AddPointsView, BalancesView, SpendPointsView, StatementsView


@pytest.fixture(autouse=True)
def _enable_db(db):
    """Enable DB access for all tests."""


@pytest.fixture
def factory():
    return RequestFactory()


def post_json(factory, path, payload):
    body = payload if isinstance(payload, (str, bytes)) else json.dumps(payload)
    return factory.post(path, data=body, content_type="application/json")


# ═══════════════════════════════════════════════════════════════════
# add-points
# ═══════════════════════════════════════════════════════════════════


class TestAddPointsView:
    def test_grant_created(self, factory, ledger):
        view = AddPointsView.as_view(ledger=ledger)
        response = view(post_json(factory, "/add-points/", {"payer": "DANNON", "points": 300}))

        assert response.status_code == 201
        data = json.loads(response.content)
        assert data["success"] is True
        assert ledger.balances() == {"DANNON": 300}

    @pytest.mark.parametrize(
        "payload",
        [
            "{not json",
            "[1, 2]",
            {"payer": "DANNON"},
            {"points": 10},
            {"payer": "", "points": 10},
            {"payer": "DANNON", "points": "10"},
            '{"payer": "DAN\\u0000NON", "points": 10}',
            '{"payer": "DANNON\\ud800", "points": 10}',
            '{"payer": "DANNON", "points": ' + "1" * 5000 + "}",
        ],
    )
    def test_bad_payload(self, factory, ledger, payload):
        view = AddPointsView.as_view(ledger=ledger)
        response = view(post_json(factory, "/add-points/", payload))

        assert response.status_code == 400
        data = json.loads(response.content)
        assert data["success"] is False
        assert data["code"] == "INVALID_REQUEST"
        assert ledger.balances() == {}

    def test_get_not_allowed(self, factory, ledger):
        view = AddPointsView.as_view(ledger=ledger)
        response = view(factory.get("/add-points/"))
        assert response.status_code == 405


# ═══════════════════════════════════════════════════════════════════
# spend-points
# ═══════════════════════════════════════════════════════════════════


class TestSpendPointsView:
    def test_spend(self, factory, ledger, sample_ledger):
        view = SpendPointsView.as_view(ledger=ledger)
        response = view(post_json(factory, "/spend-points/", {"points": 5000}))

        assert response.status_code == 200
        assert json.loads(response.content) == [
            {"payer": "DANNON", "points": -300},
            {"payer": "UNILEVER", "points": -200},
            {"payer": "MILLER COORS", "points": -4500},
        ]

    def test_insufficient_funds(self, factory, ledger):
        ledger.grant("A", 5)
        view = SpendPointsView.as_view(ledger=ledger)
        response = view(post_json(factory, "/spend-points/", {"points": 10}))

        assert response.status_code == 403
        data = json.loads(response.content)
        assert data == {
            "success": False,
            "error": "Not enough available points",
            "code": "INSUFFICIENT_FUNDS",
        }
        assert ledger.balances() == {"A": 5}

    @pytest.mark.parametrize("points", [0, -5, "5", None])
    def test_invalid_amount(self, factory, ledger, points):
        view = SpendPointsView.as_view(ledger=ledger)
        response = view(post_json(factory, "/spend-points/", {"points": points}))
        assert response.status_code == 400

    def test_oversized_integer_literal_is_bad_request(self, factory, ledger, sample_ledger):
        view = SpendPointsView.as_view(ledger=ledger)
        body = '{"points": ' + "1" * 5000 + "}"

        response = view(post_json(factory, "/spend-points/", body))

        assert response.status_code == 400
        assert json.loads(response.content)["code"] == "INVALID_REQUEST"
        assert ledger.balance("DANNON") == 1300

    def test_persistence_error_is_500_without_retry_after(self, factory):
        ledger = MagicMock()
        ledger.spend.side_effect = PersistenceError("CHECK constraint failed", operation="spend")
        view = SpendPointsView.as_view(ledger=ledger)

        response = view(post_json(factory, "/spend-points/", {"points": 10}))

        assert response.status_code == 500
        assert not response.has_header("Retry-After")
        assert json.loads(response.content)["code"] == "PERSISTENCE_ERROR"

    def test_store_unavailable_is_retryable(self, factory):
        ledger = MagicMock()
        ledger.spend.side_effect = StoreUnavailable("database is locked")
        view = SpendPointsView.as_view(ledger=ledger)

        response = view(post_json(factory, "/spend-points/", {"points": 10}))

        assert response.status_code == 503
        assert response["Retry-After"] == "1"
        assert json.loads(response.content)["code"] == "STORE_UNAVAILABLE"

    def test_unexpected_error_is_500(self, factory):
        ledger = MagicMock()
        ledger.spend.side_effect = RuntimeError("boom")
        view = SpendPointsView.as_view(ledger=ledger)

        response = view(post_json(factory, "/spend-points/", {"points": 10}))

        assert response.status_code == 500
        assert json.loads(response.content)["code"] == "INTERNAL_ERROR"

    def test_no_retry_after_on_business_errors(self, factory):
        ledger = MagicMock()
        ledger.spend.side_effect = InsufficientFunds()
        view = SpendPointsView.as_view(ledger=ledger)

        response = view(post_json(factory, "/spend-points/", {"points": 10}))

        assert response.status_code == 403
        assert not response.has_header("Retry-After")


# ═══════════════════════════════════════════════════════════════════
# balances / statements
# ═══════════════════════════════════════════════════════════════════


class TestReadViews:
    def test_balances(self, factory, ledger, sample_ledger):
        view = BalancesView.as_view(ledger=ledger)
        response = view(factory.get("/balances/"))

        assert response.status_code == 200
        assert json.loads(response.content) == {
            "DANNON": 1300,
            "UNILEVER": 200,
            "MILLER COORS": 10000,
        }

    def test_balances_store_unavailable(self, factory):
        ledger = MagicMock()
        ledger.balances.side_effect = StoreUnavailable()
        view = BalancesView.as_view(ledger=ledger)

        response = view(factory.get("/balances/"))
        assert response.status_code == 503

    def test_statements(self, factory, ledger, sample_ledger):
        view = StatementsView.as_view(ledger=ledger)
        response = view(factory.get("/statements/"))

        data = json.loads(response.content)
        assert [row["payer"] for row in data] == ["DANNON", "MILLER COORS", "UNILEVER"]
        assert data[0]["corrections"] == -200


# ═══════════════════════════════════════════════════════════════════
# URLs + app ledger
# ═══════════════════════════════════════════════════════════════════


class TestUrls:
    def test_full_flow(self, client):
        for payer, points in [("DANNON", 300), ("UNILEVER", 200), ("DANNON", -200)]:
            response = client.post(
                "/add-points/",
                data=json.dumps({"payer": payer, "points": points}),
                content_type="application/json",
            )
            assert response.status_code == 201

        response = client.post(
            "/spend-points/",
            data=json.dumps({"points": 400}),
            content_type="application/json",
        )
        assert response.status_code == 200
        assert response.json() == [
            {"payer": "DANNON", "points": -300},
            {"payer": "UNILEVER", "points": -100},
        ]

        assert client.get("/balances/").json() == {"DANNON": 0, "UNILEVER": 100}
