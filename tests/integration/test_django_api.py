"""
POSQ — Django Adapter Tests
=============================
JSON in, JSON out over the three catalog/checkout routes.
"""

from __future__ import annotations

import json

import pytest
from django.test import Client

from adapters.django_api import reset_dependencies

FETCHED = "2026-03-02T03:00:00Z"


@pytest.fixture(autouse=True)
def _fresh_wiring():
    reset_dependencies()
    yield
    reset_dependencies()


@pytest.fixture
def client():
    return Client()


def _snapshot(**overrides):
    snapshot = {
        "fetched_at": FETCHED,
        "products": [
            {
                "id": 1, "name": "Kopi", "price": "10000.00", "stock": 7,
                "promo_enabled": 1, "promo_type": "percentage", "promo_value": 20,
                "promo_days": '["Monday"]',
            },
            {"id": 2, "name": "Teh", "price": 8000, "stock": 4, "outlet_id": 7},
        ],
        "packages": [
            {"id": 10, "name": "Paket", "price": 18000, "components": [{"product_id": 1, "quantity": 2}]},
        ],
        "bundles": [
            {"id": 20, "name": "Hemat", "price": 25000, "items": [
                {"is_package": 1, "package_id": 10, "quantity": 1},
                {"is_package": 0, "product_id": 2, "quantity": 1},
            ]},
        ],
    }
    snapshot.update(overrides)
    return snapshot


def _post(client, path, body):
    return client.post(path, data=json.dumps(body), content_type="application/json")


class TestCatalogStockView:
    def test_derives_stock(self, client):
        response = _post(client, "/v1/catalog/stock", {"snapshot": _snapshot()})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["stock"] == {
            "product": {"1": 7, "2": 4},
            "package": {"10": 3},
            "bundle": {"20": 3},
        }
        assert data["issues"] == []

    def test_outlet_filter(self, client):
        response = _post(client, "/v1/catalog/stock", {"snapshot": _snapshot(), "outlet_id": "7"})
        assert response.json()["data"]["stock"]["product"] == {"2": 4}

    def test_factory_alias_outlet(self, client):
        response = _post(client, "/v1/catalog/stock", {"snapshot": _snapshot(), "outlet_id": "0"})
        stock = response.json()["data"]["stock"]
        assert stock["product"] == {"1": 7}
        assert stock["package"] == {"10": 3}

    def test_get_not_allowed(self, client):
        response = client.get("/v1/catalog/stock")
        assert response.status_code == 405
        assert response.json()["error"]["code"] == "METHOD_NOT_ALLOWED"

    def test_invalid_json(self, client):
        response = client.post("/v1/catalog/stock", data="{nope", content_type="application/json")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_missing_snapshot(self, client):
        response = _post(client, "/v1/catalog/stock", {})
        assert response.status_code == 400

    def test_malformed_record(self, client):
        snapshot = _snapshot(products=[{"id": 1, "name": "x", "price": 1, "stock": "lots"}])
        response = _post(client, "/v1/catalog/stock", {"snapshot": snapshot})
        assert response.status_code == 400
        assert "stock" in response.json()["error"]["message"]


class TestPricedStockView:
    def test_monday_promo_applied(self, client):
        response = _post(client, "/v1/catalog/priced-stock", {
            "snapshot": _snapshot(),
            "now": "2026-03-02T10:00:00+07:00",
        })
        assert response.status_code == 200
        kopi = response.json()["data"]["items"]["product"][0]
        assert kopi["price"] == 8000
        assert kopi["has_discount"] is True
        assert kopi["promo_label"] == "Diskon 20%"

    def test_tuesday_full_price(self, client):
        response = _post(client, "/v1/catalog/priced-stock", {
            "snapshot": _snapshot(),
            "now": "2026-03-03T10:00:00+07:00",
        })
        kopi = response.json()["data"]["items"]["product"][0]
        assert kopi["price"] == 10000
        assert kopi["has_discount"] is False

    def test_bad_now(self, client):
        response = _post(client, "/v1/catalog/priced-stock", {"snapshot": _snapshot(), "now": "yesterday"})
        assert response.status_code == 400


class TestCheckoutValidateView:
    def test_accepted(self, client):
        response = _post(client, "/v1/checkout/validate", {
            "snapshot": _snapshot(),
            "now": "2026-03-02T03:00:05Z",
            "lines": [{"kind": "bundle", "item_id": 20, "quantity": 3}],
        })
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["accepted"] is True
        assert data["total"] == 75000

    def test_insufficient_stock_conflict(self, client):
        response = _post(client, "/v1/checkout/validate", {
            "snapshot": _snapshot(),
            "now": "2026-03-02T03:00:05Z",
            "lines": [
                {"kind": "package", "item_id": 10, "quantity": 2},
                {"kind": "package", "item_id": 10, "quantity": 2},
            ],
        })
        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "INSUFFICIENT_STOCK"
        assert error["details"]["message_params"]["requested"] == 4

    def test_stale_snapshot_conflict(self, client):
        response = _post(client, "/v1/checkout/validate", {
            "snapshot": _snapshot(),
            "now": "2026-03-02T03:05:00Z",
            "lines": [{"kind": "product", "item_id": 1, "quantity": 1}],
        })
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "SNAPSHOT_STALE"

    def test_fetched_at_required(self, client):
        snapshot = _snapshot()
        del snapshot["fetched_at"]
        response = _post(client, "/v1/checkout/validate", {
            "snapshot": snapshot,
            "lines": [{"kind": "product", "item_id": 1, "quantity": 1}],
        })
        assert response.status_code == 400
        assert "fetched_at" in response.json()["error"]["message"]

    def test_fetched_at_needs_offset(self, client):
        response = _post(client, "/v1/checkout/validate", {
            "snapshot": _snapshot(fetched_at="2026-03-02T03:00:00"),
            "lines": [{"kind": "product", "item_id": 1, "quantity": 1}],
        })
        assert response.status_code == 400

    def test_empty_cart(self, client):
        response = _post(client, "/v1/checkout/validate", {"snapshot": _snapshot(), "lines": []})
        assert response.status_code == 400

    def test_bad_line(self, client):
        response = _post(client, "/v1/checkout/validate", {
            "snapshot": _snapshot(),
            "lines": [{"kind": "combo", "item_id": 1, "quantity": 1}],
        })
        assert response.status_code == 400

    def test_get_not_allowed(self, client):
        assert client.get("/v1/checkout/validate").status_code == 405
