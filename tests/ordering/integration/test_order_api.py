"""Integration tests for Order and statistics endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from identity.auth.claims import Claims, Role
from identity.auth.fake_adapter import StaticClaimsExtractor
from ordering.api.errors import register_ordering_exception_handlers
from ordering.api.routes import cart_router, order_router, stats_router
from protean.integrations.fastapi import register_exception_handlers

BUYER = {"Authorization": "Bearer buyer-token"}
OTHER_BUYER = {"Authorization": "Bearer other-buyer-token"}
SELLER_A = {"Authorization": "Bearer seller-a-token"}
SELLER_B = {"Authorization": "Bearer seller-b-token"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(stats_router)
    app.include_router(order_router)
    register_exception_handlers(app)
    register_ordering_exception_handlers(app)
    app.state.claims_extractor = StaticClaimsExtractor(
        {
            "buyer-token": Claims("ana@example.com", "buyer-001", Role.CLIENT, "Ana Buyer"),
            "other-buyer-token": Claims("bo@example.com", "buyer-002", Role.CLIENT, "Bo"),
            "seller-a-token": Claims("a@shop.example", "seller-a", Role.SELLER, "Cup Co"),
            "seller-b-token": Claims("b@shop.example", "seller-b", Role.SELLER, "Tea House"),
        }
    )
    return TestClient(app)


def _order_body(**overrides):
    body = {
        "items": [
            {
                "product_id": "a1",
                "product_name": "Blue Mug",
                "seller_id": "seller-a",
                "seller_name": "Cup Co",
                "unit_price": 50.0,
                "quantity": 2,
            },
            {
                "product_id": "b1",
                "product_name": "Green Tea",
                "seller_id": "seller-b",
                "seller_name": "Tea House",
                "unit_price": 25.0,
                "quantity": 2,
            },
        ],
        "shipping_address": "12 Harbour Road",
        "shipping_city": "Lisbon",
        "shipping_postal_code": "1100-001",
        "shipping_country": "PT",
        "phone_number": "+351 210 000 000",
    }
    body.update(overrides)
    return body


def _place(client, **overrides):
    response = client.post("/orders", json=_order_body(**overrides), headers=BUYER)
    assert response.status_code == 201
    return response.json()["id"]


def _set_status(client, order_id, status, headers=SELLER_A, reason=None):
    return client.put(f"/orders/{order_id}/status", json={"status": status, "reason": reason}, headers=headers)


class TestPlaceOrder:
    def test_place_order(self, client):
        response = client.post("/orders", json=_order_body(), headers=BUYER)
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["total_amount"] == 150.0
        assert data["buyer_name"] == "Ana Buyer"
        assert data["payment_method"] == "COD"

    def test_missing_token(self, client):
        response = client.post("/orders", json=_order_body())
        assert response.status_code == 401

    def test_unknown_token(self, client):
        response = client.post("/orders", json=_order_body(), headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_empty_items(self, client):
        response = client.post("/orders", json=_order_body(items=[]), headers=BUYER)
        assert response.status_code == 400

    def test_blank_shipping_field(self, client):
        response = client.post("/orders", json=_order_body(shipping_city=" "), headers=BUYER)
        assert response.status_code == 400

    def test_negative_quantity_fails_schema(self, client):
        body = _order_body()
        body["items"][0]["quantity"] = -1
        response = client.post("/orders", json=body, headers=BUYER)
        assert response.status_code == 422


class TestReadOrders:
    def test_buyer_gets_full_order(self, client):
        order_id = _place(client)
        response = client.get(f"/orders/{order_id}", headers=BUYER)
        assert response.status_code == 200
        assert len(response.json()["items"]) == 2

    def test_seller_gets_redacted_order(self, client):
        order_id = _place(client)
        data = client.get(f"/orders/{order_id}", headers=SELLER_B).json()
        assert [item["product_id"] for item in data["items"]] == ["b1"]
        assert data["total_amount"] == 50.0

    def test_other_buyer_forbidden(self, client):
        order_id = _place(client)
        response = client.get(f"/orders/{order_id}", headers=OTHER_BUYER)
        assert response.status_code == 403

    def test_missing_order(self, client):
        response = client.get("/orders/does-not-exist", headers=BUYER)
        assert response.status_code == 404

    def test_my_orders(self, client):
        first = _place(client)
        second = _place(client)
        response = client.get("/orders/mine", headers=BUYER)
        assert [order["id"] for order in response.json()] == [second, first]

    def test_my_orders_by_status(self, client):
        _place(client)
        response = client.get("/orders/mine", params={"status": "confirmed"}, headers=BUYER)
        assert response.json() == []

    def test_search_my_orders(self, client):
        cheap = _place(client, items=[_order_body()["items"][1]])
        dear = _place(client)
        response = client.get(
            "/orders/mine/search",
            params={"sort_by": "total_amount", "sort_dir": "asc"},
            headers=BUYER,
        )
        assert [order["id"] for order in response.json()] == [cheap, dear]

    def test_search_with_bad_sort_field(self, client):
        response = client.get("/orders/mine/search", params={"sort_by": "price"}, headers=BUYER)
        assert response.status_code == 400

    def test_seller_orders_redacted(self, client):
        order_id = _place(client)
        response = client.get("/orders/seller", headers=SELLER_A)
        data = response.json()
        assert [order["id"] for order in data] == [order_id]
        assert all(item["seller_id"] == "seller-a" for item in data[0]["items"])
        assert data[0]["total_amount"] == 100.0

    def test_seller_search(self, client):
        order_id = _place(client)
        response = client.get("/orders/seller/search", params={"keyword": "mug"}, headers=SELLER_A)
        assert [order["id"] for order in response.json()] == [order_id]

    def test_seller_routes_require_seller_role(self, client):
        response = client.get("/orders/seller", headers=BUYER)
        assert response.status_code == 403


class TestStatusUpdates:
    def test_seller_confirms(self, client):
        order_id = _place(client)
        response = _set_status(client, order_id, "confirmed")
        assert response.status_code == 200
        assert response.json()["status"] == "CONFIRMED"
        assert response.json()["confirmed_at"] is not None

    def test_invalid_transition(self, client):
        order_id = _place(client)
        response = _set_status(client, order_id, "SHIPPED")
        assert response.status_code == 400
        assert "PENDING" in response.json()["error"]
        assert "SHIPPED" in response.json()["error"]

    def test_unknown_status(self, client):
        order_id = _place(client)
        response = _set_status(client, order_id, "LOST")
        assert response.status_code == 400

    def test_buyer_cannot_update_status(self, client):
        order_id = _place(client)
        response = _set_status(client, order_id, "CONFIRMED", headers=BUYER)
        assert response.status_code == 403

    def test_cancel(self, client):
        order_id = _place(client)
        response = client.put(f"/orders/{order_id}/cancel", json={"reason": "Changed my mind"}, headers=BUYER)
        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"
        assert response.json()["cancellation_reason"] == "Changed my mind"

    def test_cancel_without_body_uses_default_reason(self, client):
        order_id = _place(client)
        response = client.put(f"/orders/{order_id}/cancel", headers=BUYER)
        assert response.json()["cancellation_reason"] == "Cancelled by customer"

    def test_cancel_after_shipping(self, client):
        order_id = _place(client)
        _set_status(client, order_id, "CONFIRMED")
        _set_status(client, order_id, "SHIPPED")
        response = client.put(f"/orders/{order_id}/cancel", json={}, headers=BUYER)
        assert response.status_code == 400

    def test_reorder(self, client):
        order_id = _place(client, notes="Gift wrap")
        response = client.post(f"/orders/{order_id}/reorder", headers=BUYER)
        assert response.status_code == 201
        data = response.json()
        assert data["id"] != order_id
        assert data["status"] == "PENDING"
        assert data["notes"] is None
        assert data["total_amount"] == 150.0


class TestStatsEndpoints:
    def _deliver(self, client, order_id):
        for status in ("CONFIRMED", "SHIPPED", "DELIVERED"):
            assert _set_status(client, order_id, status).status_code == 200

    def test_user_stats(self, client):
        self._deliver(client, _place(client))
        _place(client)
        data = client.get("/orders/stats/user", headers=BUYER).json()
        assert data == {"total_orders": 2, "completed_orders": 1, "total_spent": 150.0}

    def test_seller_stats(self, client):
        self._deliver(client, _place(client))
        data = client.get("/orders/stats/seller", headers=SELLER_A).json()
        assert data["total_revenue"] == 100.0
        assert data["total_items_sold"] == 2

    def test_user_product_stats(self, client):
        self._deliver(client, _place(client))
        data = client.get("/orders/stats/user/products", headers=BUYER).json()
        assert {p["product_id"] for p in data["top_products"]} == {"a1", "b1"}
        assert all(p["seller_id"] for p in data["top_products"])
        assert data["total_unique_products"] == 2

    def test_seller_product_stats(self, client):
        self._deliver(client, _place(client))
        data = client.get("/orders/stats/seller/products", headers=SELLER_A).json()
        assert data["best_sellers"][0]["product_id"] == "a1"
        assert data["recent_sales"][0]["customer_name"] == "Ana Buyer"
        assert data["total_customers"] == 1

    def test_seller_stats_require_seller_role(self, client):
        assert client.get("/orders/stats/seller", headers=BUYER).status_code == 403
