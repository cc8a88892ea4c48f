"""
API tests for the order lifecycle endpoints
"""
import pytest


@pytest.fixture
def order_payload(client_profile, product, second_product):
    return {
        "client_id": client_profile.id,
        "items": [
            {"product_id": product.id, "quantity": 3},
            {"product_id": second_product.id, "quantity": 2},
        ],
    }


@pytest.fixture
def placed_order(client, admin_headers, order_payload):
    response = client.post("/api/v1/orders", json=order_payload, headers=admin_headers)
    assert response.status_code == 201
    return response.json()


def product_stock(client, headers, product_id):
    return client.get(f"/api/v1/products/{product_id}", headers=headers).json()["stock"]


class TestCreateOrder:
    """Test POST /api/v1/orders"""

    def test_create_order(self, placed_order, product):
        assert placed_order["status"] == "RECEIVED"
        assert placed_order["total"] == 70.97
        assert [(i["product_name"], i["quantity"], i["subtotal"]) for i in placed_order["items"]] == [
            ("Keto Cocoa Bar", 3, 59.97),
            ("Granola Bites", 2, 11.0),
        ]

    def test_create_does_not_take_stock(self, client, admin_headers, placed_order, product):
        assert product_stock(client, admin_headers, product.id) == 10

    def test_insufficient_stock_is_400(self, client, admin_headers, order_payload, product):
        order_payload["items"] = [{"product_id": product.id, "quantity": 11}]

        response = client.post("/api/v1/orders", json=order_payload, headers=admin_headers)

        assert response.status_code == 400
        assert "Insufficient stock" in response.json()["detail"]

    def test_empty_items_is_422(self, client, admin_headers, order_payload):
        response = client.post("/api/v1/orders", json={**order_payload, "items": []}, headers=admin_headers)

        assert response.status_code == 422

    def test_unknown_client_is_404(self, client, admin_headers, order_payload):
        response = client.post("/api/v1/orders", json={**order_payload, "client_id": 999}, headers=admin_headers)

        assert response.status_code == 404

    def test_client_role_cannot_create_for_others(self, client, client_headers, order_payload):
        response = client.post("/api/v1/orders", json=order_payload, headers=client_headers)

        assert response.status_code == 403


class TestOrderLifecycle:
    """Test payment and status transitions through the API"""

    def test_confirmed_payment_takes_stock(self, client, admin_headers, placed_order, product, second_product):
        # Arrange: warm the product cache
        assert product_stock(client, admin_headers, product.id) == 10

        # Act
        response = client.post(
            f"/api/v1/orders/{placed_order['id']}/payment",
            json={"status": "CONFIRMED"},
            headers=admin_headers,
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["status"] == "IN_PREPARATION"
        assert product_stock(client, admin_headers, product.id) == 7
        assert product_stock(client, admin_headers, second_product.id) == 3

    def test_declined_payment_cancels(self, client, admin_headers, placed_order, product):
        response = client.post(
            f"/api/v1/orders/{placed_order['id']}/payment",
            json={"status": "DECLINED"},
            headers=admin_headers,
        )

        assert response.json()["status"] == "CANCELLED"
        assert product_stock(client, admin_headers, product.id) == 10

    def test_second_payment_is_400(self, client, admin_headers, placed_order):
        url = f"/api/v1/orders/{placed_order['id']}/payment"
        client.post(url, json={"status": "CONFIRMED"}, headers=admin_headers)

        response = client.post(url, json={"status": "CONFIRMED"}, headers=admin_headers)

        assert response.status_code == 400
        assert "RECEIVED" in response.json()["detail"]

    def test_unknown_payment_status_is_422(self, client, admin_headers, placed_order):
        response = client.post(
            f"/api/v1/orders/{placed_order['id']}/payment",
            json={"status": "MAYBE"},
            headers=admin_headers,
        )

        assert response.status_code == 422

    def test_full_lifecycle(self, client, admin_headers, placed_order):
        order_url = f"/api/v1/orders/{placed_order['id']}"

        statuses = [
            client.post(f"{order_url}/confirm", headers=admin_headers).json()["status"],
            client.post(f"{order_url}/dispatch", headers=admin_headers).json()["status"],
            client.post(f"{order_url}/deliver", headers=admin_headers).json()["status"],
        ]

        assert statuses == ["IN_PREPARATION", "DISPATCHED", "DELIVERED"]
        assert client.post(f"{order_url}/cancel", headers=admin_headers).status_code == 400

    def test_skipping_a_step_is_400(self, client, admin_headers, placed_order):
        response = client.patch(
            f"/api/v1/orders/{placed_order['id']}/status",
            json={"status": "DELIVERED"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert "Invalid status transition from RECEIVED to DELIVERED" in response.json()["detail"]

    def test_cancel_after_dispatch_restores_stock(self, client, admin_headers, placed_order, product):
        order_url = f"/api/v1/orders/{placed_order['id']}"
        client.post(f"{order_url}/payment", json={"status": "CONFIRMED"}, headers=admin_headers)
        client.patch(f"{order_url}/status", json={"status": "DISPATCHED"}, headers=admin_headers)

        response = client.post(f"{order_url}/cancel", headers=admin_headers)

        assert response.json()["status"] == "CANCELLED"
        assert product_stock(client, admin_headers, product.id) == 10


class TestOrderQueries:
    def test_list_filters_by_status(self, client, admin_headers, placed_order):
        received = client.get("/api/v1/orders?status=RECEIVED", headers=admin_headers).json()
        cancelled = client.get("/api/v1/orders?status=CANCELLED", headers=admin_headers).json()

        assert [o["id"] for o in received] == [placed_order["id"]]
        assert cancelled == []

    def test_get_missing_order_is_404(self, client, admin_headers):
        assert client.get("/api/v1/orders/999", headers=admin_headers).status_code == 404

    def test_client_sees_own_orders(self, client, client_headers, placed_order):
        response = client.get("/api/v1/orders/mine", headers=client_headers)

        assert response.status_code == 200
        assert [o["id"] for o in response.json()] == [placed_order["id"]]

    def test_admin_without_profile_has_no_own_orders(self, client, admin_headers):
        assert client.get("/api/v1/orders/mine", headers=admin_headers).status_code == 403

    def test_client_cannot_list_all_orders(self, client, client_headers):
        assert client.get("/api/v1/orders", headers=client_headers).status_code == 403
