"""
API tests for the cart endpoints
"""


class TestCartEndpoints:
    """Test /api/v1/cart for the authenticated client"""

    def add(self, client, headers, product_id, quantity):
        return client.post("/api/v1/cart", json={"product_id": product_id, "quantity": quantity}, headers=headers)

    def test_add_and_read_cart(self, client, client_headers, product):
        # Act
        created = self.add(client, client_headers, product.id, 2)
        again = self.add(client, client_headers, product.id, 2)
        cart = client.get("/api/v1/cart", headers=client_headers).json()

        # Assert
        assert created.status_code == 201
        assert again.json()["quantity"] == 4
        assert len(cart) == 1
        assert cart[0]["product"]["name"] == "Keto Cocoa Bar"
        assert cart[0]["product"]["price"] == 19.99

    def test_add_above_stock_is_400(self, client, client_headers, product):
        self.add(client, client_headers, product.id, 4)

        response = self.add(client, client_headers, product.id, 20)

        assert response.status_code == 400
        assert client.get("/api/v1/cart", headers=client_headers).json()[0]["quantity"] == 4

    def test_zero_quantity_is_422(self, client, client_headers, product):
        assert self.add(client, client_headers, product.id, 0).status_code == 422

    def test_total(self, client, client_headers, product, second_product):
        self.add(client, client_headers, product.id, 2)
        self.add(client, client_headers, second_product.id, 3)

        response = client.get("/api/v1/cart/total", headers=client_headers)

        assert response.json() == {"total": 56.48, "item_count": 2}

    def test_update_and_remove_item(self, client, client_headers, product):
        item_id = self.add(client, client_headers, product.id, 1).json()["id"]

        updated = client.put(f"/api/v1/cart/{item_id}", json={"quantity": 5}, headers=client_headers)
        removed = client.delete(f"/api/v1/cart/{item_id}", headers=client_headers)

        assert updated.json()["quantity"] == 5
        assert removed.status_code == 204
        assert client.get("/api/v1/cart", headers=client_headers).json() == []

    def test_clear_cart(self, client, client_headers, product, second_product):
        self.add(client, client_headers, product.id, 1)
        self.add(client, client_headers, second_product.id, 1)

        response = client.delete("/api/v1/cart", headers=client_headers)

        assert response.json() == {"removed": 2}

    def test_checkout_places_order(self, client, client_headers, product, client_profile):
        # Arrange
        self.add(client, client_headers, product.id, 2)

        # Act
        response = client.post("/api/v1/cart/checkout", headers=client_headers)

        # Assert
        assert response.status_code == 201
        order = response.json()
        assert order["status"] == "RECEIVED"
        assert order["client_id"] == client_profile.id
        assert order["total"] == 39.98
        assert client.get("/api/v1/cart", headers=client_headers).json() == []

    def test_checkout_empty_cart_is_400(self, client, client_headers):
        assert client.post("/api/v1/cart/checkout", headers=client_headers).status_code == 400

    def test_admin_without_profile_is_forbidden(self, client, admin_headers):
        assert client.get("/api/v1/cart", headers=admin_headers).status_code == 403

    def test_anonymous_is_401(self, client):
        assert client.get("/api/v1/cart").status_code == 401
