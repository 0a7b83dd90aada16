"""
Server-side cart endpoints, for guests (session header) and signed-in users.
"""
import uuid

API = "/api/v1"


class TestCartOwner:

    def test_requires_user_or_session(self, client):
        response = client.get(f"{API}/cart")
        assert response.status_code == 400

    def test_guest_gets_empty_cart(self, client, guest_headers):
        response = client.get(f"{API}/cart", headers=guest_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["items"] == []
        assert body["total_quantity"] == 0
        assert body["total_price"] == 0

    def test_invalid_token_rejected(self, client):
        response = client.get(f"{API}/cart", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_carts_are_isolated_per_session(self, client, make_product):
        product = make_product()
        first = {"X-Session-Id": "session-one"}
        second = {"X-Session-Id": "session-two"}

        client.post(f"{API}/cart/items", json={"product_id": str(product.id)}, headers=first)

        assert client.get(f"{API}/cart", headers=first).json()["total_quantity"] == 1
        assert client.get(f"{API}/cart", headers=second).json()["total_quantity"] == 0

    def test_user_cart_follows_token(self, client, user_headers, make_product):
        product = make_product()

        client.post(f"{API}/cart/items", json={"product_id": str(product.id)}, headers=user_headers)
        body = client.get(f"{API}/cart", headers=user_headers).json()

        assert body["total_quantity"] == 1


class TestCartItems:

    def test_add_merges_same_product(self, client, guest_headers, make_product):
        product = make_product(price=250.0)

        client.post(f"{API}/cart/items", json={"product_id": str(product.id), "quantity": 1}, headers=guest_headers)
        response = client.post(
            f"{API}/cart/items",
            json={"product_id": str(product.id), "quantity": 2},
            headers=guest_headers,
        )

        body = response.json()
        assert response.status_code == 200
        assert len(body["items"]) == 1
        assert body["items"][0]["quantity"] == 3
        assert body["items"][0]["line_total"] == 750.0
        assert body["items"][0]["image_url"] == product.images[0]
        assert body["total_quantity"] == 3
        assert body["total_price"] == 750.0

    def test_add_rejects_zero_quantity(self, client, guest_headers, make_product):
        product = make_product()
        response = client.post(
            f"{API}/cart/items",
            json={"product_id": str(product.id), "quantity": 0},
            headers=guest_headers,
        )
        assert response.status_code == 422

    def test_add_unknown_product(self, client, guest_headers):
        response = client.post(
            f"{API}/cart/items",
            json={"product_id": str(uuid.uuid4())},
            headers=guest_headers,
        )
        assert response.status_code == 404

    def test_add_inactive_product(self, client, guest_headers, make_product):
        product = make_product(is_active=False)
        response = client.post(
            f"{API}/cart/items",
            json={"product_id": str(product.id)},
            headers=guest_headers,
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Product is not available"

    def test_add_beyond_stock(self, client, guest_headers, make_product):
        product = make_product(stock=2)
        client.post(f"{API}/cart/items", json={"product_id": str(product.id), "quantity": 2}, headers=guest_headers)

        response = client.post(
            f"{API}/cart/items",
            json={"product_id": str(product.id), "quantity": 1},
            headers=guest_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Not enough stock available"

    def test_update_quantity(self, client, guest_headers, make_product):
        product = make_product(price=100.0)
        body = client.post(
            f"{API}/cart/items", json={"product_id": str(product.id)}, headers=guest_headers
        ).json()
        item_id = body["items"][0]["id"]

        body = client.put(
            f"{API}/cart/items/{item_id}", json={"quantity": 4}, headers=guest_headers
        ).json()

        assert body["items"][0]["quantity"] == 4
        assert body["total_price"] == 400.0

    def test_update_to_zero_removes(self, client, guest_headers, make_product):
        product = make_product()
        body = client.post(
            f"{API}/cart/items", json={"product_id": str(product.id)}, headers=guest_headers
        ).json()
        item_id = body["items"][0]["id"]

        body = client.put(
            f"{API}/cart/items/{item_id}", json={"quantity": 0}, headers=guest_headers
        ).json()

        assert body["items"] == []
        assert body["total_quantity"] == 0

    def test_cannot_touch_another_sessions_item(self, client, make_product):
        product = make_product()
        owner = {"X-Session-Id": "owner"}
        other = {"X-Session-Id": "intruder"}
        item_id = client.post(
            f"{API}/cart/items", json={"product_id": str(product.id)}, headers=owner
        ).json()["items"][0]["id"]

        assert client.delete(f"{API}/cart/items/{item_id}", headers=other).status_code == 404
        assert client.put(
            f"{API}/cart/items/{item_id}", json={"quantity": 2}, headers=other
        ).status_code == 404

    def test_remove_and_clear(self, client, guest_headers, make_product):
        first, second = make_product("Scarf"), make_product("Belt")
        body = client.post(f"{API}/cart/items", json={"product_id": str(first.id)}, headers=guest_headers).json()
        client.post(f"{API}/cart/items", json={"product_id": str(second.id)}, headers=guest_headers)

        body = client.delete(f"{API}/cart/items/{body['items'][0]['id']}", headers=guest_headers).json()
        assert [i["product_name"] for i in body["items"]] == ["Belt"]

        body = client.delete(f"{API}/cart", headers=guest_headers).json()
        assert body["items"] == []
        assert body["total_quantity"] == 0

    def test_update_rejects_negative(self, client, guest_headers, make_product):
        product = make_product()
        item_id = client.post(
            f"{API}/cart/items", json={"product_id": str(product.id)}, headers=guest_headers
        ).json()["items"][0]["id"]

        response = client.put(
            f"{API}/cart/items/{item_id}", json={"quantity": -1}, headers=guest_headers
        )
        assert response.status_code == 422
