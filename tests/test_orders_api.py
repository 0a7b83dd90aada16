"""
Checkout pricing, coupon redemption, stock handling and the admin
status workflow.
"""
import uuid

import pytest

API = "/api/v1"


def add_to_cart(client, headers, product, quantity=1):
    response = client.post(
        f"{API}/cart/items",
        json={"product_id": str(product.id), "quantity": quantity},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()


def checkout(client, headers, shipping_address, **extra):
    return client.post(
        f"{API}/orders",
        json={"shipping_address": shipping_address, **extra},
        headers=headers,
    )


class TestCheckoutPricing:

    def test_empty_cart(self, client, guest_headers, shipping_address):
        response = checkout(client, guest_headers, shipping_address)

        assert response.status_code == 400
        assert response.json()["detail"] == "Cart is empty"

    def test_tax_and_flat_shipping(self, client, guest_headers, shipping_address, make_product):
        add_to_cart(client, guest_headers, make_product(price=200.0), 2)

        response = checkout(client, guest_headers, shipping_address, payment_method="cod")

        assert response.status_code == 201, response.text
        order = response.json()
        assert order["subtotal"] == 400.0
        assert order["tax_amount"] == 72.0
        assert order["shipping_amount"] == 50.0
        assert order["discount_amount"] == 0.0
        assert order["total_amount"] == 522.0
        assert order["status"] == "pending"
        assert order["payment_method"] == "cod"
        assert order["guest_email"] == shipping_address["email"]
        assert order["items"][0]["quantity"] == 2
        assert order["items"][0]["line_total"] == 400.0

    def test_free_shipping_over_threshold(self, client, guest_headers, shipping_address, make_product):
        add_to_cart(client, guest_headers, make_product(price=600.0))

        order = checkout(client, guest_headers, shipping_address).json()

        assert order["shipping_amount"] == 0.0
        assert order["tax_amount"] == 108.0
        assert order["total_amount"] == 708.0

    def test_exactly_threshold_still_pays_shipping(self, client, guest_headers, shipping_address, make_product):
        add_to_cart(client, guest_headers, make_product(price=500.0))

        order = checkout(client, guest_headers, shipping_address).json()

        assert order["shipping_amount"] == 50.0


class TestCheckoutSideEffects:

    def test_stock_deducted_and_cart_cleared(self, client, db, guest_headers, shipping_address, make_product):
        product = make_product(stock=5)
        add_to_cart(client, guest_headers, product, 2)

        assert checkout(client, guest_headers, shipping_address).status_code == 201

        db.refresh(product)
        assert product.stock == 3
        assert client.get(f"{API}/cart", headers=guest_headers).json()["items"] == []

    def test_stock_shortfall_reports_lines(self, client, db, guest_headers, shipping_address, make_product):
        product = make_product(stock=3)
        add_to_cart(client, guest_headers, product, 3)

        product.stock = 1
        db.add(product)
        db.commit()

        response = checkout(client, guest_headers, shipping_address)

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["message"] == "Cart validation failed"
        assert detail["items"][0]["product_id"] == str(product.id)
        # Nothing was consumed
        assert client.get(f"{API}/cart", headers=guest_headers).json()["total_quantity"] == 3

    def test_invalid_address_rejected(self, client, guest_headers, shipping_address, make_product):
        add_to_cart(client, guest_headers, make_product())
        response = checkout(client, guest_headers, {**shipping_address, "city": "  "})
        assert response.status_code == 422


class TestCoupons:

    def test_percentage_coupon_applied(self, client, db, guest_headers, shipping_address, make_product, make_coupon):
        coupon = make_coupon("GREEN10", discount_value=10.0)
        add_to_cart(client, guest_headers, make_product(price=600.0))

        order = checkout(client, guest_headers, shipping_address, coupon_code="green10").json()

        assert order["discount_amount"] == 60.0
        assert order["coupon_code"] == "GREEN10"
        assert order["total_amount"] == 648.0
        db.refresh(coupon)
        assert coupon.usage_count == 1

    def test_percentage_capped(self, client, guest_headers, shipping_address, make_product, make_coupon):
        make_coupon("BIG50", discount_value=50.0, max_discount_amount=100.0)
        add_to_cart(client, guest_headers, make_product(price=1000.0))

        order = checkout(client, guest_headers, shipping_address, coupon_code="BIG50").json()

        assert order["discount_amount"] == 100.0

    def test_fixed_coupon(self, client, guest_headers, shipping_address, make_product, make_coupon):
        make_coupon("FLAT75", discount_type="fixed", discount_value=75.0)
        add_to_cart(client, guest_headers, make_product(price=300.0))

        order = checkout(client, guest_headers, shipping_address, coupon_code="FLAT75").json()

        assert order["discount_amount"] == 75.0
        assert order["total_amount"] == 300.0 + 54.0 + 50.0 - 75.0

    def test_min_purchase_not_met(self, client, guest_headers, shipping_address, make_product, make_coupon):
        make_coupon("MIN999", min_purchase_amount=999.0)
        add_to_cart(client, guest_headers, make_product(price=100.0))

        response = checkout(client, guest_headers, shipping_address, coupon_code="MIN999")

        assert response.status_code == 400
        assert client.get(f"{API}/cart", headers=guest_headers).json()["total_quantity"] == 1

    def test_unknown_coupon(self, client, guest_headers, shipping_address, make_product):
        add_to_cart(client, guest_headers, make_product())
        response = checkout(client, guest_headers, shipping_address, coupon_code="NOPE")
        assert response.status_code == 404

    @pytest.mark.parametrize(
        "overrides",
        [
            {"is_active": False},
            {"usage_limit": 1, "usage_count": 1},
        ],
    )
    def test_unusable_coupon(self, client, guest_headers, make_coupon, overrides):
        make_coupon("SPENT", **overrides)

        response = client.post(
            f"{API}/coupons/validate",
            json={"code": "SPENT", "subtotal": 1000},
            headers=guest_headers,
        )

        assert response.status_code == 400

    def test_validate_reports_discount(self, client, make_coupon):
        make_coupon("GREEN10", discount_value=10.0)

        response = client.post(f"{API}/coupons/validate", json={"code": "green10", "subtotal": 450})

        assert response.status_code == 200
        assert response.json() == {
            "code": "GREEN10",
            "discount_type": "percentage",
            "discount_amount": 45.0,
        }

    def test_admin_coupon_crud(self, client, admin_headers, user_headers):
        payload = {"code": "earth5", "discount_type": "fixed", "discount_value": 5}

        assert client.post(f"{API}/admin/coupons", json=payload, headers=user_headers).status_code == 403

        created = client.post(f"{API}/admin/coupons", json=payload, headers=admin_headers)
        assert created.status_code == 201
        assert created.json()["code"] == "EARTH5"

        duplicate = client.post(f"{API}/admin/coupons", json=payload, headers=admin_headers)
        assert duplicate.status_code == 409

        coupon_id = created.json()["id"]
        updated = client.patch(
            f"{API}/admin/coupons/{coupon_id}", json={"is_active": False}, headers=admin_headers
        )
        assert updated.json()["is_active"] is False

        assert client.delete(f"{API}/admin/coupons/{coupon_id}", headers=admin_headers).status_code == 204
        assert client.get(f"{API}/admin/coupons", headers=admin_headers).json() == []


class TestOrderHistory:

    def test_guest_sees_only_own_orders(self, client, shipping_address, make_product):
        mine = {"X-Session-Id": "mine"}
        theirs = {"X-Session-Id": "theirs"}
        add_to_cart(client, mine, make_product())
        order_id = checkout(client, mine, shipping_address).json()["id"]

        assert [o["id"] for o in client.get(f"{API}/orders/me", headers=mine).json()] == [order_id]
        assert client.get(f"{API}/orders/me", headers=theirs).json() == []
        assert client.get(f"{API}/orders/me/{order_id}", headers=theirs).status_code == 404

        detail = client.get(f"{API}/orders/me/{order_id}", headers=mine).json()
        assert len(detail["items"]) == 1

    def test_user_order_not_visible_to_guest(self, client, user_headers, shipping_address, make_product):
        add_to_cart(client, user_headers, make_product())
        order = checkout(client, user_headers, shipping_address).json()

        assert order["user_id"] is not None
        assert order["guest_email"] is None
        assert client.get(
            f"{API}/orders/me/{order['id']}", headers={"X-Session-Id": "anyone"}
        ).status_code == 404


class TestAdminStatus:

    @pytest.fixture
    def order_id(self, client, guest_headers, shipping_address, make_product):
        add_to_cart(client, guest_headers, make_product())
        return checkout(client, guest_headers, shipping_address).json()["id"]

    def test_requires_admin(self, client, user_headers, order_id):
        response = client.patch(
            f"{API}/orders/{order_id}/status", json={"status": "confirmed"}, headers=user_headers
        )
        assert response.status_code == 403

    def test_payment_verified_marks_payment(self, client, admin_headers, order_id):
        response = client.patch(
            f"{API}/orders/{order_id}/status",
            json={"status": "payment_verified"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "payment_verified"
        assert response.json()["payment_status"] == "verified"

    def test_invalid_transition(self, client, admin_headers, order_id):
        response = client.patch(
            f"{API}/orders/{order_id}/status", json={"status": "delivered"}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_full_lifecycle_and_filter(self, client, admin_headers, order_id):
        for next_status in ("confirmed", "shipped", "delivered"):
            response = client.patch(
                f"{API}/orders/{order_id}/status",
                json={"status": next_status},
                headers=admin_headers,
            )
            assert response.status_code == 200, response.text

        delivered = client.get(f"{API}/orders", params={"status": "delivered"}, headers=admin_headers)
        pending = client.get(f"{API}/orders", params={"status": "pending"}, headers=admin_headers)

        assert [o["id"] for o in delivered.json()] == [order_id]
        assert pending.json() == []

    def test_admin_order_detail(self, client, admin_headers, order_id):
        assert client.get(f"{API}/orders/{order_id}", headers=admin_headers).status_code == 200
        assert client.get(f"{API}/orders/{uuid.uuid4()}", headers=admin_headers).status_code == 404
