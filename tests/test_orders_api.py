"""
Account, cart and order endpoints exercised over HTTP.
"""
import pytest

from catering_api.models.order import Order
from tests.conftest import auth_headers, make_order


class TestAuth:
    """Registration, login and profile."""

    @pytest.mark.api
    def test_register_and_login(self, client):
        response = client.post("/auth/register", json={
            "email": "new@example.com",
            "password": "secret123",
            "name": "신규",
            "phone": "010-5555-6666",
        })
        assert response.status_code == 200
        assert response.json()["role"] == "consumer"

        login = client.post("/auth/login", json={"email": "new@example.com", "password": "secret123"})
        assert login.status_code == 200
        token = login.json()["access_token"]

        me = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["phone"] == "01055556666"

    @pytest.mark.api
    def test_duplicate_email(self, client, consumer):
        response = client.post("/auth/register", json={
            "email": consumer.email, "password": "secret123", "name": "중복",
        })
        assert response.status_code == 400

    @pytest.mark.api
    def test_wrong_password(self, client, consumer):
        response = client.post("/auth/login", json={"email": consumer.email, "password": "wrong-pass"})
        assert response.status_code == 401

    @pytest.mark.api
    def test_me_requires_token(self, client):
        assert client.get("/users/me").status_code == 401


class TestCart:

    @pytest.mark.api
    def test_add_and_total(self, client, consumer, product):
        headers = auth_headers(consumer)
        client.post("/cart", json={"product_id": product.id, "quantity": 3}, headers=headers)
        client.post("/cart", json={"product_id": product.id, "option_price": 1000}, headers=headers)

        cart = client.get("/cart", headers=headers).json()
        assert cart["total_quantity"] == 4
        assert cart["total_product_price"] == 12000 * 3 + 13000

    @pytest.mark.api
    def test_unknown_product(self, client, consumer):
        response = client.post("/cart", json={"product_id": 999}, headers=auth_headers(consumer))
        assert response.status_code == 404

    @pytest.mark.api
    def test_zero_quantity_removes_item(self, client, consumer, product):
        headers = auth_headers(consumer)
        item_id = client.post("/cart", json={"product_id": product.id}, headers=headers).json()["item"]["id"]

        response = client.put(f"/cart/{item_id}", json={"quantity": 0}, headers=headers)

        assert response.json() == {"message": "Item removed"}
        assert client.get("/cart", headers=headers).json()["items"] == []


class TestOrders:

    @pytest.mark.api
    def test_create_pending_order_from_cart(self, client, session, consumer, product, partner):
        headers = auth_headers(consumer)
        item_id = client.post("/cart", json={"product_id": product.id, "quantity": 2},
                              headers=headers).json()["item"]["id"]

        response = client.post("/orders", json={
            "cartItemIds": [item_id],
            "checkout": {
                "orderInfo": {"orderer": "김고객", "deliveryDate": "2026-11-02", "deliveryTime": "12:00"},
                "deliveryMethod": "quick",
            },
        }, headers=headers)

        assert response.status_code == 200
        order = session.get(Order, response.json()["orderId"])
        assert order.status == "pending"
        assert order.total_product_price == 24000
        assert order.partner_id == partner.id
        assert len(order.order_number) == 8

    @pytest.mark.api
    def test_partner_accepts(self, client, partner, order):
        response = client.post("/orders/update-status",
                               json={"orderId": order.id, "status": "preparing"},
                               headers=auth_headers(partner))

        assert response.json() == {"success": True, "orderId": order.id, "status": "preparing"}

    @pytest.mark.api
    def test_invalid_transition_is_400(self, client, partner, order):
        response = client.post("/orders/update-status",
                               json={"orderId": order.id, "status": "completed"},
                               headers=auth_headers(partner))

        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.api
    def test_consumer_cannot_update_status(self, client, consumer, order):
        response = client.post("/orders/update-status",
                               json={"orderId": order.id, "status": "preparing"},
                               headers=auth_headers(consumer))
        assert response.status_code == 403

    @pytest.mark.api
    def test_confirm_for_someone_else(self, client, consumer, order):
        response = client.post("/orders/confirm",
                               json={"orderId": order.id, "uid": consumer.id + 100},
                               headers=auth_headers(consumer))
        assert response.status_code == 403

    @pytest.mark.api
    def test_order_visibility(self, client, session, consumer, partner, admin, store):
        order = make_order(session, user=consumer, store=store)
        stranger = make_order(session, user=admin, store=store, order_number="ZZZZ9999")

        assert client.get(f"/orders/{order.id}", headers=auth_headers(consumer)).status_code == 200
        assert client.get(f"/orders/{order.id}", headers=auth_headers(partner)).status_code == 200
        assert client.get(f"/orders/{stranger.id}", headers=auth_headers(consumer)).status_code == 404

    @pytest.mark.api
    def test_my_orders_lists_items(self, client, consumer, order):
        body = client.get("/orders", headers=auth_headers(consumer)).json()

        assert body["total_items"] == 1
        assert body["results"][0]["items"][0]["quantity"] == 2
