"""
Customer to store chat and order reviews.
"""
import pytest

from catering_api.models.order_item import OrderItem
from tests.conftest import _user, auth_headers, make_order


class TestChat:

    @pytest.mark.api
    def test_room_is_reused(self, client, consumer, store):
        headers = auth_headers(consumer)
        first = client.post("/chat/rooms", json={"store_id": store.id}, headers=headers).json()
        second = client.post("/chat/rooms", json={"store_id": store.id}, headers=headers).json()

        assert first["id"] == second["id"]
        assert first["partner_id"] == store.owner_id

    @pytest.mark.api
    def test_own_store_is_refused(self, client, partner, store):
        response = client.post("/chat/rooms", json={"store_id": store.id}, headers=auth_headers(partner))
        assert response.status_code == 400

    @pytest.mark.api
    def test_messages_and_unread(self, client, consumer, partner, store, outbound):
        room_id = client.post("/chat/rooms", json={"store_id": store.id},
                              headers=auth_headers(consumer)).json()["id"]

        client.post(f"/chat/rooms/{room_id}/messages", json={"content": "내일 배송 가능할까요?"},
                    headers=auth_headers(consumer))
        client.post(f"/chat/rooms/{room_id}/messages", json={"content": "추가 문의드립니다"},
                    headers=auth_headers(consumer))

        rooms = client.get("/chat/rooms", headers=auth_headers(partner)).json()
        assert rooms[0]["partner_unread"] == 2
        assert rooms[0]["last_message"] == "추가 문의드립니다"
        assert outbound["chat_push"].call_count == 2

        messages = client.get(f"/chat/rooms/{room_id}/messages", headers=auth_headers(partner)).json()
        assert [m["content"] for m in messages] == ["내일 배송 가능할까요?", "추가 문의드립니다"]

        read = client.post(f"/chat/rooms/{room_id}/read", headers=auth_headers(partner)).json()
        assert read["partner_unread"] == 0

    @pytest.mark.api
    def test_outsider_cannot_read(self, client, session, consumer, store):
        room_id = client.post("/chat/rooms", json={"store_id": store.id},
                              headers=auth_headers(consumer)).json()["id"]
        outsider = _user(session, email="other@example.com", name="타인", role="consumer")

        response = client.get(f"/chat/rooms/{room_id}/messages", headers=auth_headers(outsider))
        assert response.status_code == 404

    @pytest.mark.api
    def test_empty_message(self, client, consumer, store):
        room_id = client.post("/chat/rooms", json={"store_id": store.id},
                              headers=auth_headers(consumer)).json()["id"]
        response = client.post(f"/chat/rooms/{room_id}/messages", json={"content": "   "},
                               headers=auth_headers(consumer))
        assert response.status_code == 400


class TestReviews:

    @pytest.fixture
    def completed_order(self, session, consumer, store, product):
        order = make_order(session, user=consumer, store=store, status="completed")
        session.add(OrderItem(order_id=order.id, product_id=product.id, product_name=product.name,
                              quantity=1, item_price=12000))
        session.commit()
        return order

    @pytest.mark.api
    def test_write_review(self, client, consumer, product, completed_order):
        response = client.post("/reviews", json={
            "order_id": completed_order.id, "product_id": product.id,
            "rating": 5, "content": "맛있어요",
        }, headers=auth_headers(consumer))
        assert response.status_code == 200

        summary = client.get(f"/products/{product.id}/reviews").json()
        assert summary["average_rating"] == 5.0
        assert summary["review_count"] == 1

    @pytest.mark.api
    def test_duplicate_review(self, client, consumer, product, completed_order):
        body = {"order_id": completed_order.id, "product_id": product.id, "rating": 4, "content": "좋아요"}
        client.post("/reviews", json=body, headers=auth_headers(consumer))

        response = client.post("/reviews", json=body, headers=auth_headers(consumer))
        assert response.status_code == 400

    @pytest.mark.api
    def test_only_completed_orders(self, client, consumer, order):
        response = client.post("/reviews", json={
            "order_id": order.id, "rating": 3, "content": "배송 전",
        }, headers=auth_headers(consumer))
        assert response.status_code == 400

    @pytest.mark.api
    def test_rating_range(self, client, consumer, completed_order):
        response = client.post("/reviews", json={
            "order_id": completed_order.id, "rating": 6, "content": "최고",
        }, headers=auth_headers(consumer))
        assert response.status_code == 422

    @pytest.mark.api
    def test_others_order(self, client, partner, completed_order):
        response = client.post("/reviews", json={
            "order_id": completed_order.id, "rating": 5, "content": "남의 주문",
        }, headers=auth_headers(partner))
        assert response.status_code == 404
