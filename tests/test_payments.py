"""
Payment flows: mobile redirect completion, process-order after the
gateway callback, the V1 webhook and VAT splitting.
"""
from unittest.mock import patch

import pytest
from sqlmodel import select

from catering_api.exceptions import PaymentGatewayError
from catering_api.models.cart import CartItem
from catering_api.models.order import Order
from catering_api.models.payment import Payment
from catering_api.models.point import PointHistory
from catering_api.schemas.order_schemas import PendingOrderData
from catering_api.services import order_service, payment_service
from catering_api.services.portone_client import portone, split_vat
from tests.conftest import auth_headers, make_order


def paid_envelope(imp_uid="imp_100", amount=24000, merchant_uid="order-1-1700000000000"):
    return {
        "code": 0,
        "message": None,
        "response": {
            "imp_uid": imp_uid,
            "merchant_uid": merchant_uid,
            "status": "paid",
            "amount": amount,
            "pay_method": "card",
        },
    }


class TestMerchantUid:
    """merchant_uid = order-{orderId}-{timestamp}"""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "merchant_uid, expected",
        [
            ("order-42-1700000000000", 42),
            ("order-7", 7),
            ("order-abc-123", None),
            ("", None),
        ],
    )
    def test_order_id_from_merchant_uid(self, merchant_uid, expected):
        assert payment_service.order_id_from_merchant_uid(merchant_uid) == expected


class TestSplitVat:

    @pytest.mark.unit
    def test_split_vat_floors_both_parts(self):
        supply, tax = split_vat(10000)
        assert (supply, tax) == (9090, 909)

    @pytest.mark.unit
    def test_split_vat_odd_amount(self):
        supply, tax = split_vat(24900)
        assert supply == 22636
        assert tax == 2263


class TestCompletePayment:
    """/payments/complete records a payment once."""

    @pytest.mark.unit
    def test_records_payment_and_deducts_points(self, session, consumer, store):
        order = make_order(session, user=consumer, store=store, payment_status="pending", used_point=2000)

        with patch.object(portone, "get_payment", return_value=paid_envelope()):
            result = payment_service.complete_payment(
                session, imp_uid="imp_100", merchant_uid="order-1-1", order_id=order.id
            )

        assert result == {
            "success": True,
            "orderNumber": order.order_number,
            "message": "결제가 완료되었습니다.",
        }
        session.refresh(order)
        session.refresh(consumer)
        assert order.payment_status == "paid"
        assert order.payment_ids == ["imp_100"]
        assert all(item.payment_id == "imp_100" for item in order.items)
        assert consumer.point == 3000

    @pytest.mark.unit
    def test_second_call_is_idempotent(self, session, consumer, store):
        order = make_order(session, user=consumer, store=store, payment_status="pending", used_point=2000)

        with patch.object(portone, "get_payment", return_value=paid_envelope()):
            payment_service.complete_payment(session, imp_uid="imp_100", merchant_uid=None, order_id=order.id)
            payment_service.complete_payment(session, imp_uid="imp_100", merchant_uid=None, order_id=order.id)

        assert len(session.exec(select(Payment)).all()) == 1
        assert len(session.exec(select(PointHistory)).all()) == 1
        session.refresh(order)
        assert order.payment_ids == ["imp_100"]

    @pytest.mark.unit
    def test_gateway_error_code(self, session, order):
        with patch.object(portone, "get_payment", return_value={"code": -1, "message": "없는 결제"}):
            with pytest.raises(PaymentGatewayError) as exc:
                payment_service.complete_payment(session, imp_uid="imp_x", merchant_uid=None, order_id=order.id)
        assert exc.value.status_code == 400


class TestProcessOrder:
    """Order creation after the gateway reported success."""

    def _verified(self, imp_uid="imp_200", amount=24000):
        return {"verified": True, "payment": paid_envelope(imp_uid, amount)["response"]}

    @pytest.mark.unit
    def test_cart_mode_creates_order(self, session, consumer, store, product, outbound):
        cart_item = CartItem(
            user_id=consumer.id, store_id=store.id, product_id=product.id,
            product_name=product.name, quantity=2, item_price=12000, request_note="포크 넣어주세요",
        )
        session.add(cart_item)
        session.commit()

        pending = PendingOrderData.model_validate({
            "orderInfo": {"orderer": "김고객", "phone": "010-1111-2222", "deliveryDate": "2026-11-02",
                          "deliveryTime": "11:30", "address": "서울 강남구 테헤란로 1"},
            "deliveryMethod": "quick",
            "cartIdParam": cart_item.id,
            "totalPrice": 24000,
            "usePoint": 1000,
        })

        with patch.object(portone, "verify_payment", return_value=self._verified()):
            result = payment_service.process_order(
                session, payment_id="imp_200", pending=pending, user=consumer
            )

        order = session.get(Order, result["orderId"])
        assert result["success"] is True
        assert order.total_product_price == 24000
        assert order.request == "포크 넣어주세요"
        assert order.delivery_info["deliveryTime"] == "11:30"
        assert order.payment_status == "paid"
        assert order.items[0].payment_id == "imp_200"
        assert session.get(CartItem, cart_item.id) is None
        assert outbound["alimtalk"].call_count == 2

    @pytest.mark.unit
    def test_existing_payment_returns_same_order(self, session, order):
        session.add(Payment(order_id=order.id, txn_id="imp_300", amount=24000))
        session.commit()

        with patch.object(portone, "verify_payment") as verify:
            result = payment_service.process_order(
                session, payment_id="imp_300", pending=PendingOrderData(), user=None
            )

        verify.assert_not_called()
        assert result["orderId"] == order.id

    @pytest.mark.unit
    def test_unverified_payment_rejected(self, session, consumer, order):
        with patch.object(portone, "verify_payment", return_value={"verified": False, "payment": {}}):
            with pytest.raises(PaymentGatewayError):
                payment_service.process_order(
                    session, payment_id="imp_400", pending=PendingOrderData(orderId=order.id), user=consumer
                )

    @pytest.mark.unit
    def test_additional_order_appends_items(self, session, consumer, store):
        order = make_order(session, user=consumer, store=store, status="preparing")
        pending = PendingOrderData.model_validate({
            "additionalOrderIdParam": order.id,
            "items": [{"productName": "음료 추가", "quantity": 3, "itemPrice": 9000}],
        })

        with patch.object(portone, "verify_payment", return_value=self._verified("imp_500", 9000)):
            payment_service.process_order(session, payment_id="imp_500", pending=pending, user=consumer)

        session.refresh(order)
        assert order.total_product_price == 33000
        assert order.total_quantity == 5
        added = [i for i in order.items if i.is_add_item]
        assert len(added) == 1
        assert added[0].payment_id == "imp_500"
        assert order.payment_ids == ["imp_500"]

    @pytest.mark.unit
    def test_additional_points_are_refunded_on_cancel(self, session, consumer, store):
        order = make_order(session, user=consumer, store=store, status="preparing", used_point=1000)
        pending = PendingOrderData.model_validate({
            "additionalOrderIdParam": order.id,
            "usePoint": 500,
            "items": [{"productName": "디저트 추가", "quantity": 1, "itemPrice": 5000}],
        })

        with patch.object(portone, "verify_payment", return_value=self._verified("imp_600", 4500)):
            payment_service.process_order(session, payment_id="imp_600", pending=pending, user=consumer)

        session.refresh(order)
        session.refresh(consumer)
        assert order.used_point == 1500
        assert consumer.point == 4500

        with patch.object(portone, "cancel_payment", return_value={"status": "cancelled"}):
            order_service.cancel_order_by_customer(session, order_id=order.id, user=consumer)

        session.refresh(consumer)
        ledger = session.exec(
            select(PointHistory).where(PointHistory.order_id == order.id).order_by(PointHistory.id)
        ).all()
        assert [(p.type, p.amount) for p in ledger] == [("used", -500), ("refunded", 1500)]
        assert consumer.point == 6000


class TestWebhook:
    """V1 webhook, quick-delivery dispatch for paid quick orders."""

    @pytest.mark.unit
    def test_v2_webhook_ignored(self, session):
        result = payment_service.handle_webhook(session, {"type": "Transaction.Paid"})
        assert result["message"] == "V2 webhook ignored"

    @pytest.mark.unit
    def test_not_paid_status(self, session):
        result = payment_service.handle_webhook(
            session, {"imp_uid": "imp_1", "merchant_uid": "order-1-1", "status": "ready"}
        )
        assert result["message"] == "Not a paid status"

    @pytest.mark.unit
    def test_quick_order_requests_courier(self, session, consumer, store):
        order = make_order(session, user=consumer, store=store, delivery_method="quick")
        body = {"imp_uid": "imp_9", "merchant_uid": f"order-{order.id}-1700000000000", "status": "paid"}

        with patch.object(portone, "get_access_token", return_value="token"), \
             patch.object(portone, "get_payment", return_value=paid_envelope("imp_9")), \
             patch(
                 "catering_api.services.quick_delivery.request_delivery_for_order",
                 return_value="778899",
             ) as courier:
            result = payment_service.handle_webhook(session, body)

        assert result == {"success": True}
        courier.assert_called_once()
        session.refresh(order)
        assert order.quick_delivery_order_no == "778899"

    @pytest.mark.unit
    def test_courier_failure_still_acknowledged(self, session, consumer, store):
        order = make_order(session, user=consumer, store=store, delivery_method="quick")
        body = {"imp_uid": "imp_9", "merchant_uid": f"order-{order.id}-1", "status": "paid"}

        with patch.object(portone, "get_access_token", return_value="token"), \
             patch.object(portone, "get_payment", return_value=paid_envelope("imp_9")), \
             patch(
                 "catering_api.services.quick_delivery.request_delivery_for_order",
                 side_effect=RuntimeError("courier down"),
             ):
            result = payment_service.handle_webhook(session, body)

        assert result == {"success": True}
        session.refresh(order)
        assert order.quick_delivery_order_no is None


class TestPaymentRoutes:
    """HTTP layer for the payment endpoints."""

    @pytest.mark.api
    def test_prepare_requires_fields(self, client, consumer):
        response = client.post("/payments/prepare", json={"orderId": 1}, headers=auth_headers(consumer))
        assert response.status_code == 400

    @pytest.mark.api
    def test_complete_route(self, client, session, consumer, store):
        order = make_order(session, user=consumer, store=store, payment_status="pending")

        with patch.object(portone, "get_payment", return_value=paid_envelope("imp_700")):
            response = client.post(
                "/payments/complete",
                json={"imp_uid": "imp_700", "merchant_uid": f"order-{order.id}-1", "orderId": order.id},
            )

        assert response.status_code == 200
        assert response.json()["orderNumber"] == order.order_number

    @pytest.mark.api
    def test_gateway_error_body(self, client, order):
        with patch.object(portone, "get_payment", return_value={"code": 1}):
            response = client.post("/payments/complete", json={"imp_uid": "imp_x", "orderId": order.id})

        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.api
    def test_cancel_is_admin_only(self, client, consumer):
        response = client.post(
            "/payments/cancel", json={"imp_uid": "imp_1"}, headers=auth_headers(consumer)
        )
        assert response.status_code == 403
