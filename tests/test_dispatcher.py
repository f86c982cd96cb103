"""
Order notification fan-out and the records it leaves behind.
"""
import pytest
from sqlmodel import select

from catering_api.models.notifications import Notification
from catering_api.notifications import OrderEvent, dispatch_order_event
from catering_api.services import order_notifications


class TestDispatch:

    @pytest.mark.unit
    def test_order_placed_channels(self, session, order, outbound):
        results = order_notifications.notify_order_placed(session, order)

        assert results == {
            "alimtalk_partner": True,
            "alimtalk_customer": True,
            "push_partner": True,
            "push_customer": True,
            "inapp_admin": True,
        }
        pushed = sorted(c.kwargs["user_id"] for c in outbound["push"].call_args_list)
        assert pushed == sorted([order.user_id, order.partner_id])
        customer_push = next(c for c in outbound["push"].call_args_list if c.kwargs["user_id"] == order.user_id)
        assert customer_push.kwargs["title"] == "주문이 완료되었습니다"
        phones = sorted(c.args[0] for c in outbound["alimtalk"].call_args_list)
        assert phones == ["01011112222", "01033334444"]

        rows = session.exec(select(Notification)).all()
        assert {r.recipient_role.value for r in rows} == {"partner", "customer", "admin"}

    @pytest.mark.unit
    def test_failing_channel_recorded_not_raised(self, session, order, outbound):
        outbound["alimtalk"].side_effect = RuntimeError("aligo down")

        results = order_notifications.notify_order_placed(session, order)

        assert results["alimtalk_partner"] is False
        failed = session.exec(select(Notification).where(Notification.status == "failed")).all()
        assert len(failed) == 2

    @pytest.mark.unit
    def test_push_without_token_counts_as_sent(self, session, order, outbound):
        outbound["push"].return_value = {"success": True, "message": "No FCM token available"}

        results = order_notifications.notify_order_placed(session, order)

        assert results["push_customer"] is True
        pushes = session.exec(select(Notification).where(Notification.channel == "push")).all()
        assert {p.status.value for p in pushes} == {"sent"}

    @pytest.mark.unit
    def test_customer_suppressed(self, session, order, outbound):
        results = dispatch_order_event(
            event=OrderEvent.ORDER_PLACED,
            order=order,
            session=session,
            extra={"partner_template": "UD_0958", "customer_template": "UD_3466", "variables": {}},
            notify_customer=False,
        )

        assert "alimtalk_customer" not in results
        assert outbound["alimtalk"].call_count == 1

    @pytest.mark.unit
    def test_cancellation_sms(self, session, order, outbound):
        order_notifications.notify_order_cancelled(session, order, reason="재료 소진", refund_amount=24000)

        message = outbound["sms"].call_args.args[1]
        assert order.order_number in message
        assert "24,000" in message


class TestSendOrderNotification:

    @pytest.mark.unit
    def test_partner_sms_fallback(self, session, outbound):
        outbound["alimtalk"].return_value = False
        variables = order_notifications.order_variables(
            store_name="행복", order_number="AB12", total_quantity=3, total_product_price=36000,
        )

        result = order_notifications.send_order_notification(
            session, partner_phone="010-3333-4444", customer_phone=None, variables=variables,
        )

        assert result["partner"] is False
        assert result["partner_sms"] is True
        assert "36,000" in outbound["sms"].call_args.args[1]
