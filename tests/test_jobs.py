"""
Scheduled maintenance jobs.
"""
from datetime import datetime, timedelta

import pytest
from sqlmodel import select

from catering_api.jobs.expire_unpaid_orders import expire_unpaid_orders
from catering_api.models.order_event import OrderEvent
from tests.conftest import make_order


class TestExpireUnpaidOrders:

    @pytest.mark.unit
    def test_stale_unpaid_order_is_cancelled(self, session, consumer, store):
        now = datetime(2026, 11, 2, 12, 0)
        stale = make_order(session, user=consumer, store=store, payment_status="pending",
                           created_at=now - timedelta(hours=30))
        fresh = make_order(session, user=consumer, store=store, payment_status="pending",
                           order_number="FRSH0001", created_at=now - timedelta(hours=1))
        paid = make_order(session, user=consumer, store=store, payment_status="paid",
                          order_number="PAID0001", created_at=now - timedelta(hours=30))

        assert expire_unpaid_orders(session, now=now) == 1

        session.refresh(stale)
        session.refresh(fresh)
        session.refresh(paid)
        assert stale.status == "cancelled"
        assert stale.cancel_reason == "결제 대기 시간 초과"
        assert fresh.status == "pending"
        assert paid.status == "pending"

        events = session.exec(select(OrderEvent).where(OrderEvent.order_id == stale.id)).all()
        assert [e.event_type for e in events] == ["cancelled"]

    @pytest.mark.unit
    def test_nothing_to_expire(self, session):
        assert expire_unpaid_orders(session) == 0
