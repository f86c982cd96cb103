"""
Coupon pricing, issuing and expiry, and the point ledger.
"""
from datetime import datetime, timedelta

import pytest
from sqlmodel import select

from catering_api.exceptions import CateringError
from catering_api.models.coupon import Coupon, UserCoupon
from catering_api.models.point import PointHistory
from catering_api.services import coupon_service, point_service
from tests.conftest import auth_headers


@pytest.fixture
def percent_coupon(session):
    coupon = Coupon(name="10% 할인", type="percentage", value=10, min_order_amount=10000,
                    max_discount_amount=5000, valid_days=7)
    session.add(coupon)
    session.commit()
    session.refresh(coupon)
    return coupon


class TestCalculateDiscount:

    @pytest.mark.unit
    def test_below_minimum(self, percent_coupon):
        assert coupon_service.calculate_discount(percent_coupon, 9000) == 0

    @pytest.mark.unit
    def test_percentage_floors(self, percent_coupon):
        assert coupon_service.calculate_discount(percent_coupon, 12345) == 1234

    @pytest.mark.unit
    def test_percentage_capped(self, percent_coupon):
        assert coupon_service.calculate_discount(percent_coupon, 100000) == 5000

    @pytest.mark.unit
    def test_fixed_never_exceeds_amount(self):
        coupon = Coupon(name="정액", type="fixed", value=5000)
        assert coupon_service.calculate_discount(coupon, 3000) == 3000

    @pytest.mark.unit
    def test_format_value(self, percent_coupon):
        assert coupon_service.format_coupon_value(percent_coupon) == "10%"
        assert coupon_service.format_coupon_value(Coupon(name="x", type="fixed", value=3000)) == "3,000원"


class TestIssueAndUse:

    @pytest.mark.unit
    def test_issue_snapshots_template(self, session, consumer, percent_coupon):
        issued = coupon_service.issue_coupon(session, coupon_id=percent_coupon.id, user_id=consumer.id)

        assert issued.coupon_name == "10% 할인"
        assert issued.status == "available"
        assert issued.expires_at - issued.issued_at == timedelta(days=7)

    @pytest.mark.unit
    def test_inactive_template_not_issued(self, session, consumer, percent_coupon):
        percent_coupon.is_active = False
        session.add(percent_coupon)
        session.commit()

        with pytest.raises(CateringError):
            coupon_service.issue_coupon(session, coupon_id=percent_coupon.id, user_id=consumer.id)

    @pytest.mark.unit
    def test_use_then_cancel(self, session, consumer, percent_coupon):
        issued = coupon_service.issue_coupon(session, coupon_id=percent_coupon.id, user_id=consumer.id)

        coupon_service.use_coupon(session, user_coupon_id=issued.id, user_id=consumer.id, order_id=10)
        assert issued.status == "used"

        with pytest.raises(CateringError):
            coupon_service.use_coupon(session, user_coupon_id=issued.id, user_id=consumer.id, order_id=11)

        coupon_service.cancel_coupon_usage(session, issued.id)
        assert issued.status == "available"
        assert issued.order_id is None

    @pytest.mark.unit
    def test_expire_coupons(self, session, consumer, percent_coupon):
        old = UserCoupon(
            user_id=consumer.id, coupon_id=percent_coupon.id, coupon_name="old", type="fixed", value=1000,
            expires_at=datetime.utcnow() - timedelta(days=1),
        )
        fresh = UserCoupon(
            user_id=consumer.id, coupon_id=percent_coupon.id, coupon_name="fresh", type="fixed", value=1000,
            expires_at=datetime.utcnow() + timedelta(days=1),
        )
        session.add(old)
        session.add(fresh)
        session.commit()

        assert coupon_service.expire_coupons(session) == 1
        assert [c.coupon_name for c in coupon_service.get_available_coupons(session, consumer.id)] == ["fresh"]


class TestPoints:

    @pytest.mark.unit
    def test_use_and_refund_keep_balance_in_sync(self, session, consumer):
        point_service.use_points(session, user_id=consumer.id, amount=1500, order_id=None)
        point_service.refund_points(session, user_id=consumer.id, amount=500, order_id=None)
        session.commit()
        session.refresh(consumer)

        assert consumer.point == 4000
        entries = session.exec(select(PointHistory).order_by(PointHistory.id)).all()
        assert [(e.amount, e.type) for e in entries] == [(-1500, "used"), (500, "refunded")]

    @pytest.mark.unit
    def test_zero_amount_is_noop(self, session, consumer):
        assert point_service.use_points(session, user_id=consumer.id, amount=0) is None


class TestCouponRoutes:

    @pytest.mark.api
    def test_admin_creates_and_issues(self, client, admin, consumer):
        created = client.post(
            "/admin/coupons",
            json={"name": "첫 주문", "type": "fixed", "value": 3000, "valid_days": 14},
            headers=auth_headers(admin),
        )
        assert created.status_code == 200

        issued = client.post(
            f"/admin/coupons/{created.json()['id']}/issue",
            json={"user_ids": [consumer.id]},
            headers=auth_headers(admin),
        )
        assert issued.json()["issued"] == 1

        available = client.get("/coupons/available?amount=20000", headers=auth_headers(consumer))
        assert available.status_code == 200
        body = available.json()
        assert body[0]["discount"] == 3000
        assert body[0]["display_value"] == "3,000원"

    @pytest.mark.api
    def test_percentage_over_100_rejected(self, client, admin):
        response = client.post(
            "/admin/coupons",
            json={"name": "x", "type": "percentage", "value": 120},
            headers=auth_headers(admin),
        )
        assert response.status_code == 400

    @pytest.mark.api
    def test_consumer_cannot_manage_coupons(self, client, consumer):
        response = client.get("/admin/coupons", headers=auth_headers(consumer))
        assert response.status_code == 403
