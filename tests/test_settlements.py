"""
Commission tiers, per-partner grouping and the xlsx export.
"""
from datetime import datetime, timedelta

import pytest
from openpyxl import load_workbook

from catering_api.services import settlement_service
from tests.conftest import auth_headers, make_order


def completed_orders(session, consumer, store, count, price=10000):
    base = datetime(2026, 10, 1)
    orders = []
    for i in range(count):
        orders.append(
            make_order(
                session, user=consumer, store=store, status="completed",
                order_number=f"ORD{i:05d}", total_product_price=price,
                settlement_status="pending", created_at=base + timedelta(hours=i),
            )
        )
    return orders


class TestFeeRate:

    @pytest.mark.unit
    @pytest.mark.parametrize("index, rate", [(1, 0.03), (5, 0.03), (6, 0.13), (40, 0.13)])
    def test_tiers(self, index, rate):
        assert settlement_service.fee_rate(index) == rate


class TestBuildSettlements:

    @pytest.mark.unit
    def test_first_five_orders_discounted(self, session, consumer, store):
        completed_orders(session, consumer, store, 6)

        partners = settlement_service.build_settlements(session)

        assert len(partners) == 1
        rows = partners[0]["orders"]
        assert [r["feeRate"] for r in rows] == [3, 3, 3, 3, 3, 13]
        assert rows[0]["fee"] == 300
        assert rows[-1]["fee"] == 1300
        assert rows[-1]["settlementAmount"] == 8700
        assert partners[0]["totalFee"] == 300 * 5 + 1300
        assert partners[0]["pendingCount"] == 6

    @pytest.mark.unit
    def test_unpaid_and_open_orders_excluded(self, session, consumer, store):
        make_order(session, user=consumer, store=store, status="completed", payment_status="pending")
        make_order(session, user=consumer, store=store, status="shipping", order_number="SHIP0001")

        assert settlement_service.build_settlements(session) == []

    @pytest.mark.unit
    def test_complete_marks_orders(self, session, consumer, store):
        orders = completed_orders(session, consumer, store, 2)

        updated = settlement_service.complete_settlements(session, [orders[0].id])
        partners = settlement_service.build_settlements(session)

        assert updated == 1
        assert partners[0]["completedCount"] == 1
        assert partners[0]["orders"][0]["settlementStatus"] == "completed"
        assert partners[0]["orders"][0]["settlementDate"] is not None

    @pytest.mark.unit
    def test_export_has_two_sheets(self, session, consumer, store):
        completed_orders(session, consumer, store, 3)

        buffer = settlement_service.export_settlements(settlement_service.build_settlements(session))
        workbook = load_workbook(buffer)

        assert workbook.sheetnames == ["Partners", "Orders"]
        assert workbook["Orders"].max_row == 4


class TestSettlementRoutes:

    @pytest.mark.api
    def test_partner_sees_own_totals(self, client, session, consumer, partner, store):
        completed_orders(session, consumer, store, 2)

        response = client.get("/partner/settlements", headers=auth_headers(partner))

        assert response.status_code == 200
        assert response.json()["totalSales"] == 20000

    @pytest.mark.api
    def test_partner_without_orders(self, client, partner):
        response = client.get("/partner/settlements", headers=auth_headers(partner))
        assert response.json()["orders"] == []

    @pytest.mark.api
    def test_admin_export_is_xlsx(self, client, session, consumer, admin, store):
        completed_orders(session, consumer, store, 1)

        response = client.get("/admin/settlements/export", headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )

    @pytest.mark.api
    def test_complete_requires_ids(self, client, admin):
        response = client.post("/admin/settlements/complete", json={"orderIds": []}, headers=auth_headers(admin))
        assert response.status_code == 400
