import io
import logging
import math
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from sqlmodel import Session, select

from catering_api.config import settings
from catering_api.constants.order_status import OrderStatus, PaymentStatus, SettlementStatus
from catering_api.models.order import Order
from catering_api.models.user import User

logger = logging.getLogger(__name__)


def fee_rate(order_index: int) -> float:
    """Commission for the partner's ``order_index``-th settled order (1-based)."""
    if order_index <= settings.first_orders_count:
        return settings.first_orders_commission_rate
    return settings.standard_commission_rate


def _settleable_orders(session: Session, partner_id: Optional[int] = None) -> List[Order]:
    query = (
        select(Order)
        .where(Order.status == OrderStatus.completed.value)
        .where(Order.payment_status == PaymentStatus.paid.value)
    )
    if partner_id is not None:
        query = query.where(Order.partner_id == partner_id)

    return session.exec(query.order_by(Order.created_at, Order.id)).all()


def _order_row(order: Order, index: int) -> dict:
    rate = fee_rate(index)
    # fees are cut to whole won
    fee = math.floor(order.total_product_price * rate)
    product_name = order.items[0].product_name if order.items else (order.product_name or "상품명 없음")

    return {
        "id": order.id,
        "orderNumber": order.order_number,
        "productName": product_name,
        "totalProductPrice": order.total_product_price,
        "orderDate": order.created_at,
        "settlementStatus": (
            SettlementStatus.completed.value
            if order.settlement_status == SettlementStatus.completed.value
            else SettlementStatus.pending.value
        ),
        "settlementDate": order.settlement_date,
        "orderIndex": index,
        "feeRate": round(rate * 100),
        "fee": fee,
        "settlementAmount": order.total_product_price - fee,
    }


def build_settlements(session: Session, partner_id: Optional[int] = None) -> List[dict]:
    grouped: Dict[int, List[Order]] = defaultdict(list)
    for order in _settleable_orders(session, partner_id):
        grouped[order.partner_id].append(order)

    partners = []
    for pid, orders in grouped.items():
        rows = [_order_row(order, index) for index, order in enumerate(orders, start=1)]
        partner = session.get(User, pid)

        partners.append({
            "partnerId": pid,
            "partnerName": orders[0].store_name or (partner.name if partner else "파트너명 없음"),
            "partnerEmail": partner.email if partner else "",
            "orders": rows,
            "totalSales": sum(r["totalProductPrice"] for r in rows),
            "totalFee": sum(r["fee"] for r in rows),
            "totalSettlement": sum(r["settlementAmount"] for r in rows),
            "pendingCount": sum(1 for r in rows if r["settlementStatus"] == "pending"),
            "completedCount": sum(1 for r in rows if r["settlementStatus"] == "completed"),
        })

    partners.sort(key=lambda p: p["pendingCount"], reverse=True)
    return partners


def complete_settlements(session: Session, order_ids: List[int]) -> int:
    now = datetime.utcnow()
    orders = session.exec(select(Order).where(Order.id.in_(order_ids))).all()

    for order in orders:
        order.settlement_status = SettlementStatus.completed.value
        order.settlement_date = now
        session.add(order)

    session.commit()
    logger.info(f"Settlement completed for {len(orders)} orders")
    return len(orders)


def export_settlements(partners: List[dict]) -> io.BytesIO:
    wb = Workbook()
    thin = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin"),
    )
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill("solid", fgColor="4F81BD")
    center = Alignment(horizontal="center")
    won = "#,##0"

    # Sheet 1: per partner
    ws = wb.active
    ws.title = "Partners"
    ws.append(["파트너", "이메일", "매출", "수수료", "정산금액", "정산대기", "정산완료"])

    for cell in ws[1]:
        cell.font = header_font
        cell.fill = header_fill
        cell.border = thin
        cell.alignment = center

    for p in partners:
        ws.append([
            p["partnerName"], p["partnerEmail"], p["totalSales"], p["totalFee"],
            p["totalSettlement"], p["pendingCount"], p["completedCount"],
        ])

    for row in ws.iter_rows(min_row=2):
        for cell in row[2:5]:
            cell.number_format = won
        for cell in row:
            cell.border = thin

    # Sheet 2: every order
    ws2 = wb.create_sheet("Orders")
    ws2.append(["파트너", "주문번호", "상품명", "주문일", "상품금액", "수수료율(%)", "수수료", "정산금액", "상태"])

    for cell in ws2[1]:
        cell.font = header_font
        cell.fill = header_fill
        cell.border = thin
        cell.alignment = center

    for p in partners:
        for o in p["orders"]:
            ws2.append([
                p["partnerName"],
                o["orderNumber"],
                o["productName"],
                o["orderDate"].strftime("%Y-%m-%d") if o["orderDate"] else "",
                o["totalProductPrice"],
                o["feeRate"],
                o["fee"],
                o["settlementAmount"],
                o["settlementStatus"],
            ])

    for row in ws2.iter_rows(min_row=2):
        for idx in (4, 6, 7):
            row[idx].number_format = won

    buffer = io.BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer
