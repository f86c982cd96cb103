import io
from typing import List

from reportlab.lib.pagesizes import A4
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfgen import canvas

from catering_api.constants.order_status import DELIVERY_METHOD_LABELS
from catering_api.models.order import Order
from catering_api.models.order_item import OrderItem
from catering_api.utils.phone import format_price

FONT = "HYSMyeongJo-Medium"
pdfmetrics.registerFont(UnicodeCIDFont(FONT))


def render_order_sheet(order: Order, items: List[OrderItem]) -> bytes:
    """Printable work sheet the partner keeps in the kitchen."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4
    y = height - 50

    c.setFont(FONT, 18)
    c.drawString(50, y, f"주문서 #{order.order_number}")
    y -= 30

    info = order.delivery_info or {}
    lines = [
        f"매장: {order.store_name}",
        f"주문자: {order.orderer or ''} ({order.phone or ''})",
        f"수령 방법: {DELIVERY_METHOD_LABELS.get(order.delivery_method, order.delivery_method)}",
        f"수령 일시: {order.delivery_date or ''} {order.delivery_time or ''}",
    ]
    if info.get("address"):
        lines.append(f"주소: {info.get('address')} {info.get('detailAddress') or ''}")
    if order.request:
        lines.append(f"요청사항: {order.request}")
    if info.get("detailedRequest"):
        lines.append(f"배송 요청: {info.get('detailedRequest')}")

    c.setFont(FONT, 11)
    for line in lines:
        c.drawString(50, y, line)
        y -= 18

    y -= 10
    c.setFont(FONT, 12)
    c.drawString(50, y, "상품")
    y -= 20

    c.setFont(FONT, 11)
    for item in items:
        prefix = "[추가] " if item.is_add_item else ""
        c.drawString(60, y, f"{prefix}{item.product_name} x {item.quantity} = {format_price(item.item_price)}원")
        y -= 16
        for option in item.options or []:
            label = option.get("name") if isinstance(option, dict) else str(option)
            c.drawString(80, y, f"- {label}")
            y -= 14
        if y < 80:
            c.showPage()
            c.setFont(FONT, 11)
            y = height - 50

    y -= 15
    c.setFont(FONT, 12)
    c.drawString(50, y, f"총 수량: {order.total_quantity}개")
    y -= 18
    c.drawString(50, y, f"상품 금액: {format_price(order.total_product_price)}원")

    c.save()
    return buffer.getvalue()
