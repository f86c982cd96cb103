import logging
from typing import Optional

from sqlmodel import Session

from catering_api.constants import alimtalk
from catering_api.models.order import Order
from catering_api.notifications import OrderEvent, dispatch_order_event
from catering_api.services import aligo_client, fcm_service
from catering_api.utils.phone import format_price, normalize_phone
from catering_api.utils.template import render_template

logger = logging.getLogger(__name__)


def order_variables(
    *,
    store_name: str,
    order_number: str,
    total_quantity: int,
    total_product_price: int,
    additional_quantity: int = 0,
    additional_product_price: int = 0,
) -> dict:
    return {
        "storeName": store_name or "",
        "orderNumber": order_number,
        "totalQuantity": str(total_quantity),
        "totalProductPrice": format_price(total_product_price),
        "additionalQuantity": str(additional_quantity),
        "additionalProductPrice": format_price(additional_product_price),
    }


def send_order_alimtalk(
    *,
    partner_phone: Optional[str],
    customer_phone: Optional[str],
    is_additional: bool,
    variables: dict,
) -> dict:
    """Order alimtalk without an order row, for callers that already hold the numbers."""
    partner_template, customer_template = alimtalk.order_templates(is_additional)
    result = {"partner": False, "customer": False}

    if partner_phone:
        result["partner"] = aligo_client.send_alimtalk(
            normalize_phone(partner_phone), partner_template, variables
        )
    if customer_phone:
        result["customer"] = aligo_client.send_alimtalk(
            normalize_phone(customer_phone), customer_template, variables
        )
    return result


def _first_product_name(order: Order) -> str:
    if order.items:
        return order.items[0].product_name
    return order.product_name or "상품"


def notify_order_placed(session: Session, order: Order, *, is_additional: bool = False):
    additional_items = [i for i in order.items if i.is_add_item] if is_additional else []

    variables = order_variables(
        store_name=order.store_name,
        order_number=order.order_number,
        total_quantity=order.total_quantity,
        total_product_price=order.total_product_price,
        additional_quantity=sum(i.quantity for i in additional_items),
        additional_product_price=sum(i.item_price or 0 for i in additional_items),
    )
    partner_template, customer_template = alimtalk.order_templates(is_additional)

    return dispatch_order_event(
        event=OrderEvent.ADDITIONAL_ORDER_PLACED if is_additional else OrderEvent.ORDER_PLACED,
        order=order,
        session=session,
        extra={
            "partner_template": partner_template,
            "customer_template": customer_template,
            "variables": variables,
            "partner_push_title": "추가 주문이 접수되었습니다" if is_additional else "새 주문이 접수되었습니다",
            "push_title": "주문이 완료되었습니다",
            "push_body": f"주문번호 {order.order_number}",
            "partner_push_body": f"주문번호 {order.order_number} / {variables['totalProductPrice']}원",
            "push_data": {"type": "ORDER_PLACED", "orderId": order.id},
            "admin_title": f"New order {order.order_number}",
            "admin_content": f"{order.store_name}: {variables['totalProductPrice']}원",
        },
    )


def notify_order_cancelled(
    session: Session,
    order: Order,
    *,
    reason: Optional[str] = None,
    refund_amount: int = 0,
):
    message = render_template(
        "sms/order_cancelled.txt",
        store_name=order.store_name,
        order_number=order.order_number,
        reason=reason,
        refund_amount=format_price(refund_amount) if refund_amount else None,
    )

    return dispatch_order_event(
        event=OrderEvent.ORDER_CANCELLED,
        order=order,
        session=session,
        extra={
            "sms_message": message,
            "push_title": "주문이 취소되었습니다",
            "push_body": f"{order.store_name} 주문({order.order_number})이 취소되었습니다.",
            "partner_push_title": "주문이 취소되었습니다",
            "partner_push_body": f"주문번호 {order.order_number}",
            "push_data": {"type": "ORDER_CANCELLED", "orderId": order.id},
            "admin_title": f"Order {order.order_number} {order.status}",
            "admin_content": reason or "",
        },
    )


def notify_shipping_started(session: Session, order: Order):
    return dispatch_order_event(
        event=OrderEvent.SHIPPING_STARTED,
        order=order,
        session=session,
        extra={
            "push_title": "상품이 배송되었습니다",
            "push_body": f"{order.store_name}에서 주문하신 상품이 출발했습니다.",
            "push_data": {"type": "ORDER_SHIPPING", "orderId": order.id},
        },
    )


def notify_confirm_reminder(session: Session, order: Order):
    return dispatch_order_event(
        event=OrderEvent.CONFIRM_REMINDER,
        order=order,
        session=session,
        extra={
            "customer_template": alimtalk.ORDER_CONFIRM_REMINDER,
            "variables": {
                "storeName": order.store_name,
                "orderNumber": order.order_number or str(order.id),
                "productName": _first_product_name(order),
            },
            "push_title": "구매확정을 해주세요!",
            "push_body": (
                f"{order.store_name}에서 주문하신 상품이 배송완료 되었습니다. "
                "구매확정을 눌러주세요."
            ),
            "push_data": {
                "type": "ORDER_CONFIRM_REMINDER",
                "orderId": order.id,
                "orderNumber": order.order_number,
            },
        },
    )


def notify_auto_confirmed(session: Session, order: Order):
    return dispatch_order_event(
        event=OrderEvent.AUTO_CONFIRMED,
        order=order,
        session=session,
        extra={
            "customer_template": alimtalk.ORDER_AUTO_CONFIRMED,
            "variables": {
                "storeName": order.store_name,
                "orderNumber": order.order_number or str(order.id),
                "productName": _first_product_name(order),
            },
            "push_title": "구매가 자동 확정되었습니다",
            "push_body": f"{order.store_name}에서 주문하신 상품이 자동으로 구매확정 되었습니다.",
            "push_data": {"type": "ORDER_AUTO_CONFIRMED", "orderId": order.id},
            "admin_title": f"Order {order.order_number} auto-confirmed",
        },
    )


def notify_order_confirmed(session: Session, order: Order):
    return dispatch_order_event(
        event=OrderEvent.ORDER_CONFIRMED,
        order=order,
        session=session,
        extra={
            "partner_push_title": "구매가 확정되었습니다",
            "partner_push_body": f"주문번호 {order.order_number}",
            "push_data": {"type": "ORDER_CONFIRMED", "orderId": order.id},
        },
    )


def send_order_notification(
    session: Session,
    *,
    partner_phone: Optional[str],
    customer_phone: Optional[str],
    partner_id: Optional[int] = None,
    customer_id: Optional[int] = None,
    is_additional: bool = False,
    variables: dict,
) -> dict:
    """
    Order alimtalk for callers holding only the numbers (no order row).

    A partner whose alimtalk fails still gets a plain SMS; pushes go to
    the ids that were given.
    """
    result = send_order_alimtalk(
        partner_phone=partner_phone,
        customer_phone=customer_phone,
        is_additional=is_additional,
        variables=variables,
    )

    if partner_phone and not result["partner"]:
        message = render_template(
            "sms/order_placed.txt",
            store_name=variables.get("storeName"),
            order_number=variables.get("orderNumber"),
            total_quantity=variables.get("totalQuantity"),
            total_product_price=variables.get("totalProductPrice"),
        )
        result["partner_sms"] = aligo_client.send_sms(partner_phone, message)

    pushes = (
        (partner_id, "추가 주문이 접수되었습니다" if is_additional else "새 주문이 접수되었습니다"),
        (customer_id, "주문이 완료되었습니다"),
    )
    for user_id, title in pushes:
        if not user_id:
            continue
        try:
            fcm_service.send_order_push(
                session,
                user_id=user_id,
                title=title,
                body=f"주문번호 {variables.get('orderNumber')}",
                data={"type": "ORDER_PLACED", "orderNumber": variables.get("orderNumber")},
            )
        except Exception:
            logger.exception(f"Order push to user {user_id} failed")

    return result


def send_cancellation_sms(
    *,
    customer_phone: str,
    store_name: str,
    order_number: str,
    reason: Optional[str] = None,
    refund_amount: int = 0,
) -> bool:
    message = render_template(
        "sms/order_cancelled.txt",
        store_name=store_name,
        order_number=order_number,
        reason=reason,
        refund_amount=format_price(refund_amount) if refund_amount else None,
    )
    return aligo_client.send_sms(customer_phone, message)
