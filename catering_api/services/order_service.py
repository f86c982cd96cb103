import logging
import secrets
import string
from datetime import datetime
from typing import Iterable, List, Optional

from sqlmodel import Session, select

from catering_api.constants.order_status import (
    CANCELLED_STATUSES,
    ConfirmationType,
    OrderStatus,
    PaymentStatus,
    SettlementStatus,
    can_transition,
)
from catering_api.exceptions import CateringError, NotFoundError, OrderStateError
from catering_api.models.cart import CartItem
from catering_api.models.order import Order
from catering_api.models.order_item import OrderItem
from catering_api.models.payment import Payment
from catering_api.models.store import Store
from catering_api.models.user import User
from catering_api.services import order_notifications, task_scheduler
from catering_api.services.coupon_service import cancel_coupon_usage
from catering_api.services.order_event_service import log_order_event
from catering_api.services.point_service import refund_points
from catering_api.services.portone_client import portone

logger = logging.getLogger(__name__)

ORDER_NUMBER_ALPHABET = string.ascii_uppercase + string.digits
ORDER_NUMBER_LENGTH = 8

STATUS_LABELS = {
    "pending": "Order placed",
    "preparing": "Order accepted",
    "shipping": "Shipping started",
    "completed": "Purchase confirmed",
    "cancelled": "Order cancelled",
    "cancelled_before_accept": "Order cancelled before acceptance",
    "rejected": "Order rejected",
}


def generate_order_number() -> str:
    return "".join(secrets.choice(ORDER_NUMBER_ALPHABET) for _ in range(ORDER_NUMBER_LENGTH))


def get_order_or_404(session: Session, order_id: int) -> Order:
    order = session.get(Order, order_id)
    if not order:
        raise NotFoundError("주문을 찾을 수 없습니다.")
    return order


# ---------------------------------------------------------------------
# ORDER CREATION
# ---------------------------------------------------------------------

def build_order(
    session: Session,
    *,
    user: User,
    store: Store,
    items: Iterable[dict],
    checkout,
) -> Order:
    """
    Create an order with its items from a checkout snapshot.

    ``items`` are dicts with product_id / product_name / quantity /
    item_price (line total) / options. Nothing is committed.
    """
    items = list(items)
    if not items:
        raise CateringError("주문할 상품이 없습니다.")

    partner = session.get(User, store.owner_id)
    info = checkout.order_info

    total_product_price = sum(i["item_price"] for i in items)
    total_quantity = sum(i["quantity"] for i in items)

    order = Order(
        order_number=generate_order_number(),
        user_id=user.id,
        store_id=store.id,
        partner_id=store.owner_id,
        store_name=store.name,
        product_name=checkout.product_name or items[0]["product_name"],
        orderer=info.orderer or user.name,
        phone=info.phone or user.phone,
        partner_phone=checkout.partner_phone or (partner.phone if partner else None) or store.phone,
        request=checkout.request,
        total_product_price=total_product_price,
        total_quantity=total_quantity,
        delivery_fee=checkout.delivery_fee,
        total_price=checkout.total_price or (total_product_price + checkout.delivery_fee),
        used_point=checkout.use_point,
        delivery_method=checkout.delivery_method,
        parcel_payment_method=checkout.parcel_payment_method,
        delivery_info={
            "recipient": checkout.recipient or info.orderer,
            "recipientPhone": info.phone,
            "addressName": checkout.address_name,
            "address": info.address,
            "detailAddress": info.detail_address,
            "zipCode": info.zip_code,
            "deliveryDate": info.delivery_date.isoformat() if info.delivery_date else None,
            "deliveryTime": info.delivery_time,
            "deliveryRequest": checkout.delivery_request,
            "detailedRequest": checkout.detailed_request,
            "entranceCode": checkout.entrance_code,
        },
        delivery_date=info.delivery_date,
        delivery_time=info.delivery_time,
        order_dates=[{"date": datetime.utcnow().isoformat(), "type": "order"}],
    )
    session.add(order)
    session.flush()

    for item in items:
        session.add(
            OrderItem(
                order_id=order.id,
                product_id=item.get("product_id"),
                product_name=item["product_name"],
                quantity=item["quantity"],
                item_price=item["item_price"],
                options=item.get("options"),
                payment_id=item.get("payment_id"),
                is_add_item=item.get("is_add_item", False),
            )
        )

    log_order_event(session, order.id, "created", STATUS_LABELS["pending"], created_by=f"user:{user.id}")
    return order


def cart_items_to_order_items(cart_items: List[CartItem]) -> List[dict]:
    return [
        {
            "product_id": c.product_id,
            "product_name": c.product_name,
            "quantity": c.quantity,
            "item_price": c.item_price * c.quantity,
            "options": c.options,
        }
        for c in cart_items
    ]


def load_cart_items(session: Session, user_id: int, cart_item_ids: List[int]) -> List[CartItem]:
    cart_items = session.exec(
        select(CartItem)
        .where(CartItem.user_id == user_id)
        .where(CartItem.id.in_(cart_item_ids))
    ).all()

    if not cart_items:
        raise NotFoundError("장바구니 상품을 찾을 수 없습니다.")

    if len({c.store_id for c in cart_items}) > 1:
        raise CateringError("한 번에 한 매장의 상품만 주문할 수 있습니다.")

    return cart_items


def create_pending_order(session: Session, *, user: User, cart_item_ids: List[int], checkout) -> Order:
    """Unpaid order created before the payment window opens."""
    cart_items = load_cart_items(session, user.id, cart_item_ids)

    store = session.get(Store, cart_items[0].store_id)
    if not store:
        raise NotFoundError("Store not found")

    order = build_order(
        session,
        user=user,
        store=store,
        items=cart_items_to_order_items(cart_items),
        checkout=checkout,
    )
    session.commit()
    session.refresh(order)

    logger.info(f"Pending order {order.order_number} created for user {user.id}")
    return order


# ---------------------------------------------------------------------
# STATUS UPDATES
# ---------------------------------------------------------------------

def update_status(
    session: Session,
    *,
    order_id: Optional[int],
    status: Optional[str],
    tracking_info: Optional[dict] = None,
    actor: Optional[User] = None,
) -> Order:
    if not order_id or not status:
        raise OrderStateError("필수 파라미터가 누락되었습니다.")

    if status not in OrderStatus.__members__:
        raise OrderStateError(f"Invalid status: {status}")

    order = get_order_or_404(session, order_id)

    if actor and actor.role != "admin" and order.partner_id != actor.id:
        raise CateringError("본인 매장의 주문만 변경할 수 있습니다.", status_code=403)

    if not can_transition(order.status, status):
        raise OrderStateError(f"Cannot change order status from {order.status} to {status}")

    created_by = f"{actor.role}:{actor.id}" if actor else "system"

    if status in CANCELLED_STATUSES:
        return cancel_order(session, order, target_status=status, created_by=created_by)

    now = datetime.utcnow()
    previous = order.status
    order.status = status
    order.updated_at = now

    if tracking_info:
        order.tracking_info = tracking_info

    if status == OrderStatus.shipping.value:
        order.shipping_completed_at = now
        _schedule_completion_tasks(order)

    if status == OrderStatus.completed.value:
        order.completed_at = now
        order.settlement_status = SettlementStatus.pending.value

    session.add(order)
    log_order_event(
        session,
        order.id,
        status,
        STATUS_LABELS[status],
        created_by=created_by,
        meta={"from": previous, "tracking_info": tracking_info} if tracking_info else {"from": previous},
    )
    session.commit()
    session.refresh(order)

    logger.info(f"Order {order.id} status {previous} -> {status}")

    if status == OrderStatus.shipping.value:
        order_notifications.notify_shipping_started(session, order)

    return order


def _schedule_completion_tasks(order: Order):
    if not order.delivery_date:
        logger.info(f"Order {order.id} has no delivery date, completion tasks not scheduled")
        return

    try:
        notification_task_id, auto_complete_task_id = task_scheduler.schedule_order_completion_tasks(
            order.id, order.delivery_method, order.delivery_date, order.delivery_time,
        )
    except Exception:
        # status change still goes through
        logger.exception(f"Failed to schedule completion tasks for order {order.id}")
        return

    order.notification_task_id = notification_task_id
    order.auto_complete_task_id = auto_complete_task_id
    order.notification_sent = False


def _cancel_completion_tasks(order: Order):
    for task_id in (order.notification_task_id, order.auto_complete_task_id):
        if task_id and not task_scheduler.cancel_task(task_id):
            logger.warning(f"Could not cancel task {task_id} for order {order.id}")


# ---------------------------------------------------------------------
# CONFIRMATION
# ---------------------------------------------------------------------

def confirm_order(session: Session, *, order_id: Optional[int], uid: Optional[int]) -> Order:
    if not order_id or not uid:
        raise OrderStateError("필수 파라미터가 누락되었습니다.")

    order = get_order_or_404(session, order_id)

    if order.user_id != uid:
        raise CateringError("본인의 주문만 구매확정할 수 있습니다.", status_code=403)

    if order.status != OrderStatus.shipping.value:
        raise OrderStateError("배송·픽업중 상태에서만 구매확정이 가능합니다.")

    if order.confirmed_at:
        raise OrderStateError("이미 구매확정된 주문입니다.")

    _cancel_completion_tasks(order)

    now = datetime.utcnow()
    order.status = OrderStatus.completed.value
    order.confirmed_at = now
    order.completed_at = now
    order.confirmation_type = ConfirmationType.manual.value
    order.settlement_status = SettlementStatus.pending.value
    order.updated_at = now

    session.add(order)
    log_order_event(session, order.id, "completed", STATUS_LABELS["completed"], created_by=f"user:{uid}")
    session.commit()
    session.refresh(order)

    logger.info(f"Order {order.id} confirmed by user {uid}")
    order_notifications.notify_order_confirmed(session, order)
    return order


def _skipped(message: str) -> dict:
    return {"success": True, "message": message, "skipped": True}


def auto_complete(session: Session, order_id: Optional[int]) -> dict:
    """Callback target of the auto-complete task. Skips rather than fails."""
    if not order_id:
        raise OrderStateError("orderId가 필요합니다.")

    order = session.get(Order, order_id)
    if not order:
        logger.info(f"Auto-complete: order {order_id} not found")
        return _skipped("주문을 찾을 수 없습니다.")

    if order.status == OrderStatus.completed.value or order.confirmed_at:
        return _skipped("이미 구매확정되어 자동완료를 스킵합니다.")

    if order.status in CANCELLED_STATUSES:
        return _skipped("취소된 주문이어서 자동완료를 스킵합니다.")

    if order.status != OrderStatus.shipping.value:
        return _skipped("배송중 상태가 아니어서 자동완료를 스킵합니다.")

    now = datetime.utcnow()
    order.status = OrderStatus.completed.value
    order.confirmed_at = now
    order.completed_at = now
    order.confirmation_type = ConfirmationType.auto.value
    order.settlement_status = SettlementStatus.pending.value
    order.updated_at = now

    session.add(order)
    log_order_event(session, order.id, "completed", "Purchase auto-confirmed")
    session.commit()
    session.refresh(order)

    logger.info(f"Order {order.id} auto-completed")
    order_notifications.notify_auto_confirmed(session, order)

    return {"success": True, "message": "자동 구매확정이 완료되었습니다."}


def send_confirmation_reminder(session: Session, order_id: Optional[int]) -> dict:
    if not order_id:
        raise OrderStateError("orderId가 필요합니다.")

    order = session.get(Order, order_id)
    if not order:
        return _skipped("주문을 찾을 수 없습니다.")

    if order.status == OrderStatus.completed.value or order.confirmed_at:
        return _skipped("이미 구매확정되어 알림 발송을 스킵합니다.")

    if order.status != OrderStatus.shipping.value:
        return _skipped("배송중 상태가 아니어서 알림 발송을 스킵합니다.")

    order_notifications.notify_confirm_reminder(session, order)

    order.notification_sent = True
    order.notification_sent_at = datetime.utcnow()
    session.add(order)
    session.commit()

    return {"success": True, "message": "구매확정 안내 알림을 발송했습니다."}


# ---------------------------------------------------------------------
# CANCELLATION
# ---------------------------------------------------------------------

def _refund_payments(session: Session, order: Order, reason: str) -> int:
    """
    Cancel every live gateway payment of the order, returns the refunded total.

    Each refund is committed as soon as the gateway accepts it, so a failure
    part way leaves the order ``partial_cancelled`` and a retry only
    cancels what is still paid.
    """
    payments = session.exec(
        select(Payment)
        .where(Payment.order_id == order.id)
        .where(Payment.status == PaymentStatus.paid.value)
        .order_by(Payment.id)
    ).all()

    refunded = 0
    for payment in payments:
        try:
            portone.cancel_payment(imp_uid=payment.txn_id, reason=reason)
        except Exception:
            logger.error(f"Refund of {payment.txn_id} failed for order {order.id}")
            if refunded:
                order.payment_status = PaymentStatus.partial_cancelled.value
                order.updated_at = datetime.utcnow()
                session.add(order)
                session.commit()
            raise

        payment.status = PaymentStatus.cancelled.value
        payment.cancelled_at = datetime.utcnow()
        payment.cancelled_amount = payment.amount
        session.add(payment)
        session.commit()
        refunded += payment.amount

    return refunded


def cancel_order(
    session: Session,
    order: Order,
    *,
    target_status: str = OrderStatus.cancelled.value,
    reason: Optional[str] = None,
    created_by: str = "system",
) -> Order:
    """
    Cancel or reject an order.

    Paid payments are cancelled at the gateway first; a gateway failure
    keeps the order status (``partial_cancelled`` payment when some
    refunds already went through). Then used points come back, the coupon
    becomes available again and pending completion tasks are dropped.
    """
    if order.status in CANCELLED_STATUSES:
        raise OrderStateError("이미 취소된 주문입니다.")

    if not can_transition(order.status, target_status):
        raise OrderStateError(f"Cannot change order status from {order.status} to {target_status}")

    refunded = 0
    if order.payment_status in (PaymentStatus.paid.value, PaymentStatus.partial_cancelled.value):
        refunded = _refund_payments(session, order, reason or "주문 취소")
        order.payment_status = PaymentStatus.cancelled.value

    if order.used_point:
        refund_points(
            session,
            user_id=order.user_id,
            amount=order.used_point,
            order_id=order.id,
            product_name=order.product_name,
        )

    cancel_coupon_usage(session, order.coupon_id)
    _cancel_completion_tasks(order)

    now = datetime.utcnow()
    previous = order.status
    order.status = target_status
    order.cancelled_at = now
    order.cancel_reason = reason
    order.updated_at = now
    session.add(order)

    log_order_event(
        session,
        order.id,
        target_status,
        STATUS_LABELS[target_status],
        created_by=created_by,
        meta={"from": previous, "reason": reason, "refunded": refunded},
    )
    session.commit()
    session.refresh(order)

    logger.info(f"Order {order.id} {previous} -> {target_status}, refunded {refunded}")

    order_notifications.notify_order_cancelled(session, order, reason=reason, refund_amount=refunded)
    return order


def cancel_order_by_customer(session: Session, *, order_id: int, user: User, reason: Optional[str] = None) -> Order:
    order = get_order_or_404(session, order_id)

    if order.user_id != user.id:
        raise CateringError("본인의 주문만 취소할 수 있습니다.", status_code=403)

    if order.status == OrderStatus.pending.value:
        target_status = OrderStatus.cancelled_before_accept.value
    elif order.status == OrderStatus.preparing.value:
        target_status = OrderStatus.cancelled.value
    else:
        raise OrderStateError("배송이 시작된 주문은 취소할 수 없습니다.")

    return cancel_order(
        session,
        order,
        target_status=target_status,
        reason=reason or "고객 요청에 의한 취소",
        created_by=f"user:{user.id}",
    )
