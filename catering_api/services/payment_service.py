import logging
import re
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from sqlmodel import Session, select

from catering_api.constants.order_status import DeliveryMethod, PaymentStatus
from catering_api.exceptions import CateringError, NotFoundError, PaymentGatewayError
from catering_api.models.cart import CartItem
from catering_api.models.order import Order
from catering_api.models.order_item import OrderItem
from catering_api.models.payment import Payment
from catering_api.models.store import Store
from catering_api.models.user import User
from catering_api.services import order_notifications, quick_delivery
from catering_api.services.coupon_service import calculate_discount, use_coupon
from catering_api.services.order_event_service import log_order_event
from catering_api.services.order_service import (
    build_order,
    cart_items_to_order_items,
    get_order_or_404,
    load_cart_items,
)
from catering_api.services.point_service import use_points
from catering_api.services.portone_client import portone

logger = logging.getLogger(__name__)

# merchant_uid = order-{orderId}-{timestamp}
MERCHANT_PREFIX = re.compile(r"^order-")
MERCHANT_SUFFIX = re.compile(r"-\d+$")


def order_id_from_merchant_uid(merchant_uid: str) -> Optional[int]:
    raw = MERCHANT_SUFFIX.sub("", MERCHANT_PREFIX.sub("", merchant_uid or ""))
    try:
        return int(raw)
    except ValueError:
        return None


def normalize_payment(payment: Dict[str, Any]) -> Dict[str, Any]:
    normalized = dict(payment)
    if isinstance(normalized.get("status"), str):
        normalized["status"] = normalized["status"].lower()
    return normalized


def record_payment(
    *,
    session: Session,
    order: Order,
    txn_id: str,
    gateway_payment: Dict[str, Any],
    kind: str = "regular",
) -> Tuple[Payment, bool]:
    """
    Single place that stores a verified gateway payment.

    Returns ``(payment, created)``. A txn_id that was already recorded
    returns the existing row with ``created=False`` so callers can stop
    before points or coupons are applied twice.
    """
    existing = session.exec(select(Payment).where(Payment.txn_id == txn_id)).first()
    if existing:
        logger.info(f"Payment {txn_id} already recorded for order {existing.order_id}")
        return existing, False

    normalized = normalize_payment(gateway_payment)

    payment = Payment(
        order_id=order.id,
        user_id=order.user_id,
        txn_id=txn_id,
        merchant_uid=normalized.get("merchant_uid"),
        amount=int(normalized.get("amount") or 0),
        method=normalized.get("pay_method"),
        status=PaymentStatus.paid.value,
        kind=kind,
        gateway_response=normalized,
    )
    session.add(payment)

    # JSON columns are reassigned so the change is tracked
    order.payment_ids = [*(order.payment_ids or []), txn_id]
    order.payment_info = [*(order.payment_info or []), normalized]
    order.payment_status = PaymentStatus.paid.value
    order.verified_at = datetime.utcnow()
    order.updated_at = datetime.utcnow()
    session.add(order)

    if payment.amount and order.total_price and kind == "regular" and payment.amount != order.total_price:
        logger.warning(
            f"Order {order.id}: paid amount {payment.amount} differs from order total {order.total_price}"
        )

    return payment, True


def _stamp_items(session: Session, order: Order, txn_id: str):
    for item in order.items:
        item.payment_id = txn_id
        item.is_add_item = False
        session.add(item)


def _apply_points(session: Session, order: Order, amount: int):
    try:
        use_points(
            session,
            user_id=order.user_id,
            amount=amount,
            order_id=order.id,
            product_name=order.product_name,
        )
    except Exception:
        logger.exception(f"Point deduction failed for order {order.id}")


def _send_order_notification(session: Session, order: Order, is_additional: bool = False):
    try:
        order_notifications.notify_order_placed(session, order, is_additional=is_additional)
    except Exception:
        logger.exception(f"Order notification failed for order {order.id}")


# ---------------------------------------------------------------------
# MOBILE REDIRECT
# ---------------------------------------------------------------------

def complete_payment(
    session: Session,
    *,
    imp_uid: Optional[str],
    merchant_uid: Optional[str],
    order_id: Optional[int],
) -> dict:
    if not imp_uid or not order_id:
        raise CateringError("필수 파라미터가 누락되었습니다.")

    envelope = portone.get_payment(imp_uid)
    if envelope.get("code") != 0:
        raise PaymentGatewayError("결제 검증에 실패했습니다.", status_code=400)

    order = session.get(Order, order_id)
    if not order:
        raise NotFoundError("주문 정보를 찾을 수 없습니다.")

    gateway_payment = envelope.get("response") or {}
    if merchant_uid and not gateway_payment.get("merchant_uid"):
        gateway_payment["merchant_uid"] = merchant_uid

    _, created = record_payment(
        session=session, order=order, txn_id=imp_uid, gateway_payment=gateway_payment,
    )

    if created:
        _stamp_items(session, order, imp_uid)
        if order.used_point:
            _apply_points(session, order, order.used_point)
        log_order_event(session, order.id, "paid", "Payment completed", meta={"txn_id": imp_uid})

    session.commit()
    session.refresh(order)

    if created:
        _send_order_notification(session, order)

    return {
        "success": True,
        "orderNumber": order.order_number,
        "message": "결제가 완료되었습니다.",
    }


# ---------------------------------------------------------------------
# PROCESS ORDER
# ---------------------------------------------------------------------

def _create_from_cart(session: Session, user: User, pending, cart_items) -> Order:
    store_id = pending.store_id or cart_items[0].store_id
    store = session.get(Store, store_id)
    if not store:
        raise NotFoundError("Store not found")

    order = build_order(
        session,
        user=user,
        store=store,
        items=cart_items_to_order_items(cart_items),
        checkout=pending,
    )

    if pending.request is None:
        order.request = next((c.request_note for c in cart_items if c.request_note), None)
    if pending.delivery_method != DeliveryMethod.parcel.value:
        order.parcel_payment_method = None

    return order


def _append_additional_items(session: Session, order: Order, pending, txn_id: str):
    if not pending.items:
        raise CateringError("추가 주문 상품이 없습니다.")

    added_quantity = 0
    added_price = 0
    for item in pending.items:
        session.add(
            OrderItem(
                order_id=order.id,
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                item_price=item.item_price,
                options=item.options,
                payment_id=txn_id,
                is_add_item=True,
            )
        )
        added_quantity += item.quantity
        added_price += item.item_price

    order.total_product_price += pending.total_product_price or added_price
    order.total_quantity += added_quantity
    order.total_price += pending.total_price or added_price
    order.order_dates = [
        *(order.order_dates or []),
        {"type": "additional", "createdAt": datetime.utcnow().isoformat(), "paymentId": txn_id},
    ]
    session.add(order)


def process_order(session: Session, *, payment_id: Optional[str], pending, user: User) -> dict:
    """
    Persist an order after the gateway reported success.

    cart mode       cart item ids, no additional order: create the order
    additional mode ``additionalOrderIdParam``: append add-on items
    existing mode   ``orderId`` of an already created pending order
    """
    if pending is None:
        raise CateringError("pendingOrderData가 필요합니다.")
    if not payment_id:
        raise CateringError("paymentId가 필요합니다.")

    already = session.exec(select(Payment).where(Payment.txn_id == payment_id)).first()
    if already:
        order = session.get(Order, already.order_id)
        return {"success": True, "orderNumber": order.order_number, "orderId": order.id}

    verification = portone.verify_payment(payment_id)
    if not verification["verified"]:
        raise PaymentGatewayError("결제가 완료되지 않았습니다.", status_code=400)
    gateway_payment = verification["payment"]

    cart_ids = pending.all_cart_item_ids()
    is_additional = bool(pending.additional_order_id_param)
    cart_items = []

    if cart_ids and not is_additional:
        cart_items = load_cart_items(session, user.id, cart_ids)
        order = _create_from_cart(session, user, pending, cart_items)
        order.order_dates = [
            {"type": "regular", "createdAt": datetime.utcnow().isoformat(), "paymentId": payment_id}
        ]
        session.flush()
        for item in session.exec(select(OrderItem).where(OrderItem.order_id == order.id)).all():
            item.payment_id = payment_id
            session.add(item)

    elif is_additional:
        order = get_order_or_404(session, pending.additional_order_id_param)
        if order.user_id != user.id:
            raise CateringError("본인의 주문에만 추가 주문할 수 있습니다.", status_code=403)
        _append_additional_items(session, order, pending, payment_id)
        if cart_ids:
            cart_items = session.exec(
                select(CartItem)
                .where(CartItem.user_id == user.id)
                .where(CartItem.id.in_(cart_ids))
            ).all()

    else:
        if not pending.order_id:
            raise CateringError("orderId가 필요합니다.")
        order = get_order_or_404(session, pending.order_id)
        if order.user_id != user.id:
            raise CateringError("본인의 주문만 결제할 수 있습니다.", status_code=403)
        _stamp_items(session, order, payment_id)

    record_payment(
        session=session,
        order=order,
        txn_id=payment_id,
        gateway_payment=gateway_payment,
        kind="additional" if is_additional else "regular",
    )

    if pending.use_point > 0:
        # cancellation refunds order.used_point, so add-on spend accumulates there
        if is_additional:
            order.used_point = (order.used_point or 0) + pending.use_point
        elif not order.used_point:
            order.used_point = pending.use_point
        _apply_points(session, order, pending.use_point)

    if pending.coupon_id:
        try:
            user_coupon = use_coupon(
                session, user_coupon_id=pending.coupon_id, user_id=user.id, order_id=order.id,
            )
            order.coupon_id = user_coupon.id
            order.coupon_discount = calculate_discount(user_coupon, order.total_product_price)
        except CateringError as e:
            logger.warning(f"Coupon {pending.coupon_id} not applied to order {order.id}: {e.message}")

    for cart_item in cart_items:
        session.delete(cart_item)

    log_order_event(
        session,
        order.id,
        "additional_paid" if is_additional else "paid",
        "Additional order paid" if is_additional else "Payment completed",
        created_by=f"user:{user.id}",
        meta={"txn_id": payment_id},
    )
    session.commit()
    session.refresh(order)

    logger.info(f"Order {order.order_number} processed with payment {payment_id}")
    _send_order_notification(session, order, is_additional=is_additional)

    return {"success": True, "orderNumber": order.order_number, "orderId": order.id}


# ---------------------------------------------------------------------
# WEBHOOK
# ---------------------------------------------------------------------

def handle_webhook(session: Session, body: Dict[str, Any]) -> dict:
    if body.get("type"):
        return {"success": True, "message": "V2 webhook ignored"}

    imp_uid = body.get("imp_uid")
    merchant_uid = body.get("merchant_uid")
    if not imp_uid or not merchant_uid:
        logger.info(f"Webhook without imp_uid/merchant_uid: {body}")
        return {"success": True, "message": "Missing required fields"}

    if body.get("status") != "paid":
        return {"success": True, "message": "Not a paid status"}

    access_token = portone.get_access_token()
    payment = portone.get_payment(imp_uid, access_token).get("response") or {}
    logger.info(
        f"Webhook verified imp_uid={payment.get('imp_uid')} "
        f"status={payment.get('status')} amount={payment.get('amount')}"
    )

    order_id = order_id_from_merchant_uid(merchant_uid)
    order = session.get(Order, order_id) if order_id else None
    if not order:
        logger.info(f"Webhook order not found for merchant_uid {merchant_uid}")
        return {"success": True}

    if order.delivery_method == DeliveryMethod.quick.value and not order.quick_delivery_order_no:
        store = session.get(Store, order.store_id)
        if store:
            try:
                order.quick_delivery_order_no = quick_delivery.request_delivery_for_order(order, store)
                order.updated_at = datetime.utcnow()
                session.add(order)
                log_order_event(
                    session, order.id, "quick_delivery_requested", "Courier requested",
                    meta={"orderNo": order.quick_delivery_order_no},
                )
                session.commit()
            except Exception:
                session.rollback()
                logger.exception(f"Quick delivery request failed for order {order.id}")

    return {"success": True}


# ---------------------------------------------------------------------
# CANCEL
# ---------------------------------------------------------------------

def cancel_gateway_payment(
    session: Session,
    *,
    imp_uid: Optional[str],
    merchant_uid: Optional[str],
    reason: Optional[str] = None,
    amount: Optional[int] = None,
    checksum: Optional[int] = None,
) -> dict:
    cancellation = portone.cancel_payment(
        imp_uid=imp_uid,
        merchant_uid=merchant_uid,
        reason=reason,
        amount=amount,
        checksum=checksum,
    )

    txn_id = imp_uid or cancellation.get("imp_uid")
    payment = (
        session.exec(select(Payment).where(Payment.txn_id == txn_id)).first() if txn_id else None
    )
    if payment:
        cancelled = int(cancellation.get("cancel_amount") or amount or payment.amount)
        payment.cancelled_amount = cancelled
        payment.cancelled_at = datetime.utcnow()
        payment.status = (
            PaymentStatus.partial_cancelled.value
            if cancelled < payment.amount
            else PaymentStatus.cancelled.value
        )
        session.add(payment)
        session.commit()

    return cancellation
