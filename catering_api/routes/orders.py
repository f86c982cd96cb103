from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from catering_api.database import get_session
from catering_api.dependencies.auth import require_partner
from catering_api.models.order import Order
from catering_api.models.order_event import OrderEvent
from catering_api.models.user import User
from catering_api.schemas.order_schemas import (
    CancelOrderRequest,
    ConfirmRequest,
    CreateOrderRequest,
    TaskCallbackRequest,
    UpdateStatusRequest,
)
from catering_api.services import order_service
from catering_api.utils.pagination import paginate
from catering_api.utils.token import get_current_user

router = APIRouter()


def serialize_order(order: Order, with_items: bool = True) -> dict:
    data = {
        "id": order.id,
        "order_number": order.order_number,
        "store_id": order.store_id,
        "store_name": order.store_name,
        "product_name": order.product_name,
        "orderer": order.orderer,
        "phone": order.phone,
        "status": order.status,
        "payment_status": order.payment_status,
        "delivery_method": order.delivery_method,
        "delivery_date": order.delivery_date,
        "delivery_time": order.delivery_time,
        "delivery_info": order.delivery_info,
        "tracking_info": order.tracking_info,
        "total_product_price": order.total_product_price,
        "total_quantity": order.total_quantity,
        "delivery_fee": order.delivery_fee,
        "total_price": order.total_price,
        "used_point": order.used_point,
        "coupon_discount": order.coupon_discount,
        "confirmed_at": order.confirmed_at,
        "confirmation_type": order.confirmation_type,
        "cancelled_at": order.cancelled_at,
        "created_at": order.created_at,
    }
    if with_items:
        data["items"] = [
            {
                "product_id": i.product_id,
                "product_name": i.product_name,
                "quantity": i.quantity,
                "item_price": i.item_price,
                "options": i.options,
                "is_add_item": i.is_add_item,
            }
            for i in order.items
        ]
    return data


def get_visible_order(session: Session, order_id: int, user: User) -> Order:
    order = session.get(Order, order_id)
    if not order:
        raise HTTPException(404, "Order not found")
    if user.role != "admin" and user.id not in (order.user_id, order.partner_id):
        raise HTTPException(404, "Order not found")
    return order


@router.post("")
def create_order(
    data: CreateOrderRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    order = order_service.create_pending_order(
        session, user=current_user, cart_item_ids=data.cart_item_ids, checkout=data.checkout,
    )
    return {"success": True, "orderId": order.id, "orderNumber": order.order_number}


@router.get("")
def my_orders(
    page: int = 1,
    limit: int = 10,
    status: Optional[str] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    query = select(Order).where(Order.user_id == current_user.id)
    if status:
        query = query.where(Order.status == status)

    return paginate(
        session=session,
        query=query.order_by(Order.created_at.desc()),
        page=page,
        limit=limit,
        serializer=serialize_order,
    )


@router.post("/update-status")
def update_status(
    data: UpdateStatusRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_partner),
):
    order = order_service.update_status(
        session,
        order_id=data.order_id,
        status=data.status,
        tracking_info=data.tracking_info,
        actor=current_user,
    )
    return {"success": True, "orderId": order.id, "status": order.status}


@router.post("/confirm")
def confirm_order(
    data: ConfirmRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    if data.uid and data.uid != current_user.id:
        raise HTTPException(403, "본인의 주문만 구매확정할 수 있습니다.")

    order_service.confirm_order(session, order_id=data.order_id, uid=data.uid)
    return {"success": True, "message": "구매가 확정되었습니다."}


# Cloud Tasks callbacks

@router.post("/auto-complete")
def auto_complete(data: TaskCallbackRequest, session: Session = Depends(get_session)):
    return order_service.auto_complete(session, data.order_id)


@router.post("/send-confirmation-reminder")
def send_confirmation_reminder(data: TaskCallbackRequest, session: Session = Depends(get_session)):
    return order_service.send_confirmation_reminder(session, data.order_id)


@router.get("/{order_id}")
def order_detail(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return serialize_order(get_visible_order(session, order_id, current_user))


@router.get("/{order_id}/events")
def order_events(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    get_visible_order(session, order_id, current_user)

    return session.exec(
        select(OrderEvent)
        .where(OrderEvent.order_id == order_id)
        .order_by(OrderEvent.created_at)
    ).all()


@router.post("/{order_id}/cancel")
def cancel_order(
    order_id: int,
    data: Optional[CancelOrderRequest] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    order = order_service.cancel_order_by_customer(
        session, order_id=order_id, user=current_user, reason=data.reason if data else None,
    )
    return {"success": True, "orderId": order.id, "status": order.status}
