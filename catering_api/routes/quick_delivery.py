from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from catering_api.database import get_session
from catering_api.dependencies.auth import require_partner
from catering_api.models.order import Order
from catering_api.models.store import Store
from catering_api.models.user import User
from catering_api.services import quick_delivery
from catering_api.services.order_event_service import log_order_event

router = APIRouter()


class HistoryRequest(BaseModel):
    rangeStart: Optional[str] = None
    rangeEnd: Optional[str] = None
    orderNo: Optional[str] = None


@router.post("")
def request_quick_delivery(
    body: Dict[str, Any] = Body(...),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_partner),
):
    """
    Either a raw courier payload, or ``{"orderId": ...}`` to dispatch a
    stored order from its store address.
    """
    order_id = body.get("orderId")
    if not order_id:
        return quick_delivery.request_delivery(body)

    order = session.get(Order, order_id)
    if not order or (current_user.role != "admin" and order.partner_id != current_user.id):
        raise HTTPException(404, "Order not found")
    if order.quick_delivery_order_no:
        raise HTTPException(400, "이미 퀵 배송이 요청된 주문입니다.")

    store = session.get(Store, order.store_id)
    order.quick_delivery_order_no = quick_delivery.request_delivery_for_order(order, store)
    session.add(order)
    log_order_event(
        session, order.id, "quick_delivery_requested", "Courier requested",
        created_by=f"{current_user.role}:{current_user.id}",
        meta={"orderNo": order.quick_delivery_order_no},
    )
    session.commit()

    return {"success": True, "orderNo": order.quick_delivery_order_no}


@router.post("/charge")
def quick_delivery_charge(body: Dict[str, Any] = Body(...)):
    return quick_delivery.get_charge(body)


@router.post("/history")
def quick_delivery_history(data: HistoryRequest, _: User = Depends(require_partner)):
    if not data.rangeStart or not data.rangeEnd:
        raise HTTPException(400, "rangeStart와 rangeEnd는 필수입니다.")
    return quick_delivery.get_history(data.rangeStart, data.rangeEnd, data.orderNo)
