from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlmodel import Session, select

from catering_api.constants.order_status import STATUS_GROUPS
from catering_api.database import get_session
from catering_api.dependencies.auth import require_partner
from catering_api.models.order import Order
from catering_api.models.order_item import OrderItem
from catering_api.models.user import User
from catering_api.routes.orders import serialize_order
from catering_api.services.order_sheet import render_order_sheet
from catering_api.utils.pagination import paginate

router = APIRouter()


@router.get("")
def partner_orders(
    page: int = 1,
    limit: int = 20,
    status: Optional[str] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_partner),
):
    # unpaid orders stay invisible to the store
    query = (
        select(Order)
        .where(Order.partner_id == current_user.id)
        .where(Order.payment_status != "pending")
    )

    if status in STATUS_GROUPS:
        query = query.where(Order.status.in_(STATUS_GROUPS[status]))
    elif status:
        query = query.where(Order.status == status)

    return paginate(
        session=session,
        query=query.order_by(Order.created_at.desc()),
        page=page,
        limit=limit,
        serializer=serialize_order,
    )


@router.get("/{order_id}/sheet")
def order_sheet(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_partner),
):
    order = session.get(Order, order_id)
    if not order or (current_user.role != "admin" and order.partner_id != current_user.id):
        raise HTTPException(404, "Order not found")

    items = session.exec(select(OrderItem).where(OrderItem.order_id == order.id)).all()
    pdf = render_order_sheet(order, items)

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="order_{order.order_number}.pdf"'},
    )
