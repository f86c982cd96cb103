# -------- ADMIN ORDERS --------
from datetime import date, datetime, time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import String, cast
from sqlmodel import Session, or_, select

from catering_api.database import get_session
from catering_api.dependencies.auth import require_admin
from catering_api.models.order import Order
from catering_api.models.payment import Payment
from catering_api.models.user import User
from catering_api.routes.orders import serialize_order
from catering_api.utils.pagination import paginate

router = APIRouter()


@router.get("")
def list_orders(
    page: int = 1,
    limit: int = 10,
    search: Optional[str] = None,
    status: Optional[str] = None,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    query = select(Order)

    if search:
        query = query.where(
            or_(
                Order.order_number.ilike(f"%{search}%"),
                Order.orderer.ilike(f"%{search}%"),
                Order.store_name.ilike(f"%{search}%"),
                cast(Order.id, String).ilike(f"%{search}%"),
            )
        )

    if status:
        query = query.where(Order.status == status)

    if start_date:
        query = query.where(Order.created_at >= datetime.combine(start_date, time.min))

    if end_date:
        query = query.where(Order.created_at <= datetime.combine(end_date, time.max))

    return paginate(
        session=session,
        query=query.order_by(Order.created_at.desc()),
        page=page,
        limit=limit,
        serializer=lambda o: serialize_order(o, with_items=False),
    )


@router.get("/{order_id}")
def order_details(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    order = session.get(Order, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    customer = session.get(User, order.user_id)
    payments = session.exec(select(Payment).where(Payment.order_id == order.id)).all()

    return {
        **serialize_order(order),
        "customer": {
            "id": customer.id,
            "name": customer.name,
            "email": customer.email,
        } if customer else None,
        "payments": [
            {
                "txn_id": p.txn_id,
                "amount": p.amount,
                "method": p.method,
                "status": p.status,
                "kind": p.kind,
                "created_at": p.created_at,
            }
            for p in payments
        ],
        "settlement_status": order.settlement_status,
        "quick_delivery_order_no": order.quick_delivery_order_no,
    }
