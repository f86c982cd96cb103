# Run periodically: python -m catering_api.jobs.expire_unpaid_orders
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlmodel import Session, select

from catering_api.config import settings
from catering_api.constants.order_status import OrderStatus, PaymentStatus
from catering_api.database import engine
from catering_api.models.order import Order
from catering_api.services.order_event_service import log_order_event

logger = logging.getLogger(__name__)


def expire_unpaid_orders(session: Session, now: Optional[datetime] = None) -> int:
    """Cancel checkout orders that never got a payment within the expiry window."""
    now = now or datetime.utcnow()
    cutoff = now - timedelta(hours=settings.unpaid_order_expiry_hours)

    orders = session.exec(
        select(Order)
        .where(Order.status == OrderStatus.pending.value)
        .where(Order.payment_status == PaymentStatus.pending.value)
        .where(Order.created_at < cutoff)
    ).all()

    for order in orders:
        order.status = OrderStatus.cancelled.value
        order.cancelled_at = now
        order.cancel_reason = "결제 대기 시간 초과"
        order.updated_at = now
        session.add(order)
        log_order_event(
            session,
            order.id,
            "cancelled",
            "Unpaid order expired",
            created_by="system",
        )

    session.commit()
    return len(orders)


def run() -> int:
    with Session(engine) as session:
        expired = expire_unpaid_orders(session)
    logger.info(f"Expired {expired} unpaid orders")
    return expired


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run()
