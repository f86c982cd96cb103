import logging
from typing import Optional

from sqlmodel import Session

from catering_api.models.point import PointHistory
from catering_api.models.user import User

logger = logging.getLogger(__name__)

USED_REASON = "주문 결제 시 포인트 사용"
REFUND_REASON = "주문 취소로 인한 포인트 환불"


def _apply(session: Session, *, user_id: int, amount: int, type: str, reason: str,
           order_id: Optional[int] = None, product_name: Optional[str] = None) -> Optional[PointHistory]:
    user = session.get(User, user_id)
    if not user:
        logger.warning(f"Point change for missing user {user_id}")
        return None

    user.point = (user.point or 0) + amount
    session.add(user)

    entry = PointHistory(
        user_id=user_id,
        amount=amount,
        type=type,
        reason=reason,
        order_id=order_id,
        product_name=product_name,
    )
    session.add(entry)
    return entry


def use_points(session: Session, *, user_id: int, amount: int, order_id=None, product_name=None):
    if amount <= 0:
        return None
    return _apply(session, user_id=user_id, amount=-amount, type="used",
                  reason=USED_REASON, order_id=order_id, product_name=product_name)


def refund_points(session: Session, *, user_id: int, amount: int, order_id=None, product_name=None):
    if amount <= 0:
        return None
    return _apply(session, user_id=user_id, amount=amount, type="refunded",
                  reason=REFUND_REASON, order_id=order_id, product_name=product_name)
