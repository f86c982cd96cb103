import logging
import math
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from sqlmodel import Session, select

from catering_api.exceptions import CateringError, NotFoundError
from catering_api.models.coupon import Coupon, UserCoupon

logger = logging.getLogger(__name__)


def calculate_discount(coupon, order_amount: int) -> int:
    """Works on both templates and issued coupons (same pricing fields)."""
    if order_amount < (coupon.min_order_amount or 0):
        return 0

    if coupon.type == "percentage":
        discount = math.floor(order_amount * (coupon.value / 100))
        if coupon.max_discount_amount and discount > coupon.max_discount_amount:
            discount = coupon.max_discount_amount
    else:
        discount = coupon.value

    return min(discount, order_amount)


def format_coupon_value(coupon) -> str:
    if coupon.type == "percentage":
        return f"{coupon.value}%"
    return f"{coupon.value:,}원"


def _new_user_coupon(template: Coupon, user_id: int, now: datetime) -> UserCoupon:
    return UserCoupon(
        user_id=user_id,
        coupon_id=template.id,
        coupon_name=template.name,
        type=template.type,
        value=template.value,
        min_order_amount=template.min_order_amount,
        max_discount_amount=template.max_discount_amount,
        status="available",
        issued_at=now,
        expires_at=now + timedelta(days=template.valid_days),
    )


def _get_template(session: Session, coupon_id: int) -> Coupon:
    template = session.get(Coupon, coupon_id)
    if not template:
        raise NotFoundError("Coupon not found")
    if not template.is_active:
        raise CateringError("Coupon is not active")
    return template


def issue_coupon(session: Session, *, coupon_id: int, user_id: int) -> UserCoupon:
    template = _get_template(session, coupon_id)
    user_coupon = _new_user_coupon(template, user_id, datetime.utcnow())
    session.add(user_coupon)
    session.commit()
    session.refresh(user_coupon)
    return user_coupon


def issue_coupon_to_users(session: Session, *, coupon_id: int, user_ids: Iterable[int]) -> int:
    template = _get_template(session, coupon_id)
    now = datetime.utcnow()

    count = 0
    for user_id in user_ids:
        session.add(_new_user_coupon(template, user_id, now))
        count += 1

    session.commit()
    logger.info(f"Issued coupon {coupon_id} to {count} users")
    return count


def get_available_coupons(session: Session, user_id: int) -> List[UserCoupon]:
    now = datetime.utcnow()
    return session.exec(
        select(UserCoupon)
        .where(UserCoupon.user_id == user_id)
        .where(UserCoupon.status == "available")
        .where(UserCoupon.expires_at > now)
        .order_by(UserCoupon.expires_at.asc())
    ).all()


def use_coupon(session: Session, *, user_coupon_id: int, user_id: int, order_id: int) -> UserCoupon:
    coupon = session.get(UserCoupon, user_coupon_id)
    if not coupon or coupon.user_id != user_id:
        raise NotFoundError("Coupon not found")
    if coupon.status != "available" or coupon.expires_at <= datetime.utcnow():
        raise CateringError("Coupon is not available")

    coupon.status = "used"
    coupon.used_at = datetime.utcnow()
    coupon.order_id = order_id
    session.add(coupon)
    return coupon


def cancel_coupon_usage(session: Session, user_coupon_id: Optional[int]) -> Optional[UserCoupon]:
    if not user_coupon_id:
        return None

    coupon = session.get(UserCoupon, user_coupon_id)
    if not coupon or coupon.status != "used":
        return None

    coupon.status = "available"
    coupon.used_at = None
    coupon.order_id = None
    session.add(coupon)
    return coupon


def expire_coupons(session: Session, now: Optional[datetime] = None) -> int:
    now = now or datetime.utcnow()
    expired = session.exec(
        select(UserCoupon)
        .where(UserCoupon.status == "available")
        .where(UserCoupon.expires_at < now)
    ).all()

    for coupon in expired:
        coupon.status = "expired"
        session.add(coupon)

    session.commit()
    return len(expired)
