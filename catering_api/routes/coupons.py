from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from catering_api.database import get_session
from catering_api.dependencies.auth import require_admin
from catering_api.models.coupon import Coupon, UserCoupon
from catering_api.models.user import User
from catering_api.schemas.content_schemas import CouponCreate, CouponIssueRequest, CouponUpdate
from catering_api.services import coupon_service
from catering_api.utils.pagination import paginate
from catering_api.utils.token import get_current_user

router = APIRouter()


def _serialize_user_coupon(coupon: UserCoupon) -> dict:
    return {
        **coupon.model_dump(),
        "display_value": coupon_service.format_coupon_value(coupon),
    }


# -------- ADMIN --------

@router.get("/admin/coupons")
def admin_list_coupons(
    page: int = 1,
    limit: int = 20,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return paginate(
        session=session,
        query=select(Coupon).order_by(Coupon.created_at.desc()),
        page=page,
        limit=limit,
    )


@router.post("/admin/coupons")
def admin_create_coupon(
    data: CouponCreate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    if data.type == "percentage" and data.value > 100:
        raise HTTPException(400, "Percentage coupons cannot exceed 100")

    coupon = Coupon(**data.model_dump())
    session.add(coupon)
    session.commit()
    session.refresh(coupon)
    return coupon


@router.put("/admin/coupons/{coupon_id}")
def admin_update_coupon(
    coupon_id: int,
    data: CouponUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    coupon = session.get(Coupon, coupon_id)
    if not coupon:
        raise HTTPException(404, "Coupon not found")

    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(coupon, key, value)
    coupon.updated_at = datetime.utcnow()

    session.add(coupon)
    session.commit()
    session.refresh(coupon)
    return coupon


@router.delete("/admin/coupons/{coupon_id}")
def admin_deactivate_coupon(
    coupon_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    coupon = session.get(Coupon, coupon_id)
    if not coupon:
        raise HTTPException(404, "Coupon not found")

    # issued coupons keep their snapshot, only new issuing stops
    coupon.is_active = False
    coupon.updated_at = datetime.utcnow()
    session.add(coupon)
    session.commit()
    return {"message": "Coupon deactivated"}


@router.post("/admin/coupons/{coupon_id}/issue")
def admin_issue_coupon(
    coupon_id: int,
    data: CouponIssueRequest,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    if not data.user_ids:
        raise HTTPException(400, "user_ids is required")

    if len(data.user_ids) == 1:
        user_coupon = coupon_service.issue_coupon(
            session, coupon_id=coupon_id, user_id=data.user_ids[0]
        )
        return {"issued": 1, "coupon": _serialize_user_coupon(user_coupon)}

    issued = coupon_service.issue_coupon_to_users(
        session, coupon_id=coupon_id, user_ids=data.user_ids
    )
    return {"issued": issued}


@router.post("/admin/coupons/{coupon_id}/issue-all")
def admin_issue_coupon_to_all(
    coupon_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    user_ids = session.exec(
        select(User.id)
        .where(User.role == "consumer")
        .where(User.can_login == True)  # noqa: E712
    ).all()
    issued = coupon_service.issue_coupon_to_users(session, coupon_id=coupon_id, user_ids=user_ids)
    return {"issued": issued}


# -------- USER --------

@router.get("/coupons/me")
def my_coupons(
    status: Optional[str] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    query = select(UserCoupon).where(UserCoupon.user_id == current_user.id)
    if status:
        query = query.where(UserCoupon.status == status)

    coupons = session.exec(query.order_by(UserCoupon.issued_at.desc())).all()
    return [_serialize_user_coupon(c) for c in coupons]


@router.get("/coupons/available")
def available_coupons(
    amount: Optional[int] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    coupons = coupon_service.get_available_coupons(session, current_user.id)

    results = []
    for coupon in coupons:
        row = _serialize_user_coupon(coupon)
        if amount is not None:
            row["discount"] = coupon_service.calculate_discount(coupon, amount)
        results.append(row)
    return results


@router.get("/coupons/{user_coupon_id}/preview")
def preview_discount(
    user_coupon_id: int,
    amount: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    coupon = session.get(UserCoupon, user_coupon_id)
    if not coupon or coupon.user_id != current_user.id:
        raise HTTPException(404, "Coupon not found")

    discount = coupon_service.calculate_discount(coupon, amount)
    return {
        "discount": discount,
        "final_amount": amount - discount,
        "applicable": discount > 0,
    }
