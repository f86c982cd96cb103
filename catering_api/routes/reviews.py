from datetime import date, datetime, time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlmodel import Session, select

from catering_api.database import get_session
from catering_api.dependencies.auth import require_partner
from catering_api.models.order import Order
from catering_api.models.order_item import OrderItem
from catering_api.models.review import Review
from catering_api.models.user import User
from catering_api.routes.stores import get_owned_store
from catering_api.schemas.content_schemas import ReviewCreate, ReviewUpdate
from catering_api.utils.pagination import paginate
from catering_api.utils.token import get_current_user

router = APIRouter()


def _get_own_review(session: Session, review_id: int, user: User) -> Review:
    review = session.get(Review, review_id)
    if not review:
        raise HTTPException(404, "Review not found")
    if review.user_id != user.id:
        raise HTTPException(403, "Not your review")
    return review


def _rating_summary(session: Session, column, value: int) -> dict:
    avg, count = session.exec(
        select(func.avg(Review.rating), func.count(Review.id)).where(column == value)
    ).one()
    return {
        "average_rating": round(float(avg), 1) if avg else 0,
        "review_count": count,
    }


@router.post("/reviews")
def create_review(
    data: ReviewCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    order = session.get(Order, data.order_id)
    if not order or order.user_id != current_user.id:
        raise HTTPException(404, "Order not found")

    if order.status != "completed":
        raise HTTPException(400, "Reviews can only be written for completed orders")

    if data.product_id is not None:
        in_order = session.exec(
            select(OrderItem)
            .where(OrderItem.order_id == order.id)
            .where(OrderItem.product_id == data.product_id)
        ).first()
        if not in_order:
            raise HTTPException(400, "Product is not part of this order")

    existing = session.exec(
        select(Review)
        .where(Review.order_id == order.id)
        .where(Review.product_id == data.product_id)
    ).first()
    if existing:
        raise HTTPException(400, "Review already written for this order")

    review = Review(
        user_id=current_user.id,
        order_id=order.id,
        store_id=order.store_id,
        product_id=data.product_id,
        rating=data.rating,
        content=data.content,
        images=data.images,
    )
    session.add(review)
    session.commit()
    session.refresh(review)
    return review


@router.put("/reviews/{review_id}")
def update_review(
    review_id: int,
    data: ReviewUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    review = _get_own_review(session, review_id, current_user)

    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(review, key, value)
    review.updated_at = datetime.utcnow()

    session.add(review)
    session.commit()
    session.refresh(review)
    return review


@router.delete("/reviews/{review_id}")
def delete_review(
    review_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    review = _get_own_review(session, review_id, current_user)
    session.delete(review)
    session.commit()
    return {"message": "Review deleted"}


@router.get("/reviews/me")
def my_reviews(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return session.exec(
        select(Review)
        .where(Review.user_id == current_user.id)
        .order_by(Review.created_at.desc())
    ).all()


@router.get("/products/{product_id}/reviews")
def product_reviews(
    product_id: int,
    page: int = 1,
    limit: int = 20,
    session: Session = Depends(get_session),
):
    result = paginate(
        session=session,
        query=select(Review).where(Review.product_id == product_id).order_by(Review.created_at.desc()),
        page=page,
        limit=limit,
    )
    result.update(_rating_summary(session, Review.product_id, product_id))
    return result


@router.get("/stores/{store_id}/reviews")
def store_reviews(
    store_id: int,
    page: int = 1,
    limit: int = 20,
    session: Session = Depends(get_session),
):
    result = paginate(
        session=session,
        query=select(Review).where(Review.store_id == store_id).order_by(Review.created_at.desc()),
        page=page,
        limit=limit,
    )
    result.update(_rating_summary(session, Review.store_id, store_id))
    return result


@router.get("/partner/stores/{store_id}/reviews")
def partner_store_reviews(
    store_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    page: int = 1,
    limit: int = 20,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_partner),
):
    get_owned_store(session, store_id, current_user)

    query = select(Review).where(Review.store_id == store_id)
    if start_date:
        query = query.where(Review.created_at >= datetime.combine(start_date, time.min))
    if end_date:
        query = query.where(Review.created_at <= datetime.combine(end_date, time.max))

    return paginate(
        session=session,
        query=query.order_by(Review.created_at.desc()),
        page=page,
        limit=limit,
    )
