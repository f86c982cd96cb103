from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, or_, select

from catering_api.database import get_session
from catering_api.models.content import AICategory, Banner, Faq, Magazine, Notice, Popup
from catering_api.models.product import Product
from catering_api.utils.pagination import paginate

router = APIRouter()


def _for_target(column, target: Optional[str]):
    if not target:
        return column == "all"
    return column.in_(["all", target])


@router.get("/notices")
def public_notices(
    page: int = 1,
    limit: int = 20,
    target: Optional[str] = None,
    category: Optional[str] = None,
    session: Session = Depends(get_session),
):
    query = (
        select(Notice)
        .where(Notice.status == "published")
        .where(_for_target(Notice.target_type, target))
    )
    if category:
        query = query.where(Notice.category == category)

    return paginate(
        session=session,
        query=query.order_by(Notice.published_at.desc()),
        page=page,
        limit=limit,
    )


@router.get("/notices/{notice_id}")
def notice_detail(notice_id: int, session: Session = Depends(get_session)):
    notice = session.get(Notice, notice_id)
    if not notice or notice.status != "published":
        raise HTTPException(404, "Notice not found")

    notice.view_count += 1
    session.add(notice)
    session.commit()
    session.refresh(notice)
    return notice


@router.get("/faqs")
def public_faqs(
    target: Optional[str] = None,
    category: Optional[str] = None,
    session: Session = Depends(get_session),
):
    query = (
        select(Faq)
        .where(Faq.status == "published")
        .where(_for_target(Faq.target_type, target))
    )
    if category:
        query = query.where(Faq.category == category)
    return session.exec(query.order_by(Faq.display_order, Faq.id)).all()


@router.get("/magazines")
def public_magazines(
    page: int = 1,
    limit: int = 20,
    category: Optional[str] = None,
    session: Session = Depends(get_session),
):
    query = select(Magazine).where(Magazine.status == "published")
    if category:
        query = query.where(Magazine.category == category)

    return paginate(
        session=session,
        query=query.order_by(Magazine.published_at.desc()),
        page=page,
        limit=limit,
    )


@router.get("/magazines/{magazine_id}")
def magazine_detail(magazine_id: int, session: Session = Depends(get_session)):
    magazine = session.get(Magazine, magazine_id)
    if not magazine or magazine.status != "published":
        raise HTTPException(404, "Magazine not found")

    magazine.view_count += 1
    session.add(magazine)
    session.commit()
    session.refresh(magazine)
    return magazine


@router.post("/magazines/{magazine_id}/like")
def like_magazine(magazine_id: int, session: Session = Depends(get_session)):
    magazine = session.get(Magazine, magazine_id)
    if not magazine or magazine.status != "published":
        raise HTTPException(404, "Magazine not found")

    magazine.like_count += 1
    session.add(magazine)
    session.commit()
    return {"like_count": magazine.like_count}


@router.get("/banners")
def public_banners(session: Session = Depends(get_session)):
    return session.exec(
        select(Banner)
        .where(Banner.status == "active")
        .order_by(Banner.display_order, Banner.id)
    ).all()


@router.get("/popups")
def public_popups(target: Optional[str] = None, session: Session = Depends(get_session)):
    now = datetime.utcnow()
    return session.exec(
        select(Popup)
        .where(Popup.status == "active")
        .where(_for_target(Popup.target_type, target))
        .where(or_(Popup.start_date == None, Popup.start_date <= now))  # noqa: E711
        .where(or_(Popup.end_date == None, Popup.end_date >= now))  # noqa: E711
        .order_by(Popup.display_order, Popup.id)
    ).all()


@router.get("/ai-categories")
def public_ai_categories(session: Session = Depends(get_session)):
    categories = session.exec(
        select(AICategory)
        .where(AICategory.is_active == True)  # noqa: E712
        .order_by(AICategory.display_order, AICategory.id)
    ).all()

    product_ids = {pid for c in categories for pid in (c.product_ids or [])}
    products = {}
    if product_ids:
        products = {
            p.id: p
            for p in session.exec(
                select(Product)
                .where(Product.id.in_(product_ids))
                .where(Product.is_active == True)  # noqa: E712
            ).all()
        }

    return [
        {
            **category.model_dump(),
            "products": [products[pid] for pid in category.product_ids or [] if pid in products],
        }
        for category in categories
    ]
