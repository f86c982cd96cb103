# -------- ADMIN CONTENT (notices, FAQs, magazine, banners, popups, AI categories) --------
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from catering_api.database import get_session
from catering_api.dependencies.auth import require_admin
from catering_api.models.content import AICategory, Banner, Faq, Magazine, Notice, Popup
from catering_api.models.user import User
from catering_api.schemas.content_schemas import (
    AICategoryCreate,
    AICategoryUpdate,
    BannerCreate,
    BannerUpdate,
    FaqCreate,
    FaqUpdate,
    MagazineCreate,
    MagazineUpdate,
    NoticeCreate,
    NoticeUpdate,
    PopupCreate,
    PopupUpdate,
)
from catering_api.utils.pagination import paginate

router = APIRouter()


def _get_or_404(session: Session, model, row_id: int, label: str):
    row = session.get(model, row_id)
    if not row:
        raise HTTPException(404, f"{label} not found")
    return row


def _save(session: Session, row):
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


def _update(session: Session, row, changes: dict):
    for key, value in changes.items():
        setattr(row, key, value)
    row.updated_at = datetime.utcnow()
    return _save(session, row)


def _stamp_published(row):
    if row.status == "published" and row.published_at is None:
        row.published_at = datetime.utcnow()


# -------- NOTICES --------

@router.get("/notices")
def list_notices(
    page: int = 1,
    limit: int = 20,
    status: Optional[str] = None,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    query = select(Notice)
    if status:
        query = query.where(Notice.status == status)
    return paginate(session=session, query=query.order_by(Notice.created_at.desc()), page=page, limit=limit)


@router.post("/notices")
def create_notice(
    data: NoticeCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    notice = Notice(**data.model_dump(), author_id=admin.id)
    _stamp_published(notice)
    return _save(session, notice)


@router.get("/notices/{notice_id}")
def get_notice(notice_id: int, session: Session = Depends(get_session), _: User = Depends(require_admin)):
    return _get_or_404(session, Notice, notice_id, "Notice")


@router.put("/notices/{notice_id}")
def update_notice(
    notice_id: int,
    data: NoticeUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    notice = _get_or_404(session, Notice, notice_id, "Notice")
    changes = data.model_dump(exclude_unset=True)
    for key, value in changes.items():
        setattr(notice, key, value)
    _stamp_published(notice)
    return _update(session, notice, {})


@router.delete("/notices/{notice_id}")
def delete_notice(notice_id: int, session: Session = Depends(get_session), _: User = Depends(require_admin)):
    session.delete(_get_or_404(session, Notice, notice_id, "Notice"))
    session.commit()
    return {"message": "Notice deleted"}


# -------- FAQS --------

@router.get("/faqs")
def list_faqs(session: Session = Depends(get_session), _: User = Depends(require_admin)):
    return session.exec(select(Faq).order_by(Faq.display_order, Faq.id)).all()


@router.post("/faqs")
def create_faq(data: FaqCreate, session: Session = Depends(get_session), _: User = Depends(require_admin)):
    return _save(session, Faq(**data.model_dump()))


@router.put("/faqs/{faq_id}")
def update_faq(
    faq_id: int,
    data: FaqUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    faq = _get_or_404(session, Faq, faq_id, "FAQ")
    return _update(session, faq, data.model_dump(exclude_unset=True))


@router.delete("/faqs/{faq_id}")
def delete_faq(faq_id: int, session: Session = Depends(get_session), _: User = Depends(require_admin)):
    session.delete(_get_or_404(session, Faq, faq_id, "FAQ"))
    session.commit()
    return {"message": "FAQ deleted"}


# -------- MAGAZINE --------

@router.get("/magazines")
def list_magazines(
    page: int = 1,
    limit: int = 20,
    status: Optional[str] = None,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    query = select(Magazine)
    if status:
        query = query.where(Magazine.status == status)
    return paginate(session=session, query=query.order_by(Magazine.created_at.desc()), page=page, limit=limit)


@router.post("/magazines")
def create_magazine(
    data: MagazineCreate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    magazine = Magazine(**data.model_dump())
    _stamp_published(magazine)
    return _save(session, magazine)


@router.put("/magazines/{magazine_id}")
def update_magazine(
    magazine_id: int,
    data: MagazineUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    magazine = _get_or_404(session, Magazine, magazine_id, "Magazine")
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(magazine, key, value)
    _stamp_published(magazine)
    return _update(session, magazine, {})


@router.delete("/magazines/{magazine_id}")
def delete_magazine(magazine_id: int, session: Session = Depends(get_session), _: User = Depends(require_admin)):
    session.delete(_get_or_404(session, Magazine, magazine_id, "Magazine"))
    session.commit()
    return {"message": "Magazine deleted"}


# -------- BANNERS --------

@router.get("/banners")
def list_banners(session: Session = Depends(get_session), _: User = Depends(require_admin)):
    return session.exec(select(Banner).order_by(Banner.display_order, Banner.id)).all()


@router.post("/banners")
def create_banner(data: BannerCreate, session: Session = Depends(get_session), _: User = Depends(require_admin)):
    return _save(session, Banner(**data.model_dump()))


@router.put("/banners/{banner_id}")
def update_banner(
    banner_id: int,
    data: BannerUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    banner = _get_or_404(session, Banner, banner_id, "Banner")
    return _update(session, banner, data.model_dump(exclude_unset=True))


@router.delete("/banners/{banner_id}")
def delete_banner(banner_id: int, session: Session = Depends(get_session), _: User = Depends(require_admin)):
    session.delete(_get_or_404(session, Banner, banner_id, "Banner"))
    session.commit()
    return {"message": "Banner deleted"}


# -------- POPUPS --------

@router.get("/popups")
def list_popups(session: Session = Depends(get_session), _: User = Depends(require_admin)):
    return session.exec(select(Popup).order_by(Popup.display_order, Popup.id)).all()


@router.post("/popups")
def create_popup(data: PopupCreate, session: Session = Depends(get_session), _: User = Depends(require_admin)):
    if data.start_date and data.end_date and data.end_date < data.start_date:
        raise HTTPException(400, "end_date must be after start_date")
    return _save(session, Popup(**data.model_dump()))


@router.put("/popups/{popup_id}")
def update_popup(
    popup_id: int,
    data: PopupUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    popup = _get_or_404(session, Popup, popup_id, "Popup")
    return _update(session, popup, data.model_dump(exclude_unset=True))


@router.delete("/popups/{popup_id}")
def delete_popup(popup_id: int, session: Session = Depends(get_session), _: User = Depends(require_admin)):
    session.delete(_get_or_404(session, Popup, popup_id, "Popup"))
    session.commit()
    return {"message": "Popup deleted"}


# -------- AI CATEGORIES --------

@router.get("/ai-categories")
def list_ai_categories(session: Session = Depends(get_session), _: User = Depends(require_admin)):
    return session.exec(select(AICategory).order_by(AICategory.display_order, AICategory.id)).all()


@router.post("/ai-categories")
def create_ai_category(
    data: AICategoryCreate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return _save(session, AICategory(**data.model_dump()))


@router.put("/ai-categories/{category_id}")
def update_ai_category(
    category_id: int,
    data: AICategoryUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    category = _get_or_404(session, AICategory, category_id, "AI category")
    return _update(session, category, data.model_dump(exclude_unset=True))


@router.delete("/ai-categories/{category_id}")
def delete_ai_category(category_id: int, session: Session = Depends(get_session), _: User = Depends(require_admin)):
    session.delete(_get_or_404(session, AICategory, category_id, "AI category"))
    session.commit()
    return {"message": "AI category deleted"}
