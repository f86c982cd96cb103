from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from catering_api.database import get_session
from catering_api.dependencies.auth import require_partner
from catering_api.models.content import PartnerNotice
from catering_api.models.user import User
from catering_api.routes.stores import get_owned_store
from catering_api.schemas.content_schemas import PartnerNoticeCreate, PartnerNoticeUpdate

router = APIRouter()


def _store_notices(session: Session, store_id: int):
    return session.exec(
        select(PartnerNotice)
        .where(PartnerNotice.store_id == store_id)
        .order_by(PartnerNotice.is_pinned.desc(), PartnerNotice.created_at.desc())
    ).all()


def _get_owned_notice(session: Session, notice_id: int, user: User) -> PartnerNotice:
    notice = session.get(PartnerNotice, notice_id)
    if not notice:
        raise HTTPException(404, "Notice not found")
    get_owned_store(session, notice.store_id, user)
    return notice


@router.get("/stores/{store_id}/notices")
def store_notices(store_id: int, session: Session = Depends(get_session)):
    return _store_notices(session, store_id)


@router.get("/partner/stores/{store_id}/notices")
def partner_store_notices(
    store_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_partner),
):
    get_owned_store(session, store_id, current_user)
    return _store_notices(session, store_id)


@router.post("/partner/stores/{store_id}/notices")
def create_partner_notice(
    store_id: int,
    data: PartnerNoticeCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_partner),
):
    get_owned_store(session, store_id, current_user)

    notice = PartnerNotice(store_id=store_id, **data.model_dump())
    session.add(notice)
    session.commit()
    session.refresh(notice)
    return notice


@router.put("/partner/notices/{notice_id}")
def update_partner_notice(
    notice_id: int,
    data: PartnerNoticeUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_partner),
):
    notice = _get_owned_notice(session, notice_id, current_user)

    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(notice, key, value)
    notice.updated_at = datetime.utcnow()

    session.add(notice)
    session.commit()
    session.refresh(notice)
    return notice


@router.delete("/partner/notices/{notice_id}")
def delete_partner_notice(
    notice_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_partner),
):
    notice = _get_owned_notice(session, notice_id, current_user)
    session.delete(notice)
    session.commit()
    return {"message": "Notice deleted"}
