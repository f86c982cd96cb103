from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import String, cast
from sqlmodel import Session, select

from catering_api.database import get_session
from catering_api.dependencies.auth import require_partner
from catering_api.models.product import Product
from catering_api.models.store import Store
from catering_api.models.user import User
from catering_api.schemas.catalog_schemas import StoreCreate, StoreUpdate
from catering_api.utils.pagination import paginate

router = APIRouter()


def get_owned_store(session: Session, store_id: int, user: User) -> Store:
    store = session.get(Store, store_id)
    if not store:
        raise HTTPException(404, "Store not found")
    if user.role != "admin" and store.owner_id != user.id:
        raise HTTPException(403, "Not your store")
    return store


@router.get("")
def list_stores(
    page: int = 1,
    limit: int = 20,
    category: Optional[str] = None,
    search: Optional[str] = None,
    session: Session = Depends(get_session),
):
    query = select(Store).where(Store.is_active == True)  # noqa: E712

    if category:
        query = query.where(cast(Store.categories, String).ilike(f'%"{category}"%'))
    if search:
        query = query.where(Store.name.ilike(f"%{search}%"))

    return paginate(
        session=session,
        query=query.order_by(Store.created_at.desc()),
        page=page,
        limit=limit,
    )


@router.get("/mine")
def my_stores(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_partner),
):
    return session.exec(select(Store).where(Store.owner_id == current_user.id)).all()


@router.get("/{store_id}")
def store_detail(store_id: int, session: Session = Depends(get_session)):
    store = session.get(Store, store_id)
    if not store or not store.is_active:
        raise HTTPException(404, "Store not found")

    products = session.exec(
        select(Product)
        .where(Product.store_id == store_id)
        .where(Product.is_active == True)  # noqa: E712
    ).all()

    return {"store": store, "products": products}


@router.post("")
def create_store(
    data: StoreCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_partner),
):
    store = Store(owner_id=current_user.id, **data.model_dump())
    session.add(store)
    session.commit()
    session.refresh(store)
    return store


@router.put("/{store_id}")
def update_store(
    store_id: int,
    data: StoreUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_partner),
):
    store = get_owned_store(session, store_id, current_user)

    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(store, key, value)

    store.updated_at = datetime.utcnow()
    session.add(store)
    session.commit()
    session.refresh(store)
    return store
