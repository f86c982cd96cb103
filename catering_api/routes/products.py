from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import String, cast
from sqlmodel import Session, select

from catering_api.database import get_session
from catering_api.dependencies.auth import require_partner
from catering_api.models.product import Product
from catering_api.models.user import User
from catering_api.routes.stores import get_owned_store
from catering_api.schemas.catalog_schemas import ProductCreate, ProductUpdate
from catering_api.utils.pagination import paginate

router = APIRouter()


def get_owned_product(session: Session, product_id: int, user: User) -> Product:
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(404, "Product not found")
    get_owned_store(session, product.store_id, user)
    return product


@router.get("")
def list_products(
    page: int = 1,
    limit: int = 20,
    store_id: Optional[int] = None,
    category: Optional[str] = None,
    event: Optional[str] = None,
    search: Optional[str] = None,
    session: Session = Depends(get_session),
):
    query = select(Product).where(Product.is_active == True)  # noqa: E712

    if store_id:
        query = query.where(Product.store_id == store_id)
    if category:
        query = query.where(cast(Product.categories, String).ilike(f'%"{category}"%'))
    if event:
        query = query.where(cast(Product.event_tags, String).ilike(f'%"{event}"%'))
    if search:
        query = query.where(Product.name.ilike(f"%{search}%"))

    return paginate(
        session=session,
        query=query.order_by(Product.created_at.desc()),
        page=page,
        limit=limit,
    )


@router.get("/{product_id}")
def product_detail(product_id: int, session: Session = Depends(get_session)):
    product = session.get(Product, product_id)
    if not product or not product.is_active:
        raise HTTPException(404, "Product not found")
    return product


@router.post("")
def create_product(
    store_id: int,
    data: ProductCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_partner),
):
    get_owned_store(session, store_id, current_user)

    product = Product(store_id=store_id, **data.model_dump())
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


@router.put("/{product_id}")
def update_product(
    product_id: int,
    data: ProductUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_partner),
):
    product = get_owned_product(session, product_id, current_user)

    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(product, key, value)

    product.updated_at = datetime.utcnow()
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_partner),
):
    product = get_owned_product(session, product_id, current_user)

    # soft delete keeps order history joins intact
    product.is_active = False
    product.updated_at = datetime.utcnow()
    session.add(product)
    session.commit()
    return {"message": "Product deleted"}
