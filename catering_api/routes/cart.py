from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from catering_api.database import get_session
from catering_api.models.cart import CartItem
from catering_api.models.product import Product
from catering_api.models.user import User
from catering_api.schemas.cart_schemas import CartAddRequest, CartUpdateRequest
from catering_api.utils.token import get_current_user

router = APIRouter()


# Add to Cart

@router.post("")
def add_to_cart(
    data: CartAddRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    product = session.get(Product, data.product_id)
    if not product or not product.is_active:
        raise HTTPException(status_code=404, detail="Product not found")

    item = CartItem(
        user_id=current_user.id,
        store_id=product.store_id,
        product_id=product.id,
        product_name=product.name,
        quantity=data.quantity,
        item_price=product.price + data.option_price,
        options=data.options,
        request_note=data.request_note,
    )

    session.add(item)
    session.commit()
    session.refresh(item)

    return {"message": "Added to cart", "item": item}


# View Cart

@router.get("")
def get_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    items = session.exec(
        select(CartItem)
        .where(CartItem.user_id == current_user.id)
        .order_by(CartItem.created_at)
    ).all()

    return {
        "items": items,
        "total_quantity": sum(i.quantity for i in items),
        "total_product_price": sum(i.item_price * i.quantity for i in items),
    }


@router.put("/{item_id}")
def update_cart_item(
    item_id: int,
    data: CartUpdateRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    item = session.get(CartItem, item_id)
    if not item or item.user_id != current_user.id:
        raise HTTPException(404, "Cart item not found")

    if data.quantity <= 0:
        session.delete(item)
        session.commit()
        return {"message": "Item removed"}

    item.quantity = data.quantity
    session.add(item)
    session.commit()
    session.refresh(item)
    return {"message": "Cart updated", "item": item}


@router.delete("/{item_id}")
def remove_cart_item(
    item_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    item = session.get(CartItem, item_id)
    if not item or item.user_id != current_user.id:
        raise HTTPException(404, "Cart item not found")

    session.delete(item)
    session.commit()
    return {"message": "Item removed"}


@router.delete("")
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    items = session.exec(select(CartItem).where(CartItem.user_id == current_user.id)).all()
    for item in items:
        session.delete(item)
    session.commit()
    return {"message": "Cart cleared"}
