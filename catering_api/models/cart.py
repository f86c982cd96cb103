from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import Optional
from datetime import datetime


class CartItem(SQLModel, table=True):
    __tablename__ = "cart_item"
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    store_id: int = Field(foreign_key="store.id")
    product_id: int = Field(foreign_key="product.id")

    product_name: str
    quantity: int = Field(default=1)
    item_price: int  # unit price including selected options
    options: Optional[list] = Field(default=None, sa_column=Column(JSON))
    request_note: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
