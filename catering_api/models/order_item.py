from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from catering_api.models.order import Order


class OrderItem(SQLModel, table=True):
    __tablename__ = "order_item"
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)
    product_id: Optional[int] = Field(default=None, foreign_key="product.id")

    product_name: str
    quantity: int
    item_price: int  # line total
    options: Optional[list] = Field(default=None, sa_column=Column(JSON))

    payment_id: Optional[str] = None
    is_add_item: bool = Field(default=False)

    order: Optional["Order"] = Relationship(back_populates="items")
