from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON
from typing import List, Optional
from datetime import date, datetime

from catering_api.models.order_item import OrderItem


class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_number: str = Field(index=True)

    user_id: int = Field(foreign_key="user.id", index=True)
    store_id: int = Field(foreign_key="store.id", index=True)
    partner_id: int = Field(foreign_key="user.id", index=True)

    store_name: str = ""
    product_name: str = ""
    orderer: Optional[str] = None
    phone: Optional[str] = None
    partner_phone: Optional[str] = None
    request: Optional[str] = None

    total_product_price: int = 0
    total_quantity: int = 0
    delivery_fee: int = 0
    total_price: int = 0
    used_point: int = 0
    coupon_id: Optional[int] = Field(default=None, foreign_key="user_coupon.id")
    coupon_discount: int = 0

    delivery_method: str = Field(default="pickup")
    parcel_payment_method: Optional[str] = None
    # address, recipient and request fields as entered at checkout
    delivery_info: dict = Field(default_factory=dict, sa_column=Column(JSON))
    delivery_date: Optional[date] = None
    delivery_time: Optional[str] = None  # "HH:MM"
    tracking_info: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    quick_delivery_order_no: Optional[str] = None

    status: str = Field(default="pending", index=True)
    payment_status: str = Field(default="pending")
    payment_ids: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    payment_info: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    order_dates: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    verified_at: Optional[datetime] = None

    shipping_completed_at: Optional[datetime] = None
    notification_task_id: Optional[str] = None
    auto_complete_task_id: Optional[str] = None
    notification_sent: bool = Field(default=False)
    notification_sent_at: Optional[datetime] = None

    confirmed_at: Optional[datetime] = None
    confirmation_type: Optional[str] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancel_reason: Optional[str] = None

    settlement_status: str = Field(default="none")
    settlement_date: Optional[datetime] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    items: List["OrderItem"] = Relationship(back_populates="order")
