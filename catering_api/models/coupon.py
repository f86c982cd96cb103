from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class Coupon(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None
    type: str  # percentage / fixed
    value: int
    min_order_amount: int = 0
    max_discount_amount: Optional[int] = None
    valid_days: int = 30
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


class UserCoupon(SQLModel, table=True):
    __tablename__ = "user_coupon"
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    coupon_id: int = Field(foreign_key="coupon.id")

    # snapshot of the template at issue time
    coupon_name: str
    type: str
    value: int
    min_order_amount: int = 0
    max_discount_amount: Optional[int] = None

    status: str = Field(default="available", index=True)  # available / used / expired
    issued_at: datetime = Field(default_factory=datetime.utcnow)
    expires_at: datetime
    used_at: Optional[datetime] = None
    order_id: Optional[int] = None
