from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class PointHistory(SQLModel, table=True):
    __tablename__ = "point_history"
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    amount: int  # signed
    type: str  # used / refunded / earned
    reason: str
    order_id: Optional[int] = Field(default=None, foreign_key="order.id")
    product_name: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
