from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import Optional
from datetime import datetime


class Payment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)
    user_id: Optional[int] = Field(default=None, foreign_key="user.id")

    txn_id: str = Field(index=True, unique=True)  # imp_uid or V2 payment id
    merchant_uid: Optional[str] = None
    amount: int
    method: Optional[str] = None  # card / trans / vbank ...
    status: str = "paid"
    kind: str = "regular"  # regular / additional

    gateway_response: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=datetime.utcnow)
    cancelled_at: Optional[datetime] = None
    cancelled_amount: int = 0
