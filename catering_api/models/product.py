from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import List, Optional
from datetime import datetime


class Product(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    store_id: int = Field(foreign_key="store.id", index=True)

    name: str = Field(index=True)
    price: int
    description: Optional[str] = None

    images: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    categories: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    product_types: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    event_tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    delivery_methods: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    options: Optional[list] = Field(default=None, sa_column=Column(JSON))

    min_order_days: int = Field(default=0)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
