from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import List, Optional
from datetime import datetime


class Store(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="user.id", index=True)

    name: str = Field(index=True)
    phone: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None

    city: Optional[str] = None
    district: Optional[str] = None
    dong: Optional[str] = None
    address_detail: Optional[str] = None

    categories: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
