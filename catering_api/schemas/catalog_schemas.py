from typing import List, Optional

from pydantic import BaseModel, Field


class StoreCreate(BaseModel):
    name: str
    phone: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    dong: Optional[str] = None
    address_detail: Optional[str] = None
    categories: List[str] = []


class StoreUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    dong: Optional[str] = None
    address_detail: Optional[str] = None
    categories: Optional[List[str]] = None
    is_active: Optional[bool] = None


class ProductCreate(BaseModel):
    name: str
    price: int = Field(ge=0)
    description: Optional[str] = None
    images: List[str] = []
    categories: List[str] = []
    product_types: List[str] = []
    event_tags: List[str] = []
    delivery_methods: List[str] = []
    options: Optional[list] = None
    min_order_days: int = 0


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    price: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    images: Optional[List[str]] = None
    categories: Optional[List[str]] = None
    product_types: Optional[List[str]] = None
    event_tags: Optional[List[str]] = None
    delivery_methods: Optional[List[str]] = None
    options: Optional[list] = None
    min_order_days: Optional[int] = None
    is_active: Optional[bool] = None
