from typing import Optional

from pydantic import BaseModel, Field


class CartAddRequest(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)
    options: Optional[list] = None
    option_price: int = 0
    request_note: Optional[str] = None


class CartUpdateRequest(BaseModel):
    quantity: int
