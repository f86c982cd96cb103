from datetime import date
from typing import List, Optional

from pydantic import BaseModel

from catering_api.schemas.base import CamelModel


class UpdateStatusRequest(CamelModel):
    order_id: Optional[int] = None
    status: Optional[str] = None
    tracking_info: Optional[dict] = None


class ConfirmRequest(CamelModel):
    order_id: Optional[int] = None
    uid: Optional[int] = None


class TaskCallbackRequest(CamelModel):
    order_id: Optional[int] = None


class CancelOrderRequest(BaseModel):
    reason: Optional[str] = None


class OrderItemIn(CamelModel):
    product_id: Optional[int] = None
    product_name: str
    quantity: int
    item_price: int
    options: Optional[list] = None


class OrderInfo(CamelModel):
    orderer: Optional[str] = None
    phone: Optional[str] = None
    delivery_date: Optional[date] = None
    delivery_time: Optional[str] = None
    address: Optional[str] = None
    detail_address: Optional[str] = None
    zip_code: Optional[str] = None


class PendingOrderData(CamelModel):
    """Checkout snapshot the client keeps until the gateway redirects back."""

    order_info: OrderInfo = OrderInfo()
    recipient: Optional[str] = None
    address_name: Optional[str] = None
    delivery_request: Optional[str] = None
    detailed_request: Optional[str] = None
    entrance_code: Optional[str] = None
    delivery_method: str = "pickup"
    parcel_payment_method: Optional[str] = None
    use_point: int = 0
    coupon_id: Optional[int] = None
    total_price: int = 0
    total_product_price: int = 0
    delivery_fee: int = 0
    order_id: Optional[int] = None
    store_id: Optional[int] = None
    store_name: Optional[str] = None
    product_name: Optional[str] = None
    items: List[OrderItemIn] = []
    partner_id: Optional[int] = None
    partner_phone: Optional[str] = None
    request: Optional[str] = None
    cart_id_param: Optional[int] = None
    cart_item_ids: List[int] = []
    additional_order_id_param: Optional[int] = None

    def all_cart_item_ids(self) -> List[int]:
        ids = list(self.cart_item_ids)
        if self.cart_id_param and self.cart_id_param not in ids:
            ids.append(self.cart_id_param)
        return ids


class CreateOrderRequest(CamelModel):
    cart_item_ids: List[int]
    checkout: PendingOrderData
