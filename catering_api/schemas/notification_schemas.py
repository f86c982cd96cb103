from typing import Dict, Optional

from catering_api.schemas.base import CamelModel


class AlimtalkSendRequest(CamelModel):
    phone: Optional[str] = None
    template_code: Optional[str] = None
    variables: Dict[str, str] = {}


class OrderNotificationRequest(CamelModel):
    partner_phone: Optional[str] = None
    customer_phone: Optional[str] = None
    partner_id: Optional[int] = None
    customer_id: Optional[int] = None
    is_additional_order: bool = False
    store_name: str = ""
    order_number: str = ""
    total_quantity: int = 0
    total_product_price: int = 0
    additional_quantity: int = 0
    additional_product_price: int = 0


class CancellationNotificationRequest(CamelModel):
    customer_phone: Optional[str] = None
    store_name: str = ""
    order_number: str = ""
    reason: Optional[str] = None
    refund_amount: int = 0


class ChatPushRequest(CamelModel):
    room_id: Optional[int] = None
    sender_id: Optional[int] = None
    sender_name: Optional[str] = None
    message: Optional[str] = None


class OrderPushRequest(CamelModel):
    user_id: Optional[int] = None
    title: Optional[str] = None
    body: Optional[str] = None
    data: Optional[Dict[str, str]] = None


class PhoneRequest(CamelModel):
    phone: Optional[str] = None


class PhoneVerifyRequest(CamelModel):
    phone: Optional[str] = None
    code: Optional[str] = None
