from catering_api.models.user import User
from catering_api.models.store import Store
from catering_api.models.product import Product
from catering_api.models.cart import CartItem
from catering_api.models.coupon import Coupon, UserCoupon
from catering_api.models.order_item import OrderItem
from catering_api.models.order import Order
from catering_api.models.order_event import OrderEvent
from catering_api.models.payment import Payment
from catering_api.models.point import PointHistory
from catering_api.models.content import (
    Notice,
    PartnerNotice,
    Faq,
    Magazine,
    Banner,
    Popup,
    AICategory,
)
from catering_api.models.chat import ChatRoom, ChatMessage, ChatReport
from catering_api.models.review import Review
from catering_api.models.notifications import Notification
from catering_api.models.phone_verification import PhoneVerification

__all__ = [
    "User",
    "Store",
    "Product",
    "CartItem",
    "Coupon",
    "UserCoupon",
    "OrderItem",
    "Order",
    "OrderEvent",
    "Payment",
    "PointHistory",
    "Notice",
    "PartnerNotice",
    "Faq",
    "Magazine",
    "Banner",
    "Popup",
    "AICategory",
    "ChatRoom",
    "ChatMessage",
    "ChatReport",
    "Review",
    "Notification",
    "PhoneVerification",
]
