from enum import Enum


class OrderEvent(str, Enum):
    ORDER_PLACED = "order_placed"
    ADDITIONAL_ORDER_PLACED = "additional_order_placed"
    ORDER_CANCELLED = "order_cancelled"
    SHIPPING_STARTED = "shipping_started"
    CONFIRM_REMINDER = "confirm_reminder"
    AUTO_CONFIRMED = "auto_confirmed"
    ORDER_CONFIRMED = "order_confirmed"
