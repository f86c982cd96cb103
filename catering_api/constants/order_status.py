from enum import Enum


class OrderStatus(str, Enum):
    pending = "pending"
    preparing = "preparing"
    shipping = "shipping"
    completed = "completed"
    cancelled = "cancelled"
    cancelled_before_accept = "cancelled_before_accept"
    rejected = "rejected"


class PaymentStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    cancelled = "cancelled"
    partial_cancelled = "partial_cancelled"


class SettlementStatus(str, Enum):
    none = "none"
    pending = "pending"
    completed = "completed"


class DeliveryMethod(str, Enum):
    quick = "quick"
    pickup = "pickup"
    parcel = "parcel"


class ConfirmationType(str, Enum):
    manual = "manual"
    auto = "auto"


ALLOWED_TRANSITIONS = {
    "pending": ["preparing", "rejected", "cancelled_before_accept", "cancelled"],
    "preparing": ["shipping", "cancelled"],
    "shipping": ["completed"],
    "completed": [],
    "cancelled": [],
    "cancelled_before_accept": [],
    "rejected": [],
}

CANCELLED_STATUSES = {"cancelled", "cancelled_before_accept", "rejected"}

# partner order tabs
STATUS_GROUPS = {
    "cancelled_rejected": ["cancelled", "cancelled_before_accept", "rejected"],
}

DELIVERY_METHOD_LABELS = {
    "quick": "퀵업체 배송",
    "pickup": "매장 픽업",
    "parcel": "택배 배송",
}


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, [])
