# Aligo alimtalk template codes
PARTNER_ORDER = "UD_0958"
PARTNER_ADDITIONAL_ORDER = "UD_3133"
CUSTOMER_ORDER = "UD_3466"
CUSTOMER_ADDITIONAL_ORDER = "UD_3467"

# not yet registered with Kakao; Aligo answers "template not found" until then
ORDER_CONFIRM_REMINDER = "ORDER_CONFIRM_REMINDER"
ORDER_AUTO_CONFIRMED = "ORDER_AUTO_CONFIRMED"


def order_templates(is_additional: bool):
    """(partner_template, customer_template) for an order notification."""
    if is_additional:
        return PARTNER_ADDITIONAL_ORDER, CUSTOMER_ADDITIONAL_ORDER
    return PARTNER_ORDER, CUSTOMER_ORDER
