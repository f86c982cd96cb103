from catering_api.notifications.events import OrderEvent
from catering_api.notifications.channels import Channel


NOTIFICATION_RULES = {

    OrderEvent.ORDER_PLACED: {
        Channel.ALIMTALK_PARTNER: True,
        Channel.ALIMTALK_CUSTOMER: True,
        Channel.PUSH_PARTNER: True,
        Channel.PUSH_CUSTOMER: True,
        Channel.INAPP_ADMIN: True,
    },

    OrderEvent.ADDITIONAL_ORDER_PLACED: {
        Channel.ALIMTALK_PARTNER: True,
        Channel.ALIMTALK_CUSTOMER: True,
        Channel.PUSH_PARTNER: True,
        Channel.PUSH_CUSTOMER: True,
        Channel.INAPP_ADMIN: True,
    },

    OrderEvent.ORDER_CANCELLED: {
        Channel.SMS_CUSTOMER: True,
        Channel.PUSH_CUSTOMER: True,
        Channel.PUSH_PARTNER: True,
        Channel.INAPP_ADMIN: True,
    },

    OrderEvent.SHIPPING_STARTED: {
        Channel.PUSH_CUSTOMER: True,
    },

    OrderEvent.CONFIRM_REMINDER: {
        Channel.ALIMTALK_CUSTOMER: True,
        Channel.PUSH_CUSTOMER: True,
    },

    OrderEvent.AUTO_CONFIRMED: {
        Channel.ALIMTALK_CUSTOMER: True,
        Channel.PUSH_CUSTOMER: True,
        Channel.INAPP_ADMIN: True,
    },

    OrderEvent.ORDER_CONFIRMED: {
        Channel.PUSH_PARTNER: True,
    },
}
