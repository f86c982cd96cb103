from enum import Enum


class Channel(str, Enum):
    ALIMTALK_PARTNER = "alimtalk_partner"
    ALIMTALK_CUSTOMER = "alimtalk_customer"
    SMS_CUSTOMER = "sms_customer"
    PUSH_PARTNER = "push_partner"
    PUSH_CUSTOMER = "push_customer"
    INAPP_ADMIN = "inapp_admin"
