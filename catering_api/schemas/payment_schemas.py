from typing import Optional

from pydantic import Field

from catering_api.schemas.base import CamelModel
from catering_api.schemas.order_schemas import PendingOrderData


class PrepareRequest(CamelModel):
    order_id: Optional[int] = None
    amount: Optional[int] = None
    order_name: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone_number: Optional[str] = None


class VerifyRequest(CamelModel):
    imp_uid: Optional[str] = Field(default=None, alias="imp_uid")


class CompleteRequest(CamelModel):
    imp_uid: Optional[str] = Field(default=None, alias="imp_uid")
    merchant_uid: Optional[str] = Field(default=None, alias="merchant_uid")
    order_id: Optional[int] = None


class ProcessOrderRequest(CamelModel):
    payment_id: Optional[str] = None
    pending_order_data: Optional[PendingOrderData] = None


class CancelPaymentRequest(CamelModel):
    imp_uid: Optional[str] = Field(default=None, alias="imp_uid")
    merchant_uid: Optional[str] = Field(default=None, alias="merchant_uid")
    reason: Optional[str] = None
    amount: Optional[int] = None
    checksum: Optional[int] = None


class CashReceiptRequest(CamelModel):
    payment_id: Optional[str] = None
    type: Optional[str] = None
    identity_number: Optional[str] = None


class TaxInvoiceRequest(CamelModel):
    payment_id: Optional[str] = None
    order_id: Optional[str] = None
    business_number: Optional[str] = None
    company_name: Optional[str] = None
    ceo_name: Optional[str] = None
    business_address: Optional[str] = None
    business_type: Optional[str] = None
    business_category: Optional[str] = None
    email: Optional[str] = None
    total_amount: Optional[int] = None
