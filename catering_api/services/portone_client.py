import logging
import math
import time
from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from catering_api.config import settings
from catering_api.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)

IAMPORT_API_URL = "https://api.iamport.kr"
PORTONE_API_URL = "https://api.portone.io"

CASH_RECEIPT_METHODS = ("VIRTUAL_ACCOUNT", "TRANSFER")
DEFAULT_CANCEL_REASON = "고객 요청에 의한 취소"


def split_vat(total_amount: int):
    """Supply amount and VAT for a VAT-inclusive total, both floored."""
    supply = math.floor(total_amount / 1.1)
    tax = math.floor(total_amount - total_amount / 1.1)
    return supply, tax


class PortOneClient:
    """
    Thin wrapper around PortOne.

    V1 (iamport) is used for verification, webhooks and cancellation,
    V2 for payment prepare, cash receipts and tax invoices.
    """

    timeout = 10

    # ---------- V1 ----------

    def get_access_token(self) -> str:
        response = requests.post(
            f"{IAMPORT_API_URL}/users/getToken",
            json={
                "imp_key": settings.portone_api_key,
                "imp_secret": settings.portone_api_secret,
            },
            timeout=self.timeout,
        )

        if response.status_code >= 400:
            logger.error(f"PortOne token error ({response.status_code}): {response.text}")
            raise PaymentGatewayError("Failed to get access token", status_code=500)

        return response.json()["response"]["access_token"]

    def get_payment(self, imp_uid: str, access_token: Optional[str] = None) -> Dict[str, Any]:
        """Full V1 response envelope: {code, message, response}."""
        token = access_token or self.get_access_token()

        response = requests.get(
            f"{IAMPORT_API_URL}/payments/{quote(imp_uid, safe='')}",
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.timeout,
        )

        if response.status_code >= 400:
            logger.error(f"PortOne payment lookup failed ({response.status_code}): {response.text}")
            raise PaymentGatewayError("Failed to verify payment", status_code=400)

        return response.json()

    def verify_payment(self, imp_uid: str) -> Dict[str, Any]:
        data = self.get_payment(imp_uid)
        payment = data.get("response") or {}

        logger.info(
            "PortOne V1 verify imp_uid=%s status=%s amount=%s",
            payment.get("imp_uid"), payment.get("status"), payment.get("amount"),
        )

        return {
            "verified": payment.get("status") == "paid",
            "payment": payment,
        }

    def cancel_payment(
        self,
        *,
        imp_uid: Optional[str] = None,
        merchant_uid: Optional[str] = None,
        reason: Optional[str] = None,
        amount: Optional[int] = None,
        checksum: Optional[int] = None,
    ) -> Dict[str, Any]:
        if not imp_uid and not merchant_uid:
            raise PaymentGatewayError("imp_uid or merchant_uid is required", status_code=400)

        token = self.get_access_token()

        body = {
            "imp_uid": imp_uid,
            "merchant_uid": merchant_uid,
            "reason": reason or DEFAULT_CANCEL_REASON,
            "amount": amount,  # partial cancel
            "checksum": checksum,  # remaining cancellable amount
        }
        body = {k: v for k, v in body.items() if v}

        response = requests.post(
            f"{IAMPORT_API_URL}/payments/cancel",
            json=body,
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.timeout,
        )

        if response.status_code >= 400:
            logger.error(f"PortOne cancel failed ({response.status_code}): {response.text}")
            raise PaymentGatewayError("Failed to cancel payment", status_code=500)

        cancellation = response.json().get("response") or {}
        logger.info(
            "PortOne V1 cancel imp_uid=%s merchant_uid=%s status=%s",
            cancellation.get("imp_uid"), cancellation.get("merchant_uid"), cancellation.get("status"),
        )
        return cancellation

    # ---------- V2 ----------

    def _v2_headers(self):
        return {
            "Authorization": f"PortOne {settings.portone_v2_api_secret or settings.portone_api_secret}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _error_message(response, default: str) -> str:
        try:
            return response.json().get("message") or default
        except ValueError:
            return default

    def prepare_payment(
        self,
        *,
        order_id,
        amount: int,
        order_name: str,
        customer_name: Optional[str] = None,
        customer_email: Optional[str] = None,
        customer_phone: Optional[str] = None,
    ) -> Dict[str, Any]:
        payment_id = f"payment-{order_id}-{int(time.time() * 1000)}"

        response = requests.post(
            f"{PORTONE_API_URL}/payments/prepare",
            json={
                "storeId": settings.portone_store_id,
                "paymentId": payment_id,
                "orderName": order_name,
                "totalAmount": amount,
                "currency": "KRW",
                "customer": {
                    "customerId": str(order_id),
                    "fullName": customer_name,
                    "email": customer_email,
                    "phoneNumber": customer_phone,
                },
            },
            headers=self._v2_headers(),
            timeout=self.timeout,
        )

        if response.status_code >= 400:
            try:
                details = response.json()
            except ValueError:
                details = response.text
            logger.error(f"PortOne prepare failed ({response.status_code}): {details}")
            raise PaymentGatewayError(
                "Failed to prepare payment",
                status_code=response.status_code,
                details=details,
            )

        return {"paymentId": payment_id, "data": response.json()}

    def get_payment_v2(self, payment_id: str) -> Dict[str, Any]:
        response = requests.get(
            f"{PORTONE_API_URL}/payments/{quote(payment_id, safe='')}",
            headers=self._v2_headers(),
            timeout=self.timeout,
        )

        if response.status_code >= 400:
            logger.error(f"PortOne V2 payment lookup failed ({response.status_code}): {response.text}")
            raise PaymentGatewayError("Failed to fetch payment information", status_code=500)

        return response.json()

    def issue_cash_receipt(self, *, payment_id: str, receipt_type: str, identity_number: str):
        payment = self.get_payment_v2(payment_id)
        pay_method = (payment.get("method") or {}).get("type") or payment.get("payMethod")

        if pay_method not in CASH_RECEIPT_METHODS:
            raise PaymentGatewayError(
                "현금영수증은 가상계좌 또는 계좌이체 결제만 가능합니다. "
                "카드 결제 및 간편결제는 발급이 불가능합니다.",
                status_code=400,
            )

        response = requests.post(
            f"{PORTONE_API_URL}/payments/{quote(payment_id, safe='')}/cash-receipt",
            json={
                "type": receipt_type,  # PERSONAL / CORPORATE
                "customerIdentityNumber": identity_number,
            },
            headers=self._v2_headers(),
            timeout=self.timeout,
        )

        if response.status_code >= 400:
            logger.error(f"PortOne cash receipt failed ({response.status_code}): {response.text}")
            raise PaymentGatewayError(
                self._error_message(response, "현금영수증 발급에 실패했습니다."),
                status_code=500,
            )

        return response.json()

    def build_tax_invoice(
        self,
        *,
        order_id,
        business_number: str,
        company_name: str,
        ceo_name: str,
        email: str,
        total_amount: int,
        business_address: Optional[str] = None,
        business_type: Optional[str] = None,
        business_category: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        now = now or datetime.now()
        today = now.date().isoformat()
        supply, tax = split_vat(total_amount)

        return {
            "taxInvoiceKey": f"tax-{order_id}-{int(now.timestamp() * 1000)}",
            "writeDate": today,
            "purposeType": "INVOICE",
            "taxationType": "TAXABLE",
            "supplier": {
                "brn": settings.business_registration_number,
                "name": settings.business_name or "케이터링",
                "representativeName": settings.business_ceo_name,
                "address": settings.business_address,
                "businessType": settings.business_type or "서비스업",
                "businessClass": settings.business_item or "케이터링",
                "contact": {"email": settings.business_email},
            },
            "recipient": {
                "brn": "".join(ch for ch in business_number if ch.isdigit()),
                "name": company_name,
                "representativeName": ceo_name,
                "address": business_address or "",
                "businessType": business_type or "서비스업",
                "businessClass": business_category or "일반",
                "contact": {"email": email},
            },
            "productList": [
                {
                    "purchaseDate": today,
                    "name": "케이터링 서비스",
                    "spec": "",
                    "quantity": 1,
                    "unitPrice": supply,
                    "supplyCost": supply,
                    "tax": tax,
                }
            ],
            "totalSupplyAmount": supply,
            "totalTaxAmount": tax,
            "totalAmount": total_amount,
            "remark": f"주문번호: {order_id}",
            "sendToNts": True,
        }

    def issue_tax_invoice(self, tax_invoice: Dict[str, Any]) -> Dict[str, Any]:
        response = requests.post(
            f"{PORTONE_API_URL}/b2b/tax-invoices/issue-immediately",
            json={"taxInvoice": tax_invoice},
            headers=self._v2_headers(),
            timeout=self.timeout,
        )

        if response.status_code >= 400:
            logger.error(f"PortOne tax invoice failed ({response.status_code}): {response.text}")
            raise PaymentGatewayError(
                self._error_message(response, "세금계산서 발급에 실패했습니다."),
                status_code=500,
            )

        return response.json()


portone = PortOneClient()
