from fastapi import APIRouter, Depends, HTTPException

from catering_api.models.user import User
from catering_api.schemas.payment_schemas import CashReceiptRequest, TaxInvoiceRequest
from catering_api.services.portone_client import portone
from catering_api.utils.token import get_current_user

router = APIRouter()


@router.post("/cash-receipt/issue")
def issue_cash_receipt(data: CashReceiptRequest, _: User = Depends(get_current_user)):
    if not data.payment_id:
        raise HTTPException(400, "Payment ID is required")
    if not data.type or not data.identity_number:
        raise HTTPException(400, "Type and identity number are required")

    cash_receipt = portone.issue_cash_receipt(
        payment_id=data.payment_id,
        receipt_type=data.type,
        identity_number=data.identity_number,
    )
    return {"success": True, "cashReceipt": cash_receipt}


@router.post("/tax-invoice/issue")
def issue_tax_invoice(data: TaxInvoiceRequest, _: User = Depends(get_current_user)):
    if not data.payment_id or not data.order_id:
        raise HTTPException(400, "Payment ID and Order ID are required")
    if not data.business_number or not data.company_name or not data.ceo_name or not data.email:
        raise HTTPException(400, "Business information is required")
    if not data.total_amount:
        raise HTTPException(400, "Total amount is required")

    tax_invoice = portone.build_tax_invoice(
        order_id=data.order_id,
        business_number=data.business_number,
        company_name=data.company_name,
        ceo_name=data.ceo_name,
        email=data.email,
        total_amount=data.total_amount,
        business_address=data.business_address,
        business_type=data.business_type,
        business_category=data.business_category,
    )
    result = portone.issue_tax_invoice(tax_invoice)
    return {"success": True, "taxInvoice": result}
