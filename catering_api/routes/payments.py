import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlmodel import Session

from catering_api.database import get_session
from catering_api.dependencies.auth import require_admin
from catering_api.models.user import User
from catering_api.schemas.payment_schemas import (
    CancelPaymentRequest,
    CompleteRequest,
    PrepareRequest,
    ProcessOrderRequest,
    VerifyRequest,
)
from catering_api.services import payment_service
from catering_api.services.portone_client import portone
from catering_api.utils.token import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/prepare")
def prepare_payment(data: PrepareRequest, current_user: User = Depends(get_current_user)):
    if not data.order_id or not data.amount or not data.order_name:
        raise HTTPException(400, "Missing required fields")

    result = portone.prepare_payment(
        order_id=data.order_id,
        amount=data.amount,
        order_name=data.order_name,
        customer_name=data.customer_name or current_user.name,
        customer_email=data.customer_email or current_user.email,
        customer_phone=data.customer_phone_number or current_user.phone,
    )
    return {"success": True, **result}


@router.post("/verify")
def verify_payment(data: VerifyRequest):
    if not data.imp_uid:
        raise HTTPException(400, "imp_uid is required")
    return portone.verify_payment(data.imp_uid)


@router.post("/complete")
def complete_payment(data: CompleteRequest, session: Session = Depends(get_session)):
    """Mobile redirect target; the app only holds imp_uid and the order id."""
    return payment_service.complete_payment(
        session,
        imp_uid=data.imp_uid,
        merchant_uid=data.merchant_uid,
        order_id=data.order_id,
    )


@router.post("/process-order")
def process_order(
    data: ProcessOrderRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return payment_service.process_order(
        session,
        payment_id=data.payment_id,
        pending=data.pending_order_data,
        user=current_user,
    )


@router.post("/webhook")
def portone_webhook(body: Dict[str, Any] = Body(...), session: Session = Depends(get_session)):
    logger.info(f"PortOne webhook received: {body}")
    return payment_service.handle_webhook(session, body)


@router.post("/cancel")
def cancel_payment(
    data: CancelPaymentRequest,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    cancellation = payment_service.cancel_gateway_payment(
        session,
        imp_uid=data.imp_uid,
        merchant_uid=data.merchant_uid,
        reason=data.reason,
        amount=data.amount,
        checksum=data.checksum,
    )
    return {"success": True, "cancellation": cancellation}
