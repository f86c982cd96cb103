import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from catering_api.database import get_session
from catering_api.models.chat import ChatRoom
from catering_api.models.user import User
from catering_api.schemas.notification_schemas import (
    AlimtalkSendRequest,
    CancellationNotificationRequest,
    ChatPushRequest,
    OrderNotificationRequest,
    OrderPushRequest,
)
from catering_api.services import aligo_client, fcm_service, order_notifications
from catering_api.utils.token import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


def _order_variables(data: OrderNotificationRequest) -> dict:
    return order_notifications.order_variables(
        store_name=data.store_name,
        order_number=data.order_number,
        total_quantity=data.total_quantity,
        total_product_price=data.total_product_price,
        additional_quantity=data.additional_quantity,
        additional_product_price=data.additional_product_price,
    )


def _send_order(data: OrderNotificationRequest, session: Session) -> dict:
    return order_notifications.send_order_notification(
        session,
        partner_phone=data.partner_phone,
        customer_phone=data.customer_phone,
        partner_id=data.partner_id,
        customer_id=data.customer_id,
        is_additional=data.is_additional_order,
        variables=_order_variables(data),
    )


@router.post("/alimtalk/send")
def send_alimtalk(data: AlimtalkSendRequest, _: User = Depends(get_current_user)):
    if not data.phone or not data.template_code:
        raise HTTPException(400, "Missing required fields")

    success = aligo_client.send_alimtalk(data.phone, data.template_code, data.variables)
    return {"success": success}


@router.post("/notifications/send-order")
def send_order_notification(
    data: OrderNotificationRequest,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_user),
):
    _send_order(data, session)
    return {"success": True}


@router.post("/sms/send-order")
def sms_send_order(
    data: OrderNotificationRequest,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_user),
):
    result = _send_order(data, session)
    return {"success": True, "message": "알림이 발송되었습니다.", "result": result}


@router.post("/sms/send-cancellation")
def sms_send_cancellation(
    data: CancellationNotificationRequest,
    _: User = Depends(get_current_user),
):
    if not data.customer_phone:
        raise HTTPException(400, "customerPhone is required")

    sent = order_notifications.send_cancellation_sms(
        customer_phone=data.customer_phone,
        store_name=data.store_name,
        order_number=data.order_number,
        reason=data.reason,
        refund_amount=data.refund_amount,
    )
    if not sent:
        raise HTTPException(500, "취소 알림 발송에 실패했습니다.")

    return {"success": True, "message": "취소 알림이 발송되었습니다."}


@router.post("/send-fcm")
def send_chat_fcm(
    data: ChatPushRequest,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_user),
):
    if not data.room_id or not data.sender_id or not data.message:
        raise HTTPException(400, "Missing required fields")

    room = session.get(ChatRoom, data.room_id)
    if not room:
        raise HTTPException(404, "Chat room not found")

    result = fcm_service.send_chat_push(
        session,
        room=room,
        sender_id=data.sender_id,
        sender_name=data.sender_name,
        message=data.message,
    )
    if not result["success"]:
        raise HTTPException(404, result["message"])
    return result


@router.post("/send-order-fcm")
def send_order_fcm(
    data: OrderPushRequest,
    session: Session = Depends(get_session),
    _: User = Depends(get_current_user),
):
    if not data.user_id or not data.title or not data.body:
        raise HTTPException(400, "Missing required fields")

    return fcm_service.send_order_push(
        session, user_id=data.user_id, title=data.title, body=data.body, data=data.data,
    )
