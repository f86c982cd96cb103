import logging
from typing import Dict, Optional

import firebase_admin
from firebase_admin import credentials, exceptions, messaging
from sqlmodel import Session

from catering_api.config import settings
from catering_api.exceptions import ExternalServiceError
from catering_api.models.chat import ChatRoom
from catering_api.models.user import User

logger = logging.getLogger(__name__)

CHAT_CHANNEL_ID = "chat_messages"


def _get_app():
    if firebase_admin._apps:
        return firebase_admin.get_app()

    if not (settings.firebase_project_id and settings.firebase_client_email and settings.firebase_private_key):
        raise ExternalServiceError("Firebase credentials are not configured", status_code=500)

    cred = credentials.Certificate({
        "type": "service_account",
        "project_id": settings.firebase_project_id,
        "client_email": settings.firebase_client_email,
        "private_key": settings.firebase_private_key.replace("\\n", "\n"),
        "token_uri": "https://oauth2.googleapis.com/token",
    })
    app = firebase_admin.initialize_app(cred, {"projectId": settings.firebase_project_id})
    logger.info(f"Firebase Admin initialised for project {settings.firebase_project_id}")
    return app


def _send(message: messaging.Message) -> str:
    return messaging.send(message, app=_get_app())


def chat_preview(message: str) -> str:
    if message.startswith("[이미지]"):
        return "📷 사진을 보냈습니다"
    if message.startswith("[상품]"):
        return "🏷️ 상품을 공유했습니다"
    return message


def _is_invalid_token(error: Exception) -> bool:
    if isinstance(error, (messaging.UnregisteredError, exceptions.NotFoundError)):
        return True
    text = str(error)
    return (
        "not a valid FCM registration token" in text
        or "registration-token-not-registered" in text
        or "Requested entity was not found" in text
    )


def build_order_message(token: str, title: str, body: str, data: Optional[Dict] = None) -> messaging.Message:
    """Data-only message; the client app renders the notification itself."""
    payload = {"title": title, "body": body}
    for key, value in (data or {}).items():
        payload[key] = "" if value is None else str(value)

    return messaging.Message(
        token=token,
        data=payload,
        android=messaging.AndroidConfig(priority="high"),
        apns=messaging.APNSConfig(
            headers={"apns-priority": "10", "apns-push-type": "alert"},
            payload=messaging.APNSPayload(
                aps=messaging.Aps(
                    alert=messaging.ApsAlert(title=title, body=body),
                    sound="default",
                    badge=1,
                    content_available=True,
                )
            ),
        ),
    )


def send_order_push(
    session: Session,
    *,
    user_id: int,
    title: str,
    body: str,
    data: Optional[Dict] = None,
) -> dict:
    user = session.get(User, user_id)
    if not user or not user.fcm_token:
        logger.info(f"No FCM token for user {user_id}")
        return {"success": True, "message": "No FCM token available"}

    try:
        message_id = _send(build_order_message(user.fcm_token, title, body, data))
    except Exception as e:
        if _is_invalid_token(e):
            logger.info(f"Removing invalid FCM token for user {user_id}")
            user.fcm_token = None
            session.add(user)
            session.commit()
            return {"success": True, "message": "Invalid FCM token removed"}
        raise ExternalServiceError("Failed to send FCM notification", status_code=500, details=str(e))

    logger.info(f"Order push sent to user {user_id}: {message_id}")
    return {"success": True, "messageId": message_id}


def send_chat_push(
    session: Session,
    *,
    room: ChatRoom,
    sender_id: int,
    sender_name: Optional[str],
    message: str,
) -> dict:
    recipient_id = next((uid for uid in room.participants() if uid != sender_id), None)
    if recipient_id is None:
        return {"success": False, "message": "Recipient not found"}

    recipient = session.get(User, recipient_id)
    if not recipient or not recipient.fcm_token:
        return {"success": True, "message": "No FCM token available"}

    if recipient.active_room_id == room.id:
        return {"success": True, "message": "Recipient is in the chat room"}

    title = sender_name or "새 메시지"
    body = chat_preview(message)

    fcm_message = messaging.Message(
        token=recipient.fcm_token,
        notification=messaging.Notification(title=title, body=body),
        data={
            "roomId": str(room.id),
            "senderId": str(sender_id),
            "senderName": sender_name or "",
            "type": "chat",
        },
        android=messaging.AndroidConfig(
            priority="high",
            notification=messaging.AndroidNotification(
                channel_id=CHAT_CHANNEL_ID,
                priority="high",
                default_sound=True,
                default_vibrate_timings=True,
            ),
        ),
        apns=messaging.APNSConfig(
            headers={"apns-priority": "10"},
            payload=messaging.APNSPayload(
                aps=messaging.Aps(
                    alert=messaging.ApsAlert(title=title, body=body),
                    sound="default",
                    badge=1,
                    content_available=True,
                )
            ),
        ),
    )

    try:
        message_id = _send(fcm_message)
    except Exception as e:
        raise ExternalServiceError("Failed to send FCM notification", status_code=500, details=str(e))

    return {"success": True, "messageId": message_id}
