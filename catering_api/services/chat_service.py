import logging
from datetime import datetime
from typing import List

from sqlmodel import Session, or_, select

from catering_api.exceptions import CateringError, NotFoundError
from catering_api.models.chat import ChatMessage, ChatReport, ChatRoom
from catering_api.models.store import Store
from catering_api.models.user import User
from catering_api.services import fcm_service

logger = logging.getLogger(__name__)


def get_or_create_room(session: Session, *, user: User, store_id: int) -> ChatRoom:
    store = session.get(Store, store_id)
    if not store:
        raise NotFoundError("Store not found")

    if store.owner_id == user.id:
        raise CateringError("Cannot open a chat with your own store")

    room = session.exec(
        select(ChatRoom)
        .where(ChatRoom.user_id == user.id)
        .where(ChatRoom.store_id == store_id)
    ).first()
    if room:
        return room

    room = ChatRoom(user_id=user.id, partner_id=store.owner_id, store_id=store_id)
    session.add(room)
    session.commit()
    session.refresh(room)
    return room


def get_room_for(session: Session, room_id: int, user: User) -> ChatRoom:
    room = session.get(ChatRoom, room_id)
    if not room or (user.id not in room.participants() and user.role != "admin"):
        raise NotFoundError("Chat room not found")
    return room


def list_rooms(session: Session, user: User) -> List[ChatRoom]:
    return session.exec(
        select(ChatRoom)
        .where(or_(ChatRoom.user_id == user.id, ChatRoom.partner_id == user.id))
        .order_by(ChatRoom.last_message_at.desc())
    ).all()


def send_message(session: Session, *, room: ChatRoom, sender: User, content: str) -> ChatMessage:
    if not content or not content.strip():
        raise CateringError("Message is empty")

    message = ChatMessage(room_id=room.id, sender_id=sender.id, content=content)
    session.add(message)

    room.last_message = fcm_service.chat_preview(content)
    room.last_message_at = datetime.utcnow()
    if sender.id == room.user_id:
        room.partner_unread += 1
    else:
        room.user_unread += 1
    session.add(room)

    session.commit()
    session.refresh(message)

    try:
        fcm_service.send_chat_push(
            session, room=room, sender_id=sender.id, sender_name=sender.name, message=content,
        )
    except Exception:
        logger.exception(f"Chat push failed for room {room.id}")

    return message


def mark_read(session: Session, *, room: ChatRoom, user: User) -> ChatRoom:
    if user.id == room.user_id:
        room.user_unread = 0
    elif user.id == room.partner_id:
        room.partner_unread = 0

    session.add(room)
    session.commit()
    session.refresh(room)
    return room


def report_room(session: Session, *, room: ChatRoom, reporter: User, reason: str) -> ChatReport:
    if not reason:
        raise CateringError("Reason is required")

    report = ChatReport(room_id=room.id, reporter_id=reporter.id, reason=reason)
    session.add(report)
    session.commit()
    session.refresh(report)

    logger.info(f"Chat room {room.id} reported by user {reporter.id}")
    return report
