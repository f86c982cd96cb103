from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from catering_api.database import get_session
from catering_api.models.chat import ChatMessage
from catering_api.models.user import User
from catering_api.schemas.content_schemas import ChatMessageCreate, ChatReportCreate, ChatRoomCreate
from catering_api.services import chat_service
from catering_api.utils.token import get_current_user

router = APIRouter()


@router.post("/rooms")
def open_room(
    data: ChatRoomCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return chat_service.get_or_create_room(session, user=current_user, store_id=data.store_id)


@router.get("/rooms")
def my_rooms(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return chat_service.list_rooms(session, current_user)


@router.get("/rooms/{room_id}/messages")
def room_messages(
    room_id: int,
    limit: int = 50,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    room = chat_service.get_room_for(session, room_id, current_user)

    messages = session.exec(
        select(ChatMessage)
        .where(ChatMessage.room_id == room.id)
        .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
        .limit(limit)
    ).all()
    return list(reversed(messages))


@router.post("/rooms/{room_id}/messages")
def post_message(
    room_id: int,
    data: ChatMessageCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    room = chat_service.get_room_for(session, room_id, current_user)
    return chat_service.send_message(session, room=room, sender=current_user, content=data.content)


@router.post("/rooms/{room_id}/read")
def read_room(
    room_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    room = chat_service.get_room_for(session, room_id, current_user)
    return chat_service.mark_read(session, room=room, user=current_user)


@router.post("/rooms/{room_id}/report")
def report_room(
    room_id: int,
    data: ChatReportCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    room = chat_service.get_room_for(session, room_id, current_user)
    report = chat_service.report_room(session, room=room, reporter=current_user, reason=data.reason)
    return {"success": True, "reportId": report.id}
