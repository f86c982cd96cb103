from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from catering_api.database import get_session
from catering_api.models.point import PointHistory
from catering_api.models.user import User
from catering_api.schemas.user_schemas import ActiveRoomUpdate, FcmTokenUpdate, ProfileUpdate
from catering_api.utils.phone import normalize_phone
from catering_api.utils.token import get_current_user

router = APIRouter()


def serialize_user(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "phone": user.phone,
        "role": user.role,
        "point": user.point,
        "created_at": user.created_at,
    }


@router.get("/me")
def get_me(current_user: User = Depends(get_current_user)):
    return serialize_user(current_user)


@router.put("/me")
def update_me(
    data: ProfileUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    if data.name is not None:
        current_user.name = data.name
    if data.phone is not None:
        current_user.phone = normalize_phone(data.phone)

    current_user.updated_at = datetime.utcnow()
    session.add(current_user)
    session.commit()
    session.refresh(current_user)
    return serialize_user(current_user)


@router.get("/me/points")
def my_points(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    history = session.exec(
        select(PointHistory)
        .where(PointHistory.user_id == current_user.id)
        .order_by(PointHistory.created_at.desc())
    ).all()
    return {"point": current_user.point, "history": history}


@router.post("/fcm-token")
def save_fcm_token(data: FcmTokenUpdate, session: Session = Depends(get_session)):
    if not data.user_id or not data.fcm_token:
        raise HTTPException(400, "userId and fcmToken are required")

    user = session.get(User, data.user_id)
    if not user:
        raise HTTPException(404, "User not found")

    user.fcm_token = data.fcm_token
    user.fcm_token_updated_at = datetime.utcnow()
    session.add(user)
    session.commit()

    return {"success": True}


@router.put("/me/active-room")
def set_active_room(
    data: ActiveRoomUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    current_user.active_room_id = data.room_id
    session.add(current_user)
    session.commit()
    return {"success": True, "activeRoomId": data.room_id}
