from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from catering_api.schemas.base import CamelModel


class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str
    phone: Optional[str] = None
    role: Literal["consumer", "partner"] = "consumer"


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str


class UserResponse(BaseModel):
    message: str
    user_id: int
    email: EmailStr
    role: str


class FcmTokenUpdate(CamelModel):
    user_id: Optional[int] = None
    fcm_token: Optional[str] = None


class ActiveRoomUpdate(CamelModel):
    room_id: Optional[int] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
