from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password: str
    name: str
    phone: Optional[str] = Field(default=None, index=True)
    role: str = Field(default="consumer")  # consumer / partner / admin
    can_login: bool = Field(default=True)

    point: int = Field(default=0)

    fcm_token: Optional[str] = None
    fcm_token_updated_at: Optional[datetime] = None
    # chat room currently open on the user's device
    active_room_id: Optional[int] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
