from sqlmodel import SQLModel, Field
from sqlalchemy import Column, Text
from typing import Optional
from datetime import datetime


class ChatRoom(SQLModel, table=True):
    __tablename__ = "chat_room"
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    partner_id: int = Field(foreign_key="user.id", index=True)
    store_id: int = Field(foreign_key="store.id")

    last_message: Optional[str] = None
    last_message_at: Optional[datetime] = None
    user_unread: int = 0
    partner_unread: int = 0

    created_at: datetime = Field(default_factory=datetime.utcnow)

    def participants(self):
        return [self.user_id, self.partner_id]


class ChatMessage(SQLModel, table=True):
    __tablename__ = "chat_message"
    id: Optional[int] = Field(default=None, primary_key=True)
    room_id: int = Field(foreign_key="chat_room.id", index=True)
    sender_id: int = Field(foreign_key="user.id")
    content: str = Field(sa_column=Column(Text))
    created_at: datetime = Field(default_factory=datetime.utcnow)


class ChatReport(SQLModel, table=True):
    __tablename__ = "chat_report"
    id: Optional[int] = Field(default=None, primary_key=True)
    room_id: int = Field(foreign_key="chat_room.id")
    reporter_id: int = Field(foreign_key="user.id")
    reason: str
    status: str = "pending"
    created_at: datetime = Field(default_factory=datetime.utcnow)
