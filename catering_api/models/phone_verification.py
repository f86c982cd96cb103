from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class PhoneVerification(SQLModel, table=True):
    __tablename__ = "phone_verification"
    id: Optional[int] = Field(default=None, primary_key=True)
    phone: str = Field(index=True, unique=True)
    code: str
    expires_at: datetime
    created_at: datetime = Field(default_factory=datetime.utcnow)
