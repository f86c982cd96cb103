from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON, Text
from typing import List, Optional
from datetime import datetime


class Notice(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    content: str = Field(sa_column=Column(Text))
    summary: Optional[str] = None
    target_type: str = Field(default="all")  # all / partner / user
    category: str = Field(default="general")  # general / event
    status: str = Field(default="draft", index=True)  # draft / published
    view_count: int = 0
    author_id: Optional[int] = Field(default=None, foreign_key="user.id")
    published_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


class PartnerNotice(SQLModel, table=True):
    __tablename__ = "partner_notice"
    id: Optional[int] = Field(default=None, primary_key=True)
    store_id: int = Field(foreign_key="store.id", index=True)
    title: str
    content: str = Field(sa_column=Column(Text))
    is_pinned: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


class Faq(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    question: str
    answer: str = Field(sa_column=Column(Text))
    category: str = "general"
    target_type: str = Field(default="all")
    display_order: int = 0
    status: str = Field(default="draft", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


class Magazine(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    subtitle: Optional[str] = None
    content: str = Field(sa_column=Column(Text))
    cover_image: Optional[str] = None
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    status: str = Field(default="draft", index=True)  # draft / published / archived
    view_count: int = 0
    like_count: int = 0
    published_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


class Banner(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: Optional[str] = None
    image_url: str
    background_color: Optional[str] = None
    link_url: Optional[str] = None
    status: str = Field(default="active", index=True)  # active / inactive
    display_order: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


class Popup(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    image_url: str
    link_url: Optional[str] = None
    target_type: str = Field(default="all")
    status: str = Field(default="active", index=True)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    display_order: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


class AICategory(SQLModel, table=True):
    __tablename__ = "ai_category"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    product_ids: List[int] = Field(default_factory=list, sa_column=Column(JSON))
    prompt: Optional[str] = None
    is_active: bool = True
    display_order: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
