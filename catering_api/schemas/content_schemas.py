from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

Target = Literal["all", "partner", "user"]


class NoticeCreate(BaseModel):
    title: str
    content: str
    summary: Optional[str] = None
    target_type: Target = "all"
    category: Literal["general", "event"] = "general"
    status: Literal["draft", "published"] = "draft"


class NoticeUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    summary: Optional[str] = None
    target_type: Optional[Target] = None
    category: Optional[Literal["general", "event"]] = None
    status: Optional[Literal["draft", "published"]] = None


class FaqCreate(BaseModel):
    question: str
    answer: str
    category: str = "general"
    target_type: Target = "all"
    display_order: int = 0
    status: Literal["draft", "published"] = "draft"


class FaqUpdate(BaseModel):
    question: Optional[str] = None
    answer: Optional[str] = None
    category: Optional[str] = None
    target_type: Optional[Target] = None
    display_order: Optional[int] = None
    status: Optional[Literal["draft", "published"]] = None


class MagazineCreate(BaseModel):
    title: str
    subtitle: Optional[str] = None
    content: str
    cover_image: Optional[str] = None
    images: List[str] = []
    category: Optional[str] = None
    tags: List[str] = []
    status: Literal["draft", "published", "archived"] = "draft"


class MagazineUpdate(BaseModel):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    content: Optional[str] = None
    cover_image: Optional[str] = None
    images: Optional[List[str]] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[Literal["draft", "published", "archived"]] = None


class BannerCreate(BaseModel):
    title: str
    description: Optional[str] = None
    image_url: str
    background_color: Optional[str] = None
    link_url: Optional[str] = None
    status: Literal["active", "inactive"] = "active"
    display_order: int = 0


class BannerUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    background_color: Optional[str] = None
    link_url: Optional[str] = None
    status: Optional[Literal["active", "inactive"]] = None
    display_order: Optional[int] = None


class PopupCreate(BaseModel):
    title: str
    image_url: str
    link_url: Optional[str] = None
    target_type: Target = "all"
    status: Literal["active", "inactive"] = "active"
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    display_order: int = 0


class PopupUpdate(BaseModel):
    title: Optional[str] = None
    image_url: Optional[str] = None
    link_url: Optional[str] = None
    target_type: Optional[Target] = None
    status: Optional[Literal["active", "inactive"]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    display_order: Optional[int] = None


class PartnerNoticeCreate(BaseModel):
    title: str
    content: str
    is_pinned: bool = False


class PartnerNoticeUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    is_pinned: Optional[bool] = None


class AICategoryCreate(BaseModel):
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    product_ids: List[int] = []
    prompt: Optional[str] = None
    is_active: bool = True
    display_order: int = 0


class AICategoryUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    product_ids: Optional[List[int]] = None
    prompt: Optional[str] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = None


class CouponCreate(BaseModel):
    name: str
    description: Optional[str] = None
    type: Literal["percentage", "fixed"]
    value: int = Field(gt=0)
    min_order_amount: int = 0
    max_discount_amount: Optional[int] = None
    valid_days: int = Field(default=30, gt=0)
    is_active: bool = True


class CouponUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    value: Optional[int] = Field(default=None, gt=0)
    min_order_amount: Optional[int] = None
    max_discount_amount: Optional[int] = None
    valid_days: Optional[int] = Field(default=None, gt=0)
    is_active: Optional[bool] = None


class CouponIssueRequest(BaseModel):
    user_ids: List[int]


class ReviewCreate(BaseModel):
    order_id: int
    product_id: Optional[int] = None
    rating: int = Field(ge=1, le=5)
    content: str
    images: List[str] = []


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    content: Optional[str] = None
    images: Optional[List[str]] = None


class ChatRoomCreate(BaseModel):
    store_id: int


class ChatMessageCreate(BaseModel):
    content: str


class ChatReportCreate(BaseModel):
    reason: str


class SettlementCompleteRequest(BaseModel):
    orderIds: List[int]


class AIRecommendRequest(BaseModel):
    prompt: Optional[str] = None


class AnalyzeEventRequest(BaseModel):
    thumbnailUrl: Optional[str] = None
    imageBase64: Optional[str] = None
