from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from catering_api.database import get_session
from catering_api.dependencies.auth import require_admin, require_partner
from catering_api.models.user import User
from catering_api.schemas.content_schemas import AIRecommendRequest, AnalyzeEventRequest
from catering_api.services import ai_service

router = APIRouter()


@router.post("/admin/ai-recommend-products")
def ai_recommend_products(
    data: AIRecommendRequest,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    if not data.prompt or not data.prompt.strip():
        raise HTTPException(400, "프롬프트를 입력해주세요.")

    return ai_service.recommend_products(session, data.prompt.strip())


@router.post("/products/analyze-event")
def analyze_event(
    data: AnalyzeEventRequest,
    _: User = Depends(require_partner),
):
    if not data.thumbnailUrl and not data.imageBase64:
        raise HTTPException(400, "썸네일 URL 또는 이미지 데이터가 필요합니다.")

    return ai_service.analyze_event(
        thumbnail_url=data.thumbnailUrl,
        image_base64=data.imageBase64,
    )
