import base64
import json
import logging
import re
from typing import List, Optional

import requests
from openai import OpenAI
from sqlmodel import Session, select

from catering_api.config import settings
from catering_api.exceptions import CateringError, ExternalServiceError, NotFoundError
from catering_api.models.product import Product
from catering_api.utils.phone import format_price

logger = logging.getLogger(__name__)

EVENTS = [
    "회의·업무 행사",
    "교육·세미나·강연",
    "발표·전시·데모",
    "워크숍·프로젝트 일정",
    "팀·조직 모임",
    "학교·학술 행사",
    "종교·단체 모임",
    "커뮤니티·봉사 활동",
    "파티·기념일 행사",
    "오픈·축하·답례 상황",
]

RECOMMEND_SYSTEM_PROMPT = (
    "당신은 케이터링 상품 추천 전문가입니다. 사용자의 요구사항에 맞는 상품을 추천해주세요."
)

DATA_URL_PATTERN = re.compile(r"^data:(.+);base64,(.+)$", re.DOTALL)
JSON_BLOCK_PATTERN = re.compile(r"\{[\s\S]*\}")

_client: Optional[OpenAI] = None


def get_client() -> OpenAI:
    global _client
    if not settings.openai_api_key:
        raise ExternalServiceError("OPENAI_API_KEY가 설정되지 않았습니다.", status_code=500)
    if _client is None:
        _client = OpenAI(api_key=settings.openai_api_key)
    return _client


def _product_summary(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price,
        "category": product.categories or [],
        "description": product.description or "",
        "productTypes": product.product_types or [],
        "imageUrl": (product.images or [""])[0],
    }


def build_product_list_text(products: List[dict]) -> str:
    lines = []
    for idx, p in enumerate(products, start=1):
        lines.append(
            f"{idx}. ID: {p['id']}\n"
            f"   이름: {p['name']}\n"
            f"   가격: {format_price(p['price'])}원\n"
            f"   카테고리: {', '.join(p['category'])}\n"
            f"   설명: {p['description']}\n"
        )
    return "\n".join(lines)


def recommend_products(session: Session, prompt: str) -> dict:
    client = get_client()

    products = [
        _product_summary(p)
        for p in session.exec(select(Product).where(Product.is_active == True)).all()  # noqa: E712
    ]
    if not products:
        raise NotFoundError("상품이 없습니다.")

    user_prompt = (
        f'사용자 요구사항: "{prompt}"\n\n'
        "아래는 현재 이용 가능한 상품 목록입니다:\n\n"
        f"{build_product_list_text(products)}\n\n"
        "위 상품들 중에서 사용자 요구사항에 가장 적합한 상품 5~10개를 추천해주세요.\n\n"
        "응답은 반드시 아래 JSON 형식으로만 작성해주세요 (다른 텍스트 없이):\n"
        '{\n  "recommendations": [\n    {\n      "productId": "상품ID",\n'
        '      "reason": "추천 이유를 한 문장으로"\n    }\n  ],\n'
        '  "summary": "전체 추천 요약 설명"\n}'
    )

    completion = client.chat.completions.create(
        model=settings.openai_model,
        messages=[
            {"role": "system", "content": RECOMMEND_SYSTEM_PROMPT},
            {"role": "user", "content": user_prompt},
        ],
        temperature=0.7,
        max_tokens=2000,
        response_format={"type": "json_object"},
    )
    response_text = completion.choices[0].message.content or ""

    try:
        ai_response = json.loads(response_text)
    except json.JSONDecodeError:
        logger.error(f"AI recommendation is not JSON: {response_text}")
        raise CateringError(
            "AI 응답을 파싱할 수 없습니다.",
            status_code=500,
            details={"rawResponse": response_text},
        )

    # model answers with string ids
    reasons = {
        str(r.get("productId")): r.get("reason", "")
        for r in ai_response.get("recommendations", [])
    }

    recommended = [
        {**p, "recommendationReason": reasons[str(p["id"])]}
        for p in products
        if str(p["id"]) in reasons
    ]

    return {
        "success": True,
        "products": recommended,
        "summary": ai_response.get("summary", ""),
        "totalRecommendations": len(recommended),
    }


def parse_data_url(image_base64: str):
    match = DATA_URL_PATTERN.match(image_base64)
    if not match:
        raise CateringError("이미지 형식이 올바르지 않습니다.", status_code=400)
    return match.group(1), match.group(2)


def fetch_image_as_base64(image_url: str):
    try:
        response = requests.get(
            image_url,
            headers={"User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"},
            timeout=10,
        )
    except requests.RequestException:
        logger.exception(f"Image download failed: {image_url}")
        return None

    if response.status_code >= 400:
        return None

    mime_type = response.headers.get("content-type", "image/jpeg").split(";")[0]
    return mime_type, base64.b64encode(response.content).decode("ascii")


def extract_events(text: str) -> dict:
    match = JSON_BLOCK_PATTERN.search(text or "")
    if not match:
        raise CateringError("AI 응답 파싱에 실패했습니다.", status_code=500)
    try:
        result = json.loads(match.group(0))
    except json.JSONDecodeError:
        raise CateringError("AI 응답 파싱에 실패했습니다.", status_code=500)

    events = [e for e in result.get("recommendedEvents") or [] if e in EVENTS]
    return {"recommendedEvents": events[:5], "reason": result.get("reason", "")}


def analyze_event(thumbnail_url: Optional[str] = None, image_base64: Optional[str] = None) -> dict:
    image = None
    if image_base64:
        image = parse_data_url(image_base64)
    elif thumbnail_url:
        image = fetch_image_as_base64(thumbnail_url)

    if not image:
        raise CateringError("이미지가 필요합니다.", status_code=400)

    mime_type, data = image
    event_list = "\n".join(f"{i}. {e}" for i, e in enumerate(EVENTS, start=1))
    prompt = (
        "다음은 케이터링/음식 상품의 썸네일 이미지입니다. 이 이미지를 분석하여 "
        "이 음식이 어떤 행사/이벤트에 적합한지 추천해주세요.\n\n"
        f"가능한 이벤트 목록:\n{event_list}\n\n"
        "분석 기준:\n- 음식의 종류 (디저트, 샌드위치, 도시락, 케이터링 등)\n"
        "- 음식의 양과 구성\n- 포장/플레이팅 스타일\n"
        "- 가격대 느낌 (고급스러움, 캐주얼함 등)\n\n"
        "응답 형식:\n반드시 아래 JSON 형식으로만 응답해주세요. 다른 텍스트 없이 JSON만 출력하세요.\n"
        '{\n  "recommendedEvents": ["이벤트1", "이벤트2", ...],\n'
        '  "reason": "추천 이유를 한 문장으로"\n}\n\n'
        "추천 이벤트는 위 목록에 있는 이벤트 이름을 정확히 사용해주세요.\n"
        "최소 1개, 최대 5개까지 추천해주세요."
    )

    completion = get_client().chat.completions.create(
        model=settings.openai_vision_model,
        messages=[
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{data}"}},
                ],
            }
        ],
        max_tokens=500,
    )

    result = extract_events((completion.choices[0].message.content or "").strip())
    return {"success": True, **result}
