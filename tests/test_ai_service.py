"""
OpenAI backed product curation and event tagging.
"""
import json
from unittest.mock import MagicMock, patch

import pytest

from catering_api.exceptions import CateringError, NotFoundError
from catering_api.models.product import Product
from catering_api.services import ai_service
from tests.conftest import auth_headers


def _completion(content):
    completion = MagicMock()
    completion.choices = [MagicMock(message=MagicMock(content=content))]
    return completion


@pytest.fixture
def openai_client():
    client = MagicMock()
    with patch.object(ai_service, "get_client", return_value=client):
        yield client


class TestRecommend:

    @pytest.mark.unit
    def test_keeps_only_known_products(self, session, product, openai_client):
        openai_client.chat.completions.create.return_value = _completion(json.dumps({
            "recommendations": [
                {"productId": str(product.id), "reason": "회의에 적합"},
                {"productId": "9999", "reason": "없는 상품"},
            ],
            "summary": "회의용 추천",
        }))

        result = ai_service.recommend_products(session, "회의용 간식")

        assert result["totalRecommendations"] == 1
        assert result["products"][0]["id"] == product.id
        assert result["products"][0]["recommendationReason"] == "회의에 적합"
        assert result["summary"] == "회의용 추천"

    @pytest.mark.unit
    def test_inactive_products_are_hidden(self, session, product, openai_client):
        product.is_active = False
        session.add(product)
        session.commit()

        with pytest.raises(NotFoundError):
            ai_service.recommend_products(session, "아무거나")
        openai_client.chat.completions.create.assert_not_called()

    @pytest.mark.unit
    def test_unparseable_answer(self, session, product, openai_client):
        openai_client.chat.completions.create.return_value = _completion("추천드립니다")

        with pytest.raises(CateringError) as exc:
            ai_service.recommend_products(session, "회의")
        assert exc.value.status_code == 500
        assert exc.value.details == {"rawResponse": "추천드립니다"}


class TestAnalyzeEvent:

    @pytest.mark.unit
    def test_extract_events_filters_unknown(self):
        text = 'Sure! {"recommendedEvents": ["팀·조직 모임", "생일파티"], "reason": "간단한 구성"}'
        result = ai_service.extract_events(text)

        assert result == {"recommendedEvents": ["팀·조직 모임"], "reason": "간단한 구성"}

    @pytest.mark.unit
    def test_extract_events_without_json(self):
        with pytest.raises(CateringError):
            ai_service.extract_events("no json here")

    @pytest.mark.unit
    def test_invalid_data_url(self):
        with pytest.raises(CateringError) as exc:
            ai_service.analyze_event(image_base64="not-a-data-url")
        assert exc.value.status_code == 400

    @pytest.mark.unit
    def test_analyze_from_base64(self, openai_client):
        openai_client.chat.completions.create.return_value = _completion(
            '{"recommendedEvents": ["회의·업무 행사"], "reason": "도시락"}'
        )

        result = ai_service.analyze_event(image_base64="data:image/png;base64,aGVsbG8=")

        assert result["success"] is True
        assert result["recommendedEvents"] == ["회의·업무 행사"]
        content = openai_client.chat.completions.create.call_args.kwargs["messages"][0]["content"]
        assert content[1]["image_url"]["url"] == "data:image/png;base64,aGVsbG8="


class TestRoutes:

    @pytest.mark.api
    def test_recommend_requires_prompt(self, client, admin):
        response = client.post("/admin/ai-recommend-products", json={"prompt": "  "},
                               headers=auth_headers(admin))
        assert response.status_code == 400
        assert response.json()["detail"] == "프롬프트를 입력해주세요."

    @pytest.mark.api
    def test_recommend_is_admin_only(self, client, consumer):
        response = client.post("/admin/ai-recommend-products", json={"prompt": "회의"},
                               headers=auth_headers(consumer))
        assert response.status_code == 403

    @pytest.mark.api
    def test_analyze_needs_an_image(self, client, partner):
        response = client.post("/products/analyze-event", json={}, headers=auth_headers(partner))
        assert response.status_code == 400
