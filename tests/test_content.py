"""
Admin managed content and its public read side.
"""
from datetime import datetime, timedelta

import pytest

from catering_api.models.content import AICategory, Magazine, Notice, Popup
from tests.conftest import auth_headers


class TestAdminNotices:
    """Notice CRUD under /admin."""

    @pytest.mark.api
    def test_publish_stamps_published_at(self, client, admin):
        response = client.post(
            "/admin/notices",
            json={"title": "배송 안내", "content": "추석 연휴 배송 일정", "status": "published"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        assert response.json()["published_at"] is not None
        assert response.json()["author_id"] == admin.id

    @pytest.mark.api
    def test_draft_has_no_published_at(self, client, admin):
        response = client.post(
            "/admin/notices",
            json={"title": "초안", "content": "작성 중"},
            headers=auth_headers(admin),
        )
        assert response.json()["status"] == "draft"
        assert response.json()["published_at"] is None

    @pytest.mark.api
    def test_consumer_is_refused(self, client, consumer):
        response = client.post(
            "/admin/notices",
            json={"title": "x", "content": "y"},
            headers=auth_headers(consumer),
        )
        assert response.status_code == 403

    @pytest.mark.api
    def test_popup_window_validation(self, client, admin):
        response = client.post(
            "/admin/popups",
            json={
                "title": "이벤트",
                "image_url": "https://cdn.example.com/p.png",
                "start_date": "2026-11-10T00:00:00",
                "end_date": "2026-11-01T00:00:00",
            },
            headers=auth_headers(admin),
        )
        assert response.status_code == 400


class TestPublicContent:
    """Read side under /content."""

    @pytest.mark.api
    def test_only_published_notices_are_listed(self, client, session):
        session.add(Notice(title="공개", content="a", status="published", published_at=datetime.utcnow()))
        session.add(Notice(title="비공개", content="b"))
        session.add(Notice(title="파트너 전용", content="c", status="published",
                           target_type="partner", published_at=datetime.utcnow()))
        session.commit()

        body = client.get("/content/notices").json()
        assert [n["title"] for n in body["results"]] == ["공개"]

        partner_view = client.get("/content/notices", params={"target": "partner"}).json()
        assert partner_view["total_items"] == 2

    @pytest.mark.api
    def test_notice_detail_counts_views(self, client, session):
        notice = Notice(title="공지", content="a", status="published", published_at=datetime.utcnow())
        draft = Notice(title="초안", content="b")
        session.add(notice)
        session.add(draft)
        session.commit()

        client.get(f"/content/notices/{notice.id}")
        response = client.get(f"/content/notices/{notice.id}")

        assert response.json()["view_count"] == 2
        assert client.get(f"/content/notices/{draft.id}").status_code == 404

    @pytest.mark.api
    def test_magazine_like(self, client, session):
        magazine = Magazine(title="여름 케이터링", content="본문", status="published",
                            published_at=datetime.utcnow())
        session.add(magazine)
        session.commit()

        response = client.post(f"/content/magazines/{magazine.id}/like")
        assert response.json() == {"like_count": 1}

    @pytest.mark.api
    def test_popups_respect_date_window(self, client, session):
        now = datetime.utcnow()
        session.add(Popup(title="진행중", image_url="a.png",
                          start_date=now - timedelta(days=1), end_date=now + timedelta(days=1)))
        session.add(Popup(title="종료", image_url="b.png",
                          start_date=now - timedelta(days=10), end_date=now - timedelta(days=5)))
        session.add(Popup(title="상시", image_url="c.png"))
        session.commit()

        titles = {p["title"] for p in client.get("/content/popups").json()}
        assert titles == {"진행중", "상시"}

    @pytest.mark.api
    def test_ai_categories_embed_active_products(self, client, session, product):
        session.add(AICategory(name="회의 간식", product_ids=[product.id, 9999], display_order=1))
        session.add(AICategory(name="숨김", is_active=False))
        session.commit()

        body = client.get("/content/ai-categories").json()
        assert len(body) == 1
        assert [p["id"] for p in body[0]["products"]] == [product.id]
