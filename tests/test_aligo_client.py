"""
Aligo SMS / alimtalk client. The functions are imported directly so the
autouse channel mocks in conftest do not replace them here.
"""
from unittest.mock import MagicMock, patch

import pytest

from catering_api.services import aligo_client
from catering_api.services.aligo_client import fill_template, send_alimtalk, send_sms


@pytest.fixture(autouse=True)
def aligo_settings():
    with patch.multiple(
        aligo_client.settings,
        aligo_api_key="key",
        aligo_user_id="user",
        aligo_sender="0212345678",
        aligo_sender_key="sender-key",
        aligo_test_mode=False,
    ):
        aligo_client.clear_template_cache()
        yield
        aligo_client.clear_template_cache()


def _response(payload):
    response = MagicMock()
    response.json.return_value = payload
    return response


class TestFillTemplate:

    @pytest.mark.unit
    def test_replaces_every_placeholder(self):
        message = "#{storeName} 주문 #{orderNumber} / #{storeName}"
        assert fill_template(message, {"storeName": "행복", "orderNumber": "AB12"}) == "행복 주문 AB12 / 행복"

    @pytest.mark.unit
    def test_unknown_placeholder_left_alone(self):
        assert fill_template("#{missing}", {"storeName": "x"}) == "#{missing}"


class TestSendSms:

    @pytest.mark.unit
    def test_success_result_code(self):
        with patch("catering_api.services.aligo_client.requests.post",
                   return_value=_response({"result_code": "1"})) as post:
            assert send_sms("010-1234-5678", "안녕하세요") is True

        assert post.call_args.kwargs["data"]["receiver"] == "01012345678"

    @pytest.mark.unit
    def test_failure_result_code(self):
        with patch("catering_api.services.aligo_client.requests.post",
                   return_value=_response({"result_code": "-101", "message": "인증오류"})):
            assert send_sms("01012345678", "x") is False

    @pytest.mark.unit
    def test_test_mode_skips_http(self):
        with patch.object(aligo_client.settings, "aligo_test_mode", True), \
             patch("catering_api.services.aligo_client.requests.post") as post:
            assert send_sms("01012345678", "x") is True
        post.assert_not_called()


class TestSendAlimtalk:

    @pytest.mark.unit
    def test_template_fetched_once_and_filled(self):
        template = _response({
            "code": 0,
            "list": [{"templtContent": "#{storeName} 새 주문", "buttons": [{"name": "확인"}]}],
        })
        sent = _response({"code": 0})

        with patch("catering_api.services.aligo_client.requests.post",
                   side_effect=[template, sent, sent]) as post:
            assert send_alimtalk("01012345678", "UD_0958", {"storeName": "행복"}) is True
            assert send_alimtalk("01012345678", "UD_0958", {"storeName": "기쁨"}) is True

        assert post.call_count == 3
        assert post.call_args_list[1].kwargs["data"]["message_1"] == "행복 새 주문"
        assert post.call_args_list[2].kwargs["data"]["message_1"] == "기쁨 새 주문"

    @pytest.mark.unit
    def test_missing_template(self):
        with patch("catering_api.services.aligo_client.requests.post",
                   return_value=_response({"code": -99, "message": "no template"})):
            assert send_alimtalk("01012345678", "NOPE", {}) is False
