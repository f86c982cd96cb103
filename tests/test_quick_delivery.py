"""
Hudadaq courier client.
"""
from unittest.mock import MagicMock, patch

import pytest

from catering_api.exceptions import ExternalServiceError
from catering_api.services import quick_delivery
from tests.conftest import auth_headers, make_order

USER_DATA = {"topGroupNo": 1, "groupNo": 2, "customerNo": 3}


def _response(payload, status_code=200):
    response = MagicMock(status_code=status_code, text=str(payload))
    response.json.return_value = payload
    return response


@pytest.fixture(autouse=True)
def hudadaq_key():
    with patch.object(quick_delivery.settings, "hudadaq_api_key", "api-key"):
        yield


class TestBuildRequest:

    @pytest.mark.unit
    def test_payload_from_order_and_store(self, session, consumer, store):
        order = make_order(
            session, user=consumer, store=store, delivery_method="quick",
            delivery_info={
                "recipient": "이수령",
                "recipientPhone": "01099998888",
                "address": "서울 중구 세종대로 110",
                "detailAddress": "3층",
                "addressName": "시청",
                "detailedRequest": "정문 앞",
                "deliveryDate": "2026-11-02",
                "deliveryTime": "11:30",
            },
        )

        payload = quick_delivery.build_quick_delivery_request(order, store)

        assert payload["startAddress"] == "서울 강남구 역삼동"
        assert payload["destManager"] == "이수령"
        assert payload["hddMemo"] == "정문 앞"
        assert payload["reservDatetimeUp"] == "2026-11-02 11:30:00"
        assert payload["deliveryItem"] == {"bgBox": 1}
        assert "customerNo" not in payload


class TestRequests:

    @pytest.mark.unit
    def test_request_delivery_adds_account_fields(self):
        with patch.object(quick_delivery, "login", return_value=USER_DATA), \
             patch("catering_api.services.quick_delivery.requests.post",
                   return_value=_response({"orderNo": 5551})) as post:
            result = quick_delivery.request_delivery({"startAddress": "a", "destAddress": "b"})

        body = post.call_args.kwargs["json"]
        assert result["orderNo"] == 5551
        assert body["customerNo"] == 3
        assert body["upWay"] == "free_customer"
        assert post.call_args.kwargs["headers"]["x-hudadaq-application-token"] == "YXBpLWtleQ=="

    @pytest.mark.unit
    def test_login_failure(self):
        with patch.object(quick_delivery, "login", return_value=None):
            with pytest.raises(ExternalServiceError) as exc:
                quick_delivery.request_delivery({})
        assert exc.value.status_code == 401

    @pytest.mark.unit
    def test_charge_error_code(self):
        with patch.object(quick_delivery, "login", return_value=USER_DATA), \
             patch("catering_api.services.quick_delivery.requests.post",
                   return_value=_response({"code": "0", "errMsg": "주소 오류"})):
            with pytest.raises(ExternalServiceError) as exc:
                quick_delivery.get_charge({"startAddress": "a", "destAddress": "b"})
        assert exc.value.status_code == 400

    @pytest.mark.unit
    def test_history_waiting_for_dispatch(self):
        with patch.object(quick_delivery, "login", return_value=USER_DATA), \
             patch("catering_api.services.quick_delivery.requests.post",
                   return_value=_response({"code": "1", "orderList": [{"odrNo": "1"}]})):
            result = quick_delivery.get_history("2026-11-01", "2026-11-02", order_no="999")

        assert result["order"] is None
        assert result["message"] == quick_delivery.WAITING_FOR_DISPATCH

    @pytest.mark.unit
    def test_history_finds_order(self):
        with patch.object(quick_delivery, "login", return_value=USER_DATA), \
             patch("catering_api.services.quick_delivery.requests.post",
                   return_value=_response({"code": "1", "orderList": [{"odrNo": "999", "state": "배차"}]})):
            result = quick_delivery.get_history("2026-11-01", "2026-11-02", order_no="999")

        assert result["order"]["state"] == "배차"


class TestRoutes:

    @pytest.mark.api
    def test_history_needs_range(self, client, partner):
        response = client.post("/quick-delivery/history", json={"rangeStart": "2026-11-01"},
                               headers=auth_headers(partner))
        assert response.status_code == 400
