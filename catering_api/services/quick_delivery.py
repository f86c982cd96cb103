import base64
import logging
from typing import Any, Dict, Optional

import requests

from catering_api.config import settings
from catering_api.exceptions import ExternalServiceError
from catering_api.models.order import Order
from catering_api.models.store import Store

logger = logging.getLogger(__name__)

WAITING_FOR_DISPATCH = "배차 대기중입니다."


def _headers():
    if not settings.hudadaq_api_key:
        raise ExternalServiceError("HUDADAQ_API_KEY is not set", status_code=500)

    token = base64.b64encode(settings.hudadaq_api_key.encode("utf-8")).decode("ascii")
    return {
        "Content-Type": "application/json",
        "x-hudadaq-application-token": token,
    }


def _url(path: str) -> str:
    return f"{settings.hudadaq_base_url.rstrip('/')}/{path.lstrip('/')}"


def login() -> Optional[Dict[str, Any]]:
    """Returns the account block (topGroupNo, groupNo, customerNo ...) or None."""
    try:
        response = requests.post(
            _url("/member/login/"),
            json={
                "loginID": settings.hudadaq_login_id,
                "passWd": settings.hudadaq_login_password,
            },
            headers=_headers(),
            timeout=10,
        )
    except requests.RequestException:
        logger.exception("Hudadaq login error")
        return None

    if response.status_code >= 400:
        logger.error(f"Hudadaq login failed ({response.status_code})")
        return None

    return response.json().get("userData")


def _account_fields(user_data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "topGroupNo": user_data["topGroupNo"],
        "groupNo": user_data["groupNo"],
        "customerNo": user_data["customerNo"],
    }


def _require_login() -> Dict[str, Any]:
    user_data = login()
    if not user_data:
        raise ExternalServiceError("후다닥 로그인 실패", status_code=401)
    return user_data


def _post(path: str, payload: dict, error_message: str) -> Dict[str, Any]:
    response = requests.post(_url(path), json=payload, headers=_headers(), timeout=15)

    if response.status_code >= 400:
        logger.error(f"Hudadaq {path} failed ({response.status_code}): {response.text}")
        raise ExternalServiceError(error_message, status_code=response.status_code, details=response.text)

    return response.json()


def build_quick_delivery_request(order: Order, store: Store) -> Dict[str, Any]:
    """Courier order body for a paid order, without the account fields."""
    info = order.delivery_info or {}

    start_address = " ".join(
        part for part in (store.city, store.district, store.dong) if part
    )

    delivery_date = info.get("deliveryDate") or (
        order.delivery_date.isoformat() if order.delivery_date else None
    )
    delivery_time = info.get("deliveryTime") or order.delivery_time
    reserv_datetime = (
        f"{delivery_date} {delivery_time}:00" if delivery_date and delivery_time else None
    )

    payload = {
        "serviceType": "damas",
        "startCName": store.name or "",
        "startManager": store.name or "",
        "startPhone": store.phone or "",
        "startAddress": start_address,
        "startAddressDetail": store.address_detail or "",
        "destCName": info.get("addressName", ""),
        "destManager": info.get("recipient", ""),
        "destPhone": info.get("recipientPhone", ""),
        "destAddress": info.get("address", ""),
        "destAddressDetail": info.get("detailAddress", ""),
        "runtype": 0,
        "payType": "contract",
        "hddMemo": info.get("detailedRequest", ""),
        "upWay": "full",
        "downWay": "full",
        "deliveryItem": {"bgBox": 1},
    }
    if reserv_datetime:
        payload["reservDatetimeUp"] = reserv_datetime
    return payload


def request_delivery(order_data: Dict[str, Any]) -> Dict[str, Any]:
    user_data = _require_login()

    payload = {
        "serviceType": "damas",
        "upWay": "free_customer",
        "downWay": "free_customer",
        "deliveryItem": {"bgBox": 1},
        **order_data,
        **_account_fields(user_data),
    }

    result = _post("/order/", payload, "퀵 배송 주문 실패")
    logger.info(f"Hudadaq order created: {result.get('orderNo')}")
    return result


def request_delivery_for_order(order: Order, store: Store) -> Optional[str]:
    result = request_delivery(build_quick_delivery_request(order, store))
    order_no = result.get("orderNo")
    return str(order_no) if order_no is not None else None


def get_charge(body: Dict[str, Any]) -> Dict[str, Any]:
    user_data = _require_login()

    payload = {
        **_account_fields(user_data),
        "serviceType": body.get("serviceType") or "damas",
        "startAddress": body.get("startAddress"),
        "destAddress": body.get("destAddress"),
        "runtype": body.get("runtype") if body.get("runtype") is not None else 0,
        "reservDatetimeUp": body.get("reservDatetimeUp"),
        "upWay": body.get("upWay") or "free_customer",
        "downWay": body.get("downWay") or "free_customer",
        "deliveryItem": body.get("deliveryItem") or {"bgBox": 1},
    }

    result = _post("/order/charge/", payload, "퀵 배송 요금 조회 실패")

    if str(result.get("code")) != "1":
        raise ExternalServiceError("요금 조회 실패", status_code=400, details=result.get("errMsg"))

    return result


def get_history(range_start: str, range_end: str, order_no: Optional[str] = None) -> Dict[str, Any]:
    user_data = _require_login()

    result = _post(
        "/history/",
        {
            **_account_fields(user_data),
            "rangeStart": range_start,
            "rangeEnd": range_end,
            "search": {"pre": "Y", "after": "Y", "contract": "Y", "transfer": "Y", "card": "Y"},
        },
        "이용내역 조회 실패",
    )

    if not order_no:
        return result

    target = next(
        (o for o in result.get("orderList") or [] if o.get("odrNo") == str(order_no)),
        None,
    )
    if target:
        return {"code": result.get("code"), "order": target}

    return {"code": result.get("code"), "order": None, "message": WAITING_FOR_DISPATCH}
