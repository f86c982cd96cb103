import json
import logging
from typing import Dict, List, Optional

import requests

from catering_api.config import settings
from catering_api.utils.phone import normalize_phone

logger = logging.getLogger(__name__)

ALIGO_SMS_URL = "https://apis.aligo.in/send/"
ALIGO_TEMPLATE_URL = "https://kakaoapi.aligo.in/akv10/template/list/"
ALIGO_ALIMTALK_URL = "https://kakaoapi.aligo.in/akv10/alimtalk/send/"

ALIMTALK_SUBJECT = "주문알림"

# tpl_code -> {"message": str, "buttons": list}
_template_cache: Dict[str, dict] = {}


def _test_mode() -> bool:
    return not settings.is_production and settings.aligo_test_mode


def clear_template_cache():
    _template_cache.clear()


def fill_template(message: str, variables: Dict[str, str]) -> str:
    """Replace every ``#{name}`` placeholder with its value."""
    for key, value in variables.items():
        message = message.replace(f"#{{{key}}}", str(value))
    return message


def fetch_template(template_code: str) -> Optional[dict]:
    if template_code in _template_cache:
        return _template_cache[template_code]

    if not (settings.aligo_api_key and settings.aligo_user_id and settings.aligo_sender_key):
        logger.error("Aligo template lookup skipped: credentials missing")
        return None

    try:
        response = requests.post(
            ALIGO_TEMPLATE_URL,
            data={
                "apikey": settings.aligo_api_key,
                "userid": settings.aligo_user_id,
                "senderkey": settings.aligo_sender_key,
                "tpl_code": template_code,
            },
            timeout=10,
        )
        result = response.json()
    except Exception:
        logger.exception(f"Aligo template lookup failed: {template_code}")
        return None

    if result.get("code") == 0 and result.get("list"):
        template = result["list"][0]
        data = {
            "message": template.get("templtContent", ""),
            "buttons": template.get("buttons") or [],
        }
        _template_cache[template_code] = data
        return data

    logger.error(f"Aligo template {template_code} not found: {result.get('message')}")
    return None


def send_sms(phone: str, message: str) -> bool:
    if _test_mode():
        logger.info(f"[TEST MODE] SMS to {phone}: {message}")
        return True

    if not (settings.aligo_api_key and settings.aligo_user_id and settings.aligo_sender):
        logger.error("Aligo SMS skipped: credentials missing")
        return False

    receiver = normalize_phone(phone)

    try:
        response = requests.post(
            ALIGO_SMS_URL,
            data={
                "key": settings.aligo_api_key,
                "user_id": settings.aligo_user_id,
                "sender": settings.aligo_sender,
                "receiver": receiver,
                "msg": message,
                "msg_type": "SMS",
                "testmode_yn": "",
            },
            timeout=10,
        )
        result = response.json()
    except Exception:
        logger.exception("Aligo SMS exception")
        return False

    if str(result.get("result_code")) == "1":
        logger.info(f"Aligo SMS sent to {receiver}")
        return True

    logger.error(f"Aligo SMS failed: {result.get('message') or result}")
    return False


def send_alimtalk(phone: str, template_code: str, variables: Dict[str, str]) -> bool:
    if _test_mode():
        logger.info(f"[TEST MODE] alimtalk {template_code} to {phone}: {variables}")
        return True

    if not (
        settings.aligo_api_key
        and settings.aligo_user_id
        and settings.aligo_sender
        and settings.aligo_sender_key
    ):
        logger.error("Aligo alimtalk skipped: credentials missing")
        return False

    template = fetch_template(template_code)
    if not template:
        return False

    receiver = normalize_phone(phone)
    buttons: List[dict] = template["buttons"]

    try:
        response = requests.post(
            ALIGO_ALIMTALK_URL,
            data={
                "apikey": settings.aligo_api_key,
                "userid": settings.aligo_user_id,
                "senderkey": settings.aligo_sender_key,
                "tpl_code": template_code,
                "sender": settings.aligo_sender,
                "receiver_1": receiver,
                "subject_1": ALIMTALK_SUBJECT,
                "message_1": fill_template(template["message"], variables),
                "button_1": json.dumps({"button": buttons}, ensure_ascii=False),
            },
            timeout=10,
        )
        result = response.json()
    except Exception:
        logger.exception(f"Aligo alimtalk exception ({template_code})")
        return False

    if result.get("code") == 0:
        logger.info(f"Aligo alimtalk {template_code} sent to {receiver}")
        return True

    logger.error(f"Aligo alimtalk {template_code} failed: {result.get('message') or result}")
    return False
