import logging

import requests

from catering_api.config import settings
from catering_api.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

KAKAO_LOCAL_URL = "https://dapi.kakao.com/v2/local"


def _get(path: str, params: dict, error_message: str) -> dict:
    try:
        response = requests.get(
            f"{KAKAO_LOCAL_URL}/{path}",
            params=params,
            headers={"Authorization": f"KakaoAK {settings.kakao_rest_api_key}"},
            timeout=5,
        )
        return response.json()
    except (requests.RequestException, ValueError) as e:
        logger.exception("Kakao local API error")
        raise ExternalServiceError(error_message, status_code=500, details=str(e))


def search_address(query: str) -> dict:
    return _get("search/address.json", {"query": query}, "Failed to fetch address")


def coord_to_address(x: str, y: str) -> dict:
    return _get("geo/coord2address.json", {"x": x, "y": y}, "Failed to convert coordinates")
