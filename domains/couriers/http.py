# domains/couriers/http.py
"""
택배사 HTTP 호출의 단일 경계.
- requests 예외(타임아웃/연결 실패) → TransientError
- 2xx 이외 응답 → ProviderError(원문 텍스트 포함)
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from django.conf import settings

import requests

from .exceptions import ProviderError, TransientError

logger = logging.getLogger(__name__)


def _timeout() -> float:
    return float(getattr(settings, "COURIER_HTTP_TIMEOUT", 15))


def send(
    method: str,
    url: str,
    *,
    action: str,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, Any]] = None,
    json_body: Optional[Dict[str, Any]] = None,
    data: Optional[Dict[str, Any]] = None,
    auth=None,
) -> requests.Response:
    """
    action: 에러 메시지용 동작 이름 (예: "create Pathao order")
    """
    logger.info("courier call: %s %s (%s)", method, url, action)
    try:
        res = requests.request(
            method,
            url,
            headers=headers,
            params=params,
            json=json_body,
            data=data,
            auth=auth,
            timeout=_timeout(),
        )
    except requests.Timeout as e:
        raise TransientError(f"Timed out trying to {action}") from e
    except requests.RequestException as e:
        raise TransientError(f"Network error trying to {action}: {e}") from e

    if not (200 <= res.status_code < 300):
        text = res.text or ""
        logger.warning("courier non-2xx: %s %s -> %s %s", method, url, res.status_code, text[:500])
        raise ProviderError(
            f"Failed to {action}: {text or res.reason or f'HTTP {res.status_code}'}",
            status_code=res.status_code,
            raw_text=text,
        )
    return res


def parse_json(res: requests.Response, *, action: str, allow_empty: bool = False) -> Dict[str, Any]:
    text = res.text or ""
    if not text.strip():
        if allow_empty:
            return {}
        raise ProviderError(f"Empty response trying to {action}", status_code=res.status_code)
    try:
        data = json.loads(text)
    except ValueError as e:
        if allow_empty:
            logger.warning("courier response is not JSON (%s): %s", action, text[:200])
            return {}
        raise ProviderError(
            f"Invalid JSON response trying to {action}: {text[:200]}",
            status_code=res.status_code,
            raw_text=text,
        ) from e
    return data if isinstance(data, dict) else {"data": data}
