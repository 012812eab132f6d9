# domains/couriers/credentials.py
"""
저장된 자격증명 → 인증된 호출에 필요한 헤더.
- Pathao   : password grant 로 단기 bearer 토큰 발급 (호출마다 새로 발급, 캐시 없음)
- RedX     : 고정 API 토큰 헤더
- Steadfast: Api-Key / Secret-Key 헤더
- Paperfly : HTTP Basic
"""
from __future__ import annotations

import base64
import logging
from typing import Dict, Optional

from django.conf import settings

from . import http
from .exceptions import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)


def credential(config, *keys: str) -> Optional[str]:
    """keys 중 처음으로 값이 있는 자격증명(앞뒤 공백 제거)"""
    creds = getattr(config, "credentials", None) or {}
    for k in keys:
        v = creds.get(k)
        if v is None:
            continue
        v = str(v).strip()
        if v:
            return v
    return None


def _mask(value: str) -> str:
    return f"{value[:4]}... (length: {len(value)})"


class PathaoTokenProvider:
    def __init__(self, config, base_url: Optional[str] = None):
        self.config = config
        self.base_url = (base_url or settings.PATHAO_BASE_URL).rstrip("/")

    def issue_token(self) -> str:
        client_id = credential(self.config, "clientId")
        client_secret = credential(self.config, "clientSecret")
        username = credential(self.config, "username")
        password = credential(self.config, "password")
        if not (client_id and client_secret and username and password):
            raise ConfigurationError("Pathao credentials are not fully configured")

        logger.info("[Pathao] issuing token, client_id=%s username=%s", _mask(client_id), username)
        action = "issue Pathao access token"
        res = http.send(
            "POST",
            f"{self.base_url}/aladdin/api/v1/issue-token",
            action=action,
            headers={"Content-Type": "application/json"},
            json_body={
                "client_id": client_id,
                "client_secret": client_secret,
                "grant_type": "password",
                "username": username,
                "password": password,
            },
        )
        data = http.parse_json(res, action=action)
        token = data.get("access_token")
        if not token:
            raise ProviderError(
                f"Pathao access token missing in response: {str(data)[:200]}",
                status_code=res.status_code,
                raw_text=res.text or "",
            )
        return str(token)

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.issue_token()}"}


def redx_headers(config) -> Dict[str, str]:
    api_key = credential(config, "apiKey")
    if not api_key:
        raise ConfigurationError("RedX API key is not configured")
    return {"API-ACCESS-TOKEN": f"Bearer {api_key}"}


def steadfast_headers(config) -> Dict[str, str]:
    api_key = credential(config, "apiKey")
    secret = credential(config, "appSecret", "secretKey")
    if not (api_key and secret):
        raise ConfigurationError("Steadfast API credentials are not fully configured")
    return {"Api-Key": api_key, "Secret-Key": secret, "Content-Type": "application/json"}


def paperfly_headers(config) -> Dict[str, str]:
    username = credential(config, "username")
    password = credential(config, "password")
    if not (username and password):
        raise ConfigurationError(
            "Paperfly credentials (username and password) are not configured"
        )
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("utf-8")
    return {"Authorization": f"Basic {token}", "Content-Type": "application/json"}
