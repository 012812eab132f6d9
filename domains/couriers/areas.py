# domains/couriers/areas.py
"""
RedX 지역 해석기: 가맹점이 자유 입력한 area/city → RedX 카탈로그의 {id, name}

매칭 우선순위 (먼저 걸리는 것 채택)
  1) 정규화 후 완전 일치
  2) 양방향 포함
  3) 유사도 0.5 이상 중 최고점
도시 필터 카탈로그에서 못 찾으면 전체 카탈로그로 한 번 더 시도한다.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from django.conf import settings

from . import http
from .exceptions import AreaResolutionError, CourierError, ProviderError

logger = logging.getLogger(__name__)

FUZZY_THRESHOLD = 0.5
ERROR_SAMPLE_SIZE = 10

_PARENS = re.compile(r"\(.*?\)")
_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_SPACES = re.compile(r"\s+")


@dataclass(frozen=True)
class AreaMatch:
    id: int
    name: str


def normalize_area_name(value) -> str:
    """'Mohammadpur(Dhaka)' -> 'mohammadpur'"""
    s = str(value or "").lower()
    s = _PARENS.sub("", s)
    s = _NON_ALNUM.sub(" ", s)
    return _SPACES.sub(" ", s).strip()


def similarity(a, b) -> float:
    """
    1.0: 완전 일치 / 0.8: 포함 관계
    그 외: 짧은 쪽 문자 중 긴 쪽에도 있는 문자의 비율
    """
    s1 = normalize_area_name(a)
    s2 = normalize_area_name(b)
    if s1 == s2:
        return 1.0
    if s1 in s2 or s2 in s1:
        return 0.8
    longer, shorter = (s1, s2) if len(s1) >= len(s2) else (s2, s1)
    if not shorter:
        return 0.0
    matches = sum(1 for ch in shorter if ch in longer)
    return matches / len(shorter)


def match_area(query, catalog: Iterable[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """카탈로그(list of {id, name})에서 query 에 해당하는 항목. 없으면 None"""
    target = normalize_area_name(query)
    if not target:
        return None

    entries = []
    for a in catalog or []:
        norm = normalize_area_name(a.get("name"))
        if norm:
            entries.append((norm, a))

    for norm, a in entries:
        if norm == target:
            return a

    for norm, a in entries:
        if target in norm or norm in target:
            return a

    best = None
    best_score = 0.0
    for _, a in entries:
        score = similarity(query, a.get("name"))
        # 동점이면 카탈로그 앞쪽 항목 유지
        if score >= FUZZY_THRESHOLD and score > best_score:
            best, best_score = a, score
    return best


class RedxAreaResolver:
    def __init__(self, headers: Dict[str, str], base_url: Optional[str] = None):
        self.headers = headers
        self.base_url = (base_url or settings.REDX_BASE_URL).rstrip("/")

    def fetch_areas(self, district_name: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"district_name": district_name} if district_name else None
        action = "resolve RedX delivery areas"
        res = http.send(
            "GET",
            f"{self.base_url}/v1.0.0-beta/areas",
            action=action,
            headers=self.headers,
            params=params,
        )
        areas = http.parse_json(res, action=action).get("areas") or []
        return areas if isinstance(areas, list) else []

    def resolve(self, area: str, city: str) -> AreaMatch:
        city_areas = self.fetch_areas(district_name=city)
        match = match_area(area, city_areas)

        if match is None:
            # 전체 카탈로그 재시도는 실패해도 원래 에러(지역 없음)를 우선한다
            try:
                match = match_area(area, self.fetch_areas())
            except CourierError as e:
                logger.warning("[RedX] full area catalogue lookup failed: %s", e)

        if match is None:
            samples = [str(a.get("name")) for a in city_areas[:ERROR_SAMPLE_SIZE]]
            available = ", ".join(samples) if samples else "No areas found"
            more = "..." if len(city_areas) > ERROR_SAMPLE_SIZE else ""
            raise AreaResolutionError(
                f'Could not resolve RedX delivery area id for area "{area}" in city "{city}". '
                f"Available areas for this city: {available}{more}",
                samples=samples,
            )

        try:
            area_id = int(match["id"])
        except (KeyError, TypeError, ValueError):
            raise ProviderError(
                f"RedX area catalogue returned an entry without a numeric id: {match!r}",
                raw_text=str(match)[:500],
            )

        logger.info("[RedX] area %r (%s) -> %s #%s", area, city, match.get("name"), area_id)
        return AreaMatch(id=area_id, name=str(match.get("name")))
