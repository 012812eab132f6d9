# domains/couriers/retry.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from .exceptions import ProviderError

_THANA_SUFFIX = re.compile(r"\s*(Upazila|Upazilla|Thana|উপজেলা|থানা)\s*$", re.IGNORECASE)
_UPAZILA_SUFFIX = re.compile(r"\s*(Upazila|Upazilla)\s*$", re.IGNORECASE)
_SPACES = re.compile(r"\s+")

THANA_NOT_FOUND = "thana not found"


def normalize_thana(value: str) -> str:
    """'Savar Upazila' -> 'Savar'"""
    s = _THANA_SUFFIX.sub("", (value or "").strip())
    return _SPACES.sub(" ", s).strip()


def thana_candidates(area: str, city: str) -> List[str]:
    """
    Paperfly 에 차례로 넣어볼 thana 후보 (중복 제거, 순서 유지)
      1) 접미사 제거본  2) 입력 원문  3) Upazila → Thana 치환본  4) 도시(district) 이름
    """
    raw = (area or "").strip()
    out: List[str] = []
    for v in (
        normalize_thana(raw),
        raw,
        _UPAZILA_SUFFIX.sub(" Thana", raw),
        (city or "").strip(),
    ):
        if v and v not in out:
            out.append(v)
    return out


def is_thana_not_found(attempt: int, error: Exception) -> bool:
    """택배사가 thana 이름만 거부한 경우에만 다음 후보로 넘어간다"""
    if not isinstance(error, ProviderError):
        return False
    text = f"{error.raw_text} {error}".lower()
    return THANA_NOT_FOUND in text


@dataclass(frozen=True)
class RetryPolicy:
    """
    candidates  : 입력 → 시도할 후보 목록
    should_retry: (시도 번호(0부터), 마지막 에러) → True 면 다음 후보, False 면 즉시 중단
    """

    candidates: Callable[..., List[str]]
    should_retry: Callable[[int, Exception], bool]
    max_attempts: Optional[int] = None

    def plan(self, *args, **kwargs) -> List[str]:
        out = list(self.candidates(*args, **kwargs))
        if self.max_attempts is not None:
            out = out[: self.max_attempts]
        return out


PAPERFLY_THANA_POLICY = RetryPolicy(
    candidates=thana_candidates,
    should_retry=is_thana_not_found,
)
