from __future__ import annotations

from typing import List, Optional


class CourierError(Exception):
    """택배 연동 계층 공통 예외"""

    pass


class ConfigurationError(CourierError):
    """택배사 비활성/미설정, 필수 자격증명 누락. 네트워크 호출 전에 실패"""

    pass


class ValidationError(CourierError):
    """로컬에서 판별 가능한 입력 오류 (예: 전화번호 자릿수)"""

    pass


class OrderNotFound(CourierError):
    pass


class DispatchConflictError(CourierError):
    """이미 택배가 배정된 주문에 대한 중복 발송 요청"""

    pass


class AreaResolutionError(CourierError):
    """RedX 지역 카탈로그에서 일치 항목을 찾지 못함"""

    def __init__(self, message: str, *, samples: Optional[List[str]] = None):
        super().__init__(message)
        self.samples = list(samples or [])


class ProviderError(CourierError):
    """택배사가 비정상 응답을 돌려줌. raw_text 에 원문 보관"""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        raw_text: str = "",
    ):
        super().__init__(message)
        self.status_code = status_code
        self.raw_text = raw_text or ""


class TransientError(CourierError):
    """네트워크/타임아웃. 자동 재시도하지 않는다"""

    pass
