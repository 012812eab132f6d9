from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class DeliveryDetails:
    """발송 시점에 가맹점이 입력하는 배송 정보 (저장하지 않는 요청 값)"""

    recipient_name: str
    recipient_phone: str
    recipient_address: str
    city: str
    area: str
    item_weight: Optional[Decimal] = None  # kg
    amount_to_collect: Optional[Decimal] = None  # None 이면 주문 기준 기본값
    special_instruction: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeliveryDetails":
        weight = data.get("item_weight")
        amount = data.get("amount_to_collect")
        return cls(
            recipient_name=str(data.get("recipient_name") or "").strip(),
            recipient_phone=str(data.get("recipient_phone") or "").strip(),
            recipient_address=str(data.get("recipient_address") or "").strip(),
            city=str(data.get("city") or "").strip(),
            area=str(data.get("area") or "").strip(),
            item_weight=Decimal(str(weight)) if weight not in (None, "") else None,
            amount_to_collect=Decimal(str(amount)) if amount not in (None, "") else None,
            special_instruction=str(data.get("special_instruction") or ""),
        )


@dataclass
class ConsignmentResult:
    consignment_id: str
    delivery_status: str  # 정규화된 표시용 상태
    raw_status: Any = None  # 감사/디버깅 전용 원문 payload


@dataclass
class OrderCourierInfo:
    service_id: str
    consignment_id: str
    tracking_number: str
    status: str
    service_name: str = ""
    synced_at: Optional[datetime] = None
    raw_status: Any = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["synced_at"] = self.synced_at.isoformat() if self.synced_at else None
        return data
