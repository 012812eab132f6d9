# domains/couriers/adapters/pathao.py
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from django.conf import settings

from .. import http
from ..credentials import PathaoTokenProvider, credential
from ..exceptions import ConfigurationError, ValidationError
from ..models import CarrierId
from ..status import normalize_status
from ..types import ConsignmentResult, DeliveryDetails
from .base import CarrierAdapter

logger = logging.getLogger(__name__)

DELIVERY_TYPE_NORMAL = 48
ITEM_TYPE_PARCEL = 2
DEFAULT_ITEM_WEIGHT = "0.5"

_NON_DIGIT = re.compile(r"\D")


def normalize_pathao_phone(phone) -> str:
    """
    Pathao 는 정확히 11자리 전화번호만 받는다.
      "+8801712345678" -> "01712345678"
      "1712345678"     -> ValidationError
    """
    digits = _NON_DIGIT.sub("", str(phone or ""))
    if not digits:
        raise ValidationError("Recipient phone number is required for Pathao orders")
    if digits.startswith("880") and len(digits) == 13:
        digits = digits[3:]
    if len(digits) != 11:
        raise ValidationError(
            f"Pathao requires exactly 11 digits for phone number. Got: {len(digits)} digits"
        )
    return digits


class PathaoAdapter(CarrierAdapter):
    carrier_id = CarrierId.PATHAO

    def __init__(self, config, base_url: Optional[str] = None):
        super().__init__(config)
        self.base_url = (base_url or settings.PATHAO_BASE_URL).rstrip("/")
        self.tokens = PathaoTokenProvider(config, base_url=self.base_url)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/aladdin/api/v1/{path}"

    def create(self, order, tenant_tracking_id: str, details: DeliveryDetails) -> ConsignmentResult:
        store_id = credential(self.config, "storeId")
        if not store_id:
            raise ConfigurationError("Pathao store ID is not configured")

        # 네트워크 호출 전에 로컬 검증부터
        name, phone, address = self.recipient(order, details)
        phone = normalize_pathao_phone(phone)

        body = {
            "store_id": int(store_id) if store_id.isdigit() else store_id,
            "merchant_order_id": tenant_tracking_id or str(order.id),
            "recipient_name": name,
            "recipient_phone": phone,
            "recipient_address": address,
            "delivery_type": DELIVERY_TYPE_NORMAL,
            "item_type": ITEM_TYPE_PARCEL,
            "special_instruction": self.instruction(order, details),
            "item_quantity": self.total_quantity(order) or 1,
            "item_weight": str(details.item_weight) if details.item_weight else DEFAULT_ITEM_WEIGHT,
            "item_description": self.item_description(order),
            "amount_to_collect": self.amount_to_collect(order, details),
        }

        headers = {"Content-Type": "application/json", **self.tokens.auth_headers()}
        action = "create Pathao order"
        res = http.send("POST", self._url("orders"), action=action, headers=headers, json_body=body)
        data = http.parse_json(res, action=action)
        block = data.get("data") or {}

        return ConsignmentResult(
            consignment_id=str(block.get("consignment_id") or order.id),
            delivery_status=normalize_status(block.get("order_status") or "pending"),
            raw_status=data,
        )

    def get_status(self, consignment_id: str) -> ConsignmentResult:
        action = "fetch Pathao order info"
        res = http.send(
            "GET",
            self._url(f"orders/{quote(str(consignment_id), safe='')}/info"),
            action=action,
            headers=self.tokens.auth_headers(),
        )
        data = http.parse_json(res, action=action)
        block = data.get("data") or {}
        status = (
            block.get("order_status_slug")
            or block.get("order_status")
            or data.get("message")
            or "unknown"
        )
        return ConsignmentResult(
            consignment_id=str(block.get("consignment_id") or consignment_id),
            delivery_status=normalize_status(status),
            raw_status=data,
        )

    # ----- 가맹점 화면용 지역 카탈로그 (도시 → 존 → 지역) ------------------
    def _list(self, path: str, action: str) -> List[Dict[str, Any]]:
        res = http.send("GET", self._url(path), action=action, headers=self.tokens.auth_headers())
        block = http.parse_json(res, action=action).get("data") or {}
        rows = block.get("data") if isinstance(block, dict) else block
        return rows if isinstance(rows, list) else []

    def cities(self) -> List[Dict[str, Any]]:
        return self._list("city-list", "fetch Pathao cities")

    def zones(self, city_id: int) -> List[Dict[str, Any]]:
        return self._list(f"cities/{int(city_id)}/zone-list", "fetch Pathao zones")

    def areas(self, zone_id: int) -> List[Dict[str, Any]]:
        return self._list(f"zones/{int(zone_id)}/area-list", "fetch Pathao areas")
