# domains/couriers/adapters/paperfly.py
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from django.conf import settings

from domains.orders.utils import round_amount

from .. import http
from ..credentials import credential, paperfly_headers
from ..exceptions import CourierError, ProviderError, ValidationError
from ..models import CarrierId
from ..retry import PAPERFLY_THANA_POLICY, RetryPolicy
from ..status import normalize_status
from ..types import ConsignmentResult, DeliveryDetails
from .base import CarrierAdapter

logger = logging.getLogger(__name__)

CONSIGNMENT_SEPARATOR = "|"
DEFAULT_MAX_WEIGHT = "0.5"

# 트래커 응답은 HTML/JS: $("#id").val("...") / .html("...") 형태로 값이 박혀 온다
_ID_VALUE = re.compile(r"""\$\(["']#([^"']+)["']\)\.(?:val|html)\(["']([^"']*)["']\)""")
_ANY_VALUE = re.compile(r"""\.(?:val|html)\(["']([^"']+)["']\)""")
_TAGS = re.compile(r"<[^>]*>")
_STATUS_PATTERNS = [
    re.compile(r"""order[_\s-]?status[_\s-]?eng["']?\s*[:=]\s*["']([^"']+)["']""", re.IGNORECASE),
    re.compile(r"""order[_\s-]?status["']?\s*[:=]\s*["']([^"']+)["']""", re.IGNORECASE),
    re.compile(r"""status["']?\s*[:=]\s*["']([^"']+)["']""", re.IGNORECASE),
    re.compile(r"""delivery[_\s-]?status["']?\s*[:=]\s*["']([^"']+)["']""", re.IGNORECASE),
]
_FIELD_ALIASES = {
    "order_status": ["order_status_eng", "order_status", "orderstatus", "orderStatus"],
    "order_id": ["order_id_eng", "order_id", "orderid", "orderId", "tracking_id", "trackingId"],
    "status": [
        "status",
        "order_status_eng",
        "order_status",
        "ordertypeeng",
        "ordertype",
        "delivery_status",
    ],
}
_STATUS_FALLBACK_KEYS = (
    "status",
    "status_found",
    "order_status_eng",
    "order_status",
    "ordertypeeng",
    "ordertype",
    "delivery_status",
)


def build_consignment_id(order_id: str, phone: str) -> str:
    return f"{order_id}{CONSIGNMENT_SEPARATOR}{phone}"


def split_consignment_id(consignment_id: str):
    order_id, _, phone = str(consignment_id or "").partition(CONSIGNMENT_SEPARATOR)
    if not order_id or not phone:
        raise ValidationError("Paperfly tracking requires consignment in format 'orderId|phone'")
    return order_id, phone


def _strip_tags(value: str) -> str:
    return _TAGS.sub("", value).strip()


def parse_tracker_response(text: str) -> Dict[str, Any]:
    """
    트래커 HTML 에서 필드를 긁어낸다.
    반환: 추출한 필드들 + status(최종 판정값) + rawText(앞 500자)
    """
    text = text or ""
    obj: Dict[str, str] = {}

    for key, value in _ID_VALUE.findall(text):
        if key:
            obj[key] = _strip_tags(value)

    all_values = [_strip_tags(v) for v in _ANY_VALUE.findall(text) if v]

    for pattern in _STATUS_PATTERNS:
        m = pattern.search(text)
        if m and m.group(1):
            obj["status_found"] = _strip_tags(m.group(1))
            break

    for target, aliases in _FIELD_ALIASES.items():
        if obj.get(target):
            continue
        for alias in aliases:
            found = next((k for k in obj if k.lower() == alias.lower()), None)
            if found and obj[found]:
                obj[target] = obj[found]
                break

    status = next((obj[k] for k in _STATUS_FALLBACK_KEYS if obj.get(k)), None)
    if not status:
        status = all_values[-1] if all_values and all_values[-1] else "pending"

    out: Dict[str, Any] = dict(obj)
    out["status"] = status
    out["rawText"] = text[:500]
    return out


def _first(data: Dict[str, Any], *paths: str):
    for path in paths:
        cur: Any = data
        for part in path.split("."):
            cur = cur.get(part) if isinstance(cur, dict) else None
        if cur:
            return cur
    return None


class PaperflyAdapter(CarrierAdapter):
    carrier_id = CarrierId.PAPERFLY

    def __init__(
        self,
        config,
        order_url: Optional[str] = None,
        tracker_url: Optional[str] = None,
        policy: RetryPolicy = PAPERFLY_THANA_POLICY,
    ):
        super().__init__(config)
        self.order_url = order_url or settings.PAPERFLY_ORDER_URL
        self.tracker_url = tracker_url or settings.PAPERFLY_TRACKER_URL
        self.policy = policy

    def _body(self, order, tenant_tracking_id, details, name, phone, address, thana) -> Dict[str, Any]:
        return {
            "merOrderRef": tenant_tracking_id or str(order.id),
            "pickMerchantName": credential(self.config, "merchantName") or "Merchant",
            "pickMerchantAddress": "",
            "pickMerchantThana": "",
            "pickMerchantDistrict": "",
            "pickupMerchantPhone": credential(self.config, "merchantPhone") or order.customer_phone,
            "productSizeWeight": "standard",
            "productBrief": self.item_description(order),
            "packagePrice": str(round_amount(order.total)),
            "deliveryOption": "regular",
            "custname": name,
            "custaddress": address,
            "customerThana": thana,
            "customerDistrict": (details.city or "").strip(),
            "custPhone": phone,
            "max_weight": str(details.item_weight) if details.item_weight else DEFAULT_MAX_WEIGHT,
        }

    def create(self, order, tenant_tracking_id: str, details: DeliveryDetails) -> ConsignmentResult:
        headers = paperfly_headers(self.config)
        name, phone, address = self.recipient(order, details)
        if not phone:
            raise ValidationError("Recipient phone number is required for Paperfly orders")

        candidates: List[str] = self.policy.plan(details.area, details.city)
        action = "create Paperfly order"
        last_error: Optional[CourierError] = None

        for attempt, thana in enumerate(candidates):
            body = self._body(order, tenant_tracking_id, details, name, phone, address, thana)
            try:
                res = http.send("POST", self.order_url, action=action, headers=headers, json_body=body)
            except CourierError as e:
                if not self.policy.should_retry(attempt, e):
                    raise
                logger.info("[Paperfly] thana rejected: %r (attempt %s)", thana, attempt + 1)
                last_error = e
                continue

            data = http.parse_json(res, action=action, allow_empty=True)
            carrier_order_id = _first(
                data,
                "order_id",
                "orderId",
                "data.order_id",
                "data.orderId",
                "tracking_id",
                "trackingId",
            ) or tenant_tracking_id or order.id
            status = _first(
                data,
                "status",
                "order_status",
                "delivery_status",
                "data.status",
                "data.order_status",
            ) or "pending"
            return ConsignmentResult(
                consignment_id=build_consignment_id(str(carrier_order_id), phone),
                delivery_status=normalize_status(str(status)),
                raw_status=data,
            )

        last_text = ""
        if isinstance(last_error, ProviderError):
            last_text = last_error.raw_text or str(last_error)
        raise ProviderError(
            f'Paperfly could not find a valid thana for area "{details.area}" '
            f'in district "{details.city}". '
            f"Tried variations: {', '.join(candidates)}. "
            f"Last error: {last_text}",
            status_code=getattr(last_error, "status_code", None),
            raw_text=last_text,
        )

    def get_status(self, consignment_id: str) -> ConsignmentResult:
        order_id, phone = split_consignment_id(consignment_id)
        action = "fetch Paperfly tracking"
        res = http.send(
            "POST",
            self.tracker_url,
            action=action,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            data={"orderid": order_id, "phone": phone},
        )
        parsed = parse_tracker_response(res.text)
        # 복합 id 는 그대로 유지 (바인딩 키가 흔들리지 않도록)
        return ConsignmentResult(
            consignment_id=str(consignment_id),
            delivery_status=normalize_status(str(parsed["status"])),
            raw_status=parsed,
        )
