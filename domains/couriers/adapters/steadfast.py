# domains/couriers/adapters/steadfast.py
from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from django.conf import settings

from .. import http
from ..credentials import steadfast_headers
from ..models import CarrierId
from ..status import normalize_status
from ..types import ConsignmentResult, DeliveryDetails
from .base import CarrierAdapter


class SteadfastAdapter(CarrierAdapter):
    """자유 입력 주소를 그대로 받으므로 지역 해석이 필요 없다"""

    carrier_id = CarrierId.STEADFAST

    def __init__(self, config, base_url: Optional[str] = None):
        super().__init__(config)
        self.base_url = (base_url or settings.STEADFAST_BASE_URL).rstrip("/")

    def create(self, order, tenant_tracking_id: str, details: DeliveryDetails) -> ConsignmentResult:
        headers = steadfast_headers(self.config)
        name, phone, address = self.recipient(order, details)

        body = {
            "invoice": tenant_tracking_id or str(order.id),
            "recipient_name": name,
            "recipient_phone": phone,
            "recipient_address": address,
            "cod_amount": self.amount_to_collect(order, details),
            "note": self.instruction(order, details),
            "item_description": self.item_description(order),
            "total_lot": self.total_quantity(order) or 1,
            "delivery_type": 0,
        }
        if order.customer_email:
            body["recipient_email"] = order.customer_email

        action = "create Steadfast order"
        res = http.send(
            "POST", f"{self.base_url}/create_order", action=action, headers=headers, json_body=body
        )
        data = http.parse_json(res, action=action)
        consignment = data.get("consignment") or {}
        cid = consignment.get("consignment_id")
        status = consignment.get("status") or data.get("delivery_status") or "pending"
        return ConsignmentResult(
            consignment_id=str(cid) if cid else str(order.id),
            delivery_status=normalize_status(status),
            raw_status=data,
        )

    def get_status(self, consignment_id: str) -> ConsignmentResult:
        action = "fetch Steadfast delivery status"
        res = http.send(
            "GET",
            f"{self.base_url}/status_by_cid/{quote(str(consignment_id), safe='')}",
            action=action,
            headers=steadfast_headers(self.config),
        )
        data = http.parse_json(res, action=action)
        return ConsignmentResult(
            consignment_id=str(consignment_id),
            delivery_status=normalize_status(data.get("delivery_status") or "unknown"),
            raw_status=data,
        )
