# domains/couriers/adapters/redx.py
from __future__ import annotations

from decimal import Decimal
from typing import Optional
from urllib.parse import quote

from django.conf import settings

from domains.orders.utils import round_amount

from .. import http
from ..areas import RedxAreaResolver
from ..credentials import redx_headers
from ..models import CarrierId
from ..status import normalize_status
from ..types import ConsignmentResult, DeliveryDetails
from .base import CarrierAdapter

DEFAULT_PARCEL_WEIGHT_GRAMS = 500


def parcel_weight_grams(weight_kg) -> int:
    if not weight_kg:
        return DEFAULT_PARCEL_WEIGHT_GRAMS
    return round_amount(Decimal(str(weight_kg)) * 1000)


class RedxAdapter(CarrierAdapter):
    carrier_id = CarrierId.REDX

    def __init__(self, config, base_url: Optional[str] = None):
        super().__init__(config)
        self.base_url = (base_url or settings.REDX_BASE_URL).rstrip("/")

    def _url(self, path: str) -> str:
        return f"{self.base_url}/v1.0.0-beta/{path}"

    def create(self, order, tenant_tracking_id: str, details: DeliveryDetails) -> ConsignmentResult:
        headers = redx_headers(self.config)

        # 지역 id 를 못 찾으면 여기서 AreaResolutionError 로 종료
        area = RedxAreaResolver(headers, base_url=self.base_url).resolve(details.area, details.city)

        name, phone, address = self.recipient(order, details)
        body = {
            "customer_name": name,
            "customer_phone": phone,
            "delivery_area": area.name,
            "delivery_area_id": area.id,
            "customer_address": address,
            "merchant_invoice_id": tenant_tracking_id or str(order.id),
            "cash_collection_amount": str(self.amount_to_collect(order, details)),
            "parcel_weight": parcel_weight_grams(details.item_weight),
            "instruction": self.instruction(order, details),
            "value": str(round_amount(order.total)),
            "is_closed_box": True,
        }

        action = "create RedX parcel"
        res = http.send(
            "POST",
            self._url("parcel"),
            action=action,
            headers={**headers, "Content-Type": "application/json"},
            json_body=body,
        )
        data = http.parse_json(res, action=action)
        return ConsignmentResult(
            consignment_id=str(data.get("tracking_id") or order.id),
            delivery_status=normalize_status("pending"),
            raw_status=data,
        )

    def get_status(self, consignment_id: str) -> ConsignmentResult:
        action = "fetch RedX parcel info"
        res = http.send(
            "GET",
            self._url(f"parcel/info/{quote(str(consignment_id), safe='')}"),
            action=action,
            headers=redx_headers(self.config),
        )
        data = http.parse_json(res, action=action)
        parcel = data.get("parcel") or {}
        return ConsignmentResult(
            consignment_id=str(parcel.get("tracking_id") or consignment_id),
            delivery_status=normalize_status(parcel.get("status") or "unknown"),
            raw_status=data,
        )
