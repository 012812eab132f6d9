# domains/delivery/services.py
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Optional

from .models import DeliveryChargeConfig

STANDARD_METHOD_ID = "standard"
STANDARD_METHOD_NAME = "Standard Delivery"
STANDARD_ESTIMATED_DAYS = 3


def _dec(value, default: Decimal = Decimal("0")) -> Decimal:
    try:
        return Decimal(str(value)) if value not in (None, "") else default
    except (InvalidOperation, ValueError):
        return default


def _norm(value) -> str:
    return str(value or "").strip().lower()


def _standard_method(cost: Decimal) -> Dict[str, Any]:
    return {
        "id": STANDARD_METHOD_ID,
        "name": STANDARD_METHOD_NAME,
        "cost": cost,
        "estimated_days": STANDARD_ESTIMATED_DAYS,
    }


def _location_charge(charges: Iterable[Dict[str, Any]], city: str, area: str) -> Optional[Decimal]:
    """지역 정확 일치 → 도시 정확 일치 → 도시 부분 포함(양방향) 순"""
    rows = [(_norm(c.get("location")), c.get("charge")) for c in charges or [] if isinstance(c, dict)]
    rows = [(loc, charge) for loc, charge in rows if loc]
    city, area = _norm(city), _norm(area)

    if area:
        for loc, charge in rows:
            if loc == area:
                return _dec(charge)
    if city:
        for loc, charge in rows:
            if loc == city:
                return _dec(charge)
        for loc, charge in rows:
            if city in loc or loc in city:
                return _dec(charge)
    return None


def _weight_extra(charges: Iterable[Dict[str, Any]], weight: Optional[Decimal]) -> Decimal:
    if not weight:
        return Decimal("0")
    for c in charges or []:
        if isinstance(c, dict) and weight >= _dec(c.get("weight")):
            return _dec(c.get("extra_charge"))
    return Decimal("0")


def get_config(tenant_id: Optional[str]) -> Optional[DeliveryChargeConfig]:
    if not tenant_id:
        return None
    return DeliveryChargeConfig.objects.filter(tenant_id=tenant_id).first()


def calculate_shipping(
    tenant_id: Optional[str],
    *,
    city: str,
    area: str = "",
    weight=None,
    total=None,
) -> Dict[str, Any]:
    """
    반환: {"methods": [{id, name, cost, estimated_days}], "free_shipping": bool}
    설정이 없으면 무료 표준배송 하나
    """
    config = get_config(tenant_id)
    if config is None:
        return {"methods": [_standard_method(Decimal("0"))], "free_shipping": False}

    cost = _location_charge(config.specific_charges, city, area)
    if cost is None:
        cost = _dec(config.default_charge)
    cost += _weight_extra(config.weight_based_charges, _dec(weight) if weight is not None else None)

    threshold = config.free_shipping_threshold
    free = bool(threshold and total is not None and _dec(total) >= threshold)

    return {
        "methods": [_standard_method(Decimal("0") if free else cost)],
        "free_shipping": free,
    }


def storefront_delivery_config(tenant_id: Optional[str]) -> Dict[str, Any]:
    """스토어프론트 체크아웃 화면용 배송 방법 목록"""
    config = get_config(tenant_id)
    if config is None:
        return {"enabled": True, "methods": [_standard_method(Decimal("0"))], "free_shipping_threshold": None}
    return {
        "enabled": True,
        "methods": [_standard_method(_dec(config.default_charge))],
        "free_shipping_threshold": config.free_shipping_threshold,
    }
