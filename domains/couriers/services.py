# domains/couriers/services.py
from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction

from domains.orders.utils import tenant_tracking_id

from .adapters import get_adapter
from .adapters.paperfly import CONSIGNMENT_SEPARATOR, build_consignment_id
from .exceptions import ConfigurationError, DispatchConflictError, ValidationError
from .models import CarrierId, CourierServiceConfig
from .repository import CarrierConfigRepository, OrderCourierRepository
from .status import DEFAULT_STATUS
from .types import ConsignmentResult, DeliveryDetails, OrderCourierInfo

logger = logging.getLogger(__name__)

orders_repo = OrderCourierRepository()
configs_repo = CarrierConfigRepository()


def _enabled_config(tenant_id: Optional[str], service_id: str) -> CourierServiceConfig:
    if service_id not in CarrierId.values:
        raise ConfigurationError(f"Unsupported courier service: {service_id}")
    config = configs_repo.get_enabled(tenant_id, service_id)
    if config is None:
        raise ConfigurationError("Courier service not enabled or not found")
    return config


def _info(order, config: Optional[CourierServiceConfig], raw_status=None) -> OrderCourierInfo:
    return OrderCourierInfo(
        service_id=order.courier_service_id or "",
        consignment_id=order.consignment_id or "",
        tracking_number=order.tracking_number or "",
        status=order.courier_status or DEFAULT_STATUS,
        service_name=config.display_name if config else "",
        synced_at=order.courier_synced_at,
        raw_status=raw_status,
    )


def _paperfly_consignment_id(order, consignment_id: str) -> str:
    """Paperfly 추적은 'orderId|phone' 형식이 필요하다. 없으면 주문 연락처로 보충"""
    if CONSIGNMENT_SEPARATOR in consignment_id:
        return consignment_id
    phone = (order.customer_phone or "").strip()
    if not phone:
        raise ValidationError(
            "Paperfly tracking requires customer phone number on the order "
            "(consignment must be in format 'orderId|phone')"
        )
    return build_consignment_id(consignment_id, phone)


def assign(tenant_id: Optional[str], order_id, service_id: str, consignment_id: str) -> OrderCourierInfo:
    """
    가맹점이 택배사 포털에서 직접 접수한 운송장을 주문에 연결 (택배사 호출 없음).
    기존 바인딩은 통째로 교체된다.
    """
    consignment_id = (consignment_id or "").strip()
    if not consignment_id:
        raise ValidationError("Consignment ID is required")
    config = _enabled_config(tenant_id, service_id)

    with transaction.atomic():
        order = orders_repo.lock_order(tenant_id, order_id)
        if service_id == CarrierId.PAPERFLY:
            consignment_id = _paperfly_consignment_id(order, consignment_id)
        orders_repo.update_courier_info(
            order, service_id=service_id, consignment_id=consignment_id, status=DEFAULT_STATUS
        )

    logger.info("[Courier] assigned order=%s service=%s cid=%s", order.id, service_id, consignment_id)
    return _info(order, config)


def unassign(tenant_id: Optional[str], order_id) -> None:
    """주문의 택배 바인딩 해제 (택배사 쪽 접수는 건드리지 않음)"""
    with transaction.atomic():
        order = orders_repo.lock_order(tenant_id, order_id)
        orders_repo.clear_courier_info(order)
    logger.info("[Courier] unassigned order=%s", order.id)


def dispatch(
    tenant_id: Optional[str],
    order_id,
    service_id: str,
    details: DeliveryDetails,
    *,
    replace: bool = False,
) -> OrderCourierInfo:
    """
    택배사에 배송을 접수하고 결과를 바인딩으로 저장.
    - 주문 행을 잠근 채 택배사를 호출한다 (먼저 온 발송이 이긴다)
    - 이미 운송장이 있는 주문은 replace=True 일 때만 재접수
    """
    config = _enabled_config(tenant_id, service_id)
    adapter = get_adapter(config)

    with transaction.atomic():
        order = orders_repo.lock_order(tenant_id, order_id)
        if order.consignment_id and not replace:
            raise DispatchConflictError(
                f"Order already dispatched via {order.courier_service_id} "
                f"(consignment {order.consignment_id})"
            )

        result: ConsignmentResult = adapter.create(order, tenant_tracking_id(order.id), details)
        orders_repo.update_courier_info(
            order,
            service_id=service_id,
            consignment_id=result.consignment_id,
            status=result.delivery_status,
        )

    logger.info(
        "[Courier] dispatched order=%s service=%s cid=%s status=%s",
        order.id,
        service_id,
        result.consignment_id,
        result.delivery_status,
    )
    return _info(order, config, raw_status=result.raw_status)


def refresh_status(tenant_id: Optional[str], order_id) -> OrderCourierInfo:
    """바인딩된 택배사에서 최신 상태를 읽어와 바뀐 경우에만 저장"""
    order = orders_repo.get_order(tenant_id, order_id)
    if not order.has_courier_binding:
        raise ValidationError("Order has no courier assigned")

    config = _enabled_config(order.tenant_id, order.courier_service_id)
    result = get_adapter(config).get_status(order.consignment_id)

    if result.delivery_status != order.courier_status:
        orders_repo.update_status(
            order, result.delivery_status, expected_consignment_id=order.consignment_id
        )
    info = _info(order, config, raw_status=result.raw_status)
    info.status = result.delivery_status
    return info
