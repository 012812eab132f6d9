# domains/couriers/repository.py
"""
주문 ↔ 택배 바인딩 읽기/쓰기의 좁은 창구.
서비스/정산 잡은 Order 모델을 직접 건드리지 않고 여기만 통한다.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import F, Q, QuerySet
from django.utils import timezone

from domains.orders.models import TERMINAL_ORDER_STATUSES, Order, OrderStatus

from .exceptions import OrderNotFound
from .models import CourierServiceConfig


class OrderCourierRepository:
    model = Order

    def _scoped(self, tenant_id: Optional[str]) -> QuerySet:
        qs = self.model.objects.all()
        if tenant_id is not None:
            qs = qs.filter(tenant_id=tenant_id)
        return qs

    def get_order(self, tenant_id: Optional[str], order_id) -> Order:
        try:
            return self._scoped(tenant_id).prefetch_related("items").get(id=order_id)
        except (Order.DoesNotExist, DjangoValidationError, ValueError, TypeError):
            # UUID 형식이 아닌 id 도 "없음" 으로 취급
            raise OrderNotFound("Order not found")

    def lock_order(self, tenant_id: Optional[str], order_id) -> Order:
        """transaction.atomic 안에서만 호출 (select_for_update)"""
        try:
            return self._scoped(tenant_id).select_for_update().get(id=order_id)
        except (Order.DoesNotExist, DjangoValidationError, ValueError, TypeError):
            raise OrderNotFound("Order not found")

    def update_courier_info(
        self, order: Order, *, service_id: str, consignment_id: str, status: str
    ) -> Order:
        """바인딩 전체 교체 (tracking_number 는 consignment_id 의 표시용 사본)"""
        order.courier_service_id = service_id
        order.consignment_id = consignment_id
        order.tracking_number = consignment_id
        order.courier_status = status
        order.courier_synced_at = timezone.now()
        order.courier_checked_at = None
        order.save(
            update_fields=[
                "courier_service_id",
                "consignment_id",
                "tracking_number",
                "courier_status",
                "courier_synced_at",
                "courier_checked_at",
                "updated_at",
            ]
        )
        return order

    def clear_courier_info(self, order: Order) -> Order:
        order.courier_service_id = None
        order.consignment_id = None
        order.tracking_number = None
        order.courier_status = None
        order.courier_synced_at = None
        order.courier_checked_at = None
        order.save(
            update_fields=[
                "courier_service_id",
                "consignment_id",
                "tracking_number",
                "courier_status",
                "courier_synced_at",
                "courier_checked_at",
                "updated_at",
            ]
        )
        return order

    def update_status(
        self,
        order: Order,
        status: str,
        *,
        expected_consignment_id: Optional[str] = None,
        mark_delivered: bool = False,
    ) -> bool:
        """
        상태만 갱신. expected_consignment_id 가 주어지면 그 사이 재발송으로
        바인딩이 바뀐 경우 쓰지 않는다. 반환: 실제로 갱신했는지
        """
        now = timezone.now()
        values = {"courier_status": status, "courier_synced_at": now, "updated_at": now}
        if mark_delivered:
            values["status"] = OrderStatus.DELIVERED

        qs = self.model.objects.filter(id=order.id)
        if expected_consignment_id is not None:
            qs = qs.filter(consignment_id=expected_consignment_id)
        changed = qs.update(**values) > 0
        if changed:
            for k, v in values.items():
                setattr(order, k, v)
        return changed

    def mark_checked(self, order_ids) -> int:
        """정산 잡이 조회한 주문들의 courier_checked_at 갱신 (상태 값은 건드리지 않음)"""
        ids = list(order_ids)
        if not ids:
            return 0
        return self.model.objects.filter(id__in=ids).update(courier_checked_at=timezone.now())

    def open_bindings(self, limit: int, tenant_id: Optional[str] = None) -> List[Order]:
        """택배가 배정돼 있고 종결되지 않은 주문 (가장 오래 조회 안 된 순)"""
        qs = (
            self._scoped(tenant_id)
            .exclude(Q(courier_service_id__isnull=True) | Q(courier_service_id=""))
            .exclude(Q(consignment_id__isnull=True) | Q(consignment_id=""))
            .exclude(status__in=TERMINAL_ORDER_STATUSES)
            .order_by(F("courier_checked_at").asc(nulls_first=True), "created_at")
        )
        return list(qs[: max(0, int(limit))])


class CarrierConfigRepository:
    model = CourierServiceConfig

    def get_enabled(self, tenant_id: Optional[str], service_id: str) -> Optional[CourierServiceConfig]:
        return (
            self.model.objects.filter(tenant_id=tenant_id, service_id=service_id, enabled=True)
            .first()
        )

    def enabled_map(self, tenant_ids) -> Dict[tuple, CourierServiceConfig]:
        """{(tenant_id, service_id): config}. 정산 잡용 일괄 조회"""
        qs = self.model.objects.filter(tenant_id__in=set(tenant_ids), enabled=True)
        return {(c.tenant_id, c.service_id): c for c in qs}
