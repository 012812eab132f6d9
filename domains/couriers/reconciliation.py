# domains/couriers/reconciliation.py
"""
진행중인 택배 바인딩을 택배사 상태와 맞추는 배치 잡.
주문 한 건 실패가 전체를 멈추지 않는다 (목록 조회 실패만 잡 전체 실패).
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

from django.conf import settings

from domains.orders.models import TERMINAL_ORDER_STATUSES

from .adapters import get_adapter
from .repository import CarrierConfigRepository, OrderCourierRepository
from .status import is_delivered_status

logger = logging.getLogger(__name__)


def run_reconciliation(
    tenant_id: Optional[str] = None,
    *,
    batch_size: Optional[int] = None,
    delay: Optional[float] = None,
    orders_repo: Optional[OrderCourierRepository] = None,
    configs_repo: Optional[CarrierConfigRepository] = None,
) -> Dict[str, Any]:
    """
    반환: {"total", "updated", "skipped", "failed", "error_samples"}
    - updated: 상태가 바뀌어 저장한 건
    - skipped: 상태 동일 또는 택배사 비활성
    - failed : 조회/저장 중 예외 (샘플은 최대 COURIER_SYNC_ERROR_SAMPLES 개)
    """
    orders_repo = orders_repo or OrderCourierRepository()
    configs_repo = configs_repo or CarrierConfigRepository()
    batch_size = batch_size if batch_size is not None else settings.COURIER_SYNC_BATCH_SIZE
    delay = delay if delay is not None else settings.COURIER_SYNC_DELAY_SECONDS
    max_samples = int(getattr(settings, "COURIER_SYNC_ERROR_SAMPLES", 10))

    orders = orders_repo.open_bindings(batch_size, tenant_id=tenant_id)
    configs = configs_repo.enabled_map(o.tenant_id for o in orders)

    summary: Dict[str, Any] = {"total": len(orders), "updated": 0, "skipped": 0, "failed": 0}
    error_samples: List[str] = []

    for i, order in enumerate(orders):
        if i and delay and delay > 0:
            time.sleep(delay)

        config = configs.get((order.tenant_id, order.courier_service_id))
        if config is None:
            summary["skipped"] += 1
            continue

        cid = order.consignment_id
        try:
            result = get_adapter(config).get_status(cid)
            if result.delivery_status == order.courier_status:
                summary["skipped"] += 1
                continue

            mark_delivered = (
                is_delivered_status(result.delivery_status)
                and order.status not in TERMINAL_ORDER_STATUSES
            )
            if orders_repo.update_status(
                order,
                result.delivery_status,
                expected_consignment_id=cid,
                mark_delivered=mark_delivered,
            ):
                summary["updated"] += 1
            else:
                # 그 사이 재발송/해제됨
                summary["skipped"] += 1
        except Exception as e:
            summary["failed"] += 1
            logger.warning("[CourierSync] order=%s cid=%s failed: %s", order.id, cid, e)
            if len(error_samples) < max_samples:
                error_samples.append(f"Order {order.id}: {e}")

    # 조회한 주문은 상태 변화와 무관하게 다음 패스 순서에서 뒤로
    orders_repo.mark_checked(o.id for o in orders)

    summary["error_samples"] = error_samples
    logger.info(
        "[CourierSync] total=%s updated=%s skipped=%s failed=%s",
        summary["total"],
        summary["updated"],
        summary["skipped"],
        summary["failed"],
    )
    return summary
