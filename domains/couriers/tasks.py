# domains/couriers/tasks.py
from __future__ import annotations

from typing import Any, Dict, Optional

from celery import shared_task


@shared_task(name="domains.couriers.tasks.sync_delivery_status")
def sync_delivery_status(tenant_id: Optional[str] = None) -> Dict[str, Any]:
    """
    진행중 택배 상태 일괄 동기화 (Celery beat 2시간 주기)
    반환: 정산 요약 dict
    """
    # 지연 임포트로 순환참조 회피
    from .reconciliation import run_reconciliation

    return run_reconciliation(tenant_id)
