# domains/orders/utils.py
from decimal import ROUND_HALF_UP, Decimal

from .models import PaymentMethod, PaymentStatus


def round_amount(value) -> int:
    """금액을 정수(반올림, .5는 올림)로. None/빈값은 0"""
    if value in (None, ""):
        return 0
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def is_order_prepaid(order) -> bool:
    """
    선결제 여부. 모든 택배 어댑터가 이 함수 하나로 판단한다.
    - 결제 완료(completed) 이거나
    - 온라인 결제 주문이면 선결제로 본다
    """
    return (
        getattr(order, "payment_status", None) == PaymentStatus.COMPLETED
        or getattr(order, "payment_method", None) == PaymentMethod.ONLINE
    )


def default_cash_to_collect(order) -> int:
    """착불(COD) 이면서 아직 결제 전인 주문만 총액을 수금, 그 외 0"""
    if getattr(order, "payment_method", None) == PaymentMethod.COD and not is_order_prepaid(order):
        return max(0, round_amount(getattr(order, "total", 0)))
    return 0


def order_item_count(order) -> int:
    return sum(int(it.quantity or 0) for it in order.items.all())


def tenant_tracking_id(order_id) -> str:
    """택배사에 넘기는 가맹점 주문 참조번호: ORD + 주문ID 끝 8자리(대문자)"""
    return f"ORD{str(order_id)[-8:].upper()}"
