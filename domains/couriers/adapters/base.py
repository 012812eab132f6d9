from __future__ import annotations

from typing import Tuple

from domains.orders.utils import default_cash_to_collect, order_item_count, round_amount

from ..types import ConsignmentResult, DeliveryDetails


class CarrierAdapter:
    """
    각 택배사 어댑터의 공통 인터페이스
    - create     : 택배사에 배송 접수 (결과 저장은 호출부 책임)
    - get_status : 운송장 상태 조회 (읽기 전용, 멱등)
    """

    carrier_id: str = ""

    def __init__(self, config):
        self.config = config

    def create(
        self, order, tenant_tracking_id: str, details: DeliveryDetails
    ) -> ConsignmentResult:
        raise NotImplementedError

    def get_status(self, consignment_id: str) -> ConsignmentResult:
        raise NotImplementedError

    # ----- 공통 헬퍼 -----------------------------------------------------
    @staticmethod
    def recipient(order, details: DeliveryDetails) -> Tuple[str, str, str]:
        """(이름, 전화, 주소). 모달 입력이 비어 있으면 주문의 고객 스냅샷 사용"""
        name = details.recipient_name or order.customer_name
        phone = details.recipient_phone or order.customer_phone
        address = details.recipient_address or ", ".join(
            p
            for p in (order.address_line1, order.address_line2, order.city, order.postal_code)
            if p
        )
        return name, phone, address

    @staticmethod
    def amount_to_collect(order, details: DeliveryDetails) -> int:
        if details.amount_to_collect is not None:
            return max(0, round_amount(details.amount_to_collect))
        return default_cash_to_collect(order)

    @staticmethod
    def instruction(order, details: DeliveryDetails) -> str:
        return details.special_instruction or order.notes or ""

    @staticmethod
    def item_description(order) -> str:
        return f"Order {order.id} - {order.items.count()} items"

    @staticmethod
    def total_quantity(order) -> int:
        return order_item_count(order)
