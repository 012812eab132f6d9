from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    PROCESSING = "processing", "Processing"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"
    REFUNDED = "refunded", "Refunded"


# 배송상태 동기화 대상에서 빠지는 종결 상태
TERMINAL_ORDER_STATUSES = (
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
    OrderStatus.REFUNDED,
)


class PaymentMethod(models.TextChoices):
    COD = "cod", "Cash on delivery"
    ONLINE = "online", "Online"


class PaymentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"
    REFUNDED = "refunded", "Refunded"


class Order(models.Model):
    """
    주문 헤더. 생성/수정(CRUD)은 커머스 모듈 소관이고
    여기서는 택배 연동에 필요한 스냅샷 + 택배 바인딩 필드만 다룬다.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant_id = models.CharField(max_length=64, db_index=True)

    # --- 고객/배송지 스냅샷 ---
    customer_name = models.CharField(max_length=120, blank=True, default="")
    customer_phone = models.CharField(max_length=32, blank=True, default="")
    customer_email = models.EmailField(blank=True, default="")
    address_line1 = models.CharField(max_length=255, blank=True, default="")
    address_line2 = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=80, blank=True, default="")
    postal_code = models.CharField(max_length=16, blank=True, default="")
    notes = models.CharField(max_length=500, blank=True, default="")

    # --- 금액/결제 ---
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    payment_method = models.CharField(
        max_length=16, choices=PaymentMethod.choices, default=PaymentMethod.COD
    )
    payment_status = models.CharField(
        max_length=16, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )

    status = models.CharField(
        max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING
    )

    # --- 택배 바인딩 (주문당 최대 1건, 재지정 시 통째로 교체) ---
    courier_service_id = models.CharField(max_length=32, null=True, blank=True)
    consignment_id = models.CharField(max_length=128, null=True, blank=True)
    tracking_number = models.CharField(max_length=128, null=True, blank=True)
    courier_status = models.CharField(max_length=80, null=True, blank=True)
    courier_synced_at = models.DateTimeField(null=True, blank=True)
    # 정산 잡이 마지막으로 들여다본 시각 (상태 변화 여부 무관)
    courier_checked_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "orders"
        indexes = [
            models.Index(fields=["tenant_id", "created_at"]),
            models.Index(fields=["status"]),
            models.Index(fields=["courier_service_id", "consignment_id"]),
        ]

    def __str__(self) -> str:
        return f"Order({self.id}) tenant={self.tenant_id} status={self.status}"

    @property
    def has_courier_binding(self) -> bool:
        return bool(self.courier_service_id and self.consignment_id)


class OrderItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")

    product_name = models.CharField(max_length=120)
    quantity = models.PositiveIntegerField(default=1)
    price = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        db_table = "order_items"

    @property
    def line_total(self):
        return (self.price or 0) * (self.quantity or 0)
