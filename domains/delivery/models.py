from __future__ import annotations

from decimal import Decimal

from django.db import models


class DeliveryChargeConfig(models.Model):
    """
    테넌트별 배송비 설정
    - specific_charges     : [{"location": "Dhaka", "charge": 60}, ...]
    - weight_based_charges : [{"weight": 2, "extra_charge": 20}, ...]  (앞에서부터 첫 일치)
    """

    tenant_id = models.CharField(max_length=64, unique=True)
    default_charge = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    specific_charges = models.JSONField(default=list, blank=True)
    weight_based_charges = models.JSONField(default=list, blank=True)
    free_shipping_threshold = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "delivery_charge_configs"

    def __str__(self) -> str:
        return f"DeliveryChargeConfig({self.tenant_id})"
