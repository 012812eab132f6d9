from __future__ import annotations

from django.db import models


class CarrierId(models.TextChoices):
    PATHAO = "pathao", "Pathao Courier"
    REDX = "redx", "RedX Courier"
    STEADFAST = "steadfast", "Steadfast Courier"
    PAPERFLY = "paperfly", "Paperfly"


# 택배사별 필수 자격증명 키 (관리자 입력 폼 검증/문서용)
REQUIRED_CREDENTIALS = {
    CarrierId.PATHAO: ("storeId", "clientId", "clientSecret", "username", "password"),
    CarrierId.REDX: ("apiKey",),
    CarrierId.STEADFAST: ("apiKey", "secretKey"),
    CarrierId.PAPERFLY: ("username", "password"),
}


class CourierServiceConfig(models.Model):
    """
    테넌트별 택배사 설정. 가맹점 설정 화면(관리자)에서 생성/수정하고
    연동 계층은 읽기만 한다.
    """

    tenant_id = models.CharField(max_length=64, db_index=True)
    service_id = models.CharField(max_length=32, choices=CarrierId.choices)
    name = models.CharField(max_length=80, blank=True, default="")
    enabled = models.BooleanField(default=False)
    credentials = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "courier_service_configs"
        constraints = [
            models.UniqueConstraint(
                fields=("tenant_id", "service_id"), name="uq_tenant_courier_service"
            )
        ]

    def __str__(self) -> str:
        flag = "on" if self.enabled else "off"
        return f"{self.tenant_id}:{self.service_id} ({flag})"

    @property
    def display_name(self) -> str:
        return self.name or dict(CarrierId.choices).get(self.service_id, self.service_id)
