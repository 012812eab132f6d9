from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from .models import CarrierId


# ---------------------------
# 입력: 발송 모달의 배송 정보
# ---------------------------
class DeliveryDetailsSerializer(serializers.Serializer):
    recipient_name = serializers.CharField(min_length=2)
    recipient_phone = serializers.CharField(min_length=8)
    recipient_address = serializers.CharField(min_length=10)
    city = serializers.CharField()
    area = serializers.CharField()
    amount_to_collect = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False, allow_null=True
    )
    item_weight = serializers.DecimalField(
        max_digits=8, decimal_places=3, required=False, allow_null=True
    )
    special_instruction = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_item_weight(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError("Item weight must be greater than 0")
        return value


class DispatchSerializer(serializers.Serializer):
    service_id = serializers.ChoiceField(choices=CarrierId.choices)
    delivery_details = DeliveryDetailsSerializer()
    replace = serializers.BooleanField(required=False, default=False)


class AssignSerializer(serializers.Serializer):
    service_id = serializers.ChoiceField(choices=CarrierId.choices)
    consignment_id = serializers.CharField(max_length=128)


# ---------------------------
# 출력
# ---------------------------
class OrderCourierInfoSerializer(serializers.Serializer):
    service_id = serializers.CharField()
    service_name = serializers.CharField()
    consignment_id = serializers.CharField()
    tracking_number = serializers.CharField()
    status = serializers.CharField()
    synced_at = serializers.DateTimeField(allow_null=True)
    raw_status = serializers.JSONField(allow_null=True, required=False)


class SyncSummarySerializer(serializers.Serializer):
    total = serializers.IntegerField()
    updated = serializers.IntegerField()
    skipped = serializers.IntegerField()
    failed = serializers.IntegerField()
    error_samples = serializers.ListField(child=serializers.CharField())


class PathaoLocationSerializer(serializers.Serializer):
    """Pathao city/zone/area 목록 행 (필드명은 택배사 응답 그대로)"""

    city_id = serializers.IntegerField(required=False)
    city_name = serializers.CharField(required=False)
    zone_id = serializers.IntegerField(required=False)
    zone_name = serializers.CharField(required=False)
    area_id = serializers.IntegerField(required=False)
    area_name = serializers.CharField(required=False)
