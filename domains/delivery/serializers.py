from decimal import Decimal

from rest_framework import serializers


class ShippingCostRequestSerializer(serializers.Serializer):
    city = serializers.CharField()
    area = serializers.CharField(required=False, allow_blank=True, default="")
    postal_code = serializers.CharField(required=False, allow_blank=True, default="")
    weight = serializers.DecimalField(
        max_digits=8, decimal_places=3, min_value=Decimal("0"), required=False, allow_null=True
    )
    total = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False, allow_null=True
    )


class DeliveryMethodSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    cost = serializers.DecimalField(max_digits=10, decimal_places=2)
    estimated_days = serializers.IntegerField()


class ShippingCostSerializer(serializers.Serializer):
    methods = DeliveryMethodSerializer(many=True)
    free_shipping = serializers.BooleanField()


class StorefrontDeliveryConfigSerializer(serializers.Serializer):
    enabled = serializers.BooleanField()
    methods = DeliveryMethodSerializer(many=True)
    free_shipping_threshold = serializers.DecimalField(
        max_digits=12, decimal_places=2, allow_null=True
    )
