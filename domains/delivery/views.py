from drf_spectacular.utils import extend_schema
from rest_framework import parsers, status, views
from rest_framework.response import Response

from shared.permissions import HasTenant, request_tenant_id

from .serializers import (
    ShippingCostRequestSerializer,
    ShippingCostSerializer,
    StorefrontDeliveryConfigSerializer,
)
from .services import calculate_shipping, storefront_delivery_config


class DeliveryConfigAPI(views.APIView):
    """
    GET /api/v1/delivery/config/
    - 스토어프론트(비로그인) 체크아웃용 배송 방법
    """
    authentication_classes = []
    permission_classes = [HasTenant]

    @extend_schema(summary="스토어프론트 배송 설정", responses={200: StorefrontDeliveryConfigSerializer})
    def get(self, request):
        data = storefront_delivery_config(request_tenant_id(request))
        return Response(StorefrontDeliveryConfigSerializer(data).data, status=status.HTTP_200_OK)


class ShippingCostAPI(views.APIView):
    """
    POST /api/v1/delivery/shipping-cost/
    body: {city, area?, postal_code?, weight?, total?}
    """
    authentication_classes = []
    permission_classes = [HasTenant]
    parser_classes = [parsers.JSONParser]

    @extend_schema(
        summary="배송비 계산",
        request=ShippingCostRequestSerializer,
        responses={200: ShippingCostSerializer},
    )
    def post(self, request):
        ser = ShippingCostRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        v = ser.validated_data
        data = calculate_shipping(
            request_tenant_id(request),
            city=v["city"],
            area=v.get("area", ""),
            weight=v.get("weight"),
            total=v.get("total"),
        )
        return Response(ShippingCostSerializer(data).data, status=status.HTTP_200_OK)
