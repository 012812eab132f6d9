# domains/couriers/views.py
import logging

from django.conf import settings
from django.utils.crypto import constant_time_compare
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import parsers, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from shared.api_markers import DetailResponseSerializer, EmptySerializer
from shared.permissions import IsMerchantStaff, request_tenant_id

from . import services
from .adapters.pathao import PathaoAdapter
from .exceptions import (
    AreaResolutionError,
    ConfigurationError,
    CourierError,
    DispatchConflictError,
    OrderNotFound,
    ProviderError,
    TransientError,
    ValidationError,
)
from .models import CarrierId
from .reconciliation import run_reconciliation
from .repository import CarrierConfigRepository
from .serializers import (
    AssignSerializer,
    DispatchSerializer,
    OrderCourierInfoSerializer,
    PathaoLocationSerializer,
    SyncSummarySerializer,
)
from .types import DeliveryDetails

logger = logging.getLogger(__name__)

CRON_TOKEN_HEADER = "HTTP_X_CRON_TOKEN"

_ERROR_STATUS = (
    (OrderNotFound, status.HTTP_404_NOT_FOUND),
    (DispatchConflictError, status.HTTP_409_CONFLICT),
    (AreaResolutionError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ConfigurationError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (TransientError, status.HTTP_504_GATEWAY_TIMEOUT),
    (ProviderError, status.HTTP_502_BAD_GATEWAY),
)


def courier_error_response(e: CourierError) -> Response:
    code = next((c for cls, c in _ERROR_STATUS if isinstance(e, cls)), status.HTTP_502_BAD_GATEWAY)
    body = {"detail": str(e)}
    if isinstance(e, AreaResolutionError) and e.samples:
        body["samples"] = e.samples
    if code >= 500:
        logger.warning("[Courier] %s: %s", type(e).__name__, e)
    return Response(body, status=code)


_ERRORS = {
    400: DetailResponseSerializer,
    404: DetailResponseSerializer,
    409: DetailResponseSerializer,
    422: DetailResponseSerializer,
    502: DetailResponseSerializer,
    504: DetailResponseSerializer,
}


# --------------------------------------------------------------------
# POST /api/v1/couriers/orders/{order_id}/dispatch/
# body: {service_id, delivery_details{...}, replace?}
# --------------------------------------------------------------------
class CourierDispatchAPI(APIView):
    parser_classes = [parsers.JSONParser]
    permission_classes = [IsMerchantStaff]

    @extend_schema(
        summary="택배사 배송 접수",
        request=DispatchSerializer,
        responses={201: OrderCourierInfoSerializer, **_ERRORS},
    )
    def post(self, request, order_id):
        ser = DispatchSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        v = ser.validated_data

        try:
            info = services.dispatch(
                request_tenant_id(request),
                order_id,
                v["service_id"],
                DeliveryDetails.from_dict(v["delivery_details"]),
                replace=v.get("replace", False),
            )
        except CourierError as e:
            return courier_error_response(e)
        return Response(OrderCourierInfoSerializer(info).data, status=status.HTTP_201_CREATED)


# --------------------------------------------------------------------
# POST   /api/v1/couriers/orders/{order_id}/assign/  (수동 운송장 연결)
# DELETE /api/v1/couriers/orders/{order_id}/assign/  (연결 해제)
# --------------------------------------------------------------------
class CourierAssignAPI(APIView):
    parser_classes = [parsers.JSONParser]
    permission_classes = [IsMerchantStaff]

    @extend_schema(
        summary="운송장 수동 연결",
        request=AssignSerializer,
        responses={200: OrderCourierInfoSerializer, **_ERRORS},
    )
    def post(self, request, order_id):
        ser = AssignSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            info = services.assign(
                request_tenant_id(request),
                order_id,
                ser.validated_data["service_id"],
                ser.validated_data["consignment_id"],
            )
        except CourierError as e:
            return courier_error_response(e)
        return Response(OrderCourierInfoSerializer(info).data, status=status.HTTP_200_OK)

    @extend_schema(summary="운송장 연결 해제", request=None, responses={204: None, 404: DetailResponseSerializer})
    def delete(self, request, order_id):
        try:
            services.unassign(request_tenant_id(request), order_id)
        except CourierError as e:
            return courier_error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)


# --------------------------------------------------------------------
# POST /api/v1/couriers/orders/{order_id}/status/  (실시간 상태 새로고침)
# --------------------------------------------------------------------
class CourierStatusAPI(APIView):
    permission_classes = [IsMerchantStaff]

    @extend_schema(
        summary="택배 상태 새로고침",
        request=EmptySerializer,
        responses={200: OrderCourierInfoSerializer, **_ERRORS},
    )
    def post(self, request, order_id):
        try:
            info = services.refresh_status(request_tenant_id(request), order_id)
        except CourierError as e:
            return courier_error_response(e)
        return Response(OrderCourierInfoSerializer(info).data, status=status.HTTP_200_OK)


# --------------------------------------------------------------------
# POST /api/v1/couriers/sync/  (가맹점 단위 즉시 동기화)
# --------------------------------------------------------------------
class CourierSyncAPI(APIView):
    permission_classes = [IsMerchantStaff]

    @extend_schema(summary="택배 상태 일괄 동기화", request=EmptySerializer, responses={200: SyncSummarySerializer})
    def post(self, request):
        summary = run_reconciliation(request_tenant_id(request))
        return Response(summary, status=status.HTTP_200_OK)


# --------------------------------------------------------------------
# GET /api/v1/cron/sync-delivery-status/
# 외부 스케줄러용. COURIER_CRON_TOKEN 이 설정돼 있으면 X-Cron-Token 필수
# --------------------------------------------------------------------
class SyncDeliveryStatusCronAPI(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        summary="택배 상태 동기화 (cron)",
        parameters=[
            OpenApiParameter(name="X-Cron-Token", location=OpenApiParameter.HEADER, required=False, type=str),
        ],
        responses={200: SyncSummarySerializer, 401: DetailResponseSerializer},
    )
    def get(self, request):
        expected = getattr(settings, "COURIER_CRON_TOKEN", "") or ""
        if expected:
            given = request.META.get(CRON_TOKEN_HEADER) or ""
            if not constant_time_compare(given, expected):
                return Response({"detail": "invalid cron token"}, status=status.HTTP_401_UNAUTHORIZED)

        summary = run_reconciliation()
        return Response({"success": True, **summary}, status=status.HTTP_200_OK)


# --------------------------------------------------------------------
# Pathao 지역 카탈로그 (가맹점 발송 모달의 도시/존/지역 선택용)
# GET /api/v1/couriers/pathao/cities/
# GET /api/v1/couriers/pathao/cities/{city_id}/zones/
# GET /api/v1/couriers/pathao/zones/{zone_id}/areas/
# --------------------------------------------------------------------
class _PathaoLocationAPI(APIView):
    permission_classes = [IsMerchantStaff]

    def _adapter(self, request) -> PathaoAdapter:
        config = CarrierConfigRepository().get_enabled(request_tenant_id(request), CarrierId.PATHAO)
        if config is None:
            raise ConfigurationError("Pathao courier is not enabled")
        return PathaoAdapter(config)

    def _respond(self, request, fetch):
        try:
            rows = fetch(self._adapter(request))
        except CourierError as e:
            return courier_error_response(e)
        return Response({"results": rows}, status=status.HTTP_200_OK)


class PathaoCitiesAPI(_PathaoLocationAPI):
    @extend_schema(summary="Pathao 도시 목록", responses={200: PathaoLocationSerializer(many=True)})
    def get(self, request):
        return self._respond(request, lambda a: a.cities())


class PathaoZonesAPI(_PathaoLocationAPI):
    @extend_schema(summary="Pathao 존 목록", responses={200: PathaoLocationSerializer(many=True)})
    def get(self, request, city_id: int):
        return self._respond(request, lambda a: a.zones(city_id))


class PathaoAreasAPI(_PathaoLocationAPI):
    @extend_schema(summary="Pathao 지역 목록", responses={200: PathaoLocationSerializer(many=True)})
    def get(self, request, zone_id: int):
        return self._respond(request, lambda a: a.areas(zone_id))
