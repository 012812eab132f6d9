from django.urls import path

from .views import (
    CourierAssignAPI,
    CourierDispatchAPI,
    CourierStatusAPI,
    CourierSyncAPI,
    PathaoAreasAPI,
    PathaoCitiesAPI,
    PathaoZonesAPI,
)

app_name = "couriers"

urlpatterns = [
    path("orders/<uuid:order_id>/dispatch/", CourierDispatchAPI.as_view(), name="courier-dispatch"),
    path("orders/<uuid:order_id>/assign/", CourierAssignAPI.as_view(), name="courier-assign"),
    path("orders/<uuid:order_id>/status/", CourierStatusAPI.as_view(), name="courier-status"),
    path("sync/", CourierSyncAPI.as_view(), name="courier-sync"),
    # Pathao 지역 카탈로그
    path("pathao/cities/", PathaoCitiesAPI.as_view(), name="pathao-cities"),
    path("pathao/cities/<int:city_id>/zones/", PathaoZonesAPI.as_view(), name="pathao-zones"),
    path("pathao/zones/<int:zone_id>/areas/", PathaoAreasAPI.as_view(), name="pathao-areas"),
]
