# api/v1/urls.py
from django.urls import include, path

from domains.couriers.views import SyncDeliveryStatusCronAPI

urlpatterns = [
    # --- Couriers (발송/상태조회/지역 카탈로그) ---
    path("couriers/", include(("domains.couriers.urls", "couriers"))),
    # --- Delivery (스토어프론트 배송비) ---
    path("delivery/", include(("domains.delivery.urls", "delivery"))),
    # --- Cron (스케줄러가 호출하는 배송상태 동기화) ---
    path(
        "cron/sync-delivery-status/",
        SyncDeliveryStatusCronAPI.as_view(),
        name="cron-sync-delivery-status",
    ),
]
