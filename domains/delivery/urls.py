from django.urls import path

from .views import DeliveryConfigAPI, ShippingCostAPI

app_name = "delivery"

urlpatterns = [
    path("config/", DeliveryConfigAPI.as_view(), name="delivery-config"),
    path("shipping-cost/", ShippingCostAPI.as_view(), name="shipping-cost"),
]
