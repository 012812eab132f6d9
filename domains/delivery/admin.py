from django.contrib import admin

from .models import DeliveryChargeConfig


@admin.register(DeliveryChargeConfig)
class DeliveryChargeConfigAdmin(admin.ModelAdmin):
    list_display = ("tenant_id", "default_charge", "free_shipping_threshold", "updated_at")
    search_fields = ("tenant_id",)
    readonly_fields = ("created_at", "updated_at")
