# domains/orders/admin.py
from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    inlines = [OrderItemInline]
    list_display = (
        "id",
        "tenant_id",
        "status",
        "payment_method",
        "payment_status",
        "total",
        "courier_service_id",
        "consignment_id",
        "courier_status",
        "created_at",
    )
    list_filter = ("status", "payment_method", "courier_service_id")
    search_fields = ("id", "tenant_id", "customer_phone", "consignment_id")
    readonly_fields = ("courier_synced_at", "courier_checked_at", "created_at", "updated_at")
    ordering = ("-created_at",)
