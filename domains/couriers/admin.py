from __future__ import annotations

from django import forms
from django.contrib import admin

from .models import REQUIRED_CREDENTIALS, CourierServiceConfig


class CourierServiceConfigForm(forms.ModelForm):
    class Meta:
        model = CourierServiceConfig
        fields = "__all__"

    def clean(self):
        data = super().clean()
        # 활성화할 때만 필수 자격증명 확인 (Steadfast 는 appSecret 도 허용)
        if data.get("enabled"):
            creds = data.get("credentials") or {}
            required = REQUIRED_CREDENTIALS.get(data.get("service_id"), ())
            missing = [
                k
                for k in required
                if not str(creds.get(k) or (creds.get("appSecret") if k == "secretKey" else "") or "").strip()
            ]
            if missing:
                raise forms.ValidationError(f"Missing credentials: {', '.join(missing)}")
        return data


@admin.register(CourierServiceConfig)
class CourierServiceConfigAdmin(admin.ModelAdmin):
    form = CourierServiceConfigForm
    list_display = ("id", "tenant_id", "service_id", "name", "enabled", "updated_at")
    list_filter = ("service_id", "enabled")
    search_fields = ("tenant_id", "name")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("tenant_id", "service_id")
