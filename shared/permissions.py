# shared/permissions.py
from __future__ import annotations

from rest_framework.permissions import BasePermission

# ---- helpers ---------------------------------------------------------------


def _is_schema_generation(view) -> bool:
    """drf-spectacular 스키마 생성 시 True (권한을 널널하게 통과시켜 문서 생성 편의)."""
    return bool(getattr(view, "swagger_fake_view", False))


def request_tenant_id(request):
    """TenantHeaderMiddleware 가 심어둔 테넌트 id (없으면 None)"""
    return getattr(request, "tenant_id", None) or getattr(
        getattr(request, "_request", None), "tenant_id", None
    )


# ---- tenant-based permissions ----------------------------------------------


class HasTenant(BasePermission):
    """X-Tenant-ID 헤더로 테넌트가 지정된 요청만"""

    message = "X-Tenant-ID header is required."

    def has_permission(self, request, view):
        if _is_schema_generation(view):
            return True
        return bool(request_tenant_id(request))


class IsMerchantStaff(BasePermission):
    """로그인 + 테넌트 지정 + staff (가맹점 관리자 화면용)"""

    message = "Merchant staff access with X-Tenant-ID header is required."

    def has_permission(self, request, view):
        if _is_schema_generation(view):
            return True
        u = request.user
        return bool(
            getattr(u, "is_authenticated", False)
            and getattr(u, "is_staff", False)
            and request_tenant_id(request)
        )


__all__ = ["HasTenant", "IsMerchantStaff", "request_tenant_id"]
