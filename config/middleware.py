# config/middleware.py

TENANT_HEADER = "HTTP_X_TENANT_ID"


class TenantHeaderMiddleware:
    """
    X-Tenant-ID 헤더 → request.tenant_id
    테넌트 검증/권한은 앞단 게이트웨이에서 끝난 상태라고 가정한다.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.tenant_id = (request.META.get(TENANT_HEADER) or "").strip() or None
        return self.get_response(request)
