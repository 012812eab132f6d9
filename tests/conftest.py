# tests/conftest.py
import json
from decimal import Decimal
from uuid import uuid4

from django.conf import settings
from django.contrib.auth import get_user_model

import pytest
from rest_framework.test import APIClient

from domains.couriers.models import CourierServiceConfig
from domains.orders.models import Order, OrderItem, PaymentMethod, PaymentStatus

User = get_user_model()

TENANT = "tenant-a"


# ─────────────────────────────────────────────────────────────
# 전역 테스트 환경 (해싱/동기화 지연)
# ─────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True, scope="session")
def _fast_password_hasher(django_db_setup, django_db_blocker):
    """해시 느린 기본 해셔 대신 MD5 해셔 사용"""
    with django_db_blocker.unblock():
        settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


@pytest.fixture(autouse=True)
def _no_sync_delay(settings):
    # 정산 잡의 주문 간 대기 제거, cron 토큰 비활성
    settings.COURIER_SYNC_DELAY_SECONDS = 0
    settings.COURIER_CRON_TOKEN = ""


# ─────────────────────────────────────────────────────────────
# 클라이언트 & 인증
# ─────────────────────────────────────────────────────────────
@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def staff(db):
    return User.objects.create_user(
        username=f"staff_{uuid4().hex[:6]}", password="Test1234!A", is_staff=True
    )


@pytest.fixture
def merchant_client(staff):
    """staff 로그인 + X-Tenant-ID 헤더가 붙은 APIClient"""
    c = APIClient()
    c.force_authenticate(user=staff)
    c.credentials(HTTP_X_TENANT_ID=TENANT)
    return c


# ─────────────────────────────────────────────────────────────
# 팩토리 픽스처
# ─────────────────────────────────────────────────────────────
@pytest.fixture
def order_factory(db):
    """
    사용법: order_factory(total="1250.40", payment_method="online", items=[("Shirt", 2, "500")])
    """

    def _make(**kw):
        items = kw.pop("items", [("Basic Tee", 2, "500.00")])
        kw.setdefault("tenant_id", TENANT)
        kw.setdefault("customer_name", "Rahim Uddin")
        kw.setdefault("customer_phone", "01712345678")
        kw.setdefault("customer_email", "")
        kw.setdefault("address_line1", "House 12, Road 5, Dhanmondi")
        kw.setdefault("city", "Dhaka")
        kw.setdefault("total", Decimal("1000.00"))
        kw.setdefault("payment_method", PaymentMethod.COD)
        kw.setdefault("payment_status", PaymentStatus.PENDING)
        order = Order.objects.create(**kw)
        for name, qty, price in items:
            OrderItem.objects.create(order=order, product_name=name, quantity=qty, price=Decimal(price))
        return order

    return _make


@pytest.fixture
def courier_config_factory(db):
    defaults = {
        "pathao": {
            "storeId": "1234",
            "clientId": "client-id",
            "clientSecret": "client-secret",
            "username": "merchant@example.com",
            "password": "secret",
        },
        "redx": {"apiKey": "redx-key"},
        "steadfast": {"apiKey": "sf-key", "secretKey": "sf-secret"},
        "paperfly": {"username": "pf-user", "password": "pf-pass"},
    }

    def _make(service_id: str, **kw):
        kw.setdefault("tenant_id", TENANT)
        kw.setdefault("enabled", True)
        kw.setdefault("credentials", dict(defaults.get(service_id, {})))
        return CourierServiceConfig.objects.create(service_id=service_id, **kw)

    return _make


# ─────────────────────────────────────────────────────────────
# 택배사 HTTP 가짜 응답
# ─────────────────────────────────────────────────────────────
class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text


@pytest.fixture
def fake_http(monkeypatch):
    """
    domains.couriers.http 의 requests.request 를 대체.
    사용법:
      fake_http.queue(FakeResponse(...), ...)   # 순서대로 응답
      fake_http.calls                           # [(method, url, kwargs), ...]
    큐가 비면 AssertionError
    """

    class _Fake:
        def __init__(self):
            self.responses = []
            self.calls = []

        def queue(self, *responses):
            self.responses.extend(responses)
            return self

        def __call__(self, method, url, **kwargs):
            self.calls.append((method, url, kwargs))
            assert self.responses, f"unexpected courier call: {method} {url}"
            nxt = self.responses.pop(0)
            if isinstance(nxt, Exception):
                raise nxt
            return nxt

    fake = _Fake()
    monkeypatch.setattr("domains.couriers.http.requests.request", fake)
    return fake


@pytest.fixture
def fake_response():
    return FakeResponse
