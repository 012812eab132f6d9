# tests/test_couriers_views_api.py
import uuid

import pytest
from rest_framework.test import APIClient

from domains.orders.models import Order

DISPATCH_BODY = {
    "service_id": "steadfast",
    "delivery_details": {
        "recipient_name": "Rahim Uddin",
        "recipient_phone": "01712345678",
        "recipient_address": "House 12, Road 5, Dhanmondi",
        "city": "Dhaka",
        "area": "Dhanmondi",
        "amount_to_collect": 1000,
        "item_weight": 0.5,
    },
}


@pytest.mark.django_db
def test_dispatch_endpoint_creates_binding(
    merchant_client, fake_http, fake_response, order_factory, courier_config_factory
):
    order = order_factory()
    courier_config_factory("steadfast")
    fake_http.queue(fake_response(payload={"consignment": {"consignment_id": 77, "status": "in_review"}}))

    r = merchant_client.post(f"/api/v1/couriers/orders/{order.id}/dispatch/", DISPATCH_BODY, format="json")

    assert r.status_code == 201, r.data
    assert r.data["consignment_id"] == "77"
    assert r.data["status"] == "In Review"
    assert Order.objects.get(id=order.id).consignment_id == "77"


@pytest.mark.django_db
def test_dispatch_endpoint_validates_body(merchant_client, order_factory):
    order = order_factory()
    body = {**DISPATCH_BODY, "delivery_details": {**DISPATCH_BODY["delivery_details"], "recipient_address": "short"}}
    r = merchant_client.post(f"/api/v1/couriers/orders/{order.id}/dispatch/", body, format="json")
    assert r.status_code == 400
    assert "delivery_details" in r.data

    body = {**DISPATCH_BODY, "delivery_details": {**DISPATCH_BODY["delivery_details"], "item_weight": 0}}
    r = merchant_client.post(f"/api/v1/couriers/orders/{order.id}/dispatch/", body, format="json")
    assert r.status_code == 400


@pytest.mark.django_db
def test_dispatch_endpoint_error_mapping(
    merchant_client, fake_http, fake_response, order_factory, courier_config_factory
):
    order = order_factory()

    # 택배사 미설정 → 400
    r = merchant_client.post(f"/api/v1/couriers/orders/{order.id}/dispatch/", DISPATCH_BODY, format="json")
    assert r.status_code == 400
    assert "detail" in r.data

    # 없는 주문 → 404
    courier_config_factory("steadfast")
    r = merchant_client.post(f"/api/v1/couriers/orders/{uuid.uuid4()}/dispatch/", DISPATCH_BODY, format="json")
    assert r.status_code == 404

    # 택배사 오류 → 502
    fake_http.queue(fake_response(status_code=500, text="boom", reason="Server Error"))
    r = merchant_client.post(f"/api/v1/couriers/orders/{order.id}/dispatch/", DISPATCH_BODY, format="json")
    assert r.status_code == 502

    # 이미 발송됨 → 409
    Order.objects.filter(id=order.id).update(courier_service_id="steadfast", consignment_id="1")
    r = merchant_client.post(f"/api/v1/couriers/orders/{order.id}/dispatch/", DISPATCH_BODY, format="json")
    assert r.status_code == 409


@pytest.mark.django_db
def test_dispatch_endpoint_unresolved_redx_area_is_422(
    merchant_client, fake_http, fake_response, order_factory, courier_config_factory
):
    order = order_factory()
    courier_config_factory("redx")
    fake_http.queue(
        fake_response(payload={"areas": [{"id": 1, "name": "Kotwali"}]}),
        fake_response(payload={"areas": [{"id": 1, "name": "Kotwali"}]}),
    )
    body = {**DISPATCH_BODY, "service_id": "redx"}
    body["delivery_details"] = {**DISPATCH_BODY["delivery_details"], "area": "Xyzw"}

    r = merchant_client.post(f"/api/v1/couriers/orders/{order.id}/dispatch/", body, format="json")

    assert r.status_code == 422
    assert r.data["samples"] == ["Kotwali"]


@pytest.mark.django_db
def test_assign_and_status_endpoints(
    merchant_client, fake_http, fake_response, order_factory, courier_config_factory
):
    order = order_factory()
    courier_config_factory("redx")

    r = merchant_client.post(
        f"/api/v1/couriers/orders/{order.id}/assign/",
        {"service_id": "redx", "consignment_id": "21A427TU4BN3R"},
        format="json",
    )
    assert r.status_code == 200, r.data
    assert r.data["status"] == "Pending"

    fake_http.queue(fake_response(payload={"parcel": {"status": "delivered"}}))
    r = merchant_client.post(f"/api/v1/couriers/orders/{order.id}/status/")
    assert r.status_code == 200
    assert r.data["status"] == "Delivered"

    r = merchant_client.delete(f"/api/v1/couriers/orders/{order.id}/assign/")
    assert r.status_code == 204
    assert Order.objects.get(id=order.id).consignment_id is None


@pytest.mark.django_db
def test_merchant_endpoints_require_staff_and_tenant(staff, order_factory):
    order = order_factory()

    anon = APIClient()
    r = anon.post(f"/api/v1/couriers/orders/{order.id}/status/")
    assert r.status_code in (401, 403)

    no_tenant = APIClient()
    no_tenant.force_authenticate(user=staff)
    r = no_tenant.post(f"/api/v1/couriers/orders/{order.id}/status/")
    assert r.status_code == 403


@pytest.mark.django_db
def test_cron_endpoint(api_client, settings):
    r = api_client.get("/api/v1/cron/sync-delivery-status/")
    assert r.status_code == 200
    assert r.data["success"] is True
    assert r.data["total"] == 0

    settings.COURIER_CRON_TOKEN = "s3cret"
    assert api_client.get("/api/v1/cron/sync-delivery-status/").status_code == 401
    r = api_client.get("/api/v1/cron/sync-delivery-status/", HTTP_X_CRON_TOKEN="s3cret")
    assert r.status_code == 200


@pytest.mark.django_db
def test_pathao_cities_endpoint(merchant_client, fake_http, fake_response, courier_config_factory):
    r = merchant_client.get("/api/v1/couriers/pathao/cities/")
    assert r.status_code == 400

    courier_config_factory("pathao")
    fake_http.queue(
        fake_response(payload={"access_token": "tok"}),
        fake_response(payload={"data": {"data": [{"city_id": 1, "city_name": "Dhaka"}]}}),
    )
    r = merchant_client.get("/api/v1/couriers/pathao/cities/")
    assert r.status_code == 200
    assert r.data["results"][0]["city_name"] == "Dhaka"
