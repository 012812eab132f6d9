# tests/test_couriers_paperfly.py
import json

import pytest

from domains.couriers.adapters.paperfly import (
    PaperflyAdapter,
    build_consignment_id,
    parse_tracker_response,
    split_consignment_id,
)
from domains.couriers.exceptions import ProviderError, TransientError, ValidationError
from domains.couriers.retry import (
    PAPERFLY_THANA_POLICY,
    RetryPolicy,
    is_thana_not_found,
    normalize_thana,
    thana_candidates,
)
from domains.couriers.types import DeliveryDetails

THANA_NOT_FOUND = json.dumps({"error": {"message": "Thana not found"}})


def _details(area="Savar Upazila", city="Dhaka", phone="01712345678"):
    return DeliveryDetails(
        recipient_name="Karim",
        recipient_phone=phone,
        recipient_address="Bank Colony, Savar, Dhaka",
        city=city,
        area=area,
    )


# ─────────────────────────────────────────────────────────────
# thana 후보 / 재시도 정책
# ─────────────────────────────────────────────────────────────
def test_normalize_thana_strips_suffixes():
    assert normalize_thana("Savar Upazila") == "Savar"
    assert normalize_thana("Mirpur  Thana ") == "Mirpur"
    assert normalize_thana("সাভার উপজেলা") == "সাভার"


def test_thana_candidates_order_and_dedup():
    assert thana_candidates("Savar Upazila", "Dhaka") == ["Savar", "Savar Upazila", "Savar Thana", "Dhaka"]
    assert thana_candidates("Savar", "Dhaka") == ["Savar", "Dhaka"]
    assert thana_candidates("Dhaka", "Dhaka") == ["Dhaka"]


def test_retry_predicate_only_for_thana_not_found():
    assert is_thana_not_found(0, ProviderError("Failed", raw_text=THANA_NOT_FOUND))
    assert is_thana_not_found(1, ProviderError("Failed to create: THANA NOT FOUND"))
    assert not is_thana_not_found(0, ProviderError("Invalid credentials"))
    assert not is_thana_not_found(0, TransientError("thana not found"))


def test_retry_policy_max_attempts():
    policy = RetryPolicy(candidates=thana_candidates, should_retry=is_thana_not_found, max_attempts=2)
    assert policy.plan("Savar Upazila", "Dhaka") == ["Savar", "Savar Upazila"]
    assert PAPERFLY_THANA_POLICY.plan("Savar", "Dhaka") == ["Savar", "Dhaka"]


# ─────────────────────────────────────────────────────────────
# 접수 (thana 변형 재시도)
# ─────────────────────────────────────────────────────────────
@pytest.mark.django_db
def test_paperfly_three_candidates_third_used(
    fake_http, fake_response, order_factory, courier_config_factory
):
    order = order_factory()
    fake_http.queue(
        fake_response(status_code=400, text=THANA_NOT_FOUND, reason="Bad Request"),
        fake_response(status_code=400, text=THANA_NOT_FOUND, reason="Bad Request"),
        fake_response(payload={"order_id": "PF-7788", "status": "order_placed"}),
    )
    # "Savar Thana" → 후보 ["Savar", "Savar Thana", "Dhaka"]
    result = PaperflyAdapter(courier_config_factory("paperfly")).create(
        order, "ORD1", _details(area="Savar Thana")
    )

    assert len(fake_http.calls) == 3
    assert [c[2]["json"]["customerThana"] for c in fake_http.calls] == ["Savar", "Savar Thana", "Dhaka"]
    assert result.consignment_id == "PF-7788|01712345678"
    assert result.delivery_status == "Order Placed"
    body = fake_http.calls[2][2]["json"]
    assert body["merOrderRef"] == "ORD1"
    assert body["customerDistrict"] == "Dhaka"
    assert body["packagePrice"] == "1000"
    assert body["max_weight"] == "0.5"
    assert fake_http.calls[2][2]["headers"]["Authorization"].startswith("Basic ")


@pytest.mark.django_db
def test_paperfly_unrelated_error_aborts_after_one_call(
    fake_http, fake_response, order_factory, courier_config_factory
):
    order = order_factory()
    fake_http.queue(fake_response(status_code=401, text='{"error": {"message": "Unauthorized"}}', reason="Unauthorized"))

    with pytest.raises(ProviderError) as ei:
        PaperflyAdapter(courier_config_factory("paperfly")).create(order, "ORD1", _details())

    assert len(fake_http.calls) == 1
    assert ei.value.status_code == 401


@pytest.mark.django_db
def test_paperfly_transport_failure_is_not_retried(
    fake_http, order_factory, courier_config_factory
):
    import requests

    order = order_factory()
    fake_http.queue(requests.ConnectionError("reset"))
    with pytest.raises(TransientError):
        PaperflyAdapter(courier_config_factory("paperfly")).create(order, "ORD1", _details())
    assert len(fake_http.calls) == 1


@pytest.mark.django_db
def test_paperfly_exhaustion_names_all_variations(
    fake_http, fake_response, order_factory, courier_config_factory
):
    order = order_factory()
    fake_http.queue(
        *[fake_response(status_code=400, text=THANA_NOT_FOUND, reason="Bad Request") for _ in range(4)]
    )

    with pytest.raises(ProviderError) as ei:
        PaperflyAdapter(courier_config_factory("paperfly")).create(order, "ORD1", _details())

    msg = str(ei.value)
    assert len(fake_http.calls) == 4
    assert "Savar, Savar Upazila, Savar Thana, Dhaka" in msg
    assert "Thana not found" in msg


@pytest.mark.django_db
def test_paperfly_non_json_success_falls_back_to_tracking_ref(
    fake_http, fake_response, order_factory, courier_config_factory
):
    order = order_factory()
    fake_http.queue(fake_response(text="OK"))
    result = PaperflyAdapter(courier_config_factory("paperfly")).create(
        order, "ORD1", _details(area="Savar", city="Savar")
    )
    assert result.consignment_id == "ORD1|01712345678"
    assert result.delivery_status == "Pending"


# ─────────────────────────────────────────────────────────────
# 트래킹 (HTML 스크래핑)
# ─────────────────────────────────────────────────────────────
TRACKER_HTML = """
<script>
$("#order_id_eng").val("PF-7788");
$("#order_status_eng").html("<b>On the way to delivery</b>");
$('#ordertypeeng').val('Regular');
</script>
"""


def test_parse_tracker_response_extracts_fields():
    parsed = parse_tracker_response(TRACKER_HTML)
    assert parsed["order_id"] == "PF-7788"
    assert parsed["order_status"] == "On the way to delivery"
    assert parsed["status"] == "On the way to delivery"
    assert parsed["rawText"].startswith("\n<script>")


def test_parse_tracker_response_status_pattern_and_fallbacks():
    assert parse_tracker_response('var x = {delivery_status: "delivered"};')["status"] == "delivered"
    assert parse_tracker_response('$(".a").val("Picked"); $(".b").val("In Hub");')["status"] == "In Hub"
    assert parse_tracker_response("")["status"] == "pending"


def test_consignment_id_roundtrip_and_validation():
    assert split_consignment_id(build_consignment_id("PF-1", "0171")) == ("PF-1", "0171")
    with pytest.raises(ValidationError):
        split_consignment_id("PF-1")


@pytest.mark.django_db
def test_paperfly_get_status_posts_form(fake_http, fake_response, courier_config_factory):
    fake_http.queue(fake_response(text=TRACKER_HTML))

    result = PaperflyAdapter(courier_config_factory("paperfly")).get_status("PF-7788|01712345678")

    method, url, kwargs = fake_http.calls[0]
    assert (method, url) == ("POST", "http://paperfly.com.bd/trackerapi.php")
    assert kwargs["data"] == {"orderid": "PF-7788", "phone": "01712345678"}
    assert result.consignment_id == "PF-7788|01712345678"
    assert result.delivery_status == "On The Way To Delivery"
