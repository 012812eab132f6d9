# tests/test_couriers_reconciliation.py
from unittest.mock import patch

import pytest

from domains.couriers.reconciliation import run_reconciliation
from domains.couriers.tasks import sync_delivery_status
from domains.orders.models import Order, OrderStatus


def _bound(order_factory, service_id, cid, courier_status, **kw):
    return order_factory(
        courier_service_id=service_id,
        consignment_id=cid,
        tracking_number=cid,
        courier_status=courier_status,
        **kw,
    )


@pytest.mark.django_db
def test_changed_unchanged_and_disabled(fake_http, fake_response, order_factory, courier_config_factory):
    courier_config_factory("steadfast")
    courier_config_factory("redx", enabled=False)

    changed = _bound(order_factory, "steadfast", "100", "In Review")
    unchanged = _bound(order_factory, "steadfast", "200", "Hold")
    disabled = _bound(order_factory, "redx", "T1", "Pending")

    responses = {
        "/status_by_cid/100": fake_response(payload={"delivery_status": "in_transit"}),
        "/status_by_cid/200": fake_response(payload={"delivery_status": "hold"}),
    }

    def _route(method, url, **kwargs):
        fake_http.calls.append((method, url, kwargs))
        return next(r for suffix, r in responses.items() if url.endswith(suffix))

    with patch("domains.couriers.http.requests.request", side_effect=_route):
        summary = run_reconciliation()

    assert summary == {"total": 3, "updated": 1, "skipped": 2, "failed": 0, "error_samples": []}
    assert Order.objects.get(id=changed.id).courier_status == "In Transit"
    assert Order.objects.get(id=unchanged.id).courier_status == "Hold"
    assert Order.objects.get(id=disabled.id).courier_status == "Pending"
    # 비활성 택배사 주문은 호출하지 않음
    assert all("T1" not in url for _, url, _ in fake_http.calls)


@pytest.mark.django_db
def test_failure_is_counted_and_does_not_abort(
    fake_http, fake_response, order_factory, courier_config_factory
):
    courier_config_factory("redx")
    _bound(order_factory, "redx", "BAD", "Pending")
    ok = _bound(order_factory, "redx", "GOOD", "Pending")
    fake_http.queue(
        fake_response(status_code=500, text="upstream down", reason="Server Error"),
        fake_response(payload={"parcel": {"status": "delivered"}}),
    )

    summary = run_reconciliation()

    assert summary["failed"] == 1
    assert summary["updated"] == 1
    assert len(summary["error_samples"]) == 1
    assert "upstream down" in summary["error_samples"][0]
    ok.refresh_from_db()
    assert ok.courier_status == "Delivered"
    assert ok.status == OrderStatus.DELIVERED


@pytest.mark.django_db
def test_error_samples_capped(settings, fake_http, order_factory, courier_config_factory):
    import requests

    settings.COURIER_SYNC_ERROR_SAMPLES = 2
    courier_config_factory("redx")
    for i in range(4):
        _bound(order_factory, "redx", f"T{i}", "Pending")
    fake_http.queue(*[requests.Timeout("slow") for _ in range(4)])

    summary = run_reconciliation()

    assert summary["failed"] == 4
    assert len(summary["error_samples"]) == 2


@pytest.mark.django_db
def test_selection_skips_terminal_unbound_and_respects_batch(
    fake_http, fake_response, order_factory, courier_config_factory
):
    courier_config_factory("redx")
    _bound(order_factory, "redx", "T1", "Pending", status=OrderStatus.DELIVERED)
    _bound(order_factory, "redx", "T2", "Pending", status=OrderStatus.CANCELLED)
    order_factory()  # 바인딩 없음
    _bound(order_factory, "redx", "T3", "Pending")
    _bound(order_factory, "redx", "T4", "Pending")
    fake_http.queue(fake_response(payload={"parcel": {"status": "pending"}}))

    summary = run_reconciliation(batch_size=1)

    assert summary["total"] == 1
    assert summary["skipped"] == 1


@pytest.mark.django_db
def test_tenant_filter(fake_http, fake_response, order_factory, courier_config_factory):
    courier_config_factory("redx")
    courier_config_factory("redx", tenant_id="tenant-b")
    _bound(order_factory, "redx", "A1", "Pending")
    _bound(order_factory, "redx", "B1", "Pending", tenant_id="tenant-b")
    fake_http.queue(fake_response(payload={"parcel": {"status": "picked_up"}}))

    summary = run_reconciliation("tenant-b")

    assert summary["total"] == 1 and summary["updated"] == 1
    assert fake_http.calls[0][1].endswith("/parcel/info/B1")


@pytest.mark.django_db
def test_delay_between_orders(settings, fake_http, fake_response, order_factory, courier_config_factory):
    courier_config_factory("redx")
    _bound(order_factory, "redx", "T1", "Pending")
    _bound(order_factory, "redx", "T2", "Pending")
    fake_http.queue(
        fake_response(payload={"parcel": {"status": "pending"}}),
        fake_response(payload={"parcel": {"status": "pending"}}),
    )

    with patch("domains.couriers.reconciliation.time.sleep") as sleep:
        run_reconciliation(delay=0.25)

    sleep.assert_called_once_with(0.25)


@pytest.mark.django_db
def test_celery_task_runs_reconciliation():
    with patch("domains.couriers.reconciliation.run_reconciliation", return_value={"total": 0}) as run:
        assert sync_delivery_status.apply(args=["tenant-a"]).get() == {"total": 0}
    run.assert_called_once_with("tenant-a")


@pytest.mark.django_db
def test_batches_rotate_past_unchanged_orders(fake_http, fake_response, order_factory, courier_config_factory):
    courier_config_factory("redx")
    stable = _bound(order_factory, "redx", "STABLE", "Hold")
    other = _bound(order_factory, "redx", "OTHER", "Pending")
    fake_http.queue(
        fake_response(payload={"parcel": {"status": "hold"}}),
        fake_response(payload={"parcel": {"status": "pending"}}),
        fake_response(payload={"parcel": {"status": "hold"}}),
    )

    for _ in range(3):
        run_reconciliation(batch_size=1)

    polled = [url.rsplit("/", 1)[-1] for _, url, _ in fake_http.calls]
    assert polled == ["STABLE", "OTHER", "STABLE"]
    # 상태가 같으면 조회 시각만 남고 상태 값은 그대로
    stable.refresh_from_db()
    assert stable.courier_status == "Hold"
    assert stable.courier_synced_at is None
    assert stable.courier_checked_at is not None
    other.refresh_from_db()
    assert other.courier_checked_at is not None


@pytest.mark.django_db
def test_disabled_and_failed_orders_also_rotate(fake_http, fake_response, order_factory, courier_config_factory):
    courier_config_factory("redx")
    courier_config_factory("steadfast", enabled=False)
    _bound(order_factory, "steadfast", "OFF", "Pending")
    _bound(order_factory, "redx", "BAD", "Pending")
    _bound(order_factory, "redx", "LAST", "Pending")
    fake_http.queue(
        fake_response(status_code=500, text="down", reason="Server Error"),
        fake_response(payload={"parcel": {"status": "pending"}}),
    )

    first = run_reconciliation(batch_size=2)
    second = run_reconciliation(batch_size=2)

    assert (first["skipped"], first["failed"]) == (1, 1)
    assert second["total"] == 2
    assert fake_http.calls[-1][1].endswith("/parcel/info/LAST")
