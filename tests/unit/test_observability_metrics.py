"""Tests for Prometheus metrics utilities."""

from prometheus_client.parser import text_string_to_metric_families

from parking_admin.infra.observability import metrics


def _metric_value(sample_name: str, **labels: str) -> float:
    data = metrics.get_metrics_text()
    total = 0.0
    for family in text_string_to_metric_families(data):
        for sample in family.samples:
            if sample.name != sample_name:
                continue
            if all(sample.labels.get(k) == v for k, v in labels.items()):
                total += sample.value
    return total


def test_api_request_metrics() -> None:
    before = _metric_value("parking_admin_api_requests_total", operation="list", status="success")
    before_errors = _metric_value("parking_admin_api_requests_total", operation="list", status="403")

    metrics.record_api_request("list", 0.05, "success")
    metrics.record_api_request("list", 0.2, "403")

    assert (
        _metric_value("parking_admin_api_requests_total", operation="list", status="success")
        == before + 1
    )
    assert (
        _metric_value("parking_admin_api_requests_total", operation="list", status="403")
        == before_errors + 1
    )
    assert _metric_value("parking_admin_api_request_duration_seconds_count", operation="list") >= 2


def test_admin_action_metrics() -> None:
    before_ok = _metric_value("parking_admin_admin_actions_total", action="approve", status="success")
    before_err = _metric_value("parking_admin_admin_actions_total", action="reject", status="error")

    metrics.record_admin_action("approve", True)
    metrics.record_admin_action("reject", False)

    assert (
        _metric_value("parking_admin_admin_actions_total", action="approve", status="success")
        == before_ok + 1
    )
    assert (
        _metric_value("parking_admin_admin_actions_total", action="reject", status="error")
        == before_err + 1
    )


def test_stale_response_metric() -> None:
    before = _metric_value("parking_admin_stale_responses_total")

    metrics.record_stale_response()

    assert _metric_value("parking_admin_stale_responses_total") == before + 1


def test_registry_is_isolated() -> None:
    from prometheus_client import REGISTRY

    assert metrics.get_registry() is not REGISTRY
