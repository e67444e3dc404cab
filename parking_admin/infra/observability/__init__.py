"""Observability: structured logging and Prometheus metrics."""

from parking_admin.infra.observability.logging import (
    CorrelationIDFilter,
    JSONFormatter,
    get_correlation_id,
    new_correlation_id,
    set_correlation_id,
    setup_logging,
)
from parking_admin.infra.observability.metrics import (
    get_metrics_text,
    record_admin_action,
    record_api_request,
    record_stale_response,
)

__all__ = [
    "CorrelationIDFilter",
    "JSONFormatter",
    "get_correlation_id",
    "new_correlation_id",
    "set_correlation_id",
    "setup_logging",
    "get_metrics_text",
    "record_admin_action",
    "record_api_request",
    "record_stale_response",
]
