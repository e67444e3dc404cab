"""Prometheus metrics for observability.

Provides metrics collection for backend API calls and admin actions
taken on slot requests.
"""

import logging

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

# Global registry for metrics
_registry = CollectorRegistry()


# Backend API Metrics
api_requests_total = Counter(
    "parking_admin_api_requests_total",
    "Total number of backend API requests",
    ["operation", "status"],
    registry=_registry,
)

api_request_duration_seconds = Histogram(
    "parking_admin_api_request_duration_seconds",
    "Duration of backend API requests in seconds",
    ["operation"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=_registry,
)

# Admin Action Metrics
admin_actions_total = Counter(
    "parking_admin_admin_actions_total",
    "Total number of approve/reject actions",
    ["action", "status"],
    registry=_registry,
)

stale_responses_total = Counter(
    "parking_admin_stale_responses_total",
    "List responses discarded because a newer fetch was issued",
    registry=_registry,
)


def get_registry() -> CollectorRegistry:
    """Get the package metrics registry."""
    return _registry


def get_metrics_text() -> str:
    """Get metrics in Prometheus text format.

    Returns:
        Metrics in Prometheus exposition format
    """
    return generate_latest(_registry).decode("utf-8")


def record_api_request(operation: str, duration: float, status: str) -> None:
    """Record metrics for a backend API request.

    Args:
        operation: Logical operation (list/approve/reject)
        duration: Request duration in seconds
        status: "success" or the error class (e.g. "401", "network")
    """
    api_requests_total.labels(operation=operation, status=status).inc()
    api_request_duration_seconds.labels(operation=operation).observe(duration)


def record_admin_action(action: str, success: bool) -> None:
    """Record an approve or reject outcome.

    Args:
        action: "approve" or "reject"
        success: Whether the backend accepted the action
    """
    status = "success" if success else "error"
    admin_actions_total.labels(action=action, status=status).inc()


def record_stale_response() -> None:
    """Record a discarded out-of-order list response."""
    stale_responses_total.inc()


__all__ = [
    "get_registry",
    "get_metrics_text",
    "record_api_request",
    "record_admin_action",
    "record_stale_response",
]
