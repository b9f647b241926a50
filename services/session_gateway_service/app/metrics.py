"""Metrics definitions for the Session Gateway Service."""

from __future__ import annotations

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram


class GatewayMetrics:
    """A container for all Prometheus metrics for the Session Gateway Service."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics with optional registry for test isolation."""
        if registry is None:
            registry = REGISTRY
        self.http_requests_total = Counter(
            "gateway_http_requests_total",
            "Total number of HTTP requests for Session Gateway Service.",
            ["method", "endpoint", "http_status"],
            registry=registry,
        )
        self.http_request_duration_seconds = Histogram(
            "gateway_http_request_duration_seconds",
            "HTTP request duration in seconds for Session Gateway Service.",
            ["method", "endpoint"],
            registry=registry,
        )
        self.downstream_service_calls_total = Counter(
            "gateway_downstream_service_calls_total",
            "Total number of calls to the backend API.",
            ["service", "method", "status_code"],
            registry=registry,
        )
        self.downstream_service_call_duration_seconds = Histogram(
            "gateway_downstream_service_call_duration_seconds",
            "Duration of calls to the backend API in seconds.",
            ["service", "method"],
            registry=registry,
        )
        self.session_events_total = Counter(
            "gateway_session_events_total",
            "Session cookie lifecycle events.",
            ["event"],
            registry=registry,
        )
        self.api_errors_total = Counter(
            "gateway_api_errors_total",
            "Total number of API errors.",
            ["endpoint", "error_type"],
            registry=registry,
        )
