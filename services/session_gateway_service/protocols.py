"""
Protocols for the Session Gateway Service.

Route handlers depend on these interfaces; the DI container supplies the
concrete implementations.
"""

from __future__ import annotations

from typing import Protocol

from prometheus_client import Counter, Histogram


class MetricsProtocol(Protocol):
    """Protocol for metrics collection matching GatewayMetrics exactly."""

    @property
    def http_requests_total(self) -> Counter:
        """Total HTTP requests counter."""
        ...

    @property
    def http_request_duration_seconds(self) -> Histogram:
        """HTTP request duration histogram."""
        ...

    @property
    def downstream_service_calls_total(self) -> Counter:
        """Backend API calls counter."""
        ...

    @property
    def downstream_service_call_duration_seconds(self) -> Histogram:
        """Backend API call duration histogram."""
        ...

    @property
    def session_events_total(self) -> Counter:
        """Session cookie lifecycle counter (created, destroyed, expired)."""
        ...

    @property
    def api_errors_total(self) -> Counter:
        """API errors counter."""
        ...
