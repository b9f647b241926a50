"""
Core exception type for Food Dispatch services.

ServiceError wraps an immutable ErrorDetail and records itself on the
active OpenTelemetry span when one is recording.
"""

from __future__ import annotations

from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from dispatch_core.models.error_models import ErrorDetail


class ServiceError(Exception):
    """Structured service exception carrying an ErrorDetail."""

    def __init__(self, error_detail: ErrorDetail) -> None:
        super().__init__(error_detail.message)
        self.error_detail = error_detail
        self._record_to_span()

    def _record_to_span(self) -> None:
        span = trace.get_current_span()
        if span is None or not span.is_recording():
            return

        span.record_exception(self)
        span.set_status(Status(StatusCode.ERROR, self.error_detail.message))
        span.set_attribute("error", True)
        span.set_attribute("error.code", self.error_code)
        span.set_attribute("error.message", self.error_detail.message)
        span.set_attribute("error.service", self.service)
        span.set_attribute("error.operation", self.operation)
        span.set_attribute("correlation_id", self.correlation_id)

        for key, value in self.error_detail.details.items():
            if isinstance(value, (str, bool, int, float)):
                span.set_attribute(f"error.details.{key}", value)
            else:
                span.set_attribute(f"error.details.{key}", str(value))

    @property
    def correlation_id(self) -> str:
        return str(self.error_detail.correlation_id)

    @property
    def error_code(self) -> str:
        return self.error_detail.error_code.value

    @property
    def service(self) -> str:
        return self.error_detail.service

    @property
    def operation(self) -> str:
        return self.error_detail.operation

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": str(self),
            "error_detail": self.error_detail.model_dump(mode="json"),
        }

    def add_detail(self, key: str, value: Any) -> ServiceError:
        """Return a new error with ``key`` merged into details; self is unchanged."""
        new_detail = self.error_detail.model_copy(
            update={"details": {**self.error_detail.details, key: value}}
        )
        return ServiceError(new_detail)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.error_detail.message}"

    def __repr__(self) -> str:
        return (
            f"ServiceError(code={self.error_code}, message={self.error_detail.message!r}, "
            f"service={self.service}, operation={self.operation}, "
            f"correlation_id={self.correlation_id})"
        )
