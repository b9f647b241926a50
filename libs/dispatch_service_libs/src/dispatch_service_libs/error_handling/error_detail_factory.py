"""Factory for ErrorDetail instances with automatic context capture."""

from __future__ import annotations

import traceback
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from opentelemetry import trace

from dispatch_core.error_enums import ErrorCode
from dispatch_core.models.error_models import ErrorDetail


def create_error_detail_with_context(
    error_code: ErrorCode,
    message: str,
    service: str,
    operation: str,
    correlation_id: UUID | None = None,
    details: dict[str, Any] | None = None,
    capture_stack: bool = True,
) -> ErrorDetail:
    """
    Create an ErrorDetail, capturing timestamp, stack and trace context.

    Args:
        error_code: Canonical error code
        message: Human readable message
        service: Name of the service raising the error
        operation: Operation that failed
        correlation_id: Request correlation id (generated when omitted)
        details: Additional structured context
        capture_stack: Whether to attach the current stack trace

    Returns:
        Frozen ErrorDetail instance
    """
    stack_trace: str | None = None
    if capture_stack:
        current_exc = traceback.format_exc()
        if current_exc and current_exc.strip() != "NoneType: None":
            stack_trace = current_exc
        else:
            stack_trace = "".join(traceback.format_stack()[:-1])

    trace_id: str | None = None
    span_id: str | None = None
    span = trace.get_current_span()
    if span is not None and span.is_recording():
        span_context = span.get_span_context()
        if span_context.is_valid:
            trace_id = format(span_context.trace_id, "032x")
            span_id = format(span_context.span_id, "016x")

    return ErrorDetail(
        error_code=error_code,
        message=message,
        correlation_id=correlation_id or uuid4(),
        timestamp=datetime.now(timezone.utc),
        service=service,
        operation=operation,
        details=details or {},
        stack_trace=stack_trace,
        trace_id=trace_id,
        span_id=span_id,
    )
