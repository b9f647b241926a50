"""
Unit tests for error handling factory functions.

Validates ErrorDetail creation, ServiceError raising, detail handling and
correlation ID propagation.
"""

from __future__ import annotations

import uuid
from uuid import UUID

import pytest

from dispatch_core.error_enums import ErrorCode
from dispatch_service_libs.error_handling import (
    ServiceError,
    create_error_detail_with_context,
    raise_configuration_error,
    raise_connection_error,
    raise_external_service_error,
    raise_timeout_error,
    raise_unknown_error,
    raise_validation_error,
)

SERVICE = "session-gateway-service"
OPERATION = "proxy_post_backend_request"


@pytest.fixture
def correlation_id() -> UUID:
    return uuid.uuid4()


class TestCreateErrorDetailWithContext:
    def test_populates_fields(self, correlation_id: UUID) -> None:
        detail = create_error_detail_with_context(
            error_code=ErrorCode.TIMEOUT,
            message="Backend API request timed out",
            service=SERVICE,
            operation=OPERATION,
            correlation_id=correlation_id,
            details={"timeout_seconds": 30},
        )

        assert detail.error_code is ErrorCode.TIMEOUT
        assert detail.correlation_id == correlation_id
        assert detail.details == {"timeout_seconds": 30}
        assert detail.timestamp.tzinfo is not None
        assert detail.stack_trace

    def test_generates_correlation_id_and_skips_stack(self) -> None:
        detail = create_error_detail_with_context(
            error_code=ErrorCode.UNKNOWN_ERROR,
            message="boom",
            service=SERVICE,
            operation=OPERATION,
            capture_stack=False,
        )

        assert isinstance(detail.correlation_id, UUID)
        assert detail.stack_trace is None
        assert detail.details == {}
        assert detail.trace_id is None


class TestFactories:
    def test_external_service_error(self, correlation_id: UUID) -> None:
        with pytest.raises(ServiceError) as exc_info:
            raise_external_service_error(
                service=SERVICE,
                operation=OPERATION,
                external_service="backend_api",
                message="Error proxying request to backend API: ConnectError",
                correlation_id=correlation_id,
                status_code=502,
                path="orders",
            )

        detail = exc_info.value.error_detail
        assert detail.error_code is ErrorCode.EXTERNAL_SERVICE_ERROR
        assert detail.correlation_id == correlation_id
        assert detail.details == {
            "external_service": "backend_api",
            "status_code": 502,
            "path": "orders",
        }

    def test_external_service_error_omits_missing_status(self, correlation_id: UUID) -> None:
        with pytest.raises(ServiceError) as exc_info:
            raise_external_service_error(
                service=SERVICE,
                operation=OPERATION,
                external_service="backend_api",
                message="unreachable",
                correlation_id=correlation_id,
            )

        assert "status_code" not in exc_info.value.error_detail.details

    def test_timeout_error(self, correlation_id: UUID) -> None:
        with pytest.raises(ServiceError) as exc_info:
            raise_timeout_error(
                service=SERVICE,
                operation=OPERATION,
                timeout_seconds=30,
                message="Backend API request timed out",
                correlation_id=correlation_id,
                method="POST",
            )

        detail = exc_info.value.error_detail
        assert detail.error_code is ErrorCode.TIMEOUT
        assert detail.details == {"timeout_seconds": 30, "method": "POST"}

    @pytest.mark.parametrize(
        ("factory", "kwargs", "code", "detail_key"),
        [
            (raise_validation_error, {"field": "API_PORT"}, ErrorCode.VALIDATION_ERROR, "field"),
            (
                raise_configuration_error,
                {"config_key": "API_BASE_URL"},
                ErrorCode.CONFIGURATION_ERROR,
                "config_key",
            ),
            (
                raise_connection_error,
                {"target": "backend.test"},
                ErrorCode.CONNECTION_ERROR,
                "target",
            ),
            (raise_unknown_error, {}, ErrorCode.UNKNOWN_ERROR, None),
        ],
    )
    def test_remaining_factories(self, correlation_id, factory, kwargs, code, detail_key) -> None:
        with pytest.raises(ServiceError) as exc_info:
            factory(
                service=SERVICE,
                operation=OPERATION,
                message="failure",
                correlation_id=correlation_id,
                **kwargs,
            )

        detail = exc_info.value.error_detail
        assert detail.error_code is code
        assert detail.message == "failure"
        if detail_key:
            assert detail.details[detail_key] == kwargs[detail_key]
