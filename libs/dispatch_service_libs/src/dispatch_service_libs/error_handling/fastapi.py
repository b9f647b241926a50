"""FastAPI integration: render ServiceError and unexpected exceptions as JSON."""

from __future__ import annotations

from uuid import UUID, uuid4

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dispatch_core.error_enums import ErrorCode
from dispatch_service_libs.logging_utils import create_service_logger

from .error_detail_factory import create_error_detail_with_context
from .service_error import ServiceError

logger = create_service_logger("error_handling.fastapi")

ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.AUTHENTICATION_ERROR: 401,
    ErrorCode.AUTHORIZATION_ERROR: 403,
    ErrorCode.RESOURCE_NOT_FOUND: 404,
    ErrorCode.CONFIGURATION_ERROR: 500,
    ErrorCode.UNKNOWN_ERROR: 500,
    ErrorCode.EXTERNAL_SERVICE_ERROR: 502,
    ErrorCode.INVALID_RESPONSE: 502,
    ErrorCode.CONNECTION_ERROR: 503,
    ErrorCode.SERVICE_UNAVAILABLE: 503,
    ErrorCode.TIMEOUT: 504,
}


def _correlation_id_from(request: Request) -> UUID:
    correlation_id = getattr(request.state, "correlation_id", None)
    if isinstance(correlation_id, UUID):
        return correlation_id
    return uuid4()


def error_response_body(error: ServiceError) -> dict:
    detail = error.error_detail
    return {
        "error": {
            "code": detail.error_code.value,
            "message": detail.message,
            "correlation_id": str(detail.correlation_id),
            "service": detail.service,
            "operation": detail.operation,
            "details": detail.details,
        }
    }


def register_error_handlers(app: FastAPI) -> None:
    """Install exception handlers producing the ``{"error": {...}}`` envelope."""

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
        status_code = ERROR_CODE_TO_HTTP_STATUS.get(exc.error_detail.error_code, 500)
        logger.warning(
            "Service error",
            error_code=exc.error_code,
            status_code=status_code,
            operation=exc.operation,
            correlation_id=exc.correlation_id,
        )
        return JSONResponse(status_code=status_code, content=error_response_body(exc))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        correlation_id = _correlation_id_from(request)
        logger.error(
            f"Unhandled exception: {exc}",
            correlation_id=str(correlation_id),
            exc_info=True,
        )
        error = ServiceError(
            create_error_detail_with_context(
                error_code=ErrorCode.UNKNOWN_ERROR,
                message="Internal server error",
                service=getattr(app, "title", "unknown"),
                operation=f"{request.method} {request.url.path}",
                correlation_id=correlation_id,
                details={"error_type": type(exc).__name__},
            )
        )
        return JSONResponse(status_code=500, content=error_response_body(error))
