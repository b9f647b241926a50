"""Structured error handling for Food Dispatch services."""

from .error_detail_factory import create_error_detail_with_context
from .factories import (
    raise_configuration_error,
    raise_connection_error,
    raise_external_service_error,
    raise_timeout_error,
    raise_unknown_error,
    raise_validation_error,
)
from .service_error import ServiceError

__all__ = [
    "ServiceError",
    "create_error_detail_with_context",
    "raise_configuration_error",
    "raise_connection_error",
    "raise_external_service_error",
    "raise_timeout_error",
    "raise_unknown_error",
    "raise_validation_error",
]
