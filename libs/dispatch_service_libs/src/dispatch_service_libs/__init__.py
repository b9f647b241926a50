"""
Food Dispatch Service Libraries Package.

Shared infrastructure for Food Dispatch HTTP services: structured logging,
environment-aware settings and structured error handling.
"""

from .logging_utils import configure_service_logging, create_service_logger

__all__ = [
    "configure_service_logging",
    "create_service_logger",
]

# Framework-specific error handlers should be imported directly from:
# - dispatch_service_libs.error_handling.fastapi
