"""Pure data models shared across Food Dispatch services."""

from .error_models import ErrorDetail

__all__ = ["ErrorDetail"]
