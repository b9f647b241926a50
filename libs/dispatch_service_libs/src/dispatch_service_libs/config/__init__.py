"""Configuration utilities for Food Dispatch services."""

from .secure_base import SecureServiceSettings

__all__ = ["SecureServiceSettings"]
