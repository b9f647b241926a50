"""
Base settings class shared by Food Dispatch services.

Provides the standard ENVIRONMENT field and environment detection helpers.
Services subclass it and declare their own ``model_config`` (env prefix).
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dispatch_core.config_enums import Environment


class SecureServiceSettings(BaseSettings):
    """Environment-aware settings base for all services."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        validation_alias="ENVIRONMENT",
        description="Runtime environment for the service",
    )

    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    def is_staging(self) -> bool:
        return self.ENVIRONMENT == Environment.STAGING

    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        return self.ENVIRONMENT == Environment.TESTING
