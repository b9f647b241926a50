"""
Configuration for the Session Gateway Service.

Uses Pydantic settings for environment-based configuration. Backend location
and session cookie settings share the ``FOOD_DISPATCH_`` prefix with the rest
of the Food Dispatch deployment.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from dispatch_core.config_enums import Environment
from dispatch_service_libs.config import SecureServiceSettings


class Settings(SecureServiceSettings):
    """Configuration settings for the Session Gateway Service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="FOOD_DISPATCH_",
        case_sensitive=False,
        extra="ignore",
    )

    # Service identity
    SERVICE_NAME: str = "session-gateway-service"

    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        validation_alias="ENVIRONMENT",  # Read from global ENVIRONMENT var
        description="Runtime environment for the service",
    )

    # HTTP server configuration
    HTTP_HOST: str = Field(default="0.0.0.0", description="HTTP server host")
    HTTP_PORT: int = Field(default=3000, description="HTTP server port")
    MOUNT_PREFIX: str = Field(default="/api", description="Path prefix of the proxy route")

    # Logging configuration
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # Backend API location
    API_PROTOCOL: str = Field(default="http", description="Backend API protocol")
    API_HOST: str = Field(default="localhost", description="Backend API host")
    API_PORT: str = Field(default="8080", description="Backend API port, empty for none")
    API_BASE_PATH: str = Field(default="/api", description="Backend API base path")
    API_BASE_URL: str | None = Field(
        default=None,
        description="Full backend base URL; wins over protocol/host/port/base path",
    )

    # Session cookie
    SESSION_COOKIE: str = Field(default="fd_session", description="Session cookie name")
    SECURE_COOKIES: bool | None = Field(
        default=None,
        description="Force the Secure cookie attribute on or off; production when unset",
    )

    # HTTP Client Timeouts
    HTTP_CLIENT_TIMEOUT_SECONDS: int = 30
    HTTP_CLIENT_CONNECT_TIMEOUT_SECONDS: int = 10

    @field_validator("API_PORT", mode="before")
    @classmethod
    def validate_port(cls, value: object) -> str:
        if value is None:
            return ""
        port = str(value).strip()
        if port and not port.isdigit():
            raise ValueError(f"API_PORT must be numeric or empty, got {port!r}")
        return port

    @field_validator("API_BASE_PATH", mode="before")
    @classmethod
    def ensure_leading_slash(cls, value: object) -> str:
        path = "" if value is None else str(value).strip()
        if not path.startswith("/"):
            path = f"/{path}"
        return path

    @field_validator("MOUNT_PREFIX")
    @classmethod
    def validate_mount_prefix(cls, value: str) -> str:
        prefix = "/" + value.strip().strip("/")
        if prefix == "/":
            raise ValueError("MOUNT_PREFIX must name a path segment, e.g. '/api'")
        return prefix

    @field_validator("API_BASE_URL", mode="before")
    @classmethod
    def blank_base_url_is_unset(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def backend_api_base_url(self) -> str:
        """Resolved backend base URL, never ending with ``/``."""
        if self.API_BASE_URL:
            return self.API_BASE_URL.rstrip("/")

        port_segment = f":{self.API_PORT}" if self.API_PORT else ""
        url = f"{self.API_PROTOCOL}://{self.API_HOST}{port_segment}{self.API_BASE_PATH}"
        return url.rstrip("/")

    @property
    def use_secure_cookies(self) -> bool:
        if self.SECURE_COOKIES is not None:
            return self.SECURE_COOKIES
        return self.is_production()


# Global settings instance
settings = Settings()
