"""Tests for Session Gateway settings and backend URL resolution."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dispatch_core.config_enums import Environment
from services.session_gateway_service.config import Settings

BACKEND_ENV_VARS = (
    "FOOD_DISPATCH_API_PROTOCOL",
    "FOOD_DISPATCH_API_HOST",
    "FOOD_DISPATCH_API_PORT",
    "FOOD_DISPATCH_API_BASE_PATH",
    "FOOD_DISPATCH_API_BASE_URL",
    "FOOD_DISPATCH_SESSION_COOKIE",
    "FOOD_DISPATCH_SECURE_COOKIES",
    "ENVIRONMENT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in BACKEND_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _settings() -> Settings:
    return Settings(_env_file=None)


class TestBackendBaseUrl:
    def test_defaults(self):
        settings = _settings()

        assert settings.backend_api_base_url == "http://localhost:8080/api"
        assert settings.SESSION_COOKIE == "fd_session"
        assert settings.ENVIRONMENT is Environment.DEVELOPMENT

    def test_composed_from_parts(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FOOD_DISPATCH_API_PROTOCOL", "https")
        monkeypatch.setenv("FOOD_DISPATCH_API_HOST", "orders.internal")
        monkeypatch.setenv("FOOD_DISPATCH_API_PORT", "9443")
        monkeypatch.setenv("FOOD_DISPATCH_API_BASE_PATH", "v2")

        assert _settings().backend_api_base_url == "https://orders.internal:9443/v2"

    def test_empty_port_is_omitted(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FOOD_DISPATCH_API_PORT", "")

        assert _settings().backend_api_base_url == "http://localhost/api"

    def test_trailing_slash_is_stripped(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FOOD_DISPATCH_API_BASE_PATH", "/")

        assert _settings().backend_api_base_url == "http://localhost:8080"

    def test_override_wins_and_loses_trailing_slash(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FOOD_DISPATCH_API_HOST", "ignored")
        monkeypatch.setenv("FOOD_DISPATCH_API_BASE_URL", "https://api.bakery.example/rest/")

        assert _settings().backend_api_base_url == "https://api.bakery.example/rest"

    def test_blank_override_falls_back_to_parts(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FOOD_DISPATCH_API_BASE_URL", "  ")

        assert _settings().backend_api_base_url == "http://localhost:8080/api"

    def test_non_numeric_port_is_rejected(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FOOD_DISPATCH_API_PORT", "eighty")

        with pytest.raises(ValidationError):
            _settings()


class TestSessionSettings:
    def test_cookie_name_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FOOD_DISPATCH_SESSION_COOKIE", "bakery_sid")

        assert _settings().SESSION_COOKIE == "bakery_sid"

    @pytest.mark.parametrize(
        ("environment", "expected"),
        [("production", True), ("staging", False), ("development", False), ("testing", False)],
    )
    def test_secure_cookies_follow_production_flag(
        self, monkeypatch: pytest.MonkeyPatch, environment: str, expected: bool
    ):
        monkeypatch.setenv("ENVIRONMENT", environment)

        assert _settings().use_secure_cookies is expected

    def test_secure_cookie_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.setenv("FOOD_DISPATCH_SECURE_COOKIES", "true")

        assert _settings().use_secure_cookies is True


class TestMountPrefix:
    @pytest.mark.parametrize(
        ("value", "expected"), [("/api", "/api"), ("api/", "/api"), ("/bff/api/", "/bff/api")]
    )
    def test_normalised(self, value: str, expected: str):
        assert Settings(_env_file=None, MOUNT_PREFIX=value).MOUNT_PREFIX == expected

    @pytest.mark.parametrize("value", ["", "/", "  "])
    def test_root_prefix_is_rejected(self, value: str):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, MOUNT_PREFIX=value)
