"""
Tests for health and metrics routes in the Session Gateway Service.

Tests the /healthz and /metrics endpoints with DI integration and
Prometheus registry isolation.
"""

from __future__ import annotations

import pytest
from dishka import make_async_container
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI
from fastapi.testclient import TestClient

from services.session_gateway_service.tests.test_provider import (
    BACKEND_BASE_URL,
    InfrastructureTestProvider,
)


class TestHealthRoutes:
    """Test suite for health check and metrics endpoints."""

    @pytest.fixture
    def provider(self) -> InfrastructureTestProvider:
        return InfrastructureTestProvider()

    @pytest.fixture
    def client_with_health_routes(self, provider):
        """Test client with health routes and test dependencies."""
        app = FastAPI()

        setup_dishka(make_async_container(provider), app)

        from services.session_gateway_service.routers import health_routes

        app.include_router(health_routes.router)

        with TestClient(app) as client:
            yield client

    def test_healthz_endpoint_returns_healthy_status(self, client_with_health_routes):
        response = client_with_health_routes.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "session_gateway_service_test"
        assert data["status"] == "healthy"
        assert data["message"] == "Session Gateway Service is healthy"
        assert data["version"] == "1.0.0"
        assert data["environment"] == "development"
        assert data["checks"] == {"service_responsive": True, "dependencies_available": True}

    def test_healthz_describes_backend_without_probing(self, client_with_health_routes):
        data = client_with_health_routes.get("/healthz").json()

        backend = data["dependencies"]["backend_api"]
        assert backend["base_url"] == BACKEND_BASE_URL
        assert backend["status"] == "unchecked"

    def test_metrics_endpoint_exposes_gateway_metrics(self, client_with_health_routes, provider):
        from services.session_gateway_service.app.metrics import GatewayMetrics

        metrics = GatewayMetrics(registry=provider.registry)
        metrics.session_events_total.labels(event="created").inc()

        response = client_with_health_routes.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert 'gateway_session_events_total{event="created"} 1.0' in response.text
