"""
Shared fixtures for Session Gateway Service tests.

Every test app is the production ``create_app()`` re-wired onto a test
dishka container: test infrastructure, the real SessionProvider and
FastAPI's request context.
"""

from __future__ import annotations

import pytest
from dishka import make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from httpx import ASGITransport, AsyncClient

from services.session_gateway_service.app.main import create_app
from services.session_gateway_service.app.session_provider import SessionProvider
from services.session_gateway_service.tests.test_provider import InfrastructureTestProvider


@pytest.fixture(autouse=True)
def _clear_prometheus_registry():
    """Clear Prometheus registry before each test to avoid collisions."""
    from prometheus_client import REGISTRY

    collectors = list(REGISTRY._collector_to_names.keys())
    for collector in collectors:
        REGISTRY.unregister(collector)
    yield


@pytest.fixture
def infrastructure() -> InfrastructureTestProvider:
    return InfrastructureTestProvider()


@pytest.fixture
async def container(infrastructure: InfrastructureTestProvider):
    """Create test container with test infrastructure and the real session provider."""
    container = make_async_container(
        infrastructure,
        SessionProvider(),
        FastapiProvider(),
    )
    yield container
    await container.close()


@pytest.fixture
async def client(container):
    """Create test client against the gateway app with the test container."""
    app = create_app()
    setup_dishka(container, app)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    # create_app() attached its own production container before the re-wiring
    await app.state.di_container.close()
