from __future__ import annotations

from collections.abc import AsyncIterator
from http.cookiejar import CookieJar, DefaultCookiePolicy

import httpx
from dishka import Provider, Scope, provide
from prometheus_client import REGISTRY, CollectorRegistry

from services.session_gateway_service.app.metrics import GatewayMetrics
from services.session_gateway_service.config import Settings, settings
from services.session_gateway_service.protocols import MetricsProtocol
from services.session_gateway_service.session_policy import SessionPolicy


def refusing_cookie_jar() -> httpx.Cookies:
    """Cookie store that refuses every cookie; the pooled client is shared by all users."""
    return httpx.Cookies(CookieJar(policy=DefaultCookiePolicy(allowed_domains=[])))


class GatewayProvider(Provider):
    scope = Scope.APP

    @provide
    def get_config(self) -> Settings:
        return settings

    @provide
    async def get_http_client(self, config: Settings) -> AsyncIterator[httpx.AsyncClient]:
        # One pooled client for every proxied request; redirects stay with the browser
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(
                config.HTTP_CLIENT_TIMEOUT_SECONDS,
                connect=config.HTTP_CLIENT_CONNECT_TIMEOUT_SECONDS,
            ),
            follow_redirects=False,
            cookies=refusing_cookie_jar(),
        ) as client:
            yield client

    @provide
    def provide_session_policy(self, config: Settings) -> SessionPolicy:
        return SessionPolicy.from_settings(config)

    @provide
    def provide_registry(self) -> CollectorRegistry:
        return REGISTRY

    @provide
    def provide_metrics(self, registry: CollectorRegistry) -> MetricsProtocol:
        return GatewayMetrics(registry=registry)
