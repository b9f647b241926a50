"""Health and metrics routes for the Session Gateway Service."""

from __future__ import annotations

from dishka import FromDishka
from dishka.integrations.fastapi import inject
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from dispatch_service_libs.logging_utils import create_service_logger
from services.session_gateway_service.config import Settings

router = APIRouter(tags=["Health"])


@router.get("/healthz")
@inject
async def health_check(config: FromDishka[Settings]) -> dict[str, str | dict]:
    """Liveness report. The backend API is described, not probed."""
    logger = create_service_logger("session_gateway_service.routers.health")
    logger.debug("Health check requested")

    checks = {"service_responsive": True, "dependencies_available": True}
    dependencies = {
        "backend_api": {
            "status": "unchecked",
            "base_url": config.backend_api_base_url,
            "note": "Backend availability surfaces per proxied request",
        },
    }

    return {
        "service": config.SERVICE_NAME,
        "status": "healthy",
        "message": "Session Gateway Service is healthy",
        "version": "1.0.0",
        "checks": checks,
        "dependencies": dependencies,
        "environment": config.ENVIRONMENT.value,
    }


@router.get("/metrics", response_class=PlainTextResponse)
@inject
async def metrics(registry: FromDishka[CollectorRegistry]):
    """Prometheus metrics endpoint."""
    logger = create_service_logger("session_gateway_service.routers.health")
    try:
        metrics_data = generate_latest(registry)
        return PlainTextResponse(content=metrics_data, media_type=CONTENT_TYPE_LATEST)
    except Exception as e:
        logger.error(f"Error generating metrics: {e}", exc_info=True)
        return PlainTextResponse(content="Error generating metrics", status_code=500)
