from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from dispatch_service_libs.error_handling.fastapi import (
    register_error_handlers as register_fastapi_error_handlers,
)
from dispatch_service_libs.logging_utils import configure_service_logging
from services.session_gateway_service.app.startup_setup import (
    create_di_container,
    setup_dependency_injection,
    shutdown_services,
)
from services.session_gateway_service.config import settings

from ..routers import proxy_routes
from ..routers.health_routes import router as health_router
from .middleware import CorrelationIDMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await shutdown_services(app)


def create_app() -> FastAPI:
    configure_service_logging(
        settings.SERVICE_NAME,
        environment=settings.ENVIRONMENT.value,
        log_level=settings.LOG_LEVEL,
    )

    app = FastAPI(
        title=settings.SERVICE_NAME,
        version="1.0.0",
        description=(
            "Food Dispatch Session Gateway - authenticating reverse proxy between "
            "the order-management UI and the backend REST API"
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Register error handlers
    register_fastapi_error_handlers(app)

    # Add Correlation ID Middleware (must be early in chain)
    app.add_middleware(CorrelationIDMiddleware)

    # Include routers
    app.include_router(health_router, tags=["Health"])
    app.include_router(proxy_routes.router, prefix=settings.MOUNT_PREFIX, tags=["Proxy"])

    # Setup Dishka DI
    container = create_di_container()
    setup_dependency_injection(app, container)

    # Store container reference for cleanup
    app.state.di_container = container

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "services.session_gateway_service.app.main:app",
        host=settings.HTTP_HOST,
        port=settings.HTTP_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
