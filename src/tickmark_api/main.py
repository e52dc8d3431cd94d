# src/tickmark_api/main.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""
Application Entry (Adapters Bootstrap)

Synopsis:
    FastAPI bootstrap that wires middleware, exception handlers and routers.
    Provides an application factory (`create_app`) and a module-level eager
    app (`app`) for ASGI servers and tooling.

Design:
    • Bootstrap only (no business logic): routers + middleware + handlers.
    • Lifespan initializes the database engine and disposes it on shutdown.
    • Every error leaves the service as the canonical ErrorEnvelope.
    • Observability:
        - Root JSON logging configured from settings.
        - Request correlation ids on every request and log line.
        - Prometheus exposition at `/metrics` when enabled.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from tickmark_api import __version__
from tickmark_api.adapters.routers import api_router, metrics_router
from tickmark_api.config.settings import Settings, get_settings
from tickmark_api.domain.exceptions.base import DomainError
from tickmark_api.infrastructure.database.session import (
    dispose_engine,
    init_engine_and_sessionmaker,
)
from tickmark_api.infrastructure.http.errors import (
    handle_domain_error,
    handle_http_exception,
    handle_unhandled_exception,
    handle_validation_error,
)
from tickmark_api.infrastructure.http.middleware.request_id import RequestIdMiddleware
from tickmark_api.infrastructure.logging.logger import (
    configure_root_logging,
    get_json_logger,
)

logger = get_json_logger(__name__)


def _stable_operation_id(route: APIRoute) -> str:
    """Deterministic operationId: the route name, falling back to method + path."""
    if route.operation_id:
        return route.operation_id
    methods = ",".join(sorted(route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "")
    return f"{methods.lower()}_{path.lower()}"


def _make_lifespan(settings: Settings) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    @asynccontextmanager
    async def runtime_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Initialize the database engine for the app's lifetime."""
        init_engine_and_sessionmaker(settings)
        app.state.settings = settings
        logger.info(
            "service_startup",
            extra={"service": settings.service_name, "env": settings.environment.value},
        )
        try:
            yield
        finally:
            await dispose_engine()
            logger.info("service_shutdown")

    return runtime_lifespan


def _attach_cors(app: FastAPI, settings: Settings) -> None:
    """Attach CORS middleware when origins are configured."""
    origins = settings.cors_allow_origins
    if not origins:
        return
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "ETag"],
    )


def _attach_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unhandled_exception)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override; defaults to :func:`get_settings`.

    Returns:
        FastAPI: Fully configured application instance.
    """
    settings = settings or get_settings()
    configure_root_logging(settings.log_level)

    app = FastAPI(
        title="Tickmark API",
        version=__version__,
        description="Materiality and audit sampling calculations.",
        docs_url=settings.docs_url,
        openapi_url=settings.openapi_url,
        lifespan=_make_lifespan(settings),
        generate_unique_id_function=_stable_operation_id,
    )

    _attach_exception_handlers(app)
    app.add_middleware(RequestIdMiddleware)
    _attach_cors(app, settings)

    app.include_router(api_router)
    if settings.metrics_enabled:
        app.include_router(metrics_router)

    return app


# Eager app for ASGI servers (``uvicorn tickmark_api.main:app``).
app: FastAPI = create_app()
