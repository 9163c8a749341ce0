"""FastAPI application factory.

The application owns one ``ConnectionRegistry``. All pools still registered
when the application shuts down are closed.
"""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pg_browser import __version__
from pg_browser.api.responses import error_body, error_response
from pg_browser.api.routes import router
from pg_browser.config.settings import Settings, get_settings
from pg_browser.db.registry import ConnectionRegistry
from pg_browser.models.errors import PgBrowserError
from pg_browser.observability.metrics import metrics
from pg_browser.observability.tracing import REQUEST_ID_HEADER, request_context

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: start metrics on startup, close pools on shutdown."""
    settings: Settings = app.state.settings

    if settings.observability.metrics_enabled:
        try:
            metrics.start_metrics_server(settings.observability.metrics_port)
            logger.info(f"Metrics server listening on port {settings.observability.metrics_port}")
        except OSError as e:
            logger.warning(f"Metrics server not started: {e!s}")

    logger.info("PostgreSQL browser service started")
    try:
        yield
    finally:
        logger.info("Shutting down, closing open connections...")
        await app.state.registry.close_all()


def create_app(
    settings: Settings | None = None,
    registry: ConnectionRegistry | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Application settings. Loaded from the environment if None.
        registry: Connection registry to serve. A fresh one is created if None.

    Returns:
        FastAPI: The configured application.

    Example:
        >>> app = create_app()
        >>> uvicorn.run(app, port=5000)
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="PostgreSQL Browser",
        description="Connect to PostgreSQL databases, browse tables and page through rows",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.registry = registry or ConnectionRegistry(settings.pool)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials="*" not in settings.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def trace_requests(request: Request, call_next) -> Response:
        async with request_context(request.headers.get(REQUEST_ID_HEADER)) as request_id:
            started = time.perf_counter()
            response = await call_next(request)
            route = request.scope.get("route")
            metrics.observe_http_request(
                method=request.method,
                route=getattr(route, "path", "unmatched"),
                status=response.status_code,
                duration=time.perf_counter() - started,
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        return JSONResponse(
            status_code=400,
            content=error_body("Invalid request", errors, settings.security),
        )

    @app.exception_handler(PgBrowserError)
    async def handle_service_error(request: Request, exc: PgBrowserError) -> JSONResponse:
        logger.warning(
            f"Request failed on {request.method} {request.url.path}: {exc.message}",
            extra={"error_code": exc.code},
        )
        return error_response(exc, "Request failed", settings.security)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=error_body("Internal server error", str(exc), settings.security),
        )

    app.include_router(router)
    return app
