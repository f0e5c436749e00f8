"""
FastAPI Application Factory.
Creates and configures the FastAPI application with all routers, middleware, and DI.

Surfaces:
- /api/messages/*: friends, search, add-friend, conversation history, send
- /ws:             realtime presence (live message push)
- /metrics, /, /health
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka
from motor.motor_asyncio import AsyncIOMotorDatabase
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from friendchat.config.logging_config import (
    DEFAULT_CORRELATION_ID,
    correlation_id_var,
    setup_logging,
)
from friendchat.config.settings import Config
from friendchat.infrastructure.persistence import ensure_indexes
from friendchat.observability import (
    MetricsErrorType,
    increment_error,
    observe_request_latency,
)
from friendchat.presentation.api import (
    friends_router,
    messages_router,
    metrics_router,
    realtime_router,
)
from friendchat.presentation.api.rate_limit import limiter
from friendchat.setup.ioc import create_container

# Setup logging
setup_logging(Config.LOG_LEVEL, Config.LOG_PATH)

logger = logging.getLogger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to extract and set correlation ID from request headers."""

    async def dispatch(self, request: Request, call_next):
        # Get correlation ID from header or use default
        correlation_id = request.headers.get("X-Correlation-ID", DEFAULT_CORRELATION_ID)

        # Set in contextvars (propagates to async tasks and logging)
        correlation_id_var.set(correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Records http_server_request_duration_seconds per route template."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        route = request.scope.get("route")
        # Route template keeps label cardinality bounded (no raw ids)
        route_path = getattr(route, "path", "unmatched")
        observe_request_latency(
            request.method,
            route_path,
            response.status_code,
            time.perf_counter() - start,
        )
        return response


def _jsonable_errors(errors) -> list:
    # Pydantic error contexts may hold exception objects
    return [
        {key: value for key, value in error.items() if key in ("loc", "msg", "type")}
        for error in errors
    ]


def _build_lifespan(container: AsyncContainer, ensure_db_indexes: bool):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        - Startup: create MongoDB indexes (real infrastructure only)
        - Shutdown: close DI container (Mongo, Redis, httpx clients)
        """
        if ensure_db_indexes:
            db = await container.get(AsyncIOMotorDatabase)
            await ensure_indexes(db)
        logger.info("FastAPI application started. DI container initialized.")
        yield
        await container.close()
        logger.info("FastAPI application shutdown. DI container closed.")

    return lifespan


def create_fastapi_app(container: Optional[AsyncContainer] = None) -> FastAPI:
    """
    Application factory for creating FastAPI app.

    Args:
        container: DI container to use; defaults to the production wiring.
            Tests pass a container built with fake infrastructure.

    Returns:
        FastAPI application instance
    """
    ensure_db_indexes = container is None
    if container is None:
        container = create_container()

    app = FastAPI(
        title="Friendchat API",
        description="Friends, direct messages and live delivery",
        version="1.0.0",
        lifespan=_build_lifespan(container, ensure_db_indexes),
    )

    # Setup Dishka BEFORE app starts (must add middleware before startup)
    setup_dishka(container, app)

    app.state.limiter = limiter

    app.add_middleware(MetricsMiddleware)
    # Correlation ID middleware (must be added before CORS)
    app.add_middleware(CorrelationIdMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Validation error handler - shows detailed Pydantic errors
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.info(f"[VALIDATION ERROR] {request.method} {request.url.path}: {errors}")
        return JSONResponse(
            status_code=400,
            content={"error": "Validation error", "details": _jsonable_errors(errors)},
        )

    # HTTP exception handler - catch all HTTPException including 400s
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.info(f"[HTTP ERROR {exc.status_code}] {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
        )

    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        increment_error(MetricsErrorType.UNHANDLED)
        logger.error(
            f"[GLOBAL ERROR] {type(exc).__name__}: {exc}",
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    # Health check routes
    @app.get("/", tags=["health"])
    async def root():
        return {"message": "FastAPI server is running."}

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy"}

    # Register routers (friends first: its static paths share the prefix)
    app.include_router(friends_router)
    app.include_router(messages_router)
    app.include_router(realtime_router)
    app.include_router(metrics_router)

    if Config.ATTACHMENT_BACKEND == "local" and Config.UPLOAD_PUBLIC_URL.startswith("/"):
        app.mount(
            Config.UPLOAD_PUBLIC_URL.rstrip("/"),
            StaticFiles(directory=Config.UPLOAD_BASE, check_dir=False),
            name="uploads",
        )

    return app


# Create the app instance
app = create_fastapi_app()
