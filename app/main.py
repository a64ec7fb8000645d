"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, cast

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.auth.constants import BEARER_CHALLENGE
from app.api.v1.router import api_router
from app.config import settings
from app.core.database import close_db, init_db
from app.core.exceptions import (
    BriefNotFoundError,
    ConflictError,
    ForbiddenError,
    IntelError,
    QuotaExhaustedError,
    RateLimitedError,
    UnauthorizedError,
    UpstreamError,
    ValidationError,
)
from app.core.logging import setup_logging
from app.core.redis import close_redis

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Brief generation failed. Please try again."

_STATUS_BY_ERROR: tuple[tuple[type[IntelError], int], ...] = (
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (BriefNotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (RateLimitedError, status.HTTP_429_TOO_MANY_REQUESTS),
    (QuotaExhaustedError, status.HTTP_402_PAYMENT_REQUIRED),
)


def status_for(exc: IntelError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def intel_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render application errors as `{"error": message}` with the mapped status.

    Upstream and parsing failures are logged in full and reported with a
    generic message; their raw text never reaches the client.
    """
    error = cast(IntelError, exc)
    status_code = status_for(error)
    message = error.message

    if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "Request failed",
            extra={
                "path": request.url.path,
                "error_type": type(error).__name__,
                "error": error.message,
                "details": error.details,
            },
        )
        message = GENERIC_FAILURE_MESSAGE
    elif isinstance(error, UpstreamError):
        logger.warning(
            "Upstream limit reached",
            extra={"path": request.url.path, "error_type": type(error).__name__},
        )
        message = (
            "Rate limit exceeded. Please try again later."
            if isinstance(error, RateLimitedError)
            else "AI credits exhausted. Please add funds to continue."
        )

    headers = BEARER_CHALLENGE if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    setup_logging()

    logger.info(
        "Starting dCorpo Intel",
        extra={
            "environment": settings.environment,
            "version": settings.app_version,
            "brief_model": settings.get_brief_model(),
            "search_enabled": settings.search_enabled,
        },
    )

    if settings.environment == "development":
        await init_db()
        logger.info("Development database initialized")

    yield

    logger.info("Shutting down dCorpo Intel")
    await close_redis()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Legal-intelligence newsletter backend: AI brief generation, "
            "editorial workflow, publishing and subscriber signup"
        ),
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        cast(Any, CORSMiddleware),
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(IntelError, intel_error_handler)

    # Include API router
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    @app.get(
        "/health",
        summary="Health check",
        description="Return service health status and backend version information.",
    )
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "version": settings.app_version}

    return app


app = create_app()
