"""
Main application entry point.

This module initializes and configures the FastAPI application.
It handles startup/shutdown events and wires everything together.
"""

import asyncio
import contextlib
import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from config.settings import settings
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.domain.code_store import CodeStore
from src.domain.exceptions import InvalidOrExpiredCodeError
from src.infrastructure.cache.in_memory_code_store import InMemoryCodeStore
from src.infrastructure.observability.metrics_middleware import MetricsMiddleware
from src.infrastructure.observability.redis_metrics_storage import RedisMetricsStorage
from src.presentation.routes import router
from src.presentation.schemas import HealthCheckResponse

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def sweep_expired_codes(code_store: CodeStore, interval_seconds: float) -> None:
    """
    Periodically evict expired codes.

    Reads already ignore expired records; this only reclaims the memory of
    codes nobody came back to verify.
    """
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            code_store.purge_expired()
        except Exception as e:
            logger.error(f"Expired code sweep failed: {e}", exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    - Startup: create the code store (and metrics storage if enabled),
      start the expiry sweeper
    - Shutdown: stop the sweeper, close metrics storage

    Decision: The code store lives exactly as long as the app. Codes are
    process memory only and are gone after a restart.
    """
    logger.info("Starting Email Verification API...")

    app.state.code_store = InMemoryCodeStore(lock_stripes=settings.code_store_lock_stripes)
    logger.info("In-memory code store initialized")

    app.state.metrics_storage = RedisMetricsStorage() if settings.enable_metrics else None

    sweeper: asyncio.Task | None = None
    if settings.code_store_sweep_interval_seconds > 0:
        sweeper = asyncio.create_task(
            sweep_expired_codes(app.state.code_store, settings.code_store_sweep_interval_seconds)
        )

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down Email Verification API...")
    if sweeper is not None:
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
    if app.state.metrics_storage is not None:
        await app.state.metrics_storage.close()
    logger.info("Application shutdown complete")


app = FastAPI(
    title="Email Verification API",
    description="""
    Issues and checks short-lived, single-use email verification codes.

    ## Features
    - 6-digit codes sent by email
    - Codes expire after 5 minutes and can be used once
    - A new code replaces any outstanding one for the same address
    - Case-insensitive email matching

    ## Technical Stack
    - FastAPI for REST API
    - In-process TTL store for codes
    - SMTP (aiosmtplib + Jinja2) or Celery for email delivery
    - Redis for metrics
    """,
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Decision: Allow all origins for development/demo.
# In production, restrict to specific domains.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.enable_metrics:
    app.add_middleware(MetricsMiddleware)
    logger.info("Metrics middleware enabled")
else:
    logger.info("Metrics middleware disabled")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors and return 400 Bad Request.

    Decision: On the verify endpoint a malformed request gets the same generic
    error as a wrong code, so input shape doesn't reveal anything either.
    """
    if request.url.path.endswith("/verification/verify"):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"succeeded": False, "error": InvalidOrExpiredCodeError.MESSAGE},
        )

    errors = exc.errors()
    error_messages = [f"{err['loc'][-1]}: {err['msg']}" for err in errors]

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "succeeded": False,
            "error": "Request validation failed",
            "errors": error_messages,
        },
    )


app.include_router(router)


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "service": "Email Verification API",
        "version": settings.app_version,
        "status": "running",
        "docs": "/docs",
        "health": "/api/v1/health",
        "metrics": "/api/v1/metrics",
    }


@app.get("/api/v1/health", response_model=HealthCheckResponse, tags=["monitoring"])
async def health_check(request: Request) -> HealthCheckResponse:
    """
    Health check endpoint.

    Reports whether the code store is up. Without it no code can be issued
    or verified.
    """
    code_store_status = (
        "healthy" if getattr(request.app.state, "code_store", None) is not None else "unhealthy"
    )

    return HealthCheckResponse(
        status="healthy" if code_store_status == "healthy" else "degraded",
        service=settings.app_name,
        version=settings.app_version,
        timestamp=datetime.now(UTC),
        checks={"code_store": code_store_status},
    )


@app.get("/api/v1/metrics", tags=["monitoring"])
async def get_metrics_endpoint(request: Request) -> dict:
    """
    Metrics endpoint.

    Returns current metrics aggregated across all workers if metrics are enabled.
    """
    storage: RedisMetricsStorage | None = getattr(request.app.state, "metrics_storage", None)
    if storage is None:
        return {
            "error": "MetricsDisabled",
            "message": "Metrics collection is disabled. Enable with ENABLE_METRICS=true",
        }

    return await storage.get_metrics()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
