"""
FastAPI application entry point.
"""

import logging
import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response

from worker_integrity import __version__
from worker_integrity.api.routes import health_router, workers_router
from worker_integrity.config import get_settings
from worker_integrity.observability.logging import setup_logging
from worker_integrity.observability.metrics import get_metrics, setup_metrics
from worker_integrity.observability.tracing import (
    instrument_fastapi,
    instrument_redis,
    setup_tracing,
)
from worker_integrity.registry import close_redis, init_redis

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    setup_logging()
    setup_metrics()
    setup_tracing()
    instrument_redis()
    await init_redis()

    logger.info("Application started")

    yield

    # Shutdown
    await close_redis()
    logger.info("Application shutdown")


async def metrics_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Record request count and latency for every route except /metrics."""
    if request.url.path == "/metrics":
        return await call_next(request)

    start_time = time.perf_counter()
    response = await call_next(request)

    route = request.scope.get("route")
    endpoint = getattr(route, "path", request.url.path)
    get_metrics().record_api_request(
        method=request.method,
        endpoint=endpoint,
        status=response.status_code,
        duration_seconds=time.perf_counter() - start_time,
    )
    return response


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured application instance.
    """
    app = FastAPI(
        title="Worker Integrity API",
        description="Registered worker versions and deployment drift",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.middleware("http")(metrics_middleware)

    # Include routers
    app.include_router(health_router)
    app.include_router(workers_router)

    # Instrument with OpenTelemetry
    instrument_fastapi(app)

    return app


def run() -> None:
    """Run the API server."""
    settings = get_settings()

    uvicorn.run(
        "worker_integrity.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


# Create app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    run()
