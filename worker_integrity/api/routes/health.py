"""
Health check routes.
"""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from redis.asyncio import Redis

from worker_integrity import __version__
from worker_integrity.observability.metrics import get_metrics
from worker_integrity.registry import get_redis_dependency
from worker_integrity.types.api import HealthResponse

router = APIRouter(tags=["Health"])


async def _ping(client: Redis) -> bool:
    try:
        return bool(await client.ping())
    except Exception:
        return False


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health of the API and the Redis connection.",
)
async def health_check(
    client: Redis = Depends(get_redis_dependency),
) -> HealthResponse:
    """
    Perform a health check.

    Checks Redis connectivity and returns service status.

    Args:
        client: Redis client.

    Returns:
        HealthResponse with service status.
    """
    redis_status = "healthy" if await _ping(client) else "unhealthy"

    return HealthResponse(
        status="healthy" if redis_status == "healthy" else "degraded",
        version=__version__,
        redis=redis_status,
        timestamp=datetime.now(UTC),
    )


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the service is ready to receive traffic.",
)
async def readiness_check(
    client: Redis = Depends(get_redis_dependency),
) -> dict:
    """
    Kubernetes readiness probe endpoint.

    Args:
        client: Redis client.

    Returns:
        Ready status.
    """
    return {"ready": await _ping(client)}


@router.get(
    "/live",
    summary="Liveness check",
    description="Check if the service is alive.",
)
async def liveness_check() -> dict:
    """Kubernetes liveness probe endpoint."""
    return {"alive": True}


@router.get(
    "/metrics",
    summary="Prometheus metrics",
    description="Expose Prometheus metrics.",
)
async def metrics() -> Response:
    """
    Expose Prometheus metrics.

    Returns:
        Prometheus-formatted metrics.
    """
    metrics_collector = get_metrics()
    return Response(
        content=metrics_collector.get_metrics(),
        media_type=metrics_collector.get_content_type(),
    )
