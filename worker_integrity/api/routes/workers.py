"""
Worker version routes.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from redis.asyncio import Redis
from redis.exceptions import RedisError

from worker_integrity.config import get_settings
from worker_integrity.constants import API_V1_PREFIX
from worker_integrity.registry import VersionRegistry, get_redis_dependency
from worker_integrity.types.api import WorkerVersionListResponse, WorkerVersionResponse
from worker_integrity.types.version import VersionRegistration

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{API_V1_PREFIX}/workers", tags=["Workers"])


async def get_registry(
    client: Redis = Depends(get_redis_dependency),
) -> VersionRegistry:
    """Dependency providing the version registry."""
    return VersionRegistry(client)


def _registration_to_response(
    role: str,
    registration: VersionRegistration,
    expected_git_sha: str | None,
) -> WorkerVersionResponse:
    """Convert a registration to a WorkerVersionResponse."""
    return WorkerVersionResponse(
        role=role,
        git_sha=registration.git_sha,
        build_date=registration.build_date,
        started_at=registration.started_at,
        pid=registration.pid,
        expected_git_sha=expected_git_sha,
        stale=expected_git_sha is not None and registration.git_sha != expected_git_sha,
    )


def _expected_git_sha() -> str | None:
    expected = (get_settings().expected_git_sha or "").strip()
    return expected or None


@router.get(
    "/versions",
    response_model=WorkerVersionListResponse,
    summary="List worker versions",
    description="List the version registered by every worker role.",
)
async def list_worker_versions(
    registry: VersionRegistry = Depends(get_registry),
) -> WorkerVersionListResponse:
    """
    List registered worker versions.

    A worker is reported stale when EXPECTED_GIT_SHA is configured and
    differs from the version it registered.

    Args:
        registry: Version registry.

    Returns:
        WorkerVersionListResponse with every registered role.

    Raises:
        HTTPException: If the registry is unreachable.
    """
    try:
        registrations = await registry.list_all()
    except RedisError as e:
        logger.warning(f"Version registry unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Version registry unavailable",
        ) from e

    expected = _expected_git_sha()
    workers = [
        _registration_to_response(role, registration, expected)
        for role, registration in registrations.items()
    ]

    return WorkerVersionListResponse(
        workers=workers,
        total=len(workers),
        stale=sum(1 for worker in workers if worker.stale),
    )


@router.get(
    "/{role}/version",
    response_model=WorkerVersionResponse,
    summary="Get worker version",
    description="Get the version registered by a single worker role.",
)
async def get_worker_version(
    role: str,
    registry: VersionRegistry = Depends(get_registry),
) -> WorkerVersionResponse:
    """
    Get the registered version of a worker role.

    Raises:
        HTTPException: If the role has no registration or the registry is unreachable.
    """
    try:
        registration = await registry.get(role)
    except RedisError as e:
        logger.warning(f"Version registry unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Version registry unavailable",
        ) from e

    if registration is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Worker version not registered",
        )

    return _registration_to_response(role, registration, _expected_git_sha())
