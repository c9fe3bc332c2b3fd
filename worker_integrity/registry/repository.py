"""
Version registry backed by Redis.

Each worker role publishes the version it runs under workers:{role}:version
with a 24-hour expiry. Registration is monitoring-only: enforcement has
already happened in the startup guard, so a failed write never stops a
worker.
"""

import logging
import os
from datetime import UTC, datetime

from pydantic import ValidationError
from redis.asyncio import Redis

from worker_integrity.config import get_settings
from worker_integrity.constants import (
    RegistrationOutcome,
    SPAN_LIST_VERSIONS,
    SPAN_REGISTER_VERSION,
    VERSION_KEY_NAMESPACE,
    VERSION_KEY_SUFFIX,
)
from worker_integrity.observability.metrics import get_metrics
from worker_integrity.observability.tracing import get_tracer
from worker_integrity.types.version import VersionInfo, VersionRegistration

logger = logging.getLogger(__name__)


def version_key(role: str) -> str:
    """Build the registry key for a worker role."""
    return f"{VERSION_KEY_NAMESPACE}:{role}:{VERSION_KEY_SUFFIX}"


def role_from_key(key: str) -> str | None:
    """Extract the worker role from a registry key, or None if it is not one."""
    prefix = f"{VERSION_KEY_NAMESPACE}:"
    suffix = f":{VERSION_KEY_SUFFIX}"
    if not (key.startswith(prefix) and key.endswith(suffix)):
        return None
    role = key[len(prefix) : -len(suffix)]
    return role or None


class VersionRegistry:
    """
    Repository for worker version records.

    Implements:
    - Best-effort registration with expiry
    - Lookup of a single role
    - Listing of every registered role
    """

    def __init__(self, client: Redis, ttl_seconds: int | None = None):
        """
        Initialize the registry with a Redis client.

        Args:
            client: The async Redis client.
            ttl_seconds: Record expiry. Defaults to REGISTRATION_TTL_SECONDS.
        """
        self._client = client
        self._ttl_seconds = ttl_seconds or get_settings().registration_ttl_seconds

    @staticmethod
    def build_registration(
        info: VersionInfo,
        started_at: datetime | None = None,
        pid: int | None = None,
    ) -> VersionRegistration:
        """
        Build the record published for this process.

        Args:
            info: The version snapshot that passed the guard.
            started_at: Process start time. Defaults to now (UTC).
            pid: Process id. Defaults to the current process.

        Returns:
            VersionRegistration: The record to store.
        """
        return VersionRegistration(
            git_sha=info.git_sha,
            build_date=info.build_date,
            started_at=started_at or datetime.now(UTC),
            pid=pid if pid is not None else os.getpid(),
        )

    async def register(
        self,
        role: str,
        info: VersionInfo,
        started_at: datetime | None = None,
    ) -> bool:
        """
        Publish the version of this process for a role.

        Never raises: the store being unreachable must not block job
        processing.

        Args:
            role: Worker role identifier.
            info: The version snapshot that passed the guard.
            started_at: Process start time.

        Returns:
            True if the record was written.
        """
        registration = self.build_registration(info, started_at=started_at)
        key = version_key(role)
        metrics = get_metrics()

        try:
            with get_tracer().start_as_current_span(SPAN_REGISTER_VERSION) as span:
                span.set_attribute("worker_role", role)
                span.set_attribute("git_sha", info.git_sha)

                await self._client.set(key, registration.to_json(), ex=self._ttl_seconds)

        except Exception as e:
            logger.warning(
                f"Version registration failed: {e}",
                extra={"worker_role": role, "key": key, "git_sha": info.git_sha},
            )
            metrics.record_registration(role, RegistrationOutcome.FAILED)
            return False

        logger.info(
            "Version registered",
            extra={
                "worker_role": role,
                "key": key,
                "git_sha": registration.git_sha,
                "pid": registration.pid,
                "ttl_seconds": self._ttl_seconds,
            },
        )
        metrics.record_registration(role, RegistrationOutcome.REGISTERED)
        return True

    async def get(self, role: str) -> VersionRegistration | None:
        """
        Get the registered version of a role.

        Args:
            role: Worker role identifier.

        Returns:
            The registration, or None if absent or unreadable.
        """
        raw = await self._client.get(version_key(role))
        if raw is None:
            return None
        return self._decode(version_key(role), raw)

    async def list_all(self) -> dict[str, VersionRegistration]:
        """
        List every registered role.

        Returns:
            Mapping of role to registration, sorted by role.
        """
        pattern = version_key("*")
        registrations: dict[str, VersionRegistration] = {}

        with get_tracer().start_as_current_span(SPAN_LIST_VERSIONS):
            keys = [key async for key in self._client.scan_iter(match=pattern)]

            for key in sorted(set(keys)):
                role = role_from_key(key)
                if role is None:
                    continue

                raw = await self._client.get(key)
                if raw is None:
                    # Expired between scan and read
                    continue

                registration = self._decode(key, raw)
                if registration is not None:
                    registrations[role] = registration

        return registrations

    def _decode(self, key: str, raw: str) -> VersionRegistration | None:
        """Decode a stored record, logging records that do not parse."""
        try:
            return VersionRegistration.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Unreadable version record",
                extra={"key": key, "error": str(e)},
            )
            return None
