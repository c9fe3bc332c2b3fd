"""
Worker process entry point.

Startup order:
1. Configure logging (no external connections)
2. Collect the version snapshot and enforce the version guard
3. Connect to Redis and register the version (best-effort, in background)
4. Hand off to the worker body until shutdown
"""

import asyncio
import logging
import signal
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from worker_integrity.config import get_settings
from worker_integrity.guard import collect_version_info, enforce_version_guard
from worker_integrity.observability.logging import bind_worker_context, setup_logging
from worker_integrity.observability.metrics import get_metrics
from worker_integrity.observability.tracing import instrument_redis, setup_tracing
from worker_integrity.registry import VersionRegistry, close_redis, init_redis
from worker_integrity.types.version import VersionInfo

logger = logging.getLogger(__name__)

# Seconds a pending registration may delay shutdown
REGISTRATION_GRACE_SECONDS = 1.0

# Type alias for the work a worker performs once it is READY
WorkerBody = Callable[[VersionInfo, asyncio.Event], Awaitable[None]]


async def wait_for_shutdown(info: VersionInfo, stop_event: asyncio.Event) -> None:
    """Default worker body: idle until shutdown is requested."""
    await stop_event.wait()


class Worker:
    """
    Worker that runs after the version guard has passed.

    Features:
    - Non-blocking version registration on startup
    - Periodic refresh so the registration outlives its expiry
    - Graceful shutdown on SIGTERM/SIGINT
    """

    def __init__(
        self,
        info: VersionInfo,
        registry: VersionRegistry,
        role: str | None = None,
        body: WorkerBody | None = None,
        refresh_interval: float | None = None,
    ):
        """
        Initialize the worker.

        Args:
            info: Version snapshot that passed the guard.
            registry: Version registry to publish to.
            role: Worker role identifier. Defaults to WORKER_ROLE.
            body: Work to run once ready. Defaults to idling until stopped.
            refresh_interval: Seconds between registration refreshes.
        """
        settings = get_settings()

        self.info = info
        self.role = role or settings.worker_role
        self.refresh_interval = refresh_interval or settings.registration_refresh_seconds
        # Process start; every refresh republishes this same value
        self.started_at = datetime.now(UTC)

        self._registry = registry
        self._body = body or wait_for_shutdown
        self._stop_event = asyncio.Event()
        self._registration_task: asyncio.Task | None = None
        self._refresh_task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        """Check if the worker has not been asked to stop."""
        return not self._stop_event.is_set()

    async def start(self) -> None:
        """Start the worker and run its body until it returns."""
        logger.info(
            "Worker starting",
            extra={"worker_role": self.role, "git_sha": self.info.git_sha},
        )

        get_metrics().record_build_info(self.role, self.info.git_sha, self.info.build_date)

        # Registration must not delay the body
        self._registration_task = asyncio.create_task(
            self._registry.register(self.role, self.info, started_at=self.started_at)
        )
        self._refresh_task = asyncio.create_task(self._refresh_loop())

        try:
            await self._body(self.info, self._stop_event)
        finally:
            await self._cancel_background_tasks()

        logger.info("Worker stopped", extra={"worker_role": self.role})

    async def stop(self) -> None:
        """Stop the worker gracefully."""
        logger.info("Worker stopping", extra={"worker_role": self.role})
        self._stop_event.set()

    async def _cancel_background_tasks(self) -> None:
        # Let an in-flight registration finish briefly, a short-lived body included
        if self._registration_task is not None and not self._registration_task.done():
            await asyncio.wait({self._registration_task}, timeout=REGISTRATION_GRACE_SECONDS)

        for task in (self._registration_task, self._refresh_task):
            if task is None or task.done():
                continue
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _refresh_loop(self) -> None:
        """
        Periodically re-publish the registration.

        Only the registry write is repeated; the guard never runs again.
        """
        while self.running:
            try:
                await asyncio.sleep(self.refresh_interval)

                if not self.running:
                    break

                await self._registry.register(
                    self.role, self.info, started_at=self.started_at
                )

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.exception(f"Error in registration refresh loop: {e}")


async def run_async(info: VersionInfo, body: WorkerBody | None = None) -> None:
    """
    Run the worker asynchronously.

    Must only be called with a snapshot that already passed the guard.
    """
    settings = get_settings()

    setup_tracing()
    instrument_redis()
    bind_worker_context(settings.worker_role, info.git_sha)

    client = await init_redis()
    worker = Worker(info=info, registry=VersionRegistry(client), body=body)

    # Handle shutdown signals
    loop = asyncio.get_running_loop()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(
            sig,
            lambda: asyncio.create_task(worker.stop())
        )

    try:
        await worker.start()
    finally:
        await close_redis()


def run(body: WorkerBody | None = None) -> None:
    """
    Run the worker.

    The guard runs synchronously before the event loop starts, so a
    failing worker exits before any connection is opened.
    """
    setup_logging()

    info = enforce_version_guard(collect_version_info())

    asyncio.run(run_async(info, body))


if __name__ == "__main__":
    run()
