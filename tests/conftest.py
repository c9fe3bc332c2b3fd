"""
Pytest configuration and shared fixtures.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from tests.fakes import FakeRedis
from worker_integrity.api.main import create_app
from worker_integrity.config import Settings, get_settings
from worker_integrity.constants import RuntimeMode
from worker_integrity.registry import VersionRegistry, get_redis_dependency
from worker_integrity.types.version import VersionInfo


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Make environment changes in a test visible to get_settings()."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_redis() -> FakeRedis:
    """Create an empty in-memory Redis."""
    return FakeRedis()


@pytest.fixture
def registry(fake_redis: FakeRedis) -> VersionRegistry:
    """Create a registry over the in-memory Redis."""
    return VersionRegistry(fake_redis)


@pytest.fixture
def test_settings() -> Settings:
    """Create production test settings."""
    return Settings(
        app_env="production",
        git_sha="abc123",
        build_date="2026-01-05T10:00:00Z",
        expected_git_sha=None,
        worker_role="extractor",
        log_level="DEBUG",
        log_format="console",
    )


@pytest.fixture
def production_info() -> VersionInfo:
    """A production snapshot that passes every check."""
    return VersionInfo(
        git_sha="abc123",
        build_date="2026-01-05T10:00:00Z",
        expected_sha="abc123",
        runtime_mode=RuntimeMode.PRODUCTION,
        invoked_via_interpreter=False,
        argv=("/usr/local/bin/worker-integrity-worker",),
    )


@pytest_asyncio.fixture
async def app(fake_redis: FakeRedis) -> AsyncGenerator[FastAPI]:
    """Create a FastAPI app backed by the in-memory Redis."""
    app = create_app()

    async def override_redis() -> AsyncGenerator[FakeRedis]:
        yield fake_redis

    app.dependency_overrides[get_redis_dependency] = override_redis
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
