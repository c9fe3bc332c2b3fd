"""
API request and response type definitions.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class WorkerVersionResponse(BaseModel):
    """Registered version of a single worker role."""

    role: str
    git_sha: str
    build_date: str | None
    started_at: datetime
    pid: int
    expected_git_sha: str | None = Field(
        default=None, description="Version expected by the current deployment"
    )
    stale: bool = Field(
        default=False, description="True when the registered version differs from the expected one"
    )


class WorkerVersionListResponse(BaseModel):
    """All registered worker versions."""

    workers: list[WorkerVersionResponse]
    total: int
    stale: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    redis: str
    timestamp: datetime
