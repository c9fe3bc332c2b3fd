"""
Type definitions for worker integrity.
Contains input/output type definitions for all functions, grouped by module.
"""

from worker_integrity.types.api import (
    HealthResponse,
    WorkerVersionListResponse,
    WorkerVersionResponse,
)
from worker_integrity.types.version import (
    GuardFailure,
    VersionInfo,
    VersionRegistration,
)

__all__ = [
    # API types
    "WorkerVersionResponse",
    "WorkerVersionListResponse",
    "HealthResponse",
    # Version types
    "VersionInfo",
    "GuardFailure",
    "VersionRegistration",
]
