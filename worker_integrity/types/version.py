"""
Version-related type definitions for internal use.
"""

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from worker_integrity.constants import GuardFailureKind, RuntimeMode, UNKNOWN_GIT_SHA


@dataclass(frozen=True)
class VersionInfo:
    """
    Version snapshot of the running process.

    Built once at process entry and never mutated. Every guard decision
    is a pure function of this record.
    """

    git_sha: str
    runtime_mode: RuntimeMode
    invoked_via_interpreter: bool
    build_date: str | None = None
    expected_sha: str | None = None
    argv: tuple[str, ...] = field(default=(), compare=False)

    @property
    def is_production(self) -> bool:
        """Check if the process runs in production mode."""
        return self.runtime_mode == RuntimeMode.PRODUCTION

    @property
    def has_known_identity(self) -> bool:
        """Check if a build identity was baked into the artifact."""
        return self.git_sha != UNKNOWN_GIT_SHA


@dataclass(frozen=True)
class GuardFailure:
    """
    A failed startup check.
    Carries the diagnostic lines written before the process exits.
    """

    kind: GuardFailureKind
    lines: tuple[str, ...]


class VersionRegistration(BaseModel):
    """
    Version record stored in the registry for a worker role.

    Serialized with camelCase field names so that any consumer of the
    shared store reads the same record shape.
    """

    model_config = ConfigDict(populate_by_name=True)

    git_sha: str = Field(..., alias="gitSha")
    build_date: str | None = Field(default=None, alias="buildDate")
    started_at: datetime = Field(..., alias="startedAt")
    pid: int

    def to_json(self) -> str:
        """Serialize using the wire field names."""
        return self.model_dump_json(by_alias=True)
