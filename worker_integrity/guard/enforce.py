"""
Fail-fast enforcement of the startup version guard.

A failed check terminates the process. Nothing in-process is expected to
catch the exit: the supervisor sees a non-zero status and routes no work
to this worker.
"""

import logging
import sys
from typing import TextIO

from worker_integrity.constants import GUARD_EXIT_CODE, GUARD_LOG_TAG
from worker_integrity.guard.checks import evaluate_guard
from worker_integrity.types.version import GuardFailure, VersionInfo

logger = logging.getLogger(__name__)


def write_diagnostics(failure: GuardFailure, stream: TextIO) -> None:
    """
    Write tagged diagnostic lines for a guard failure.

    Args:
        failure: The failed check.
        stream: Output stream, normally stderr.
    """
    for line in failure.lines:
        stream.write(f"{GUARD_LOG_TAG} {line}\n")
    stream.flush()


def enforce_version_guard(
    info: VersionInfo,
    stream: TextIO | None = None,
) -> VersionInfo:
    """
    Enforce the startup guard for this process.

    Must run before any external connection is opened.

    Args:
        info: The version snapshot.
        stream: Diagnostic stream. Defaults to sys.stderr.

    Returns:
        The snapshot, unchanged, when every check passes.

    Raises:
        SystemExit: With a non-zero status on the first failing check.
    """
    failure = evaluate_guard(info)

    if failure is not None:
        write_diagnostics(failure, stream or sys.stderr)
        logger.critical(
            "Version guard failed",
            extra={
                "guard_failure": str(failure.kind),
                "git_sha": info.git_sha,
                "expected_git_sha": info.expected_sha,
                "runtime_mode": str(info.runtime_mode),
            },
        )
        sys.exit(GUARD_EXIT_CODE)

    logger.info(
        "Version guard passed",
        extra={
            "git_sha": info.git_sha,
            "build_date": info.build_date,
            "runtime_mode": str(info.runtime_mode),
        },
    )
    return info
