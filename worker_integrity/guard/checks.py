"""
Startup version checks.

Each check is a pure predicate over a VersionInfo snapshot. Checks run in
a fixed order and evaluation stops at the first failure:

- START -> interpreter -> unknown identity -> mismatch -> READY
- any failing check -> TERMINATED
"""

from collections.abc import Callable

from worker_integrity.constants import GuardFailureKind
from worker_integrity.types.version import GuardFailure, VersionInfo

# Type alias for guard check functions
GuardCheck = Callable[[VersionInfo], GuardFailure | None]


def check_interpreter_invocation(info: VersionInfo) -> GuardFailure | None:
    """
    Reject production workers started from live source.

    The code that was reviewed and built into the image must be the code
    that runs; a reloader or a source checkout can diverge from it.
    """
    if not (info.is_production and info.invoked_via_interpreter):
        return None

    return GuardFailure(
        kind=GuardFailureKind.INTERPRETER_INVOCATION_IN_PRODUCTION,
        lines=(
            "FATAL: production worker was started from live source, not the built artifact",
            f"argv: {' '.join(info.argv) or '<empty>'}",
            "Production must run the installed console script baked into the image.",
            "Fix: rebuild the image and redeploy; never run a reloader or a source checkout in production.",
        ),
    )


def check_unknown_identity(info: VersionInfo) -> GuardFailure | None:
    """Reject production artifacts built without a recorded GIT_SHA."""
    if not info.is_production or info.has_known_identity:
        return None

    return GuardFailure(
        kind=GuardFailureKind.UNKNOWN_VERSION_IN_PRODUCTION,
        lines=(
            f"FATAL: GIT_SHA is '{info.git_sha}' in production",
            "The artifact carries no build identity and cannot be trusted.",
            "Fix: build the image with --build-arg GIT_SHA=$(git rev-parse HEAD)",
        ),
    )


def check_version_mismatch(info: VersionInfo) -> GuardFailure | None:
    """
    Reject artifacts whose identity differs from the deploy-time expectation.

    Catches stale containers that were reused instead of recreated after a
    new version was declared.
    """
    if not info.is_production or info.expected_sha is None:
        return None
    if info.expected_sha == info.git_sha:
        return None

    return GuardFailure(
        kind=GuardFailureKind.VERSION_MISMATCH,
        lines=(
            "FATAL: version mismatch",
            f"  EXPECTED_GIT_SHA={info.expected_sha}",
            f"  GIT_SHA={info.git_sha}",
            "The running container is stale.",
            "Fix: rebuild the image and recreate the container; do not reuse it.",
        ),
    )


# Evaluation order is part of the contract
GUARD_CHECKS: tuple[GuardCheck, ...] = (
    check_interpreter_invocation,
    check_unknown_identity,
    check_version_mismatch,
)


def evaluate_guard(
    info: VersionInfo,
    checks: tuple[GuardCheck, ...] = GUARD_CHECKS,
) -> GuardFailure | None:
    """
    Run the checks in order and return the first failure.

    Args:
        info: The version snapshot.
        checks: Ordered checks to evaluate.

    Returns:
        The first GuardFailure, or None if every check passes.
    """
    for check in checks:
        failure = check(info)
        if failure is not None:
            return failure
    return None
