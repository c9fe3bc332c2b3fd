"""
Version snapshot collection.

All environment and argument inspection for the startup guard happens
here, once, producing an immutable VersionInfo.
"""

import sys
from collections.abc import Iterable, Sequence
from pathlib import PurePath

from worker_integrity.config import Settings, get_settings
from worker_integrity.constants import (
    INSTALLED_PACKAGE_DIRS,
    RuntimeMode,
    UNKNOWN_GIT_SHA,
)
from worker_integrity.types.version import VersionInfo


def resolve_runtime_mode(app_env: str | None) -> RuntimeMode:
    """
    Map the APP_ENV value to a runtime mode.

    Args:
        app_env: Raw environment value.

    Returns:
        RuntimeMode.PRODUCTION only for "production" (case-insensitive).
    """
    if app_env and app_env.strip().lower() == RuntimeMode.PRODUCTION:
        return RuntimeMode.PRODUCTION
    return RuntimeMode.NON_PRODUCTION


def _normalize_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _runner_name(part: str) -> str:
    name = part.lower()
    for suffix in (".py", ".exe"):
        if name.endswith(suffix):
            name = name[: -len(suffix)]
    return name


def detect_interpreter_invocation(
    argv: Sequence[str],
    source_runners: Iterable[str],
) -> bool:
    """
    Detect a process launched from live source instead of the installed artifact.

    Two shapes count as live source:
    - a reloader, debugger or shim named anywhere in the argument vector
      (either as a path component or as the executable itself);
    - a `.py` entry file that lives outside any installed package directory,
      i.e. a script run straight from a source checkout.

    Args:
        argv: The process argument vector.
        source_runners: Names of source-level runners.

    Returns:
        True if the invocation runs live source.
    """
    if not argv:
        return False

    runners = {runner.lower() for runner in source_runners}

    for arg in argv:
        if not arg:
            continue
        parts = PurePath(arg).parts
        if any(_runner_name(part) in runners for part in parts):
            return True

    entry = PurePath(argv[0])
    if entry.suffix == ".py":
        return not any(part in INSTALLED_PACKAGE_DIRS for part in entry.parts)

    return False


def collect_version_info(
    settings: Settings | None = None,
    argv: Sequence[str] | None = None,
) -> VersionInfo:
    """
    Build the version snapshot for this process.

    Args:
        settings: Settings to read from. Defaults to the cached settings.
        argv: Argument vector. Defaults to sys.argv.

    Returns:
        VersionInfo: The immutable snapshot consumed by the guard.
    """
    settings = settings or get_settings()
    argv = tuple(sys.argv if argv is None else argv)

    git_sha = _normalize_optional(settings.git_sha) or UNKNOWN_GIT_SHA

    # The Dockerfile default for BUILD_DATE is the same placeholder as GIT_SHA
    build_date = _normalize_optional(settings.build_date)
    if build_date == UNKNOWN_GIT_SHA:
        build_date = None

    return VersionInfo(
        git_sha=git_sha,
        build_date=build_date,
        expected_sha=_normalize_optional(settings.expected_git_sha),
        runtime_mode=resolve_runtime_mode(settings.app_env),
        invoked_via_interpreter=detect_interpreter_invocation(
            argv, settings.guard_source_runners
        ),
        argv=argv,
    )
