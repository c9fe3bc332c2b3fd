"""
Application constants.
Centralized location for all constant values used across the application.
"""

from enum import StrEnum


class RuntimeMode(StrEnum):
    """Runtime mode derived from APP_ENV."""

    PRODUCTION = "production"
    NON_PRODUCTION = "non-production"


class GuardFailureKind(StrEnum):
    """
    Startup guard failures.

    Every kind is fatal: the process exits before any connection is opened.
    """

    INTERPRETER_INVOCATION_IN_PRODUCTION = "InterpreterInvocationInProduction"
    UNKNOWN_VERSION_IN_PRODUCTION = "UnknownVersionInProduction"
    VERSION_MISMATCH = "VersionMismatch"


class RegistrationOutcome(StrEnum):
    """Result of a best-effort version registration."""

    REGISTERED = "registered"
    FAILED = "failed"


# Build identity sentinel
UNKNOWN_GIT_SHA = "unknown"

# Guard output
GUARD_LOG_TAG = "[version-guard]"
GUARD_EXIT_CODE = 1

# Reloaders, debuggers and shims that execute live source
DEFAULT_SOURCE_RUNNERS: tuple[str, ...] = (
    "watchfiles",
    "watchmedo",
    "hupper",
    "jurigged",
    "reloadium",
    "debugpy",
    "pdb",
)
INSTALLED_PACKAGE_DIRS: tuple[str, ...] = ("site-packages", "dist-packages")

# Registry keys: workers:{role}:version
VERSION_KEY_NAMESPACE = "workers"
VERSION_KEY_SUFFIX = "version"
REGISTRATION_TTL_SECONDS = 86400

# API constants
API_V1_PREFIX = "/v1"

# Metrics names
METRIC_BUILD_INFO = "worker_build_info"
METRIC_REGISTRATIONS = "worker_registrations_total"
METRIC_API_REQUESTS = "api_requests_total"
METRIC_API_LATENCY = "api_request_latency_seconds"

# Trace span names
SPAN_REGISTER_VERSION = "register_version"
SPAN_LIST_VERSIONS = "list_versions"
