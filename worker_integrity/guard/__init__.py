"""
Guard module.
Contains the startup version guard: snapshot, checks and enforcement.
"""

from worker_integrity.guard.checks import GUARD_CHECKS, evaluate_guard
from worker_integrity.guard.enforce import enforce_version_guard
from worker_integrity.guard.snapshot import (
    collect_version_info,
    detect_interpreter_invocation,
)

__all__ = [
    "GUARD_CHECKS",
    "evaluate_guard",
    "enforce_version_guard",
    "collect_version_info",
    "detect_interpreter_invocation",
]
