"""
Unit tests for the startup version checks.
"""

import dataclasses
import itertools

import pytest

from worker_integrity.constants import GuardFailureKind, RuntimeMode
from worker_integrity.guard.checks import (
    GUARD_CHECKS,
    check_interpreter_invocation,
    check_unknown_identity,
    check_version_mismatch,
    evaluate_guard,
)
from worker_integrity.types.version import VersionInfo

SHAS = ["unknown", "abc123", "def456"]
EXPECTED = [None, "unknown", "abc123", "def456"]


def make_info(
    runtime_mode: RuntimeMode = RuntimeMode.PRODUCTION,
    invoked_via_interpreter: bool = False,
    git_sha: str = "abc123",
    expected_sha: str | None = None,
) -> VersionInfo:
    return VersionInfo(
        git_sha=git_sha,
        runtime_mode=runtime_mode,
        invoked_via_interpreter=invoked_via_interpreter,
        expected_sha=expected_sha,
        argv=("/app/worker.py",) if invoked_via_interpreter else ("/usr/local/bin/worker",),
    )


class TestCheckOrder:
    """Tests for the evaluation order."""

    def test_order(self):
        """Test checks run interpreter, identity, then mismatch."""
        assert GUARD_CHECKS == (
            check_interpreter_invocation,
            check_unknown_identity,
            check_version_mismatch,
        )

    def test_stops_at_first_failure(self):
        """Test later checks are never evaluated after a failure."""
        evaluated: list[str] = []

        def failing(info: VersionInfo):
            evaluated.append("failing")
            return check_interpreter_invocation(info)

        def later(info: VersionInfo):
            evaluated.append("later")
            return None

        info = make_info(invoked_via_interpreter=True, git_sha="unknown", expected_sha="x")
        failure = evaluate_guard(info, checks=(failing, later))

        assert failure is not None
        assert evaluated == ["failing"]


class TestGuardProperties:
    """Properties that hold over every combination of inputs."""

    @pytest.mark.parametrize(
        ("invoked", "git_sha", "expected_sha"),
        list(itertools.product([True, False], SHAS, EXPECTED)),
    )
    def test_non_production_never_fails(self, invoked, git_sha, expected_sha):
        """Test no check fires outside production."""
        info = make_info(RuntimeMode.NON_PRODUCTION, invoked, git_sha, expected_sha)

        assert evaluate_guard(info) is None

    @pytest.mark.parametrize(
        ("git_sha", "expected_sha"),
        list(itertools.product(SHAS, EXPECTED)),
    )
    def test_interpreter_invocation_fails_first(self, git_sha, expected_sha):
        """Test live source in production wins over every other failure."""
        info = make_info(invoked_via_interpreter=True, git_sha=git_sha, expected_sha=expected_sha)

        failure = evaluate_guard(info)

        assert failure is not None
        assert failure.kind == GuardFailureKind.INTERPRETER_INVOCATION_IN_PRODUCTION

    @pytest.mark.parametrize("expected_sha", EXPECTED)
    def test_unknown_identity_fails(self, expected_sha):
        """Test an unknown GIT_SHA fails in production whatever is expected."""
        info = make_info(git_sha="unknown", expected_sha=expected_sha)

        failure = evaluate_guard(info)

        assert failure is not None
        assert failure.kind == GuardFailureKind.UNKNOWN_VERSION_IN_PRODUCTION

    @pytest.mark.parametrize(
        ("git_sha", "expected_sha"),
        [(sha, exp) for sha, exp in itertools.product(SHAS[1:], EXPECTED) if exp is not None and exp != sha],
    )
    def test_mismatch_fails(self, git_sha, expected_sha):
        """Test a known GIT_SHA different from EXPECTED_GIT_SHA fails."""
        info = make_info(git_sha=git_sha, expected_sha=expected_sha)

        failure = evaluate_guard(info)

        assert failure is not None
        assert failure.kind == GuardFailureKind.VERSION_MISMATCH

    @pytest.mark.parametrize("git_sha", SHAS[1:])
    def test_matching_expected_sha_passes(self, git_sha):
        """Test a matching expected version passes."""
        assert evaluate_guard(make_info(git_sha=git_sha, expected_sha=git_sha)) is None

    @pytest.mark.parametrize("git_sha", SHAS[1:])
    def test_no_expected_sha_passes(self, git_sha):
        """Test no expected version means no mismatch enforcement."""
        assert evaluate_guard(make_info(git_sha=git_sha)) is None

    def test_idempotent(self):
        """Test identical snapshots give identical outcomes."""
        info = make_info(git_sha="abc123", expected_sha="def456")
        copy = dataclasses.replace(info)

        assert evaluate_guard(info) == evaluate_guard(info) == evaluate_guard(copy)


class TestScenarios:
    """Tests for the documented startup scenarios."""

    def test_interpreter_in_production(self):
        """Test the live-source diagnostic names the argv."""
        failure = evaluate_guard(make_info(invoked_via_interpreter=True))

        assert failure.kind == GuardFailureKind.INTERPRETER_INVOCATION_IN_PRODUCTION
        assert "live source" in failure.lines[0]
        assert "/app/worker.py" in failure.lines[1]

    def test_unknown_identity_in_production(self):
        """Test the unknown-identity diagnostic gives the build-arg remedy."""
        failure = evaluate_guard(make_info(git_sha="unknown"))

        assert failure.kind == GuardFailureKind.UNKNOWN_VERSION_IN_PRODUCTION
        assert any("GIT_SHA" in line for line in failure.lines)
        assert any("--build-arg GIT_SHA" in line for line in failure.lines)

    def test_mismatch_shows_both_values(self):
        """Test the mismatch diagnostic shows both versions and the remedy."""
        failure = evaluate_guard(make_info(git_sha="abc123", expected_sha="def456"))

        assert failure.kind == GuardFailureKind.VERSION_MISMATCH
        text = "\n".join(failure.lines)
        assert "EXPECTED_GIT_SHA=def456" in text
        assert "GIT_SHA=abc123" in text
        assert "recreate the container" in text

    def test_matching_versions_pass(self):
        """Test a production worker with matching versions is ready."""
        assert evaluate_guard(make_info(git_sha="abc123", expected_sha="abc123")) is None

    def test_non_production_unknown_passes(self):
        """Test a development worker may run without a build identity."""
        info = make_info(RuntimeMode.NON_PRODUCTION, git_sha="unknown", expected_sha=None)

        assert evaluate_guard(info) is None
