"""
Unit tests for settings loading.
"""

import pytest

from worker_integrity.config import Settings
from worker_integrity.constants import DEFAULT_SOURCE_RUNNERS
from worker_integrity.guard.snapshot import collect_version_info


class TestGuardSourceRunners:
    """Tests for GUARD_SOURCE_RUNNERS parsing."""

    def test_defaults(self):
        """Test the built-in runner list is used when unset."""
        assert Settings().guard_source_runners == list(DEFAULT_SOURCE_RUNNERS)

    def test_comma_separated(self, monkeypatch: pytest.MonkeyPatch):
        """Test a plain comma-separated value is split and trimmed."""
        monkeypatch.setenv("GUARD_SOURCE_RUNNERS", "watchfiles, devshim ,")

        assert Settings().guard_source_runners == ["watchfiles", "devshim"]

    def test_json_array(self, monkeypatch: pytest.MonkeyPatch):
        """Test a JSON array is still accepted."""
        monkeypatch.setenv("GUARD_SOURCE_RUNNERS", '["watchfiles", "devshim"]')

        assert Settings().guard_source_runners == ["watchfiles", "devshim"]

    def test_single_name(self, monkeypatch: pytest.MonkeyPatch):
        """Test one runner name without separators."""
        monkeypatch.setenv("GUARD_SOURCE_RUNNERS", "devshim")

        assert Settings().guard_source_runners == ["devshim"]

    def test_comma_separated_runner_detected(self, monkeypatch: pytest.MonkeyPatch):
        """Test a runner configured as a comma list marks the process as live source."""
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("GIT_SHA", "abc123")
        monkeypatch.setenv("GUARD_SOURCE_RUNNERS", "watchfiles,devshim")

        info = collect_version_info(argv=["/usr/local/bin/devshim", "worker"])

        assert info.invoked_via_interpreter is True
