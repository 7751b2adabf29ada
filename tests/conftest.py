"""Shared fixtures."""

from __future__ import annotations

import pytest

from isitsafe.logger import configure_verdict_log, reset_verdict_log


@pytest.fixture(autouse=True)
def verdict_log(tmp_path):
    """Send scan verdicts to a per-test file."""
    path = tmp_path / "analysis.log"
    configure_verdict_log(path)
    yield path
    reset_verdict_log()
