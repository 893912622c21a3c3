"""Integration test fixtures — real file I/O, network mocked with respx."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from yfp.core.config import HttpConfig


@pytest.fixture
def isolated_dir(tmp_path: Path, monkeypatch) -> Path:
    """Working directory with no yfp.yml and no YFP_* environment."""
    for key in list(os.environ):
        if key.startswith("YFP_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def fast_http() -> HttpConfig:
    """HTTP settings with no retry sleeps."""
    return HttpConfig(rate_limit=10, max_retries=1, retry_backoff=0)
