"""Pytest configuration for test isolation.

Settings are read from ``MARKETPLACE_RECON_*`` environment variables (and the
CLI loads a ``.env`` from the working directory), and the CLI configures the
package logger once per process. Either can leak between tests, so every test
starts from a clean environment, runs in its own temporary working directory
and leaves logging unconfigured.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from marketplace_reconciliation.config import ENV_PREFIX
from marketplace_reconciliation.logging_setup import reset_logging

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Drop configured settings and run from a per-test working directory."""

    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir(parents=True, exist_ok=True)
    monkeypatch.chdir(workdir)
    yield
    reset_logging()


@pytest.fixture
def sample_csv_path() -> Path:
    return DATA_DIR / "payouts_sample.csv"


@pytest.fixture
def sample_csv_text(sample_csv_path: Path) -> str:
    return sample_csv_path.read_text(encoding="utf-8")
