"""Shared fixtures for CLI command tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from shipctl.history import memory as memory_module
from shipctl.lib.logging_config import ROOT_LOGGER_NAME


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def cli_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Run commands in an empty directory with a known AWS region.

    Yields:
        The working directory used by the command.

    Cleanup:
        Drops the log handlers attached by the command.
    """
    monkeypatch.chdir(tmp_path)
    for name in ("AWS_REGION", "AWS_DEFAULT_REGION"):
        monkeypatch.delenv(name, raising=False)
    for name in (
        "SHIPCTL_BACKEND",
        "SHIPCTL_SLACK_WEBHOOK_URL",
        "SHIPCTL_POLL_INTERVAL",
        "SHIPCTL_TIMEOUT",
        "SHIPCTL_STATE_DIR",
        "SHIPCTL_SSM_PREFIX",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")

    yield tmp_path

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.handlers.clear()
    root.setLevel(logging.NOTSET)


@pytest.fixture
def memory_storage(monkeypatch: pytest.MonkeyPatch) -> dict:
    """Replace the process-wide MEMORY backend storage with an empty dict."""
    storage: dict = {}
    monkeypatch.setattr(memory_module, "_DEFAULT_STORAGE", storage)
    return storage
