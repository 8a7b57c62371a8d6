"""Shared pytest fixtures for pubtest tests."""

from __future__ import annotations

import logging

import pytest

from pubtest.config import reset_config
from pubtest.core.reporting import RecordingReporter


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    """Each test starts from built-in defaults, untouched by the shell env."""
    for key in (
        "PUBTEST_CONFIG_FILE",
        "PUBTEST_DEFAULT_TIMEOUT",
        "PUBTEST_REQUIRE_VALUE",
        "PUBTEST_RESOURCE_DIR",
        "PUBTEST_LOG_LEVEL",
        "PUBTEST_LOG_DIR",
    ):
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def recorder() -> RecordingReporter:
    """Fresh reporter that just records failures."""
    return RecordingReporter()


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """Undo any ``setup_logging`` call made during the test."""
    logger = logging.getLogger("pubtest")
    level, handlers = logger.level, logger.handlers[:]
    yield logger
    for handler in logger.handlers[:]:
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.setLevel(level)
