"""Logging setup for the ``pubtest`` logger, plus a contextual logger.

Only the package logger is configured; the root logger is left to the host
test runner so its own capture (e.g. pytest's ``caplog``) keeps working.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Any


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------
_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PACKAGE_LOGGER = "pubtest"


# ---------------------------------------------------------------------------
# setup_logging
# ---------------------------------------------------------------------------
def setup_logging(
    log_level: str = "WARNING",
    log_dir: str | None = None,
    max_bytes: int = 1024 * 1024,  # 1 MB
    backup_count: int = 3,
) -> logging.Logger:
    """Attach console (and optionally rotating-file) handlers to ``pubtest``.

    Safe to call multiple times: handlers installed by an earlier call are
    removed first.

    Args:
        log_level: One of DEBUG / INFO / WARNING / ERROR / CRITICAL.
        log_dir: Directory for ``pubtest.log``; no file handler when *None*.
        max_bytes: Max size per log file before rotation.
        backup_count: Number of rotated backup files to keep.

    Returns:
        The configured package logger.
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, "pubtest.log"),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


# ---------------------------------------------------------------------------
# ContextualLogger
# ---------------------------------------------------------------------------
class ContextualLogger:
    """Thin wrapper that prepends ``[key=value …]`` context to every message.

    Usage::

        log = ContextualLogger(logging.getLogger(__name__), op="wait_for_value", timeout=0.5)
        log.debug("Subscribed")  # => "[op=wait_for_value] [timeout=0.5] Subscribed"
    """

    def __init__(self, logger: logging.Logger, **context: Any) -> None:
        self._logger = logger
        self._prefix = " ".join(f"[{k}={v}]" for k, v in context.items())

    def _fmt(self, msg: str) -> str:
        return f"{self._prefix} {msg}" if self._prefix else msg

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(self._fmt(msg), *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(self._fmt(msg), *args, **kwargs)
