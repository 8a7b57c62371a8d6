"""Locate a test suite's resource directory from a test source file."""

from __future__ import annotations

from pathlib import Path

from pubtest.config import get_config
from pubtest.core.reporting import caller_location


def get_test_resource_directory(file: str | Path | None = None) -> Path:
    """Return ``<dir of file>/../<resource_dir_name>``.

    With ``tests/unit/test_x.py`` this is ``tests/Resources`` under the
    default config.  When *file* is omitted the calling module's file is
    used.
    """
    if file is None:
        location = caller_location()
        if location is None:
            raise RuntimeError("Cannot determine the calling source file")
        file = location.file
    return Path(file).resolve().parent.parent / get_config().resource_dir_name
