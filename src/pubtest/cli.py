"""``pubtest-compare``: structurally compare two JSON documents.

Usage:
    pubtest-compare actual.json expected.json

Exit code: 0 when the documents match, 1 on any mismatch, 2 on bad input.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

from pubtest.config import load_config
from pubtest.core.comparator import StructuralComparator
from pubtest.log_config import setup_logging

_RED = "\033[91m"
_GREEN = "\033[92m"
_RESET = "\033[0m"


def _load(path: Path) -> object:
    return json.loads(path.read_text(encoding="utf-8"))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="pubtest-compare", description=__doc__.splitlines()[0])
    parser.add_argument("actual", type=Path)
    parser.add_argument("expected", type=Path)
    parser.add_argument("--config", type=Path, default=None, help="pubtest JSON config file")
    parser.add_argument("--no-color", action="store_true")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as exc:
        # pydantic.ValidationError and json.JSONDecodeError are ValueErrors.
        print(f"error: invalid config: {exc}", file=sys.stderr)
        return 2
    setup_logging(config.log_level, config.log_dir)

    try:
        actual = _load(args.actual)
        expected = _load(args.expected)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    red, green, reset = ("", "", "") if args.no_color else (_RED, _GREEN, _RESET)
    mismatches = StructuralComparator().compare(actual, expected)
    for error in mismatches:
        path = getattr(error, "path", "")
        prefix = f"{path}: " if path else ""
        print(f"{red}[FAIL]{reset} {prefix}{error}")
    if mismatches:
        print(f"{len(mismatches)} mismatch(es)")
        return 1
    print(f"{green}[OK]{reset} documents match")
    return 0


if __name__ == "__main__":
    sys.exit(main())
