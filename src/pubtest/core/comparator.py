"""Recursive structural comparison of nested key/value data.

Values are classified into a closed set of :class:`NodeKind` tags and each
key is compared by the *pair* of tags found on the two sides.  Every
divergence is reported; siblings are independent failure sites, so the
comparison never stops at the first problem.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from pubtest.core.errors import (
    AssertionCountMismatch,
    AssertionFieldMismatch,
    AssertionKeySetMismatch,
    AssertionSequenceMismatch,
    AssertionUnsupportedPair,
)
from pubtest.core.models.failure import SourceLocation
from pubtest.core.reporting import FailureReporter

_log = logging.getLogger(__name__)


class NodeKind(str, Enum):
    """Kinds of value the comparator understands."""

    MAPPING = "mapping"
    TEXT = "text"
    INTEGER = "integer"
    UNSUPPORTED = "unsupported"


def classify(value: Any) -> NodeKind:
    """Tag *value*.  ``bool`` is not an integer here."""
    if isinstance(value, Mapping) and all(isinstance(k, str) for k in value):
        return NodeKind.MAPPING
    if isinstance(value, str):
        return NodeKind.TEXT
    if isinstance(value, int) and not isinstance(value, bool):
        return NodeKind.INTEGER
    return NodeKind.UNSUPPORTED


class StructuralComparator:
    """Compares two nested mappings and reports every mismatch.

    Args:
        reporter: Receives each mismatch as it is found (optional).
        location: Call site attached to reported mismatches.
    """

    def __init__(
        self,
        reporter: FailureReporter | None = None,
        location: SourceLocation | None = None,
    ) -> None:
        self._reporter = reporter
        self._location = location

    def compare(self, actual: Any, expected: Any) -> list[AssertionError]:
        """Compare *actual* against *expected*; return all mismatches found."""
        mismatches: list[AssertionError] = []
        if classify(actual) is NodeKind.MAPPING and classify(expected) is NodeKind.MAPPING:
            self._compare_mappings(actual, expected, "", mismatches)
        else:
            self._mismatch(AssertionUnsupportedPair("", actual, expected), mismatches)
        _log.debug("Structural comparison found %d mismatch(es)", len(mismatches))
        return mismatches

    def _compare_mappings(
        self,
        actual: Mapping[str, Any],
        expected: Mapping[str, Any],
        path: str,
        out: list[AssertionError],
    ) -> None:
        missing = expected.keys() - actual.keys()
        extra = actual.keys() - expected.keys()
        if missing or extra:
            self._mismatch(AssertionKeySetMismatch(missing, extra, path), out)
            return

        for field, actual_value in actual.items():
            expected_value = expected[field]
            field_path = f"{path}.{field}" if path else field
            match classify(actual_value), classify(expected_value):
                case NodeKind.MAPPING, NodeKind.MAPPING:
                    self._compare_mappings(actual_value, expected_value, field_path, out)
                case (NodeKind.TEXT, NodeKind.TEXT) | (NodeKind.INTEGER, NodeKind.INTEGER):
                    if actual_value != expected_value:
                        self._mismatch(
                            AssertionFieldMismatch(field, actual_value, expected_value, field_path),
                            out,
                        )
                case _:
                    self._mismatch(
                        AssertionUnsupportedPair(field, actual_value, expected_value, field_path),
                        out,
                    )

    def _mismatch(self, error: AssertionError, out: list[AssertionError]) -> None:
        out.append(error)
        if self._reporter is not None:
            self._reporter.report_failure(error, self._location)


def compare_sequences(first: Sequence[Any], second: Sequence[Any]) -> AssertionError | None:
    """Return the single divergence between two sequences, or *None*.

    A length difference wins over element differences.
    """
    if len(first) != len(second):
        return AssertionCountMismatch(len(first), len(second))
    for index, (a, b) in enumerate(zip(first, second)):
        if a != b:
            return AssertionSequenceMismatch(index, a, b)
    return None
