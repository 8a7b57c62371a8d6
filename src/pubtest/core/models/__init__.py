"""Pydantic models for configuration, wait outcomes and failures."""
from pubtest.core.models.config import PubtestConfig
from pubtest.core.models.failure import Failure, SourceLocation
from pubtest.core.models.outcome import OutcomeKind, WaiterState, WaitOutcome

__all__ = [
    "PubtestConfig",
    "Failure",
    "SourceLocation",
    "OutcomeKind",
    "WaiterState",
    "WaitOutcome",
]
