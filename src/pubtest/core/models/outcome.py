"""Wait outcome model and waiter lifecycle enumerations."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OutcomeKind(str, Enum):
    """How a single wait on a producer ended."""

    COMPLETED = "completed"
    COMPLETED_NO_VALUE = "completed_no_value"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class WaiterState(str, Enum):
    """Lifecycle of one :class:`~pubtest.core.waiter.AsyncResultWaiter`."""

    IDLE = "idle"
    SUBSCRIBED = "subscribed"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    RELEASED = "released"


class WaitOutcome(BaseModel):
    """Classified result of a wait.

    ``value`` is only meaningful for :attr:`OutcomeKind.COMPLETED` and
    ``error`` only for :attr:`OutcomeKind.FAILED`.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: OutcomeKind
    value: Any = Field(default=None)
    error: BaseException | None = Field(default=None)

    @classmethod
    def completed(cls, value: Any) -> WaitOutcome:
        return cls(kind=OutcomeKind.COMPLETED, value=value)

    @classmethod
    def completed_no_value(cls) -> WaitOutcome:
        return cls(kind=OutcomeKind.COMPLETED_NO_VALUE)

    @classmethod
    def failed(cls, error: BaseException) -> WaitOutcome:
        return cls(kind=OutcomeKind.FAILED, error=error)

    @classmethod
    def timed_out(cls) -> WaitOutcome:
        return cls(kind=OutcomeKind.TIMED_OUT)

    @property
    def has_value(self) -> bool:
        return self.kind is OutcomeKind.COMPLETED
