"""Failure records and the source locations they point at."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class SourceLocation(BaseModel):
    """File and line of the assertion call site."""

    model_config = ConfigDict(frozen=True)

    file: str
    line: int = Field(ge=0)

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"


class Failure(BaseModel):
    """One failure handed to a :class:`~pubtest.core.reporting.FailureReporter`."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    error: AssertionError
    location: SourceLocation | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def message(self) -> str:
        return str(self.error)

    def __str__(self) -> str:
        if self.location is None:
            return self.message
        return f"{self.location}: {self.message}"
