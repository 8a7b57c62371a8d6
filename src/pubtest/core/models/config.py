"""Configuration Pydantic model: PubtestConfig."""

from __future__ import annotations

import threading

from pydantic import BaseModel, ConfigDict, Field


class PubtestConfig(BaseModel):
    """Runtime settings for the waiter, comparator and resource helpers."""

    model_config = ConfigDict(extra="forbid")

    default_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=threading.TIMEOUT_MAX,
        allow_inf_nan=False,
        description="Wait deadline when a call doesn't pass one",
    )
    require_value: bool = Field(
        default=False,
        description="Report a failure when a producer finishes without emitting",
    )
    resource_dir_name: str = Field(
        default="Resources",
        min_length=1,
        description="Sibling directory returned by get_test_resource_directory()",
    )
    log_level: str = Field(default="WARNING", description="Level for the pubtest logger")
    log_dir: str | None = Field(
        default=None, description="Directory for rotating log files (None = console only)"
    )
