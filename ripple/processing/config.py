"""Reactor configuration using pydantic-settings."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ErrorPolicy = Literal["skip", "halt"]


class ReactorSettings(BaseSettings):
    """Runtime configuration for a ReactorLoop.

    All settings can be configured via environment variables with the
    RIPPLE_ prefix. For example:
    - RIPPLE_BATCH_SIZE=500
    - RIPPLE_ERROR_POLICY=halt

    Attributes:
        processor_name: Name under which the checkpoint is stored.
        batch_size: Maximum number of events read from the log per poll.
        poll_interval_seconds: Sleep between polls when the log has nothing new.
        error_policy: What the loop does when an event fails.
            "skip" logs malformed events and moves past them, and leaves
            other failures to be redelivered on the next poll.
            "halt" raises ReactorHalted on any failure.
        log_level: Level used for per-event processing messages.

    Example:
        >>> settings = ReactorSettings(error_policy="halt", batch_size=10)
    """

    model_config = SettingsConfigDict(env_prefix="RIPPLE_")

    processor_name: str = "todo_completed_notifier"
    batch_size: int = Field(default=100, gt=0)
    poll_interval_seconds: float = Field(default=1.0, ge=0)
    error_policy: ErrorPolicy = "skip"
    log_level: str = "DEBUG"
