"""Checkpoint backend for tracking the reactor's committed stream position."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from ..domain import utc_now


@dataclass
class Checkpoint:
    """Position in the event log up to which processing is durably complete.

    Attributes:
        processor_name: Name of the reactor owning the checkpoint
        position: Sequence number of the last committed event (0 before any)
        events_processed: Total number of events committed (for metrics/logging)
        updated_at: When the checkpoint was last advanced

    Example:
        >>> checkpoint = Checkpoint(
        ...     processor_name="todo_completed_notifier",
        ...     position=42,
        ...     events_processed=42,
        ... )
    """

    processor_name: str
    position: int = 0
    events_processed: int = 0
    updated_at: datetime = field(default_factory=utc_now)

    def advance(self, position: int) -> "Checkpoint":
        """Return the checkpoint moved past an event at ``position``."""
        if position <= self.position:
            raise ValueError(
                f"Checkpoint for {self.processor_name!r} cannot move from "
                f"{self.position} back to {position}"
            )
        return Checkpoint(
            processor_name=self.processor_name,
            position=position,
            events_processed=self.events_processed + 1,
        )


class CheckpointBackend(ABC):
    """Abstract interface for persisting reactor checkpoints.

    Saving a checkpoint is the reactor's single commit point: once
    save_checkpoint() returns, the event at that position is never
    processed again by a restarted reactor.

    Implementations should handle:
    - Atomic updates (checkpoint saves should be all-or-nothing)
    - Persistence (checkpoints survive process restarts)
    - Durability (save_checkpoint only returns once the write is durable)
    """

    async def initialize_schema(self) -> None:
        """Create storage structures needed by the backend. No-op by default."""
        return None

    @abstractmethod
    async def load_checkpoint(self, processor_name: str) -> Checkpoint | None:
        """Load the latest checkpoint for a reactor.

        Args:
            processor_name: Name of the reactor to load the checkpoint for

        Returns:
            The checkpoint if it exists, None if this is the first run
        """
        ...

    @abstractmethod
    async def save_checkpoint(self, checkpoint: Checkpoint) -> None:
        """Save a checkpoint for a reactor.

        This should atomically replace any existing checkpoint for the
        same reactor.

        Args:
            checkpoint: The checkpoint data to persist
        """
        ...


class InMemoryCheckpointBackend(CheckpointBackend):
    """In-memory checkpoint storage for testing.

    Stores checkpoints in a dictionary keyed by processor name.
    Not suitable for production use as checkpoints are lost on restart.
    Set ``failure`` to make save_checkpoint() raise.
    """

    def __init__(self, failure: Exception | None = None) -> None:
        self._checkpoints: dict[str, Checkpoint] = {}
        self.failure = failure

    async def load_checkpoint(self, processor_name: str) -> Checkpoint | None:
        return self._checkpoints.get(processor_name)

    async def save_checkpoint(self, checkpoint: Checkpoint) -> None:
        if self.failure is not None:
            raise self.failure
        self._checkpoints[checkpoint.processor_name] = checkpoint
