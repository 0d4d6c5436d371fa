"""Upstream event log interfaces and implementations.

This module provides:
- EventLog: Abstract interface for reading events in stream order
- InMemoryEventLog: Simple in-memory implementation for testing
"""

from abc import ABC, abstractmethod
from typing import Any

from ..domain import InboundEvent


class EventLog(ABC):
    """Abstract interface for reading the upstream event stream.

    The log is owned by another system; the reactor only reads from it. The
    read position is tracked by the reactor's checkpoint, which makes the
    read resumable after a restart.

    Implementations must guarantee:
    - Events are returned in ascending sequence_number order
    - Events of one aggregate are never reordered
    - Delivery is at-least-once (the same event may be returned again)
    """

    @abstractmethod
    async def read(self, after: int, limit: int) -> list[InboundEvent]:
        """Read the next events after a stream position.

        Args:
            after: Sequence number of the last processed event (0 for the start)
            limit: Maximum number of events to return

        Returns:
            Up to ``limit`` events with sequence_number > after, in order.
            An empty list means there is nothing new to process.

        Raises:
            MalformedEvent: If the next event after ``after`` cannot be decoded.
                Events before an undecodable one are returned first, and the
                error is raised by the read that reaches it.
        """
        ...


class InMemoryEventLog(EventLog):
    """In-memory event log for testing.

    Stores all events in a single ordered list and assigns sequence numbers
    on append. ``redeliver`` lets tests simulate a log that hands back an
    already-delivered event.

    Examples:
        >>> log = InMemoryEventLog()
        >>> log.append("T1", "todo_added", {"title": "Buy milk"})
        >>> [e.sequence_number for e in await log.read(after=0, limit=10)]
        [1]
    """

    def __init__(self) -> None:
        self.events: list[InboundEvent] = []
        self._redeliveries: list[InboundEvent] = []

    def append(
        self,
        aggregate_id: str,
        event_type: str,
        body: dict[str, Any] | None = None,
    ) -> InboundEvent:
        """Record a new event at the end of the stream."""
        event = InboundEvent(
            aggregate_id=aggregate_id,
            type=event_type,
            body=body or {},
            sequence_number=len(self.events) + 1,
        )
        self.events.append(event)
        return event

    def redeliver(self, event: InboundEvent) -> None:
        """Return an already-delivered event once more, in sequence order, on the next read."""
        self._redeliveries.append(event)

    async def read(self, after: int, limit: int) -> list[InboundEvent]:
        redelivered, self._redeliveries = self._redeliveries, []
        fresh = [event for event in self.events if event.sequence_number > after]
        events = sorted(redelivered + fresh, key=lambda event: event.sequence_number)
        return events[:limit]
