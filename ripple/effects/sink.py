"""Event sinks for events produced by the reactor."""

from abc import ABC, abstractmethod

from ..domain import OutboundEvent


class EventSink(ABC):
    """Append-only destination for newly produced domain events.

    Each appended event is causally linked (via ``caused_by``) to the
    inbound event that produced it. Implementations must make the append
    durable before returning; raising signals that the append failed and
    the reactor must not treat the causing event as processed.
    """

    async def initialize_schema(self) -> None:
        """Create storage structures needed by the sink. No-op by default."""
        return None

    @abstractmethod
    async def append(self, event: OutboundEvent) -> None:
        """Durably append an event.

        Args:
            event: The event to append

        Raises:
            Exception: Any exception signals that the append failed
        """
        ...


class InMemoryEventSink(EventSink):
    """In-memory event sink for testing.

    Keeps every appended event in order, including duplicates, so tests can
    observe replays. Set ``failure`` to make append() raise.
    """

    def __init__(self, failure: Exception | None = None) -> None:
        self.events: list[OutboundEvent] = []
        self.failure = failure

    async def append(self, event: OutboundEvent) -> None:
        if self.failure is not None:
            raise self.failure
        self.events.append(event)

    def of_type(self, event_type: str) -> list[OutboundEvent]:
        return [event for event in self.events if event.type == event_type]
