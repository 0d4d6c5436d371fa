from datetime import datetime, timezone
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID


def utc_now() -> datetime:
    """Get the current UTC timestamp.

    Returns:
        Current datetime with UTC timezone information
    """
    return datetime.now(tz=timezone.utc)


class EventIdentity(NamedTuple):
    """Position of an inbound event: the aggregate and its stream sequence number."""

    aggregate_id: str
    sequence_number: int

    def __str__(self) -> str:
        return f"{self.aggregate_id}@{self.sequence_number}"


class InboundEvent(BaseModel):
    """Immutable domain event read from the upstream event log.

    Inbound events are facts owned by another system. The reactor never
    modifies them; it only folds them into its projection and reacts to
    them. The log may deliver the same event more than once, so everything
    that consumes an InboundEvent must tolerate replays.

    Attributes:
        id: Unique identifier assigned when the event was recorded
        aggregate_id: ID of the entity the event belongs to
        type: Type tag used for dispatching (e.g. "todo_added")
        body: Event payload as a plain mapping of field to value
        sequence_number: Position in the stream (1-indexed, monotonically increasing)
        timestamp: When the event was recorded (UTC timezone)

    Examples:
        >>> event = InboundEvent(
        ...     aggregate_id="T1",
        ...     type="todo_added",
        ...     body={"title": "Buy milk", "stakeholder_email": "a@x.com"},
        ...     sequence_number=1,
        ... )
        >>> event.identity
        EventIdentity(aggregate_id='T1', sequence_number=1)
    """

    model_config = ConfigDict(frozen=True)

    id: ULID = Field(
        default_factory=ULID,
        description="Unique identifier for this event instance",
    )
    aggregate_id: str = Field(min_length=1, description="ID of the entity the event belongs to")
    type: str = Field(min_length=1, description="Type tag used to route the event")
    body: dict[str, Any] = Field(default_factory=dict, description="Event payload")
    sequence_number: int = Field(
        ge=1,
        description="Position in the stream (1-indexed, monotonically increasing)",
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event was recorded (UTC timezone)",
    )

    @property
    def identity(self) -> EventIdentity:
        return EventIdentity(self.aggregate_id, self.sequence_number)


class OutboundEvent(BaseModel):
    """Domain event produced by the reactor as a reaction to an inbound event.

    Every outbound event carries the identity of the inbound event that
    caused it, so downstream consumers can discard duplicates produced when
    the causing event is redelivered after a crash.

    Attributes:
        id: Unique identifier for this event instance
        aggregate_id: ID of the entity the event is about
        type: Type tag (e.g. "stakeholder-notified")
        body: Event payload
        caused_by: Identity of the inbound event that produced this one
        timestamp: When the event was produced (UTC timezone)
    """

    model_config = ConfigDict(frozen=True)

    id: ULID = Field(default_factory=ULID)
    aggregate_id: str
    type: str
    body: dict[str, Any] = Field(default_factory=dict)
    caused_by: EventIdentity
    timestamp: datetime = Field(default_factory=utc_now)
