"""MongoDB implementation of the upstream EventLog."""

from typing import Any

from ulid import ULID

from ripple.domain import EventIdentity, InboundEvent, MalformedEvent
from ripple.processing import EventLog

from .collection import IndexDirection, IndexedCollection, IndexSpec
from .config import MongoConfiguration


class MongoDBEventLog(EventLog):
    """Reads inbound events from a MongoDB collection in stream order.

    The collection is written by the system that owns the log; this class
    only reads it. Each document carries a stream-wide ``sequence_number``
    that the reactor checkpoints against.

    Document structure:
        {
            "_id": ObjectId(),
            "event_id": "01J...",
            "aggregate_id": "T1",
            "type": "todo_added",
            "body": {"title": "Buy milk", "stakeholder_email": "a@x.com"},
            "sequence_number": 1,
            "timestamp": ISODate(...)
        }
    """

    def __init__(self, config: MongoConfiguration):
        self._events = IndexedCollection(
            config.events,
            indexes=[IndexSpec(keys=[("sequence_number", IndexDirection.ASC)], unique=True)],
        )

    async def initialize_schema(self) -> None:
        await self._events.initialize_schema()

    async def read(self, after: int, limit: int) -> list[InboundEvent]:
        events: list[InboundEvent] = []
        async for doc in self._events.find(
            {"sequence_number": {"$gt": after}},
            sort=[("sequence_number", IndexDirection.ASC)],
            limit=limit,
        ):
            try:
                events.append(self._to_event(doc))
            except MalformedEvent:
                if events:
                    break
                raise
        return events

    async def append(self, event: InboundEvent) -> None:
        """Write an event to the log. Used when seeding the log, never by the reactor."""
        await self._events.insert_one(
            {
                "event_id": str(event.id),
                "aggregate_id": event.aggregate_id,
                "type": event.type,
                "body": event.body,
                "sequence_number": event.sequence_number,
                "timestamp": event.timestamp,
            }
        )

    @staticmethod
    def _to_event(doc: dict[str, Any]) -> InboundEvent:
        """Decode a stored document.

        Raises:
            MalformedEvent: If a required field is missing or has an invalid value
        """
        try:
            fields: dict[str, Any] = {
                "aggregate_id": doc["aggregate_id"],
                "type": doc["type"],
                "body": doc.get("body") or {},
                "sequence_number": doc["sequence_number"],
            }
            if doc.get("event_id"):
                fields["id"] = ULID.from_str(doc["event_id"])
            if doc.get("timestamp"):
                fields["timestamp"] = doc["timestamp"]
            return InboundEvent(**fields)
        except (KeyError, TypeError, ValueError) as err:
            identity = EventIdentity(str(doc.get("aggregate_id", "")), doc["sequence_number"])
            raise MalformedEvent(identity, f"undecodable document: {err}") from err
