"""MongoDB implementation of EventSink."""

import logging

from pymongo.errors import DuplicateKeyError

from ripple.domain import OutboundEvent
from ripple.effects import EventSink

from .collection import IndexDirection, IndexedCollection, IndexSpec
from .config import MongoConfiguration

LOGGER = logging.getLogger(__name__)


class MongoDBEventSink(EventSink):
    """Appends outbound events to a MongoDB collection.

    A unique index on (caused_by, type) means an event re-emitted while
    replaying its cause is stored only once. The duplicate append is
    reported as success, since the event it would have written is already
    durable.

    Document structure:
        {
            "_id": ObjectId(),
            "event_id": "01J...",
            "aggregate_id": "T1",
            "type": "stakeholder-notified",
            "body": {"notified_at": ISODate(...)},
            "caused_by": {"aggregate_id": "T1", "sequence_number": 3},
            "timestamp": ISODate(...)
        }
    """

    def __init__(self, config: MongoConfiguration):
        self._events = IndexedCollection(
            config.outbound_events,
            indexes=[
                IndexSpec(
                    keys=[
                        ("caused_by.aggregate_id", IndexDirection.ASC),
                        ("caused_by.sequence_number", IndexDirection.ASC),
                        ("type", IndexDirection.ASC),
                    ],
                    unique=True,
                ),
                IndexSpec(keys=[("aggregate_id", IndexDirection.ASC)]),
            ],
        )

    async def initialize_schema(self) -> None:
        await self._events.initialize_schema()

    async def append(self, event: OutboundEvent) -> None:
        doc = {
            "event_id": str(event.id),
            "aggregate_id": event.aggregate_id,
            "type": event.type,
            "body": event.body,
            "caused_by": event.caused_by._asdict(),
            "timestamp": event.timestamp,
        }
        try:
            await self._events.insert_one(doc)
        except DuplicateKeyError:
            LOGGER.warning(
                "Outbound event already appended for its cause",
                extra={"event_type": event.type, "caused_by": str(event.caused_by)},
            )
