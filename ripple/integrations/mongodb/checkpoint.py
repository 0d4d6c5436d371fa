"""MongoDB implementation of CheckpointBackend for resumable reactors."""

from pymongo import WriteConcern

from ripple.processing import Checkpoint, CheckpointBackend

from .collection import IndexDirection, IndexedCollection, IndexSpec
from .config import MongoConfiguration


class MongoDBCheckpointBackend(CheckpointBackend):
    """MongoDB implementation of the CheckpointBackend interface.

    This implementation uses MongoDB to store checkpoints with:
    - Unique index on processor_name for fast lookup
    - Atomic replace_one with upsert for checkpoint updates
    - Journaled writes, so a saved checkpoint survives a server crash

    Document structure:
        {
            "_id": ObjectId(),
            "processor_name": "todo_completed_notifier",
            "position": 42,
            "events_processed": 42,
            "updated_at": ISODate(...)
        }

    Examples:
        >>> backend = MongoDBCheckpointBackend(MongoConfiguration())
        >>> await backend.initialize_schema()
        >>> checkpoint = await backend.load_checkpoint("todo_completed_notifier")
    """

    def __init__(self, config: MongoConfiguration):
        self._checkpoints = IndexedCollection(
            config.checkpoints.with_options(write_concern=WriteConcern(j=True)),
            indexes=[IndexSpec(keys=[("processor_name", IndexDirection.ASC)], unique=True)],
        )

    async def initialize_schema(self) -> None:
        """Create the unique index on processor_name."""
        await self._checkpoints.initialize_schema()

    async def load_checkpoint(self, processor_name: str) -> Checkpoint | None:
        doc = await self._checkpoints.find_one(
            {"processor_name": processor_name}, projection={"_id": 0}
        )
        if doc is None:
            return None

        return Checkpoint(
            processor_name=doc["processor_name"],
            position=doc["position"],
            events_processed=doc["events_processed"],
            updated_at=doc["updated_at"],
        )

    async def save_checkpoint(self, checkpoint: Checkpoint) -> None:
        doc = {
            "processor_name": checkpoint.processor_name,
            "position": checkpoint.position,
            "events_processed": checkpoint.events_processed,
            "updated_at": checkpoint.updated_at,
        }
        await self._checkpoints.replace_one(
            {"processor_name": checkpoint.processor_name}, doc, upsert=True
        )
