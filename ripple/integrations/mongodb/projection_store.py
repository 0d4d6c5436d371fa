"""MongoDB implementation of ProjectionStore."""

from collections.abc import Mapping
from typing import Any

from pymongo.errors import DuplicateKeyError

from ripple.domain import DuplicateKey, NotFound, ProjectionRecord
from ripple.projection import ProjectionStore, validate_fields

from .collection import IndexDirection, IndexedCollection, IndexSpec
from .config import MongoConfiguration


class MongoDBProjectionStore(ProjectionStore):
    """MongoDB implementation of the ProjectionStore interface.

    Each record is one document; the unique index on ``entity_id`` is what
    turns a second insert into DuplicateKey.

    Document structure:
        {
            "_id": ObjectId(),
            "entity_id": "01J...",
            "title": "Buy milk",
            "contact_address": "a@x.com"
        }

    Examples:
        >>> store = MongoDBProjectionStore(MongoConfiguration())
        >>> await store.initialize_schema()
        >>> await store.insert("T1", {"title": "Buy milk", "contact_address": None})
    """

    def __init__(self, config: MongoConfiguration):
        self._records = IndexedCollection(
            config.projection,
            indexes=[IndexSpec(keys=[("entity_id", IndexDirection.ASC)], unique=True)],
        )

    async def initialize_schema(self) -> None:
        """Create the unique index on entity_id."""
        await self._records.initialize_schema()

    async def insert(self, entity_id: str, fields: Mapping[str, Any]) -> None:
        values = validate_fields(fields)
        record = ProjectionRecord(entity_id=entity_id, **values)
        try:
            await self._records.insert_one(record.model_dump())
        except DuplicateKeyError:
            raise DuplicateKey(entity_id) from None

    async def update(self, entity_id: str, fields: Mapping[str, Any]) -> None:
        values = validate_fields(fields)
        if not values:
            # $set rejects an empty document; still report a missing record
            await self.get(entity_id)
            return
        result = await self._records.update_one({"entity_id": entity_id}, {"$set": values})
        if result.matched_count == 0:
            raise NotFound(entity_id)

    async def get(self, entity_id: str) -> ProjectionRecord:
        doc = await self._records.find_one({"entity_id": entity_id}, projection={"_id": 0})
        if doc is None:
            raise NotFound(entity_id)
        return ProjectionRecord.model_validate(doc)

    async def delete(self, entity_id: str) -> None:
        await self._records.delete_one({"entity_id": entity_id})
