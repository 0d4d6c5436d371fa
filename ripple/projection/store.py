"""Projection storage for per-entity derived state."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from ..domain import PROJECTION_FIELDS, DuplicateKey, NotFound, ProjectionRecord


def validate_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Check that only projection columns are being written.

    Args:
        fields: Column values keyed by column name

    Returns:
        A copy of the fields as a plain dict

    Raises:
        ValueError: If a field is not a projection column
    """
    unknown = set(fields) - PROJECTION_FIELDS
    if unknown:
        raise ValueError(f"Unknown projection fields: {sorted(unknown)}")
    return dict(fields)


class ProjectionStore(ABC):
    """Keyed table holding the reactor's derived state.

    Every operation addresses exactly one record by its entity id. The
    store is a disposable read-model: it can always be rebuilt by replaying
    the event log from the beginning.

    Contract:
    - insert() fails with DuplicateKey if the key is present
    - update() fails with NotFound if the key is absent, and only touches
      the supplied fields
    - get() fails with NotFound if the key is absent
    - delete() is idempotent; deleting an absent key is a no-op

    Implementations:
    - InMemoryProjectionStore: dict-backed, for tests and single-process use
    - MongoDBProjectionStore: collection with a unique index on entity_id
    """

    async def initialize_schema(self) -> None:
        """Create tables, indexes and constraints needed by the store.

        Called once at process startup, never while reacting to events.
        """
        return None

    @abstractmethod
    async def insert(self, entity_id: str, fields: Mapping[str, Any]) -> None:
        """Create a record.

        Args:
            entity_id: Key of the new record
            fields: Initial column values

        Raises:
            DuplicateKey: If a record with this key already exists
            ValueError: If fields contains an unknown column
        """
        ...

    @abstractmethod
    async def update(self, entity_id: str, fields: Mapping[str, Any]) -> None:
        """Merge the supplied fields into an existing record.

        Args:
            entity_id: Key of the record to update
            fields: Column values to overwrite; other columns are left untouched

        Raises:
            NotFound: If no record with this key exists
            ValueError: If fields contains an unknown column
        """
        ...

    @abstractmethod
    async def get(self, entity_id: str) -> ProjectionRecord:
        """Look up a record.

        Raises:
            NotFound: If no record with this key exists
        """
        ...

    @abstractmethod
    async def delete(self, entity_id: str) -> None:
        """Remove a record if it exists."""
        ...


class InMemoryProjectionStore(ProjectionStore):
    """In-memory projection store for testing.

    Stores records in a dictionary keyed by entity id.
    Not suitable for production use as records are lost on restart.
    """

    def __init__(self) -> None:
        self.records: dict[str, ProjectionRecord] = {}

    async def insert(self, entity_id: str, fields: Mapping[str, Any]) -> None:
        values = validate_fields(fields)
        if entity_id in self.records:
            raise DuplicateKey(entity_id)
        self.records[entity_id] = ProjectionRecord(entity_id=entity_id, **values)

    async def update(self, entity_id: str, fields: Mapping[str, Any]) -> None:
        values = validate_fields(fields)
        try:
            record = self.records[entity_id]
        except KeyError:
            raise NotFound(entity_id) from None
        self.records[entity_id] = record.model_copy(update=values)

    async def get(self, entity_id: str) -> ProjectionRecord:
        try:
            return self.records[entity_id]
        except KeyError:
            raise NotFound(entity_id) from None

    async def delete(self, entity_id: str) -> None:
        self.records.pop(entity_id, None)
