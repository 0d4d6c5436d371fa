"""MongoDB collection wrapper with explicit index management.

This module provides an IndexedCollection class that wraps a MongoDB
AsyncCollection, declares the indexes the collection needs, and exposes
the handful of single-document operations the reactor backends use.
Indexes are created only by initialize_schema(), which is run once at
startup; runtime operations never touch the schema.
"""

from collections.abc import AsyncIterator
from enum import IntEnum
from typing import Any

from pydantic import BaseModel
from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.collection import AsyncCollection


class IndexDirection(IntEnum):
    """Sort direction for MongoDB index fields."""

    ASC = ASCENDING
    """Ascending order (1)."""

    DESC = DESCENDING
    """Descending order (-1)."""


class IndexSpec(BaseModel):
    """Specification for a MongoDB index.

    Example:
        >>> # Unique key
        >>> IndexSpec(keys=[("entity_id", IndexDirection.ASC)], unique=True)
        >>>
        >>> # Compound unique index
        >>> IndexSpec(
        ...     keys=[
        ...         ("caused_by.aggregate_id", IndexDirection.ASC),
        ...         ("caused_by.sequence_number", IndexDirection.ASC),
        ...     ],
        ...     unique=True,
        ... )
    """

    keys: list[tuple[str, IndexDirection]]
    """(field_name, direction) tuples."""

    unique: bool = False
    """If True, enforce uniqueness."""

    async def apply(self, collection: AsyncCollection[dict[str, Any]]) -> None:
        """Apply this index specification to a collection."""
        kwargs: dict[str, Any] = {}
        if self.unique:
            kwargs["unique"] = True
        await collection.create_index(self.keys, **kwargs)


class UpdateResult(BaseModel):
    """Result of an update operation."""

    matched_count: int
    """Number of documents matching the filter."""

    modified_count: int
    """Number of documents modified."""


class IndexedCollection:
    """A MongoDB collection wrapper that knows its own indexes.

    Example:
        >>> collection = IndexedCollection(
        ...     config.projection,
        ...     indexes=[IndexSpec(keys=[("entity_id", IndexDirection.ASC)], unique=True)],
        ... )
        >>> await collection.initialize_schema()
        >>> await collection.insert_one({"entity_id": "T1", "title": "Buy milk"})
    """

    def __init__(
        self,
        collection: AsyncCollection[dict[str, Any]],
        indexes: list[IndexSpec] | None = None,
    ) -> None:
        self._collection = collection
        self._indexes = indexes or []

    async def initialize_schema(self) -> None:
        """Create the declared indexes. Safe to run repeatedly."""
        for spec in self._indexes:
            await spec.apply(self._collection)

    async def find_one(
        self,
        filter: dict[str, Any],
        projection: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Find a single document matching the filter."""
        result: dict[str, Any] | None = await self._collection.find_one(
            filter, projection=projection
        )
        return result

    async def find(
        self,
        filter: dict[str, Any],
        sort: list[tuple[str, int]] | None = None,
        limit: int | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Find documents matching the filter.

        Args:
            filter: MongoDB query filter.
            sort: Optional list of (field, direction) tuples.
            limit: Optional maximum number of documents to return.

        Yields:
            Matching documents.
        """
        cursor = self._collection.find(filter)

        if sort:
            cursor = cursor.sort(sort)
        if limit:
            cursor = cursor.limit(limit)

        async for doc in cursor:
            yield doc

    async def insert_one(self, document: dict[str, Any]) -> None:
        await self._collection.insert_one(document)

    async def update_one(
        self,
        filter: dict[str, Any],
        update: dict[str, Any],
    ) -> UpdateResult:
        """Update a single document.

        Args:
            filter: MongoDB query filter.
            update: Update operations (e.g., {"$set": {...}}).

        Returns:
            UpdateResult with matched_count and modified_count.
        """
        result = await self._collection.update_one(filter, update)
        return UpdateResult(
            matched_count=result.matched_count,
            modified_count=result.modified_count,
        )

    async def replace_one(
        self,
        filter: dict[str, Any],
        replacement: dict[str, Any],
        upsert: bool = False,
    ) -> None:
        await self._collection.replace_one(filter, replacement, upsert=upsert)

    async def delete_one(self, filter: dict[str, Any]) -> None:
        await self._collection.delete_one(filter)
