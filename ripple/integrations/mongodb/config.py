"""MongoDB configuration using pydantic-settings."""

from functools import cached_property
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.asynchronous.mongo_client import AsyncMongoClient


class MongoConfiguration(BaseSettings):
    """Configuration and factory for MongoDB resources.

    All settings can be configured via environment variables with the
    RIPPLE_MONGO_ prefix. For example:
    - RIPPLE_MONGO_URI=mongodb://localhost:27017
    - RIPPLE_MONGO_DATABASE=todos
    - RIPPLE_MONGO_EVENTS_COLLECTION=domain_events

    The configuration also acts as a factory, providing lazy-initialized
    properties for the MongoDB client, database, and collections.

    Attributes:
        uri: MongoDB connection URI.
        database: Database name to use.
        events_collection: Collection holding the upstream event log.
        projection_collection: Collection holding the reactor's projection.
        checkpoints_collection: Collection holding reactor checkpoints.
        outbound_events_collection: Collection receiving events the reactor emits.
        server_selection_timeout_ms: How long to wait for a server before failing.

    Example:
        >>> config = MongoConfiguration(database="todos")
        >>> projection = config.projection
        >>> await config.on_shutdown()
    """

    model_config = SettingsConfigDict(env_prefix="RIPPLE_MONGO_")

    # Connection settings
    uri: str = "mongodb://localhost:27017"
    database: str = "ripple"
    server_selection_timeout_ms: int = 30000

    # Collection names
    events_collection: str = "events"
    projection_collection: str = "reactor_todo_completed_notifier"
    checkpoints_collection: str = "checkpoints"
    outbound_events_collection: str = "outbound_events"

    @cached_property
    def client(self) -> AsyncMongoClient[dict[str, Any]]:
        """Get the MongoDB async client.

        The client is lazily created and cached for reuse.
        """
        return AsyncMongoClient(
            self.uri, serverSelectionTimeoutMS=self.server_selection_timeout_ms
        )

    @cached_property
    def db(self) -> AsyncDatabase[dict[str, Any]]:
        return self.client[self.database]

    @cached_property
    def events(self) -> AsyncCollection[dict[str, Any]]:
        return self.db[self.events_collection]

    @cached_property
    def projection(self) -> AsyncCollection[dict[str, Any]]:
        return self.db[self.projection_collection]

    @cached_property
    def checkpoints(self) -> AsyncCollection[dict[str, Any]]:
        return self.db[self.checkpoints_collection]

    @cached_property
    def outbound_events(self) -> AsyncCollection[dict[str, Any]]:
        return self.db[self.outbound_events_collection]

    async def on_shutdown(self) -> None:
        """Close the MongoDB client if it was created."""
        if "client" in self.__dict__:
            await self.client.close()
