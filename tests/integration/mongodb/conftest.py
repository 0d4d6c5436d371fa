"""Pytest fixtures for MongoDB integration tests."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from ripple.integrations.mongodb import MongoConfiguration

# Assumes a MongoDB container is running locally on port 27017
LOCAL_MONGO_URI = "mongodb://localhost:27017"


@pytest_asyncio.fixture
async def mongo_config(request: pytest.FixtureRequest) -> AsyncIterator[MongoConfiguration]:
    """Create a MongoConfiguration on a fresh database, dropped before each test."""
    db_name = f"test_{request.node.name}"[:63]
    config = MongoConfiguration(
        uri=LOCAL_MONGO_URI,
        database=db_name,
        server_selection_timeout_ms=2000,
    )
    await config.client.drop_database(config.database)
    try:
        yield config
    finally:
        await config.on_shutdown()
