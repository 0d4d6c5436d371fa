"""MongoDB integration for the ripple event reactor.

This module provides MongoDB implementations of the EventLog,
ProjectionStore, CheckpointBackend and EventSink interfaces using the
async PyMongo driver.

Installation:
    pip install ripple[mongodb]

Usage:
    >>> from ripple.integrations.mongodb import (
    ...     MongoConfiguration,
    ...     MongoDBCheckpointBackend,
    ...     MongoDBEventLog,
    ...     MongoDBEventSink,
    ...     MongoDBProjectionStore,
    ... )
    >>>
    >>> config = MongoConfiguration(uri="mongodb://localhost:27017", database="todos")
    >>> store = MongoDBProjectionStore(config)
    >>> await store.initialize_schema()
"""

from .checkpoint import MongoDBCheckpointBackend
from .collection import IndexDirection, IndexedCollection, IndexSpec
from .config import MongoConfiguration
from .event_log import MongoDBEventLog
from .event_sink import MongoDBEventSink
from .projection_store import MongoDBProjectionStore

__all__ = [
    "MongoConfiguration",
    "IndexedCollection",
    "IndexSpec",
    "IndexDirection",
    "MongoDBEventLog",
    "MongoDBProjectionStore",
    "MongoDBCheckpointBackend",
    "MongoDBEventSink",
]
