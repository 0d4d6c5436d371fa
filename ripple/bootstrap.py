"""Assembly of reactors for a hosting process.

The hosting process owns startup: it runs initialize_schema() once, then
builds and runs the loop. Nothing here runs while events are processed.

Example:
    >>> config = MongoConfiguration()
    >>> loop, components = build_mongodb_reactor(config, LoggingNotificationPort())
    >>> await initialize_schema(*components)
    >>> await loop.run()
"""

import logging
from typing import Any, Protocol, runtime_checkable

from .effects import Clock, EventSink, NotificationPort
from .processing import CheckpointBackend, EventLog, ReactorLoop, ReactorSettings
from .projection import ProjectionStore
from .reactors import TodoCompletedNotifier

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class HasSchema(Protocol):
    """Component that needs storage structures created before first use."""

    async def initialize_schema(self) -> None: ...


async def initialize_schema(*components: Any) -> None:
    """Run the schema step of every component that has one.

    Components without an ``initialize_schema`` method are skipped, so the
    full list of collaborators can be passed without filtering.
    """
    for component in components:
        if isinstance(component, HasSchema):
            await component.initialize_schema()
            LOGGER.info("Schema initialized", extra={"component": type(component).__name__})


def build_reactor(
    store: ProjectionStore,
    notifications: NotificationPort,
    sink: EventSink,
    log: EventLog,
    checkpoints: CheckpointBackend,
    settings: ReactorSettings | None = None,
    clock: Clock | None = None,
) -> ReactorLoop:
    """Wire the todo completion notifier to a reactor loop."""
    notifier = TodoCompletedNotifier(store, notifications, sink, clock)
    return ReactorLoop(
        log=log,
        dispatcher=notifier.build_dispatcher(),
        checkpoints=checkpoints,
        settings=settings,
    )


def build_mongodb_reactor(
    config: Any,
    notifications: NotificationPort,
    settings: ReactorSettings | None = None,
    clock: Clock | None = None,
) -> tuple[ReactorLoop, list[Any]]:
    """Build a reactor backed by MongoDB collections.

    Args:
        config: A MongoConfiguration
        notifications: Port used to notify stakeholders
        settings: Loop settings, read from the environment when omitted
        clock: Clock for outbound event timestamps

    Returns:
        The loop, and the MongoDB components whose schema must be initialized
    """
    from .integrations.mongodb import (
        MongoDBCheckpointBackend,
        MongoDBEventLog,
        MongoDBEventSink,
        MongoDBProjectionStore,
    )

    store = MongoDBProjectionStore(config)
    sink = MongoDBEventSink(config)
    log = MongoDBEventLog(config)
    checkpoints = MongoDBCheckpointBackend(config)
    loop = build_reactor(store, notifications, sink, log, checkpoints, settings, clock)
    return loop, [store, sink, log, checkpoints]
