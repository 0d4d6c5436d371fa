"""Central test fixtures for the reactor and its in-memory collaborators."""

from datetime import datetime, timezone

import pytest

from ripple.effects import FixedClock, InMemoryEventSink, InMemoryNotificationPort
from ripple.processing import (
    InMemoryCheckpointBackend,
    InMemoryEventLog,
    ReactorLoop,
    ReactorSettings,
)
from ripple.projection import InMemoryProjectionStore
from ripple.reactors import TodoCompletedNotifier

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def store() -> InMemoryProjectionStore:
    return InMemoryProjectionStore()


@pytest.fixture
def notifications() -> InMemoryNotificationPort:
    return InMemoryNotificationPort()


@pytest.fixture
def sink() -> InMemoryEventSink:
    return InMemoryEventSink()


@pytest.fixture
def event_log() -> InMemoryEventLog:
    return InMemoryEventLog()


@pytest.fixture
def checkpoints() -> InMemoryCheckpointBackend:
    return InMemoryCheckpointBackend()


@pytest.fixture
def notifier(store, notifications, sink, clock) -> TodoCompletedNotifier:
    return TodoCompletedNotifier(store, notifications, sink, clock)


@pytest.fixture
def settings() -> ReactorSettings:
    return ReactorSettings(batch_size=10, poll_interval_seconds=0)


@pytest.fixture
def loop(event_log, notifier, checkpoints, settings) -> ReactorLoop:
    return ReactorLoop(event_log, notifier.build_dispatcher(), checkpoints, settings)
