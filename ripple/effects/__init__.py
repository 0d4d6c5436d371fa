"""Side-effect capabilities injected into reactors.

- NotificationPort: One-way message delivery to external parties
- EventSink: Append-only destination for produced events
- Clock: Source of the current time
"""

from .clock import Clock, FixedClock, SystemClock
from .notification import (
    InMemoryNotificationPort,
    LoggingNotificationPort,
    Notification,
    NotificationPort,
)
from .sink import EventSink, InMemoryEventSink

__all__ = [
    "Clock",
    "SystemClock",
    "FixedClock",
    "Notification",
    "NotificationPort",
    "InMemoryNotificationPort",
    "LoggingNotificationPort",
    "EventSink",
    "InMemoryEventSink",
]
