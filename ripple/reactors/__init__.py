"""Reactors: business rules that turn inbound events into projection changes and effects."""

from .todo_completed_notifier import (
    TodoAdded,
    TodoAmended,
    TodoCompletedNotifier,
    TodoEventType,
    completion_message,
    parse_body,
)

__all__ = [
    "TodoCompletedNotifier",
    "TodoEventType",
    "TodoAdded",
    "TodoAmended",
    "completion_message",
    "parse_body",
]
