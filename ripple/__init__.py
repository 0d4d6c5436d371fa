"""Ripple - an event reactor for event-sourced systems.

This module provides the public API for building reactors that fold an
upstream event stream into a projection, trigger external effects, and
emit follow-up events, safely under at-least-once delivery.
"""

from .bootstrap import build_reactor, initialize_schema
from .domain import InboundEvent, OutboundEvent, ProjectionRecord
from .processing import Dispatcher, ReactorLoop, ReactorSettings
from .reactors import TodoCompletedNotifier, TodoEventType

__all__ = [
    # Domain primitives
    "InboundEvent",
    "OutboundEvent",
    "ProjectionRecord",
    # Processing
    "Dispatcher",
    "ReactorLoop",
    "ReactorSettings",
    # Reactors
    "TodoCompletedNotifier",
    "TodoEventType",
    # Bootstrapping
    "build_reactor",
    "initialize_schema",
]
