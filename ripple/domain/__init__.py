"""Domain primitives for the event reactor.

- InboundEvent: Immutable event read from the upstream log
- OutboundEvent: Event produced by the reactor, linked to its cause
- EventIdentity: (aggregate_id, sequence_number) identity of an inbound event
- ProjectionRecord: Per-entity derived state
- ReactorError and subclasses: Error taxonomy
"""

from .event import EventIdentity, InboundEvent, OutboundEvent, utc_now
from .exceptions import (
    DuplicateKey,
    EffectFailure,
    MalformedEvent,
    NotFound,
    ReactorError,
    ReactorHalted,
)
from .record import PROJECTION_FIELDS, ProjectionRecord

__all__ = [
    "EventIdentity",
    "InboundEvent",
    "OutboundEvent",
    "utc_now",
    "ProjectionRecord",
    "PROJECTION_FIELDS",
    "ReactorError",
    "DuplicateKey",
    "NotFound",
    "EffectFailure",
    "MalformedEvent",
    "ReactorHalted",
]
