"""Exceptions raised while reacting to events."""

from .event import EventIdentity


class ReactorError(Exception):
    """Base class for all errors raised by the reactor."""


class DuplicateKey(ReactorError):
    """Raised when inserting a projection record whose key already exists."""

    def __init__(self, entity_id: str):
        super().__init__(f"Projection record {entity_id!r} already exists")
        self.entity_id = entity_id


class NotFound(ReactorError):
    """Raised when reading or updating a projection record that does not exist."""

    def __init__(self, entity_id: str):
        super().__init__(f"Projection record {entity_id!r} not found")
        self.entity_id = entity_id


class EffectFailure(ReactorError):
    """Raised when an external effect (notification or event emission) fails.

    The handler is aborted without deleting projection state, the checkpoint
    does not advance, and the causing event is redelivered on the next poll.
    The original error is available as ``__cause__``.
    """

    def __init__(self, effect: str, identity: EventIdentity):
        super().__init__(f"{effect} failed while processing event {identity}")
        self.effect = effect
        self.identity = identity


class MalformedEvent(ReactorError):
    """Raised when an event body is missing expected fields or has invalid values."""

    def __init__(self, identity: EventIdentity, reason: str):
        super().__init__(f"Malformed event {identity}: {reason}")
        self.identity = identity
        self.reason = reason


class ReactorHalted(ReactorError):
    """Raised by the reactor loop when configured to halt on a failed event.

    The checkpoint is left on the last successfully processed event, so a
    restarted loop retries the failed event first.
    """

    def __init__(self, identity: EventIdentity):
        super().__init__(f"Reactor halted on event {identity}")
        self.identity = identity
