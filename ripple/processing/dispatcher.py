import logging
from collections.abc import Awaitable, Callable, Mapping

from ..domain import InboundEvent

LOGGER = logging.getLogger(__name__)

Handler = Callable[[InboundEvent], Awaitable[None]]


class Dispatcher:
    """Routes each inbound event to the handler registered for its type tag.

    The routing table is an explicit mapping from type tag to exactly one
    handler, built when the reactor is assembled. Events whose type has no
    handler are ignored, since the upstream stream may carry event types
    that are irrelevant to this reactor.

    Examples:
        >>> dispatcher = Dispatcher({"todo_added": on_todo_added})
        >>> dispatcher.register("todo_completed", on_todo_completed)
        >>> await dispatcher.dispatch(event)
        True
    """

    __slots__ = ("_handlers",)

    def __init__(self, handlers: Mapping[str, Handler] | None = None):
        self._handlers: dict[str, Handler] = {}
        for event_type, handler in (handlers or {}).items():
            self.register(event_type, handler)

    def register(self, event_type: str, handler: Handler) -> None:
        """Register the handler for an event type.

        Raises:
            ValueError: If a handler is already registered for the type
        """
        if event_type in self._handlers:
            raise ValueError(f"Handler already registered for event type {event_type!r}")
        self._handlers[event_type] = handler

    def handles(self, event_type: str) -> bool:
        return event_type in self._handlers

    @property
    def event_types(self) -> frozenset[str]:
        return frozenset(self._handlers)

    async def dispatch(self, event: InboundEvent) -> bool:
        """Invoke the handler for the event's type.

        Args:
            event: The event to route

        Returns:
            True if a handler ran, False if the event type is not handled

        Raises:
            Any exception raised by the handler
        """
        handler = self._handlers.get(event.type)
        if handler is None:
            LOGGER.debug(
                "Ignoring unhandled event type",
                extra={"event_type": event.type, "event": str(event.identity)},
            )
            return False
        await handler(event)
        return True
