"""Reactor that notifies a todo's stakeholder when the todo is completed."""

import logging
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError, field_validator

from ..domain import (
    DuplicateKey,
    EffectFailure,
    InboundEvent,
    MalformedEvent,
    NotFound,
    OutboundEvent,
)
from ..effects import Clock, EventSink, NotificationPort, SystemClock
from ..processing import Dispatcher
from ..projection import ProjectionStore

LOGGER = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class TodoEventType(str, Enum):
    """Type tags of the todo events this reactor consumes and produces."""

    ADDED = "todo_added"
    AMENDED = "todo_amended"
    ABANDONED = "todo_abandoned"
    COMPLETED = "todo_completed"
    STAKEHOLDER_NOTIFIED = "stakeholder-notified"


class TodoAdded(BaseModel):
    title: str
    stakeholder_email: str | None = None


class TodoAmended(BaseModel):
    title: str | None = None
    stakeholder_email: str | None = None

    @field_validator("title")
    @classmethod
    def title_not_null(cls, value: str | None) -> str | None:
        # Only runs when the amendment names a title; a todo cannot lose it
        if value is None:
            raise ValueError("title cannot be null")
        return value


def parse_body(event: InboundEvent, schema: type[M]) -> M:
    """Validate an event body against its schema.

    Raises:
        MalformedEvent: If required fields are missing or values have the wrong type
    """
    try:
        return schema.model_validate(event.body)
    except ValidationError as err:
        fields = ", ".join(".".join(map(str, error["loc"])) for error in err.errors())
        raise MalformedEvent(event.identity, f"invalid fields: {fields}") from err


def completion_message(title: str | None) -> str:
    return f"Your todo item {title or ''} has been completed!"


class TodoCompletedNotifier:
    """Keeps a side-table of open todos and notifies stakeholders on completion.

    The projection holds one record per open todo: its title and the email
    address of the stakeholder to notify. Records are created by
    ``todo_added``, changed by ``todo_amended`` and removed by
    ``todo_abandoned`` or ``todo_completed``.

    On ``todo_completed`` with a stakeholder address, the notifier sends the
    notification, then appends a ``stakeholder-notified`` event, and only
    then deletes the record. If either effect fails the record is kept and
    the error propagates, so the completion is redelivered and the whole
    sequence is retried. A crash after notifying but before the checkpoint
    is saved results in a second notification, never a lost one.

    Every handler tolerates replays:
    - a repeated ``todo_added`` finds the record already present
    - ``todo_amended`` for a deleted or unknown todo changes nothing
    - terminal events for a deleted or unknown todo change nothing

    Completion with no stakeholder address deletes the record silently:
    no notification and no outbound event.

    Example:
        >>> notifier = TodoCompletedNotifier(
        ...     store=InMemoryProjectionStore(),
        ...     notifications=LoggingNotificationPort(),
        ...     sink=InMemoryEventSink(),
        ... )
        >>> dispatcher = notifier.build_dispatcher()
    """

    processor_name = "todo_completed_notifier"

    def __init__(
        self,
        store: ProjectionStore,
        notifications: NotificationPort,
        sink: EventSink,
        clock: Clock | None = None,
    ):
        self.store = store
        self.notifications = notifications
        self.sink = sink
        self.clock = clock or SystemClock()

    def build_dispatcher(self) -> Dispatcher:
        return Dispatcher(
            {
                TodoEventType.ADDED.value: self.on_todo_added,
                TodoEventType.AMENDED.value: self.on_todo_amended,
                TodoEventType.ABANDONED.value: self.on_todo_abandoned,
                TodoEventType.COMPLETED.value: self.on_todo_completed,
            }
        )

    async def on_todo_added(self, event: InboundEvent) -> None:
        body = parse_body(event, TodoAdded)
        try:
            await self.store.insert(
                event.aggregate_id,
                {"title": body.title, "contact_address": body.stakeholder_email},
            )
        except DuplicateKey:
            LOGGER.info(
                "Todo already projected, treating as replay",
                extra={"event": str(event.identity)},
            )

    async def on_todo_amended(self, event: InboundEvent) -> None:
        body = parse_body(event, TodoAmended)
        changes: dict[str, Any] = {}
        if "title" in body.model_fields_set:
            changes["title"] = body.title
        if "stakeholder_email" in body.model_fields_set:
            changes["contact_address"] = body.stakeholder_email
        if not changes:
            return

        try:
            await self.store.update(event.aggregate_id, changes)
        except NotFound:
            LOGGER.info(
                "Amended todo is not projected, ignoring",
                extra={"event": str(event.identity)},
            )

    async def on_todo_abandoned(self, event: InboundEvent) -> None:
        await self.store.delete(event.aggregate_id)

    async def on_todo_completed(self, event: InboundEvent) -> None:
        try:
            todo = await self.store.get(event.aggregate_id)
        except NotFound:
            LOGGER.info(
                "Completed todo is not projected, treating as already applied",
                extra={"event": str(event.identity)},
            )
            return

        if todo.has_contact_address:
            await self._notify_stakeholder(event, todo.contact_address, todo.title)
        else:
            LOGGER.debug(
                "Completed todo has no stakeholder, skipping notification",
                extra={"event": str(event.identity)},
            )

        await self.store.delete(event.aggregate_id)

    async def _notify_stakeholder(
        self, event: InboundEvent, address: str, title: str | None
    ) -> None:
        try:
            await self.notifications.send(address, completion_message(title))
        except Exception as err:
            raise EffectFailure("notification", event.identity) from err

        now = self.clock.now()
        notified = OutboundEvent(
            aggregate_id=event.aggregate_id,
            type=TodoEventType.STAKEHOLDER_NOTIFIED.value,
            body={"notified_at": now},
            caused_by=event.identity,
            timestamp=now,
        )
        try:
            await self.sink.append(notified)
        except Exception as err:
            raise EffectFailure("event emission", event.identity) from err

        LOGGER.info(
            "Stakeholder notified of todo completion",
            extra={"event": str(event.identity), "outbound_event_id": str(notified.id)},
        )
