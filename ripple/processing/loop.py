import asyncio
import logging
from collections import Counter
from dataclasses import dataclass

from ..domain import EventIdentity, InboundEvent, MalformedEvent, ReactorHalted
from .checkpoint import Checkpoint, CheckpointBackend
from .config import ReactorSettings
from .dispatcher import Dispatcher
from .log import EventLog

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchResult:
    """Outcome of one or more polls of the event log.

    Attributes:
        events_read: Number of events returned by the log
        committed: Number of events the checkpoint advanced past
        stalled_on: Identity of the event that failed, if processing stopped on one
    """

    events_read: int = 0
    committed: int = 0
    stalled_on: EventIdentity | None = None


class ReactorLoop:
    """Pulls events from the upstream log in order and drives the dispatcher.

    For every event the loop moves through ``Idle -> Processing -> Committed``
    or ``Idle -> Processing -> Failed``:

    - **Committed**: the handler returned (or no handler is registered for the
      type). The checkpoint is advanced past the event and durably saved
      before the next event is processed.
    - **Failed**: the handler raised. The checkpoint stays where it is, the
      rest of the batch is dropped, and the same event is read again on the
      next poll. Redelivery is the only retry mechanism; there is no backoff.

    Events are processed strictly one at a time. A crash can therefore only
    ever cause the in-flight event to be redelivered, never lost.

    What happens on failure is governed by ``settings.error_policy``:

    - ``"skip"``: a MalformedEvent is logged and the checkpoint moves past it;
      any other failure is logged and the event is redelivered on the next poll.
    - ``"halt"``: any failure raises ReactorHalted with the checkpoint left on
      the last committed event.

    Attributes:
        log: Upstream event log to read from
        dispatcher: Routes events to handlers
        checkpoints: Durable storage for the committed position
        settings: Batch size, poll interval, error policy and log level

    Example:
        >>> loop = ReactorLoop(
        ...     log=InMemoryEventLog(),
        ...     dispatcher=notifier.build_dispatcher(),
        ...     checkpoints=InMemoryCheckpointBackend(),
        ... )
        >>> task = asyncio.create_task(loop.run())
        >>> ...
        >>> loop.stop()
        >>> await task
    """

    def __init__(
        self,
        log: EventLog,
        dispatcher: Dispatcher,
        checkpoints: CheckpointBackend,
        settings: ReactorSettings | None = None,
    ) -> None:
        self.log = log
        self.dispatcher = dispatcher
        self.checkpoints = checkpoints
        self.settings = settings or ReactorSettings()
        self.level = getattr(logging, self.settings.log_level.upper())
        self._checkpoint: Checkpoint | None = None
        self._failures: Counter[EventIdentity] = Counter()
        self._stop_requested = False

    @property
    def processor_name(self) -> str:
        return self.settings.processor_name

    @property
    def position(self) -> int:
        """Sequence number of the last committed event (0 before the first commit)."""
        return self._checkpoint.position if self._checkpoint else 0

    def failure_count(self, identity: EventIdentity) -> int:
        """Number of consecutive failed attempts at an event since its last commit."""
        return self._failures[identity]

    def stop(self) -> None:
        """Ask the loop to stop after the event currently in flight is committed."""
        self._stop_requested = True

    async def load_checkpoint(self) -> Checkpoint:
        """Load the committed position, starting from the beginning on first run."""
        if self._checkpoint is None:
            checkpoint = await self.checkpoints.load_checkpoint(self.processor_name)
            self._checkpoint = checkpoint or Checkpoint(processor_name=self.processor_name)
            LOGGER.info(
                "Reactor resuming from checkpoint",
                extra={"processor": self.processor_name, "position": self._checkpoint.position},
            )
        return self._checkpoint

    async def run_once(self) -> BatchResult:
        """Read one batch from the log and process it event by event.

        Returns:
            How many events were read and committed, and the failed event if
            the batch stopped on one

        Raises:
            ReactorHalted: If an event fails and the error policy is "halt"
            Any exception raised while reading the log or saving the checkpoint
        """
        checkpoint = await self.load_checkpoint()
        try:
            events = await self.log.read(
                after=checkpoint.position, limit=self.settings.batch_size
            )
        except MalformedEvent as err:
            # The log could not decode the next event at all
            if self.settings.error_policy == "halt":
                raise ReactorHalted(err.identity) from err
            LOGGER.error(
                "Skipping undecodable event",
                extra={"event": str(err.identity), "reason": err.reason},
            )
            await self._commit(err.identity)
            return BatchResult(1, 1)
        committed = 0

        for event in events:
            if self._stop_requested:
                break
            if event.sequence_number <= self.position:
                LOGGER.debug(
                    "Skipping redelivered event behind checkpoint",
                    extra={"event": str(event.identity), "position": self.position},
                )
                continue

            if not await self._process(event):
                return BatchResult(len(events), committed, stalled_on=event.identity)
            await self._commit(event.identity)
            committed += 1

        return BatchResult(len(events), committed)

    async def drain(self) -> BatchResult:
        """Process until the log has nothing new or an event fails.

        Returns:
            Totals across all polls, with the failed event if processing stalled
        """
        events_read = 0
        committed = 0
        while True:
            result = await self.run_once()
            events_read += result.events_read
            committed += result.committed
            if result.stalled_on is not None or result.committed == 0 or self._stop_requested:
                return BatchResult(events_read, committed, stalled_on=result.stalled_on)

    async def run(self) -> None:
        """Poll the log until stop() is called.

        Sleeps ``poll_interval_seconds`` whenever a poll commits nothing. With the
        "skip" policy a poll that fails on the log or the checkpoint store is
        logged and retried after the same sleep; the checkpoint has not moved,
        so the same events are read again.

        Raises:
            ReactorHalted: If an event fails and the error policy is "halt"
            Any exception from a failed poll when the error policy is "halt"
        """
        LOGGER.info("Reactor started", extra={"processor": self.processor_name})
        try:
            while not self._stop_requested:
                try:
                    result = await self.run_once()
                except ReactorHalted:
                    raise
                except Exception:
                    if self.settings.error_policy == "halt":
                        raise
                    LOGGER.warning(
                        "Reactor poll failed, retrying",
                        exc_info=True,
                        extra={"processor": self.processor_name, "position": self.position},
                    )
                    result = BatchResult()
                if result.committed == 0 and not self._stop_requested:
                    await asyncio.sleep(self.settings.poll_interval_seconds)
        finally:
            self._stop_requested = False
            LOGGER.info(
                "Reactor stopped",
                extra={"processor": self.processor_name, "position": self.position},
            )

    async def _process(self, event: InboundEvent) -> bool:
        """Dispatch one event and apply the error policy.

        Returns:
            True if the checkpoint should advance past the event
        """
        identity = event.identity
        try:
            handled = await self.dispatcher.dispatch(event)
        except MalformedEvent as err:
            if self.settings.error_policy == "halt":
                raise ReactorHalted(identity) from err
            LOGGER.error(
                "Skipping malformed event",
                extra={"event": str(identity), "event_type": event.type, "reason": err.reason},
            )
            return True
        except Exception as err:
            self._failures[identity] += 1
            if self.settings.error_policy == "halt":
                raise ReactorHalted(identity) from err
            LOGGER.warning(
                "Event processing failed, checkpoint not advanced",
                exc_info=True,
                extra={
                    "event": str(identity),
                    "event_type": event.type,
                    "attempt": self._failures[identity],
                },
            )
            return False

        LOGGER.log(
            self.level,
            "Processed event",
            extra={"event": str(identity), "event_type": event.type, "handled": handled},
        )
        return True

    async def _commit(self, identity: EventIdentity) -> None:
        checkpoint = await self.load_checkpoint()
        advanced = checkpoint.advance(identity.sequence_number)
        await self.checkpoints.save_checkpoint(advanced)
        self._checkpoint = advanced
        self._failures.pop(identity, None)
