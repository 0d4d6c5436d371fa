"""Notification ports for delivering one-way messages to external parties."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """A message delivered to an address."""

    address: str
    message: str


class NotificationPort(ABC):
    """Capability for delivering a one-way message to an external party.

    The port does not deduplicate. Callers that may retry (such as a reactor
    replaying an event after a crash) are responsible for idempotency.

    Implementations should fail fast or apply their own bounded retries; the
    reactor treats send() as a single call that either returns or raises.
    Any exception raised is reported as a failed delivery.
    """

    @abstractmethod
    async def send(self, address: str, message: str) -> None:
        """Deliver a message.

        Args:
            address: Destination, e.g. an email address
            message: Human readable message text

        Raises:
            Exception: Any exception signals that delivery failed
        """
        ...


class InMemoryNotificationPort(NotificationPort):
    """Records notifications instead of delivering them.

    Set ``failure`` to an exception to make every send() raise it, which
    simulates an unavailable transport.

    Examples:
        >>> port = InMemoryNotificationPort()
        >>> await port.send("a@x.com", "hello")
        >>> port.sent
        [Notification(address='a@x.com', message='hello')]
    """

    def __init__(self, failure: Exception | None = None) -> None:
        self.sent: list[Notification] = []
        self.attempts = 0
        self.failure = failure

    async def send(self, address: str, message: str) -> None:
        self.attempts += 1
        if self.failure is not None:
            raise self.failure
        self.sent.append(Notification(address=address, message=message))


class LoggingNotificationPort(NotificationPort):
    """Writes notifications to the log instead of delivering them.

    Useful in development, where there is no mail transport configured.

    Attributes:
        level: The numeric logging level (e.g., logging.INFO)
    """

    def __init__(self, level: str = "INFO"):
        """Initialize the logging port.

        Args:
            level: String representation of the log level (e.g.,
                "INFO", "DEBUG"). Case-insensitive.
        """
        self.level = getattr(logging, level.upper())

    async def send(self, address: str, message: str) -> None:
        LOGGER.log(
            self.level,
            "-- Email Sent\nTo: %s\nMessage: %s",
            address,
            message,
            extra={"notification_address": address},
        )
