from datetime import datetime, timedelta, timezone
from typing import Protocol

from ..domain import utc_now


class Clock(Protocol):
    """Source of the current time, injected so handlers stay deterministic in tests."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return utc_now()


class FixedClock:
    """Clock that returns a fixed instant until moved explicitly.

    Examples:
        >>> clock = FixedClock(datetime(2025, 1, 1, tzinfo=timezone.utc))
        >>> clock.advance(timedelta(minutes=5))
        >>> clock.now()
        datetime.datetime(2025, 1, 1, 0, 5, tzinfo=datetime.timezone.utc)
    """

    def __init__(self, instant: datetime | None = None):
        self.instant = instant or datetime(2025, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.instant

    def advance(self, delta: timedelta) -> None:
        self.instant += delta
