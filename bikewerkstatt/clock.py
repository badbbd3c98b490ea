"""
Injectable wall-clock sources.

Slot generation and validation take a clock instead of calling
``datetime.now()`` directly, so "today" and "now" can be pinned in tests
and demos.
"""

from datetime import date, datetime


class Clock:
    """Local wall-clock time source. Naive datetimes, no timezone handling."""

    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """Reads the host's local time."""

    def now(self) -> datetime:
        return datetime.now().replace(second=0, microsecond=0)


class FixedClock(Clock):
    """Always returns the same moment. Can be moved forward manually."""

    def __init__(self, moment: datetime) -> None:
        self._moment = moment

    def now(self) -> datetime:
        return self._moment

    def set(self, moment: datetime) -> None:
        self._moment = moment
