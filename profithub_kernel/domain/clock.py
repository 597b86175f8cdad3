"""
Clock -- where module services get "today" from.

Engines never read a clock; ``as_of``, ``reference`` and ``cutoff_date``
are always explicit.  Services default those dates from an injected
Clock so a test can pin the calendar.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta, timezone


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Current moment, timezone-aware."""

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Clock pinned to one moment until moved explicitly.

    ``DeterministicClock.on(date(2024, 6, 15))`` reads noon UTC that day, so
    ``today()`` is stable whatever offset a caller applies.
    """

    def __init__(self, moment: datetime):
        if moment.tzinfo is None:
            raise ValueError("DeterministicClock needs a timezone-aware datetime")
        self._moment = moment

    @classmethod
    def on(cls, day: date) -> "DeterministicClock":
        return cls(datetime.combine(day, time(12, 0), tzinfo=timezone.utc))

    def now(self) -> datetime:
        return self._moment

    def advance(self, days: int = 0, seconds: int = 0) -> None:
        self._moment += timedelta(days=days, seconds=seconds)
