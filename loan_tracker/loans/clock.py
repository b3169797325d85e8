"""
Injectable clock.

LoanStore and the statistics helpers never call ``datetime.now()``
directly; they ask the Clock they were given. Tests pass a FixedClock.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone
from typing import Optional


class Clock(ABC):
    """Source of the current instant."""

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time (timezone-aware)."""
        ...

    def today(self) -> date:
        """Get the current calendar date."""
        return self.now().date()


class SystemClock(Clock):
    """
    Production clock backed by the system time.

    Without ``tz`` the machine's local zone is used, so the calendar day
    rolls over at the lender's midnight.
    """

    def __init__(self, tz: Optional[timezone] = None):
        self._tz = tz

    def now(self) -> datetime:
        if self._tz is None:
            return datetime.now().astimezone()
        return datetime.now(self._tz)


class FixedClock(Clock):
    """
    Clock with controlled time.

    ``now()`` returns the same value on repeated calls until ``advance()``
    or ``set_time()`` is called.
    """

    def __init__(self, fixed_time: Optional[datetime] = None):
        self._time = fixed_time or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._time

    def set_time(self, time: datetime) -> None:
        """Set the clock to a specific time."""
        self._time = time

    def advance(self, days: int = 0, seconds: int = 0) -> datetime:
        """Move the clock forward and return the new time."""
        self._time = self._time + timedelta(days=days, seconds=seconds)
        return self._time
