"""
Injectable clock for the lifecycle managers.

Every "active as of today" decision depends on a reference date. Managers
never call ``date.today()`` themselves; they ask the Clock they were built
with, so tests and demos can pin the date.
"""

from abc import ABC, abstractmethod
from datetime import date, timedelta
from typing import Optional


class Clock(ABC):
    """Source of the reference date used by the lifecycle managers."""

    @abstractmethod
    def today(self) -> date:
        """Get the current reference date."""
        ...


class SystemClock(Clock):
    """Production clock backed by the local system date."""

    def today(self) -> date:
        return date.today()


class FixedClock(Clock):
    """
    Clock pinned to a given date.

    Example:
        clock = FixedClock(date(2025, 5, 15))
        clock.advance(days=30)
        clock.today()  # date(2025, 6, 14)
    """

    def __init__(self, today: date):
        self._today = today

    def today(self) -> date:
        return self._today

    def set(self, today: date) -> None:
        """Move the clock to an arbitrary date."""
        self._today = today

    def advance(self, days: int = 1) -> date:
        """Move the clock forward and return the new date."""
        self._today = self._today + timedelta(days=days)
        return self._today


def make_clock(pinned: Optional[date] = None) -> Clock:
    """Build a FixedClock when a date is pinned, otherwise a SystemClock."""
    if pinned is not None:
        return FixedClock(pinned)
    return SystemClock()
