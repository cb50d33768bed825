"""Injectable clock for age and employment-duration arithmetic.

Every component that needs "today" receives a Clock instead of reading the
wall clock, so a run over the same bundle with the same clock is reproducible.
"""

from datetime import date, datetime, timezone
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Source of the current date and time."""

    def today(self) -> date: ...

    def now(self) -> datetime: ...


class SystemClock:
    """Clock backed by the system time (UTC)."""

    def today(self) -> date:
        return self.now().date()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock pinned to a single instant. Used in tests and replayed runs."""

    def __init__(self, current: date | datetime):
        if isinstance(current, datetime):
            self._now = current if current.tzinfo else current.replace(tzinfo=timezone.utc)
        else:
            self._now = datetime(current.year, current.month, current.day, tzinfo=timezone.utc)

    def today(self) -> date:
        return self._now.date()

    def now(self) -> datetime:
        return self._now

    def __repr__(self) -> str:
        return f"FixedClock({self._now.isoformat()})"


__all__ = ["Clock", "SystemClock", "FixedClock"]
