"""
Clock -- injectable source of "now" for the health service.

Responsibility:
    The only place the health pipeline learns the current instant.  The
    service reads it once per computation, stamps ``computed_at`` with it
    and derives the business calendar day for deadline arithmetic.

Architecture position:
    Kernel > Domain.  ``SystemClock`` is the one sanctioned read of the
    system time; engines receive a ``date`` and never see a clock.

Invariants enforced:
    - ``now()`` is timezone-aware.
    - The calendar day of an instant depends on the business time zone,
      never on the host's local zone.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone, tzinfo


def calendar_day(instant: datetime, tz: tzinfo) -> date:
    """Calendar day on which ``instant`` falls in ``tz``."""
    return instant.astimezone(tz).date()


class Clock(ABC):
    """
    Abstract clock interface.

    Contract:
        Services take a Clock in their constructor.  Engine code takes the
        calendar day as an ``as_of`` argument instead.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Current instant, timezone-aware."""
        ...

    def today(self, tz: tzinfo = timezone.utc) -> date:
        return calendar_day(self.now(), tz)


class SystemClock(Clock):
    """Production clock reading the system time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Test clock frozen at a chosen instant.

    Guarantees:
        - ``now()`` is stable until ``advance()`` or ``set_time()``.
        - A naive ``fixed_time`` is taken to be UTC.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._now = self._aware(
            fixed_time or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        )

    @staticmethod
    def _aware(value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def now(self) -> datetime:
        return self._now

    def set_time(self, time: datetime) -> None:
        self._now = self._aware(time)

    def advance(self, delta: timedelta | int = 1) -> datetime:
        """Move forward by ``delta`` (seconds if an int); return the new time."""
        if not isinstance(delta, timedelta):
            delta = timedelta(seconds=delta)
        self._now = self._now + delta
        return self._now
