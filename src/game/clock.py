"""
Clock collaborators.

Lock status and interval computations read time only through a Clock, so
tests can pin or advance it.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Current time as a timezone-aware UTC datetime."""
        ...


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Manually controlled clock."""

    def __init__(self, start: datetime | None = None):
        start = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        self._now = start

    def now(self) -> datetime:
        return self._now

    def set(self, when: datetime) -> None:
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        self._now = when

    def advance(self, **kwargs: float) -> datetime:
        """Move forward by a timedelta spec, e.g. advance(days=1, hours=2)."""
        self._now = self._now + timedelta(**kwargs)
        return self._now
