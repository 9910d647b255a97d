"""Time source for expiry decisions.

The domain never calls ``datetime.now()`` directly; it asks a Clock, so
tests can pin or advance time.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

DEFAULT_DEAL_WINDOW = timedelta(hours=12)


class Clock(ABC):

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""


class SystemClock(Clock):

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
