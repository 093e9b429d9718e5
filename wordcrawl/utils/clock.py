import threading
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol


class Clock(Protocol):
    """Time source used for deadline checks. Swappable so tests can move time by hand."""

    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualClock:
    """A clock that only moves when told to.

    Thread-safe so crawl tasks on pool workers can read it while a test
    advances it.
    """

    def __init__(self, start: Optional[datetime] = None):
        self._lock = threading.Lock()
        self._now = start or datetime(2000, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def advance(self, delta: timedelta) -> None:
        with self._lock:
            self._now = self._now + delta

    def set(self, when: datetime) -> None:
        with self._lock:
            self._now = when
