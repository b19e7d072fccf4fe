"""Wall-clock helpers — single source of truth for 'now'.

Object names and call-log ids are both millisecond stamps. ``MonotonicMillis``
hands out strictly increasing values so two stamps taken in the same
millisecond never collide.

Usage:
    from quickresearch.utils.clock import now_utc, epoch_ms, MonotonicMillis
"""

from __future__ import annotations

import time
from datetime import datetime, timezone


def now_utc() -> datetime:
    """Return the current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def epoch_ms() -> int:
    """Milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


class MonotonicMillis:
    """Strictly increasing epoch-millisecond stamps for one owner."""

    def __init__(self) -> None:
        self._last = 0

    def next(self) -> int:
        stamp = epoch_ms()
        if stamp <= self._last:
            stamp = self._last + 1
        self._last = stamp
        return stamp

    @property
    def last(self) -> int:
        return self._last
