"""
Time source for lockup and settlement computation.

The ledger reads ``now()`` once at the start of each operation; all lockup
arithmetic for that operation uses the same reading.
"""

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int:
        """Current unix time in whole seconds."""
        ...


class SystemClock:
    """Wall clock that never runs backwards within a process."""

    def __init__(self) -> None:
        self._last = 0

    def now(self) -> int:
        current = int(time.time())
        if current > self._last:
            self._last = current
        return self._last


class FixedClock:
    """Manually advanced clock for tests and replays."""

    def __init__(self, start: int = 1_700_000_000):
        self.current = start

    def now(self) -> int:
        return self.current

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("clock cannot move backwards")
        self.current += seconds
        return self.current

    def advance_days(self, days: int) -> int:
        return self.advance(days * 86_400)
