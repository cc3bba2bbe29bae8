"""Fixed-delay spacing between consecutive provider queries."""
from __future__ import annotations

import threading
import time
from typing import Callable, Optional


class FixedDelayRateLimiter:
    """Block until ``delay_seconds`` have passed since the previous query.

    The first call never waits. ``sleep`` and ``clock`` are injectable so the
    policy can be exercised without real time passing.
    """

    def __init__(
        self,
        delay_seconds: float,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")
        self.delay_seconds = float(delay_seconds)
        self._sleep = sleep
        self._clock = clock
        self._last: Optional[float] = None
        self._lock = threading.Lock()

    def wait(self) -> float:
        """Wait if needed and return the number of seconds slept."""
        with self._lock:
            slept = 0.0
            if self._last is not None:
                remaining = self.delay_seconds - (self._clock() - self._last)
                if remaining > 0:
                    self._sleep(remaining)
                    slept = remaining
            self._last = self._clock()
            return slept

    def reset(self) -> None:
        with self._lock:
            self._last = None
