# src/species_fetch/rate_gate.py
"""
Process-wide throttle for NCBI E-utilities calls.
"""

import threading
import time
from typing import Callable, Optional

from ratelimit import limits, sleep_and_retry


class RateGate:
    """Strict periodic gate shared by every remote call in a run.

    ``acquire()`` blocks until at least ``1 / calls_per_second`` seconds have
    passed since the previous acquisition started. There is no burst
    allowance. Safe to share between threads.
    """

    def __init__(self, calls_per_second: float = 2.0, clock: Callable[[], float] = time.monotonic):
        if calls_per_second <= 0:
            raise ValueError("calls_per_second must be positive")
        self.interval = 1.0 / calls_per_second
        self._clock = clock
        self._lock = threading.Lock()
        self._limited: Optional[Callable[[], None]] = None

    def _build(self) -> Callable[[], None]:
        @sleep_and_retry
        @limits(calls=1, period=self.interval, clock=self._clock)
        def _tick():
            return None

        return _tick

    def acquire(self) -> None:
        # The limiter's first window opens when it is built, so build it on
        # the first call rather than in __init__
        with self._lock:
            if self._limited is None:
                self._limited = self._build()
        self._limited()
