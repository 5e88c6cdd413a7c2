"""Background thread that keeps a SoftClock ticking once per second."""

from __future__ import annotations

import logging
import threading
from copy import copy
from datetime import datetime
from typing import Optional

from quorumclock.errors import ClockStateError
from quorumclock.soft_clock import SoftClock

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0


class ClockRunner:
    """
    Owns a SoftClock and advances it on a daemon thread.

    The clock is seeded before the thread starts. The thread flags readiness
    as its first action, then sleeps one interval and ticks, forever.
    Readers only ever get copies taken under the lock.

    If a tick fails the clock is considered corrupt: the thread stops and
    every later `snapshot()` raises ClockStateError.
    """

    def __init__(self, clock: SoftClock, interval: float = TICK_INTERVAL) -> None:
        self._clock = clock
        self._interval = interval
        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._stopping = threading.Event()
        self._failure: Optional[BaseException] = None
        self._thread: Optional[threading.Thread] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> "ClockRunner":
        if self._thread is not None:
            raise RuntimeError("ClockRunner already started")

        self._thread = threading.Thread(
            target=self._run, name="quorumclock-ticker", daemon=True
        )
        self._thread.start()
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop ticking and wait for the thread to finish."""
        self._stopping.set()
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self) -> None:
        self._ready.set()
        while not self._stopping.wait(self._interval):
            with self._lock:
                try:
                    self._clock.tick()
                except Exception as exc:
                    self._failure = exc
                    logger.critical("Software clock tick failed: %s", exc)
                    return

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    def is_ready(self) -> bool:
        return self._ready.is_set()

    def wait_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the ticker has started; False if ``timeout`` ran out."""
        return self._ready.wait(timeout)

    def snapshot(self) -> SoftClock:
        """Return a copy of the clock as of a single instant."""
        with self._lock:
            if self._failure is not None:
                raise ClockStateError(
                    "software clock is corrupt after a failed tick"
                ) from self._failure
            return copy(self._clock)


def start_clock(
    interval: float = TICK_INTERVAL, now: Optional[datetime] = None
) -> ClockRunner:
    """Seed a SoftClock from system UTC time and start ticking it."""
    clock = SoftClock.from_system_time(now)
    logger.debug("Software clock seeded at %s", clock.as_sample().format())
    return ClockRunner(clock, interval=interval).start()
