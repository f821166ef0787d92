from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Coalesces bursts of calls into ONE call after a quiet period.

    Every call() restarts the timer; only the last scheduled call runs.
    timer_factory must look like threading.Timer (interval, function) with
    start()/cancel(); tests pass a manual fake.
    """

    def __init__(
        self,
        delay_sec: float,
        fn: Callable[[], Any],
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        self.delay_sec = float(delay_sec)
        self.fn = fn
        self.timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: Optional[Any] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def call(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            generation = self._generation
            timer = self.timer_factory(self.delay_sec, lambda: self._fire(generation))
            if hasattr(timer, "daemon"):
                timer.daemon = True
            self._timer = timer
        timer.start()

    def cancel(self) -> None:
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()

    def flush(self) -> bool:
        """Run a pending call now. Returns False when nothing was pending."""
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is None:
            return False
        timer.cancel()
        self.fn()
        return True

    def _fire(self, generation: int) -> None:
        with self._lock:
            # superseded by a newer call(), or flushed/cancelled meanwhile
            if generation != self._generation or self._timer is None:
                return
            self._timer = None
        logger.debug("[Autosave] Quiet period elapsed, saving")
        self.fn()
