"""
Cancellable interval task.

Runs a function on a dedicated daemon thread: once immediately, then again
``interval`` seconds after each run finishes, so runs never overlap.

The function receives the task's cancellation event and is expected to wait
on it instead of sleeping, so that cancel() interrupts it promptly.
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class CancellableIntervalTask:
    """
    Usage:
        task = CancellableIntervalTask(check, interval=600, name="license-check")
        task.start()
        ...
        task.stop(timeout=5)
    """

    def __init__(self, func: Callable[[threading.Event], None], interval: float, name: str = "interval-task"):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.func = func
        self.interval = interval
        self.name = name
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.runs = 0

    @property
    def cancelled(self) -> threading.Event:
        return self._cancelled

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self._thread is not None:
            raise RuntimeError(f"Task '{self.name}' was already started")
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()

    def _run(self):
        while not self._cancelled.is_set():
            try:
                self.func(self._cancelled)
            except Exception:
                # A failing run must not end the schedule
                logger.exception(f"Task '{self.name}' run failed")
            self.runs += 1
            if self._cancelled.wait(self.interval):
                break
        logger.debug(f"Task '{self.name}' finished after {self.runs} run(s)")

    def cancel(self):
        """Signal cancellation; an in-flight run sees it at its next wait."""
        self._cancelled.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the thread; True if it has finished."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def stop(self, timeout: float) -> bool:
        """
        Cancel and wait up to ``timeout`` seconds.

        If the thread is still running afterwards it is abandoned: it is a
        daemon and exits at its next cancellation point.

        Returns:
            True if the thread finished within the timeout
        """
        self.cancel()
        if self.join(timeout):
            return True
        logger.warning(
            f"Task '{self.name}' did not finish within {timeout}s, abandoning it"
        )
        return False
