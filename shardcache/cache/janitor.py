"""
Janitor Module

Background thread that periodically sweeps expired entries out of a cache.

States:
- IDLE: constructed, not started
- RUNNING: sweeping once per interval
- STOPPED: terminal; a stopped janitor never runs again

The janitor only holds the sweep callable it is given. The cache passes its
shard table's sweep, not itself, so the janitor thread never keeps the
cache handle alive. See Cache for the finalizer that stops it.
"""

import logging
import threading
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class JanitorState(Enum):
    """Lifecycle states of a Janitor."""
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class Janitor:
    """
    Periodic sweeper running on a daemon thread.

    Ticks never queue up: the next wait only begins once the current sweep
    has returned. Stopping wakes the thread immediately but does not interrupt
    a sweep that is already in progress.

    Usage:
        janitor = Janitor(interval=60, sweep=table.delete_expired)
        janitor.start()
        ...
        janitor.stop()
    """

    def __init__(self, interval: float, sweep: Callable[[], int]):
        """
        Initialize the janitor.

        Args:
            interval: Seconds between sweeps (must be positive)
            sweep: Callable performing one sweep, returning entries removed

        Raises:
            ValueError: If interval is not positive
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self._sweep = sweep
        self._stop_event = threading.Event()
        self._state_lock = threading.Lock()
        self._state = JanitorState.IDLE
        self._thread: Optional[threading.Thread] = None
        self.sweeps = 0

    @property
    def state(self) -> JanitorState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == JanitorState.RUNNING

    def start(self) -> None:
        """
        Start sweeping.

        Raises:
            RuntimeError: If the janitor was already started or stopped
        """
        with self._state_lock:
            if self._state != JanitorState.IDLE:
                raise RuntimeError(f"cannot start janitor in state {self._state.value}")
            self._thread = threading.Thread(
                target=self._run,
                name=f"shardcache-janitor-{id(self):x}",
                daemon=True,
            )
            self._state = JanitorState.RUNNING
            self._thread.start()
        logger.debug(f"Janitor started (interval={self.interval}s)")

    def stop(self) -> None:
        """Signal the thread to exit. Safe to call more than once."""
        with self._state_lock:
            if self._state == JanitorState.STOPPED:
                return
            self._state = JanitorState.STOPPED
        self._stop_event.set()
        logger.debug("Janitor stopped")

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the thread to exit.

        Returns:
            True if the thread has exited (or was never started)
        """
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            try:
                removed = self._sweep()
            except Exception:
                logger.exception("Janitor sweep failed")
                continue
            self.sweeps += 1
            logger.debug(f"Janitor sweep #{self.sweeps} removed {removed} entries")

    def __repr__(self) -> str:
        return f"Janitor(interval={self.interval}, state={self._state.value})"
