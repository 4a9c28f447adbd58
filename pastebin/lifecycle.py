"""
Start/stop control for the background reaper loop.
"""
import enum
import logging
import threading
from typing import Optional

from pastebin.reaper import Reaper

logger = logging.getLogger(__name__)


class State(enum.Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class Lifecycle:
    """
    Runs Reaper.reap_once() on a fixed interval in a daemon thread.

    start() and stop() are idempotent. Stopping never interrupts a cycle that
    is already running; it only prevents the next one from being scheduled.
    """

    def __init__(self, reaper: Reaper, interval: float = 1.0):
        self.reaper = reaper
        self.interval = interval
        self._state = State.STOPPED
        self._lock = threading.Lock()
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> State:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is State.RUNNING

    def start(self) -> bool:
        """Launch the reaper loop. Returns False if it was already running."""
        with self._lock:
            if self._state is State.RUNNING:
                return False
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name="paste-reaper",
                daemon=True,
            )
            self._state = State.RUNNING
            self._thread.start()

        logger.info(f"Reaper started (every {self.interval}s)")
        return True

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Stop scheduling reaper cycles. Returns False if it was already stopped.

        Args:
            timeout: How long to wait for an in-flight cycle to finish
        """
        with self._lock:
            if self._state is State.STOPPED:
                return False
            self._state = State.STOPPED
            self._stop_event.set()
            thread = self._thread

        thread.join(timeout)
        logger.info("Reaper stopped")
        return True

    def _run(self, stop_event: threading.Event):
        # Event.wait returns True once stop() has been called
        while not stop_event.wait(self.interval):
            try:
                self.reaper.reap_once()
            except Exception as e:
                logger.exception(f"Error in reaper cycle: {e}")
