"""
Rest timer.

A countdown that ticks once per interval on a background thread and stops
by itself at zero. Only one countdown runs at a time: starting a new one
cancels the one in flight. The timer never touches the stores.
"""

import logging
import threading
from typing import Callable, Optional

from pump_core.constants import DEFAULT_ACCESSORY_REST_SECONDS, DEFAULT_MAIN_REST_SECONDS
from pump_core.models import Exercise

logger = logging.getLogger(__name__)

TickCallback = Callable[[int], None]
ExpireCallback = Callable[[], None]


def rest_seconds_for(exercise: Exercise,
                     main_rest: int = DEFAULT_MAIN_REST_SECONDS,
                     accessory_rest: int = DEFAULT_ACCESSORY_REST_SECONDS) -> int:
    """Rest after a set: longer for the main lift of the day."""
    return main_rest if exercise.is_main else accessory_rest


def format_clock(seconds: int) -> str:
    """Format seconds as ``MM:SS``."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class RestTimer:
    """Cancellable countdown."""

    def __init__(self, interval: float = 1.0):
        self.interval = interval
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop: Optional[threading.Event] = None
        self._remaining = 0

    @property
    def remaining(self) -> int:
        with self._lock:
            return self._remaining

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self, duration: int, on_tick: Optional[TickCallback] = None,
              on_expire: Optional[ExpireCallback] = None) -> None:
        """
        Start counting down from ``duration``, cancelling any running countdown.

        Args:
            duration: Seconds (ticks) to count down; nothing runs if not positive
            on_tick: Called with the remaining count after every tick
            on_expire: Called once when the count reaches zero
        """
        self.cancel()
        if duration <= 0:
            return

        stop = threading.Event()
        with self._lock:
            self._remaining = int(duration)
        self._stop = stop
        self._thread = threading.Thread(
            target=self._run, args=(stop, on_tick, on_expire),
            name="rest-timer", daemon=True,
        )
        logger.debug(f"Rest timer started for {duration}s")
        self._thread.start()

    def _run(self, stop: threading.Event, on_tick: Optional[TickCallback],
             on_expire: Optional[ExpireCallback]) -> None:
        while not stop.wait(self.interval):
            with self._lock:
                if stop.is_set():
                    return
                self._remaining -= 1
                remaining = self._remaining
            if on_tick:
                on_tick(remaining)
            if remaining <= 0:
                logger.debug("Rest timer expired")
                if on_expire:
                    on_expire()
                return

    def cancel(self) -> None:
        """Stop the running countdown, if any, without calling ``on_expire``."""
        stop, thread = self._stop, self._thread
        if stop is not None:
            stop.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._stop = None
        self._thread = None
        with self._lock:
            self._remaining = 0

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the countdown ends. Returns True if it is no longer running."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
        return not self.is_running
