"""
Elapsed-time display while recording.
"""

import threading
import time
from typing import Callable, Optional


def format_elapsed(elapsed_ms: float) -> str:
    """
    Format milliseconds as HH:MM:SS.

    Hours are not wrapped, a 30 hour recording shows "30:00:00".
    """
    total_seconds = max(int(elapsed_ms // 1000), 0)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


class ElapsedTicker:
    """
    Calls on_tick with the formatted elapsed time every interval seconds.

    Runs on a daemon thread until cancel() is called.
    """

    def __init__(
        self,
        started_at: float,
        on_tick: Callable[[str], None],
        interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.started_at = started_at
        self.on_tick = on_tick
        self.interval = interval
        self.clock = clock
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run, name="timelapse-ticker", daemon=True)
        self._thread.start()

    def elapsed(self) -> str:
        return format_elapsed((self.clock() - self.started_at) * 1000)

    def cancel(self) -> None:
        """Stop ticking and wait for the thread unless called from it."""
        self._cancelled.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and not self._cancelled.is_set()

    def _run(self) -> None:
        while not self._cancelled.wait(self.interval):
            self.on_tick(self.elapsed())
