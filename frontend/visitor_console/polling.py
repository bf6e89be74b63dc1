import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Poller:
    """Run a callback every `interval` seconds on a background thread."""

    def __init__(self, interval: float, callback: Callable[[], None], name: str = "poller"):
        self.interval = interval
        self.callback = callback
        self.name = name
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "Poller":
        if self.running:
            return self
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        logger.info(f"Poller {self.name} started ({self.interval}s)")
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            # a callback may stop its own poller; the loop exits on the next wait
            if threading.current_thread() is not self._thread:
                self._thread.join(timeout)
            self._thread = None
            logger.info(f"Poller {self.name} stopped")

    def _run(self) -> None:
        # first tick after one full interval; wait() returns True once stopped
        while not self._stop.wait(self.interval):
            try:
                self.callback()
            except Exception as e:
                logger.error(f"Poller {self.name} callback failed: {e}", exc_info=True)

    def __enter__(self) -> "Poller":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
