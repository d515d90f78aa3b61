"""Background expiry sweeper.

The cache only skips expired entries on lookup; this service removes them
on a fixed interval. It is never started implicitly: whoever builds the
cache owns the sweeper's start/stop lifecycle.
"""

import logging
import threading

from mimir.config import settings
from mimir.exceptions import CacheBackendError
from mimir.protocols import CacheStore

logger = logging.getLogger(__name__)


class CleanupService:
    """Periodically calls ``cleanup()`` on a cache store from a daemon thread.

    Example:
        ```python
        sweeper = CleanupService(repository, interval=60)
        sweeper.start()
        ...
        sweeper.stop()

        # or
        with CleanupService(repository, interval=60):
            ...
        ```
    """

    def __init__(self, store: CacheStore, interval: float | None = None) -> None:
        """Initialize the sweeper.

        Args:
            store: The cache store to sweep.
            interval: Seconds between sweeps. Defaults to settings.
        """
        self._store = store
        self._interval = settings.cache_cleanup_interval if interval is None else interval
        if self._interval <= 0:
            raise ValueError(f"interval must be positive, got {self._interval}")
        self._stop_event: threading.Event | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    def start(self) -> None:
        """Start sweeping. Calling it while already running does nothing."""
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            # Each thread gets its own event so a late stop() cannot reach a newer thread
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run, args=(self._stop_event,), name="mimir-cache-cleanup", daemon=True
            )
            self._thread.start()
        logger.info("Cache cleanup started (interval %.1fs)", self._interval)

    def stop(self, timeout: float | None = None) -> None:
        """Signal the sweeper to exit and wait for it.

        Args:
            timeout: Maximum seconds to wait for the thread to finish.
        """
        with self._lock:
            thread, stop_event = self._thread, self._stop_event
            self._thread = self._stop_event = None
            if thread is None:
                return
            stop_event.set()
        thread.join(timeout)
        logger.info("Cache cleanup stopped")

    def run_once(self) -> int:
        """Run a single sweep.

        Returns:
            Number of entries removed
        """
        removed = self._store.cleanup()
        if removed:
            logger.debug("Cleanup removed %d expired entries", removed)
        return removed

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._interval):
            try:
                self.run_once()
            except CacheBackendError:
                logger.exception("Cache cleanup failed, retrying next interval")

    @property
    def running(self) -> bool:
        """Whether the sweeper thread is alive."""
        thread = self._thread
        return thread is not None and thread.is_alive()

    @property
    def interval(self) -> float:
        return self._interval

    def __enter__(self) -> "CleanupService":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
