"""
Infrastructure adapter: runs DirectoryScanService on a background thread with a
fixed delay between the end of one cycle and the start of the next.

A failed cycle is logged and retried on the next tick; it never stops the runner.
"""

import threading

import structlog

from crypto_recommender.application.services.directory_scanner import DirectoryScanService
from crypto_recommender.domain.exceptions import DirectoryScanError

logger = structlog.get_logger(__name__)


class PeriodicScanRunner:
    def __init__(self, scanner: DirectoryScanService, interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._scanner = scanner
        self._interval = interval_seconds
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.failures = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> list[str]:
        """Run a single synchronous scan cycle. Faults propagate to the caller."""
        return self._scanner.scan()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._loop, name="crypto-directory-scanner", daemon=True
        )
        self._thread.start()
        logger.info("scan_runner_started", interval_seconds=self._interval)

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("scan_runner_stopped")

    def _loop(self) -> None:
        while not self._stop_event.wait(self._interval):
            try:
                self._scanner.scan()
            except DirectoryScanError:
                self.failures += 1
                logger.exception("scheduled_scan_failed", failures=self.failures)
