"""Timed reload strategy."""
import threading
from typing import List, Optional

from confbind.domain.ports import ConfigProvider, ReloadStrategy
from confbind.infrastructure.logging.logger import get_logger


class TimedReloadStrategy(ReloadStrategy):
    """
    Reload every registered provider at a fixed interval.

    One daemon worker thread serves all providers of the strategy. It starts
    with the first registration and stops when the last provider
    deregisters or ``stop()`` is called; a later registration starts a new
    worker.
    """

    def __init__(self, interval_seconds: float):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self.interval_seconds = interval_seconds
        self._providers: List[ConfigProvider] = []
        self._lock = threading.RLock()
        self._worker: Optional[threading.Thread] = None
        self._shutdown_event = threading.Event()
        self.logger = get_logger(__name__)

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._worker is not None and self._worker.is_alive()

    def providers(self) -> List[ConfigProvider]:
        with self._lock:
            return list(self._providers)

    def register(self, provider: ConfigProvider) -> None:
        with self._lock:
            if any(existing is provider for existing in self._providers):
                return
            self._providers.append(provider)
            if self._worker is None:
                self._start()
        self.logger.debug(f"Registered provider for timed reload every {self.interval_seconds}s")

    def deregister(self, provider: ConfigProvider) -> None:
        with self._lock:
            self._providers = [existing for existing in self._providers if existing is not provider]
            empty = not self._providers
        if empty:
            self.stop()

    def stop(self) -> None:
        """Stop the worker; registered providers are kept."""
        with self._lock:
            worker = self._worker
            self._worker = None
            self._shutdown_event.set()
        if worker is not None and worker is not threading.current_thread():
            worker.join(timeout=self.interval_seconds + 1)
            self.logger.debug("Timed reload worker stopped")

    def tick(self) -> None:
        """Reload every registered provider once."""
        for provider in self.providers():
            try:
                provider.reload()
            except Exception as e:
                self.logger.error(f"Error in timed reload: {e}")

    def _start(self) -> None:
        self._shutdown_event = threading.Event()
        shutdown_event = self._shutdown_event

        def reload_worker() -> None:
            while not shutdown_event.wait(self.interval_seconds):
                self.tick()

        self._worker = threading.Thread(target=reload_worker, name="confbind-reload", daemon=True)
        self._worker.start()
        self.logger.debug("Timed reload worker started")
