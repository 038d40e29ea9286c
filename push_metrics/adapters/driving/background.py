"""Dedicated background thread that drives the push loop."""

import asyncio
import logging
import threading

from push_metrics.adapters.driven.http.client import HttpClient
from push_metrics.core.push_loop import start_push_loop
from push_metrics.ports.registry import RegistryPort
from push_metrics.ports.settings import SettingsPort

__all__ = ["PushLoopHandle"]

logger = logging.getLogger(__name__)


class PushLoopHandle:
    """Handle to a push loop running on its own daemon thread.

    The thread owns a private asyncio event loop, so the caller's thread
    (and any event loop it runs) is never blocked. Dropping the handle
    does not stop the loop; the daemon flag only keeps it from holding
    the process open at exit.
    """

    def __init__(
        self,
        settings: SettingsPort,
        registry: RegistryPort,
        name: str = "push-metrics",
    ) -> None:
        """Prepare, but do not start, the background thread.

        Args:
            settings: Runtime settings for the loop.
            registry: Source of metric snapshots.
            name: Thread name, visible in thread dumps.
        """
        self.settings = settings
        self.registry = registry
        self._loop = asyncio.new_event_loop()
        self._stop = asyncio.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> "PushLoopHandle":
        """Spawn the thread and return immediately."""
        self._thread.start()
        return self

    def stop(self) -> None:
        """Ask the loop to exit at its next sleep.

        Safe to call from any thread. Production code has no reason to;
        it exists so tests and embedding hosts can end the loop cleanly.
        """
        try:
            self._loop.call_soon_threadsafe(self._stop.set)
        except RuntimeError:
            # Event loop already closed: the thread has finished
            logger.debug("Push metrics loop already stopped.")

    def join(self, timeout: float | None = None) -> None:
        """Wait for the thread to finish (only happens after stop())."""
        self._thread.join(timeout)

    def is_alive(self) -> bool:
        """Return True while the push loop thread is running."""
        return self._thread.is_alive()

    @property
    def name(self) -> str:
        """Name of the push loop thread."""
        return self._thread.name

    def _run(self) -> None:
        asyncio.set_event_loop(self._loop)
        try:
            self._loop.run_until_complete(self._serve())
        finally:
            self._loop.close()

    async def _serve(self) -> None:
        async with HttpClient() as http:
            try:
                await start_push_loop(
                    settings=self.settings,
                    registry=self.registry,
                    request_fn=http.push,
                    stop_event=self._stop,
                )
            except Exception as e:
                logger.error(f"Unhandled exception in push loop: {e}", exc_info=True)

        logger.info("Push metrics loop stopped.")
