"""Metrics pusher entrypoint."""

import logging
from collections.abc import Mapping

from push_metrics.adapters.driven.config.settings import resolve_settings
from push_metrics.adapters.driven.metrics.prometheus_registry import PrometheusRegistry
from push_metrics.adapters.driving.background import PushLoopHandle
from push_metrics.ports.registry import RegistryPort
from push_metrics.ports.settings import SettingsPort

__all__ = ["MetricsPusher"]

logger = logging.getLogger(__name__)


class MetricsPusher:
    """Periodically push the process's metrics to a push gateway.

    Usage:
        handle = MetricsPusher().start()

    Configuration comes from PUSH_METRICS_ENDPOINT and
    PUSH_METRICS_FREQUENCY_SECS; see resolve_settings().
    """

    def __init__(
        self,
        registry: RegistryPort | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the pusher.

        Args:
            registry: Metrics source; defaults to the process-wide
                prometheus_client registry.
            env: Key-value lookup for configuration; defaults to the
                process environment.
        """
        self.registry = registry if registry is not None else PrometheusRegistry()
        self.env = env

    def start(self) -> PushLoopHandle | None:
        """Start a background thread pushing metrics, if configured.

        Startup sequence:
        1. Resolve configuration from the environment.
        2. Skip (return None) if pushing is disabled or misconfigured.
        3. Spawn the push loop thread and return its handle at once.

        Every call decides on its own; calling twice starts two loops.

        Returns:
            Handle to the running loop, or None if nothing was started.
        """
        config = resolve_settings(self.env)
        if config is None:
            return None

        # Wrap config into port so core depends on interface (hexagonal)
        settings_port = SettingsPort(
            push_endpoint=config.push_endpoint,
            frequency_sec=config.frequency_sec,
        )

        handle = PushLoopHandle(settings=settings_port, registry=self.registry).start()
        logger.debug(f"Push metrics thread {handle.name} started.")
        return handle
