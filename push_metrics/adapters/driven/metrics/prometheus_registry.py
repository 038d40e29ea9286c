"""Prometheus registry adapter: snapshot and text exposition encoding."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, generate_latest
from prometheus_client.metrics_core import Metric

from push_metrics.ports.registry import RegistryPort

__all__ = ["PrometheusRegistry"]


class _FrozenSnapshot:
    """Collector-shaped wrapper so generate_latest() replays a gathered snapshot."""

    def __init__(self, families: Sequence[Metric]) -> None:
        self._families = families

    def collect(self) -> Iterator[Metric]:
        return iter(self._families)


class PrometheusRegistry(RegistryPort):
    """Read-only adapter over a prometheus_client registry.

    Defaults to the process-wide REGISTRY that Counter, Gauge and
    Histogram register into unless told otherwise.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        """Initialize the adapter.

        Args:
            registry: Registry to read from.
        """
        self._registry = registry

    def gather(self) -> list[Metric]:
        """Collect every registered metric family right now.

        Returns:
            Metric families with their current sample values.
        """
        return list(self._registry.collect())

    def encode(self, snapshot: Sequence[Metric]) -> bytes:
        """Render a gathered snapshot in the Prometheus text format.

        Args:
            snapshot: Families returned by gather().

        Returns:
            UTF-8 encoded exposition text.
        """
        return generate_latest(_FrozenSnapshot(snapshot))
