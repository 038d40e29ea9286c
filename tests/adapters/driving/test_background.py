"""Tests for the background push thread."""

import logging
import threading
from unittest.mock import AsyncMock, patch

from prometheus_client import CollectorRegistry, Counter

from push_metrics.adapters.driven.metrics.prometheus_registry import PrometheusRegistry
from push_metrics.adapters.driving.background import PushLoopHandle
from push_metrics.ports.settings import SettingsPort

__all__ = []


def test_handle_pushes_on_daemon_thread(gateway_sink) -> None:
    """The loop should run on its own daemon thread and reach the gateway."""
    registry = CollectorRegistry()
    Counter("batches", "Batches completed", registry=registry).inc()

    handle = PushLoopHandle(
        SettingsPort(push_endpoint=gateway_sink.url, frequency_sec=60),
        PrometheusRegistry(registry),
    ).start()

    try:
        assert gateway_sink.wait_for(1)
        assert handle.is_alive()
        assert handle.name == "push-metrics"
        assert handle._thread.daemon is True
        assert handle._thread is not threading.current_thread()
    finally:
        handle.stop()
        handle.join(timeout=5)

    _, path, body = gateway_sink.received[0]
    assert path == "/metrics/job/test"
    assert b"batches_total 1.0" in body


def test_handle_stop_interrupts_sleep(gateway_sink) -> None:
    """stop() should end the thread even in the middle of a long sleep."""
    handle = PushLoopHandle(
        SettingsPort(push_endpoint=gateway_sink.url, frequency_sec=3600),
        PrometheusRegistry(CollectorRegistry()),
    ).start()

    assert gateway_sink.wait_for(1)
    handle.stop()
    handle.join(timeout=5)

    assert not handle.is_alive()
    assert len(gateway_sink.received) == 1


def test_handle_stop_after_exit_is_noop(gateway_sink) -> None:
    """Stopping an already finished loop should not raise."""
    handle = PushLoopHandle(
        SettingsPort(push_endpoint=gateway_sink.url, frequency_sec=3600),
        PrometheusRegistry(CollectorRegistry()),
    ).start()
    handle.stop()
    handle.join(timeout=5)

    handle.stop()

    assert not handle.is_alive()


def test_handle_logs_unhandled_loop_errors(caplog) -> None:
    """An exception escaping the loop is logged, not raised into the host."""
    caplog.set_level(logging.ERROR)
    failing_loop = AsyncMock(side_effect=RuntimeError("loop exploded"))

    with patch("push_metrics.adapters.driving.background.start_push_loop", failing_loop):
        handle = PushLoopHandle(
            SettingsPort(push_endpoint="http://127.0.0.1:9/metrics", frequency_sec=1),
            PrometheusRegistry(CollectorRegistry()),
        ).start()
        handle.join(timeout=5)

    assert not handle.is_alive()
    assert "Unhandled exception in push loop: loop exploded" in caplog.text


def test_handle_stop_tolerates_closed_loop() -> None:
    """stop() racing with the thread closing its loop should not raise."""
    handle = PushLoopHandle(
        SettingsPort(push_endpoint="http://127.0.0.1:9/metrics", frequency_sec=1),
        PrometheusRegistry(CollectorRegistry()),
    )
    handle._loop.close()

    handle.stop()

    assert not handle.is_alive()
