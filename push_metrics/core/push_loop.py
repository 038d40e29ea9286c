"""Push loop that periodically ships a metrics snapshot to the push gateway."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from aiohttp import ClientError, ClientResponse

from push_metrics.ports.http import FIRST_FAILING_HTTP_CODE, HttpPort
from push_metrics.ports.registry import RegistryPort
from push_metrics.ports.settings import SettingsPort

__all__ = ["push_once", "start_push_loop"]

logger = logging.getLogger(__name__)

RequestFn = Callable[[HttpPort], Awaitable[ClientResponse]]


async def push_once(
    settings: SettingsPort,
    registry: RegistryPort,
    request_fn: RequestFn,
) -> None:
    """Gather, encode and send one snapshot.

    Every failure is logged and swallowed; the caller always gets to
    sleep and try again next tick.

    Args:
        settings: Runtime configuration (endpoint, frequency).
        registry: Source of the metrics snapshot and its encoder.
        request_fn: Async function used to send one HTTP request.
    """
    try:
        snapshot = registry.gather()
        body = registry.encode(snapshot)
    except Exception as e:  # noqa: BLE001
        logger.error(f"Failed to encode push metrics: {e}.")
        return

    request = HttpPort(
        url=settings.push_endpoint,
        body=body,
        content_type=registry.content_type,
    )

    try:
        resp = await request_fn(request)
    except (ClientError, asyncio.TimeoutError) as e:
        logger.error(f"Failed to push metrics to {settings.push_endpoint}. Error: {e!r}")
        return

    if resp.status >= FIRST_FAILING_HTTP_CODE:
        logger.error(
            f"Failed to push metrics to {settings.push_endpoint}. Error: HTTP {resp.status}"
        )


async def _sleep_or_stop(stop_event: asyncio.Event, seconds: float) -> None:
    """Sleep for the given duration unless the stop event fires first."""
    try:
        await asyncio.wait_for(stop_event.wait(), timeout=seconds)
    except asyncio.TimeoutError:
        pass


async def start_push_loop(
    settings: SettingsPort,
    registry: RegistryPort,
    request_fn: RequestFn,
    stop_event: asyncio.Event,
) -> None:
    """Run the push loop.

    Periodically:
    1. Snapshot the registry.
    2. Encode it into the text exposition format (skip the send on failure).
    3. POST it to the push gateway and wait for the outcome.
    4. Sleep frequency_sec seconds, counted from the end of step 3.
    5. Repeat until stop_event is set.

    Args:
        settings: Runtime configuration (endpoint, frequency).
        registry: Source of the metrics snapshot and its encoder.
        request_fn: Async function used to send one HTTP request.
        stop_event: Event checked between iterations and awaited during sleep.

    Notes:
        - Iterations never overlap: each send is awaited before sleeping,
          so a slow gateway stretches the interval instead of piling up
          requests.
        - Nothing sets stop_event in production, so the loop lives as long
          as the process does.
    """
    while not stop_event.is_set():
        try:
            await push_once(settings, registry, request_fn)
        except Exception as e:  # noqa: BLE001
            logger.error(
                f"Unexpected error pushing metrics to {settings.push_endpoint}: {e}",
                exc_info=True,
            )

        await _sleep_or_stop(stop_event, settings.frequency_sec)
