"""Configuration resolution from environment variables."""

import logging
import os
from collections.abc import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, ValidationError

__all__ = [
    "PushSettings",
    "resolve_settings",
    "DEFAULT_PUSH_FREQUENCY_SECS",
    "PUSH_METRICS_ENDPOINT",
    "PUSH_METRICS_FREQUENCY_SECS",
]

load_dotenv()

logger = logging.getLogger(__name__)
_http_url_adapter = TypeAdapter(HttpUrl)

# eg value for PUSH_METRICS_ENDPOINT: "http://pushgateway.example.com:9091/metrics/job/safety_rules"
PUSH_METRICS_ENDPOINT = "PUSH_METRICS_ENDPOINT"
PUSH_METRICS_FREQUENCY_SECS = "PUSH_METRICS_FREQUENCY_SECS"
DEFAULT_PUSH_FREQUENCY_SECS = 15


class PushSettings(BaseModel):
    """Resolved push configuration, immutable once built.

    Attributes:
        push_endpoint: Push gateway URL that receives metric snapshots.
        frequency_sec: Seconds between pushes (must be positive).
    """

    model_config = ConfigDict(frozen=True)

    push_endpoint: str = Field(..., description="Push gateway URL.")
    frequency_sec: int = Field(
        default=DEFAULT_PUSH_FREQUENCY_SECS,
        gt=0,
        description="Seconds between pushes.",
    )


def _is_http_url(value: str) -> bool:
    try:
        _http_url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def _parse_frequency(raw: str) -> int | None:
    """Parse a strictly positive decimal integer, None when malformed."""
    if not (raw.isascii() and raw.isdigit()):
        return None
    value = int(raw)
    return value if value > 0 else None


def resolve_settings(env: Mapping[str, str] | None = None) -> PushSettings | None:
    """Decide whether metrics should be pushed, and where and how often.

    Environment variables:
    - PUSH_METRICS_ENDPOINT: push gateway URL; if unset the feature is off.
    - PUSH_METRICS_FREQUENCY_SECS: positive integer, defaults to 15.

    A malformed frequency disables the feature instead of raising, so a bad
    deployment never takes the host process down. Any endpoint that is set
    is used as given; one that is not an http(s) URL only earns a warning
    here and an error on every push.

    Args:
        env: Key-value lookup to read from; defaults to the process environment.

    Returns:
        Validated PushSettings, or None when pushing should be skipped.
    """
    if env is None:
        env = os.environ

    endpoint = env.get(PUSH_METRICS_ENDPOINT)
    if endpoint is None:
        logger.info(f"{PUSH_METRICS_ENDPOINT} env var is not set. Skipping sending metrics.")
        return None

    frequency_raw = env.get(PUSH_METRICS_FREQUENCY_SECS)
    if frequency_raw is None:
        frequency_sec = DEFAULT_PUSH_FREQUENCY_SECS
    else:
        parsed = _parse_frequency(frequency_raw)
        if parsed is None:
            logger.error(f"Invalid value for {PUSH_METRICS_FREQUENCY_SECS}: {frequency_raw!r}")
            return None
        frequency_sec = parsed

    if not _is_http_url(endpoint):
        logger.warning(
            f"{PUSH_METRICS_ENDPOINT}={endpoint!r} is not an http(s) URL; pushes will fail until it is fixed"
        )

    settings = PushSettings(push_endpoint=endpoint, frequency_sec=frequency_sec)

    logger.info(
        f"Starting push metrics loop. Sending metrics to {settings.push_endpoint} "
        f"with a frequency of {settings.frequency_sec} seconds"
    )

    return settings
