"""Settings port definition (DTO)."""

from dataclasses import dataclass

__all__ = ["SettingsPort"]


@dataclass(frozen=True)
class SettingsPort:
    """Runtime settings for the push loop.

    Decouples core from concrete configuration sources, enabling
    easy testing and implementation swapping.

    Attributes:
        push_endpoint: Push gateway URL that receives metric snapshots.
        frequency_sec: Seconds to sleep between the end of one push and
            the start of the next.
    """

    push_endpoint: str
    frequency_sec: float
