"""Registry port definition (interface)."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

__all__ = ["RegistryPort"]


class RegistryPort(Protocol):
    """Read-only view over the process-wide metrics registry.

    The core only ever gathers and encodes; registering and updating
    metrics is the host application's business.
    """

    content_type: str

    def gather(self) -> Sequence[Any]:
        """Take a point-in-time snapshot of every registered metric family.

        Returns:
            Metric families as they were at the time of the call.
        """
        ...

    def encode(self, snapshot: Sequence[Any], /) -> bytes:
        """Serialize a snapshot into the text exposition format.

        Args:
            snapshot: Result of a previous gather().

        Returns:
            Encoded payload.
        """
        ...
