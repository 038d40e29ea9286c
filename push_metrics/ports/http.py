"""HTTP port definition (DTO)."""

from dataclasses import dataclass

__all__ = ["HttpPort", "FIRST_FAILING_HTTP_CODE"]

FIRST_FAILING_HTTP_CODE = 400


@dataclass
class HttpPort:
    """One metrics push to be sent by the loop.

    Attributes:
        url: Target push gateway URL.
        body: Encoded metrics snapshot.
        content_type: Content type announced by the encoder.
    """

    url: str
    body: bytes
    content_type: str
