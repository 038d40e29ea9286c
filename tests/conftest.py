"""Shared fixtures: a local HTTP server standing in for the push gateway."""

import threading
import time
from collections.abc import Iterator
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest

__all__ = []


class _SinkHandler(BaseHTTPRequestHandler):
    """Accept every POST, remembering when it arrived and what it carried."""

    def do_POST(self) -> None:  # noqa: N802
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length)
        self.server.received.append((time.monotonic(), self.path, body))
        self.send_response(self.server.status_code)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def log_message(self, format: str, *args: object) -> None:
        """Keep test output quiet."""


class GatewaySink(HTTPServer):
    """Minimal push gateway recording (monotonic_time, path, body) per push."""

    def __init__(self) -> None:
        super().__init__(("127.0.0.1", 0), _SinkHandler)
        self.received: list[tuple[float, str, bytes]] = []
        self.status_code = 200

    @property
    def url(self) -> str:
        host, port = self.server_address[:2]
        return f"http://{host}:{port}/metrics/job/test"

    def wait_for(self, count: int, timeout: float = 10.0) -> bool:
        """Poll until at least `count` pushes arrived or timeout expires."""
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if len(self.received) >= count:
                return True
            time.sleep(0.05)
        return False


@pytest.fixture
def gateway_sink() -> Iterator[GatewaySink]:
    """Run a GatewaySink on a background thread for one test.

    Yields:
        Running sink.
    """
    sink = GatewaySink()
    thread = threading.Thread(target=sink.serve_forever, daemon=True)
    thread.start()
    yield sink
    sink.shutdown()
    sink.server_close()
    thread.join(timeout=5)
