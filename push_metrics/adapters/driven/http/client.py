"""HTTP client adapter that POSTs metric snapshots to a push gateway."""

from types import TracebackType

import aiohttp
from aiohttp import ClientResponse, ClientTimeout

from push_metrics.ports.http import HttpPort

__all__ = ["HttpClient", "PUSH_CONNECT_TIMEOUT", "PUSH_TOTAL_TIMEOUT"]

PUSH_CONNECT_TIMEOUT = 10
# Same overall budget aiohttp applies when none is given
PUSH_TOTAL_TIMEOUT = 5 * 60


class HttpClient:
    """HTTP client for push gateway uploads.

    One POST per call, a fixed connect timeout and no retries; the
    session lives as long as the async context.
    """

    def __init__(self) -> None:
        self.session: aiohttp.ClientSession | None = None
        self.timeout = ClientTimeout(total=PUSH_TOTAL_TIMEOUT, sock_connect=PUSH_CONNECT_TIMEOUT)

    async def __aenter__(self) -> "HttpClient":
        """Enter async context manager (start session).

        Returns:
            Self for use in async with statement.
        """
        self.session = aiohttp.ClientSession()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Exit async context manager (close session).

        Args:
            exc_type: Exception type if raised in context.
            exc: Exception instance if raised in context.
            tb: Traceback if raised in context.
        """
        if self.session:
            await self.session.close()

    async def push(self, req: HttpPort) -> ClientResponse:
        """Send one encoded snapshot; the response is released on return.

        Args:
            req: Push request with URL and encoded body.

        Returns:
            HTTP response (status and headers only).

        Raises:
            RuntimeError: If session not initialized.
            aiohttp exceptions: Network/timeout errors, invalid URLs.
        """
        if self.session is None:
            raise RuntimeError("Session not initialized; use 'async with' context manager")

        async with self.session.post(
            req.url,
            data=req.body,
            headers={"Content-Type": req.content_type},
            timeout=self.timeout,
        ) as resp:
            return resp
