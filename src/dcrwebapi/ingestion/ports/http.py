"""HTTP communication abstraction for the refresh pipeline.

Separates HTTP transport from decoding and refresh policy. Allows easy
mocking of the remote providers in tests.
"""

from typing import Protocol


class IFetcher(Protocol):
    """Abstraction for the remote fetcher.

    Single Responsibility: GET a URL with a timeout and a fixed user-agent and
    return the raw body.
    Does NOT handle:
    - Response decoding or validation
    - Retry or fallback (owned by the orchestrator's attempt strategies)
    """

    async def fetch(self, url: str, timeout: float | None = None) -> bytes:
        """Execute GET request.

        Args:
            url: Full URL to request
            timeout: Request timeout in seconds (fetcher default if None)

        Returns:
            Raw response body

        Raises:
            FetchTimeoutError: Timeout exceeded
            RemoteError: Non-2xx status
            TransportError: DNS, connection, TLS failures
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
