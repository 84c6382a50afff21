"""Remote fetcher implementation for async requests.

Wraps aiohttp behind the IFetcher abstraction and maps every failure to the
dcrwebapi fetch error taxonomy.
"""

import aiohttp

from dcrwebapi.config.state import HttpConfig
from dcrwebapi.exceptions import FetchTimeoutError, RemoteError, TransportError
from dcrwebapi.ingestion.ports.http import IFetcher
from dcrwebapi.observability import get_infrastructure_logger


class AiohttpFetcher(IFetcher):
    """Remote fetcher using a shared aiohttp session.

    One GET per call, no retries. The session is created lazily inside the
    running event loop and reused for every provider.
    """

    def __init__(self, config: HttpConfig | None = None):
        """Initialize fetcher.

        Args:
            config: HTTP configuration (user-agent, default timeout, pool size)
        """
        self.config = config or HttpConfig()
        self._session: aiohttp.ClientSession | None = None
        self.log = get_infrastructure_logger("http-fetcher")

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit_per_host=self.config.max_connections_per_host
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
            )
            self.log.debug(
                "session_opened",
                user_agent=self.config.user_agent,
                limit_per_host=self.config.max_connections_per_host,
            )
        return self._session

    async def fetch(self, url: str, timeout: float | None = None) -> bytes:
        """Execute GET request.

        Args:
            url: Full URL
            timeout: Request timeout override in seconds

        Returns:
            Raw response body

        Raises:
            FetchTimeoutError: Timeout exceeded
            RemoteError: Non-2xx status
            TransportError: Connection, DNS or TLS failure
        """
        session = await self._get_session()
        total = timeout or self.config.timeout

        try:
            async with session.get(
                url, timeout=aiohttp.ClientTimeout(total=total)
            ) as resp:
                if not 200 <= resp.status < 300:
                    raise RemoteError(
                        f"{url}: non-success status: {resp.status}",
                        status=resp.status,
                        url=url,
                    )
                return await resp.read()
        except TimeoutError as e:
            raise FetchTimeoutError(
                f"{url}: request timed out after {total}s", url=url, timeout=total
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"{url}: failed to send request: {e}", url=url) from e
        except OSError as e:
            raise TransportError(f"{url}: transport failure: {e}", url=url) from e

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None
            self.log.debug("session_closed")
