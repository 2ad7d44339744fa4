"""Concrete HTTP client implementation for async requests.

Wraps aiohttp behind IHttpClient abstraction.
"""

import asyncio

import aiohttp
from yarl import URL

from stockai.infrastructure.observability import get_infrastructure_logger
from stockai.ingestion.config.value_objects import HttpClientConfig
from stockai.ingestion.ports.http import (
    HttpResponse,
    HttpTimeoutError,
    HttpTransportError,
    IHttpClient,
)

log = get_infrastructure_logger("http-client")


class AiohttpClient(IHttpClient):
    """HTTP client implementation using aiohttp.

    The session uses a DummyCookieJar: cookies are only ever sent through an
    explicit ``Cookie`` header, so each credential cycle controls exactly
    which session it presents.
    """

    def __init__(self, config: HttpClientConfig):
        """Initialize HTTP client.

        Args:
            config: HTTP client configuration
        """
        self.config = config
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            # Provider responses carry header blocks larger than the 8 KiB default
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                cookie_jar=aiohttp.DummyCookieJar(),
                max_line_size=self.config.max_header_size,
                max_field_size=self.config.max_header_size,
            )
        return self._session

    async def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """Execute GET request.

        Args:
            url: Full URL
            headers: HTTP headers
            timeout: Request timeout override

        Returns:
            HttpResponse with status, raw body, headers and Set-Cookie values

        Raises:
            HttpTimeoutError: When the timeout elapses
            HttpTransportError: On connection errors
        """
        session = await self._get_session()
        timeout_obj = aiohttp.ClientTimeout(total=timeout or self.config.timeout)

        try:
            # url is sent as built; the crumb is already percent-encoded
            async with session.get(
                URL(url, encoded=True),
                headers=headers,
                timeout=timeout_obj,
                max_redirects=self.config.max_redirects,
            ) as resp:
                body = await resp.read()
                return HttpResponse(
                    status_code=resp.status,
                    body=body,
                    headers=dict(resp.headers),
                    url=str(resp.url),
                    set_cookies=list(resp.headers.getall("Set-Cookie", [])),
                )
        except asyncio.TimeoutError as e:
            log.warning("http_timeout", url=url, timeout=timeout_obj.total)
            raise HttpTimeoutError(
                f"Timed out after {timeout_obj.total}s: {url}", url=url
            ) from e
        except aiohttp.ClientError as e:
            log.warning("http_transport_error", url=url, error=str(e))
            raise HttpTransportError(f"{type(e).__name__}: {e}", url=url) from e

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None
