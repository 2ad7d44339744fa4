"""HTTP communication abstractions for upstream adapters.

Separates HTTP transport layer from business logic (credentials, retry on
auth rejection, error mapping). Allows easy mocking and swapping of HTTP
implementations in tests.
"""

from dataclasses import dataclass, field
from typing import Protocol


class HttpTransportError(Exception):
    """Network-level failure: connection refused, DNS, broken response."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class HttpTimeoutError(HttpTransportError):
    """Request exceeded its timeout."""

    pass


@dataclass
class HttpResponse:
    """HTTP response data container.

    ``body`` is kept as raw bytes; upstream payloads are forwarded unmodified.
    ``set_cookies`` holds every ``Set-Cookie`` header value in arrival order.
    """

    status_code: int
    body: bytes
    headers: dict[str, str]
    url: str
    set_cookies: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def content_type(self) -> str:
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value
        return "application/octet-stream"

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class IHttpClient(Protocol):
    """Abstraction for HTTP client.

    Single Responsibility: Execute HTTP requests and return responses.
    Does NOT handle:
    - Status code interpretation
    - Error mapping
    - Retry logic
    - Cookie or crumb injection
    """

    async def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """Execute GET request.

        Args:
            url: Full URL to request, query string included
            headers: HTTP headers
            timeout: Request timeout in seconds

        Raises:
            HttpTimeoutError: When the timeout elapses
            HttpTransportError: On network or connection errors
        """
        ...

    async def close(self) -> None:
        """Release pooled connections."""
        ...


class ICredentialProvider(Protocol):
    """Abstraction for upstream session credentials.

    Single Responsibility: Provide a fresh (token, cookie header) pair.
    Handles caching, expiry and refresh transparently.
    """

    async def ensure_credentials(self):
        """Return current credentials, acquiring them if stale.

        Raises:
            AcquisitionError: If the handshake fails
        """
        ...

    def invalidate(self, token: str | None = None) -> None:
        """Mark the cached token unusable after an auth rejection."""
        ...
