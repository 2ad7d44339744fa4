"""Authenticated request forwarding to the Yahoo Finance API."""

from dataclasses import dataclass
from urllib.parse import quote, urlsplit, urlunsplit

from stockai.infrastructure.observability import get_ingestion_logger
from stockai.ingestion.config.value_objects import ForwarderConfig
from stockai.ingestion.ports.http import (
    HttpResponse,
    HttpTransportError,
    ICredentialProvider,
    IHttpClient,
)

from .credential_store import Credentials
from .error_mapper import YahooErrorMapper
from .exceptions import AuthError, UpstreamError

log = get_ingestion_logger("forwarder")


@dataclass(frozen=True)
class ForwardedResponse:
    """Upstream payload, passed through untouched."""

    body: bytes
    content_type: str
    status_code: int = 200


def validate_target_url(url: str) -> None:
    """Raise ValueError unless ``url`` is an absolute http(s) URL."""
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError(f"Target URL must be an absolute http(s) URL: {url!r}")


def append_token(url: str, token: str, param: str = "crumb") -> str:
    """Append the url-encoded token to the query string, ahead of any fragment."""
    parts = urlsplit(url)
    pair = f"{param}={quote(token, safe='')}"
    query = f"{parts.query}&{pair}" if parts.query else pair
    return urlunsplit(parts._replace(query=query))


class UpstreamForwarder:
    """Executes authenticated GETs, recovering from one round of crumb expiry.

    Per call the flow is bounded to two attempts:

        Init -> CredentialsReady -> RequestSent -> Success
                                                -> AuthRejected -> CredentialsRefreshed
                                                   -> RequestRetried -> Success | Failed
                                                -> Failed

    Dependencies injected (not instantiated):
    - credential_provider: Supplies and invalidates (crumb, cookie) pairs
    - http_client: Executes HTTP requests
    """

    def __init__(
        self,
        config: ForwarderConfig,
        credential_provider: ICredentialProvider,
        http_client: IHttpClient,
        error_mapper: YahooErrorMapper | None = None,
    ):
        self.config = config
        self.credential_provider = credential_provider
        self.http_client = http_client
        self.error_mapper = error_mapper or YahooErrorMapper()

    async def forward(
        self, target_url: str, timeout: float | None = None
    ) -> ForwardedResponse:
        """Fetch ``target_url`` with the crumb appended and session cookies attached.

        Args:
            target_url: Absolute upstream URL without the crumb parameter
            timeout: Override of the data endpoint timeout

        Returns:
            ForwardedResponse with the raw upstream body

        Raises:
            ValueError: If target_url is not an absolute http(s) URL
            AcquisitionError: If credentials could not be (re)acquired
            UpstreamError: On non-auth failure, or when the retry fails too
        """
        validate_target_url(target_url)
        timeout = timeout or self.config.data_timeout

        credentials = await self.credential_provider.ensure_credentials()
        try:
            return await self._send(target_url, credentials, timeout)
        except AuthError as e:
            log.warning(
                "upstream_auth_rejected",
                url=target_url,
                status_code=e.status_code,
                cycle=credentials.cycle,
            )
            self.credential_provider.invalidate(credentials.token)

        credentials = await self.credential_provider.ensure_credentials()
        try:
            response = await self._send(target_url, credentials, timeout)
        except AuthError as e:
            log.error("upstream_auth_rejected_after_refresh", url=target_url)
            raise UpstreamError(
                f"Credentials rejected again after refresh: {e.message}",
                status_code=e.status_code,
                url=e.url,
            ) from e
        log.info("upstream_retry_succeeded", url=target_url, cycle=credentials.cycle)
        return response

    async def fetch_page(
        self, target_url: str, timeout: float | None = None
    ) -> ForwardedResponse:
        """Fetch an HTML page with the session cookies only (no crumb, no retry).

        Raises:
            ValueError: If target_url is not an absolute http(s) URL
            AcquisitionError: If credentials could not be acquired
            UpstreamError: On any upstream failure
        """
        validate_target_url(target_url)
        credentials = await self.credential_provider.ensure_credentials()
        headers = {
            "User-Agent": self.config.user_agent,
            "Cookie": credentials.cookie_header,
            "Accept": "text/html,application/xhtml+xml",
            "Accept-Language": "en-US,en;q=0.5",
        }
        response = await self._get(
            target_url, headers, timeout or self.config.page_timeout
        )
        return ForwardedResponse(
            body=response.body,
            content_type=response.content_type,
            status_code=response.status_code,
        )

    # ---------- internal ----------

    async def _send(
        self, target_url: str, credentials: Credentials, timeout: float
    ) -> ForwardedResponse:
        url = append_token(target_url, credentials.token, self.config.token_param)
        headers = {
            "User-Agent": self.config.user_agent,
            "Cookie": credentials.cookie_header,
            "Accept": "application/json",
        }
        log.debug("upstream_request_sent", url=target_url, cycle=credentials.cycle)
        response = await self._get(url, headers, timeout, target_url=target_url)
        return ForwardedResponse(
            body=response.body,
            content_type=response.content_type,
            status_code=response.status_code,
        )

    async def _get(
        self,
        url: str,
        headers: dict[str, str],
        timeout: float,
        target_url: str | None = None,
    ) -> HttpResponse:
        # errors carry the crumb-less URL
        target_url = target_url or url
        try:
            response = await self.http_client.get(url, headers=headers, timeout=timeout)
        except HttpTransportError as e:
            raise self.error_mapper.map_transport(e, target_url) from e

        if not response.ok:
            raise self.error_mapper.map_response(response, target_url)
        return response
