"""
Cookie + crumb credential cache for the Yahoo Finance API.

The provider gates its data endpoints behind a short-lived "crumb" that is
only issued to a client presenting the session cookies of its landing page.
CredentialStore runs that two-step handshake lazily, caches the resulting
pair for ``ttl`` seconds, and collapses concurrent refreshes into a single
in-flight acquisition.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, replace

from stockai.infrastructure.observability import get_ingestion_logger
from stockai.ingestion.config.value_objects import CrumbConfig
from stockai.ingestion.ports.http import (
    HttpResponse,
    HttpTimeoutError,
    HttpTransportError,
    IHttpClient,
)

from .exceptions import AcquisitionError, AcquisitionTimeoutError

log = get_ingestion_logger("credential-store")


@dataclass(frozen=True)
class CredentialState:
    """Snapshot of the cached session. Replaced as a whole, never mutated."""

    token: str | None = None
    cookie_header: str = ""
    acquired_at: float = 0.0
    cycle: int = 0


@dataclass(frozen=True)
class Credentials:
    """A (token, cookie header) pair produced by one acquisition cycle."""

    token: str
    cookie_header: str
    cycle: int


def reduce_set_cookies(set_cookies: list[str]) -> str:
    """Reduce ``Set-Cookie`` values to ``name=value`` segments joined by ``; ``."""
    pairs = []
    for raw in set_cookies:
        pair = raw.split(";", 1)[0].strip()
        if pair:
            pairs.append(pair)
    return "; ".join(pairs)


def _mask(token: str) -> str:
    return token[:3] + "***" if len(token) > 3 else "***"


class CredentialStore:
    """Acquires and caches the session cookie header and crumb.

    Usage:
        store = CredentialStore(config, http_client)
        credentials = await store.ensure_credentials()
        ...
        store.invalidate(credentials.token)  # after a 401/403
    """

    def __init__(
        self,
        config: CrumbConfig,
        http_client: IHttpClient,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.http_client = http_client
        self._clock = clock
        self._state = CredentialState()
        self._inflight: asyncio.Future | None = None

    # ---------- public ----------

    @property
    def state(self) -> CredentialState:
        return self._state

    @property
    def has_token(self) -> bool:
        return self._state.token is not None

    def is_fresh(self, state: CredentialState | None = None) -> bool:
        state = state or self._state
        return (
            state.token is not None
            and self._clock() - state.acquired_at < self.config.ttl
        )

    async def ensure_credentials(self) -> Credentials:
        """Return a fresh credential pair, acquiring one if needed.

        Concurrent callers that find the cache stale share one acquisition
        and all observe its result or its exception.

        Raises:
            AcquisitionError: If either handshake step fails
        """
        state = self._state
        if self.is_fresh(state):
            return Credentials(state.token, state.cookie_header, state.cycle)

        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._acquire())
        else:
            log.debug("crumb_refresh_joined")

        # shield: a cancelled waiter must not abort the shared acquisition
        state = await asyncio.shield(self._inflight)
        return Credentials(state.token, state.cookie_header, state.cycle)

    def invalidate(self, token: str | None = None) -> None:
        """Clear the cached token so the next call re-runs the full handshake.

        Cookies and ``acquired_at`` are left as they are; acquisition always
        harvests a new cookie jar regardless. When ``token`` is given, only
        that token is invalidated: a rejection of a token that has already
        been replaced by a concurrent refresh is ignored.
        """
        current = self._state
        if current.token is None:
            return
        if token is not None and token != current.token:
            log.debug("crumb_invalidation_skipped", cycle=current.cycle)
            return
        self._state = replace(current, token=None)
        log.info("crumb_invalidated", cycle=current.cycle)

    # ---------- internal ----------

    async def _acquire(self) -> CredentialState:
        try:
            cookie_header = await self._harvest_cookies()
            token = await self._fetch_crumb(cookie_header)
            state = CredentialState(
                token=token,
                cookie_header=cookie_header,
                acquired_at=self._clock(),
                cycle=self._state.cycle + 1,
            )
            self._state = state
            log.info(
                "crumb_refreshed",
                cycle=state.cycle,
                crumb=_mask(token),
                cookies=len(cookie_header.split("; ")) if cookie_header else 0,
            )
            return state
        except AcquisitionError as e:
            log.error("crumb_refresh_failed", error=str(e), url=e.url)
            raise
        finally:
            self._inflight = None

    async def _harvest_cookies(self) -> str:
        response = await self._get(
            self.config.landing_url,
            headers={
                "User-Agent": self.config.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "en-US,en;q=0.5",
            },
            timeout=self.config.landing_timeout,
        )
        return reduce_set_cookies(response.set_cookies)

    async def _fetch_crumb(self, cookie_header: str) -> str:
        response = await self._get(
            self.config.crumb_url,
            headers={
                "User-Agent": self.config.user_agent,
                "Cookie": cookie_header,
                "Accept": "*/*",
            },
            timeout=self.config.crumb_timeout,
        )
        token = response.text.strip()
        if not token:
            raise AcquisitionError(
                "Crumb endpoint returned an empty body",
                status_code=response.status_code,
                url=self.config.crumb_url,
            )
        return token

    async def _get(
        self, url: str, headers: dict[str, str], timeout: float
    ) -> HttpResponse:
        try:
            response = await self.http_client.get(url, headers=headers, timeout=timeout)
        except HttpTimeoutError as e:
            raise AcquisitionTimeoutError(
                f"Timed out fetching {url}: {e}", url=url
            ) from e
        except HttpTransportError as e:
            raise AcquisitionError(f"Failed to fetch {url}: {e}", url=url) from e

        if not response.ok:
            raise AcquisitionError(
                f"Unexpected status {response.status_code} from {url}",
                status_code=response.status_code,
                url=url,
            )
        return response
