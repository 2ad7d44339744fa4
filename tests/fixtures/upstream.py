"""In-memory stand-ins for the Yahoo upstream and the clock."""

import asyncio
import re
from collections.abc import Callable
from dataclasses import dataclass, field

from stockai.ingestion.ports.http import HttpResponse

LANDING_URL = "https://finance.yahoo.com/"
CRUMB_URL = "https://query1.finance.yahoo.com/v1/test/getcrumb"

_CYCLE_COOKIE = re.compile(r"B=cycle(\d+)")


def make_response(
    status_code: int = 200,
    body: bytes = b'{"ok": true}',
    url: str = "",
    content_type: str = "application/json;charset=utf-8",
    set_cookies: list[str] | None = None,
) -> HttpResponse:
    return HttpResponse(
        status_code=status_code,
        body=body,
        headers={"Content-Type": content_type},
        url=url,
        set_cookies=set_cookies or [],
    )


@dataclass
class RecordedCall:
    url: str
    headers: dict[str, str]
    timeout: float | None


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class FakeYahooUpstream:
    """Scripted upstream implementing IHttpClient.

    Each landing page visit is a new acquisition cycle N: it issues the
    cookie ``B=cycleN`` and the crumb endpoint answers ``crumbN`` to whoever
    presents that cookie, so tokens and cookies can be matched to a cycle.
    """

    landing_url: str = LANDING_URL
    crumb_url: str = CRUMB_URL
    latency: float = 0.0
    landing_cookies: list[str] | None = None
    landing_error: Exception | None = None
    crumb_status: int = 200
    crumb_body: str | None = None
    crumb_error: Exception | None = None
    data_responses: list = field(default_factory=list)
    data_handler: Callable[[str, dict], HttpResponse] | None = None
    calls: list[RecordedCall] = field(default_factory=list)
    cycle: int = 0
    closed: bool = False

    async def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        headers = dict(headers or {})
        self.calls.append(RecordedCall(url, headers, timeout))
        if self.latency:
            await asyncio.sleep(self.latency)

        if url == self.landing_url:
            return self._landing(url)
        if url == self.crumb_url:
            return self._crumb(url, headers)
        return self._data(url, headers)

    async def close(self) -> None:
        self.closed = True

    # ---------- call inspection ----------

    def calls_to(self, url: str) -> list[RecordedCall]:
        return [c for c in self.calls if c.url == url]

    @property
    def landing_calls(self) -> list[RecordedCall]:
        return self.calls_to(self.landing_url)

    @property
    def crumb_calls(self) -> list[RecordedCall]:
        return self.calls_to(self.crumb_url)

    @property
    def data_calls(self) -> list[RecordedCall]:
        return [c for c in self.calls if c.url not in (self.landing_url, self.crumb_url)]

    # ---------- handlers ----------

    def _landing(self, url: str) -> HttpResponse:
        if self.landing_error is not None:
            raise self.landing_error
        self.cycle += 1
        cookies = self.landing_cookies
        if cookies is None:
            cookies = [
                f"B=cycle{self.cycle}; Expires=Tue, 01 Jan 2030 00:00:00 GMT; "
                "Path=/; Domain=.yahoo.com",
                f"GUC=AQ{self.cycle}; Secure; HttpOnly",
            ]
        return make_response(
            body=b"<html></html>",
            url=url,
            content_type="text/html",
            set_cookies=cookies,
        )

    def _crumb(self, url: str, headers: dict[str, str]) -> HttpResponse:
        if self.crumb_error is not None:
            raise self.crumb_error
        if self.crumb_body is not None:
            body = self.crumb_body
        else:
            match = _CYCLE_COOKIE.search(headers.get("Cookie", ""))
            body = f"crumb{match.group(1)}" if match else ""
        return make_response(
            status_code=self.crumb_status,
            body=body.encode(),
            url=url,
            content_type="text/plain",
        )

    def _data(self, url: str, headers: dict[str, str]) -> HttpResponse:
        if self.data_handler is not None:
            return self.data_handler(url, headers)
        if self.data_responses:
            scripted = self.data_responses.pop(0)
            if isinstance(scripted, Exception):
                raise scripted
            if isinstance(scripted, int):
                return make_response(status_code=scripted, url=url)
            return scripted
        return make_response(url=url)
