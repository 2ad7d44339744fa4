"""Upstream URL builders for the Yahoo Finance endpoints the gateway exposes.

Every URL is built without the crumb; UpstreamForwarder appends it.
"""

from urllib.parse import quote

DEFAULT_QUERY_BASE_URL = "https://query1.finance.yahoo.com"
DEFAULT_PAGE_BASE_URL = "https://finance.yahoo.com"

DEFAULT_SUMMARY_MODULES = "defaultKeyStatistics,financialData,summaryDetail,price"


class YahooEndpoints:
    """Builds target URLs against configurable base URLs."""

    def __init__(
        self,
        query_base_url: str = DEFAULT_QUERY_BASE_URL,
        page_base_url: str = DEFAULT_PAGE_BASE_URL,
    ):
        self.query_base_url = query_base_url.rstrip("/")
        self.page_base_url = page_base_url.rstrip("/")

    def chart_url(
        self,
        symbol: str,
        range: str = "6mo",
        interval: str = "1d",
        include_pre_post: str = "false",
    ) -> str:
        """Price/volume time series."""
        return (
            f"{self.query_base_url}/v8/finance/chart/{quote(symbol, safe='')}"
            f"?range={quote(range, safe='')}&interval={quote(interval, safe='')}"
            f"&includePrePost={quote(include_pre_post, safe='')}"
        )

    def quote_url(self, symbols: str) -> str:
        """Batch real-time quotes; ``symbols`` is comma-separated."""
        return f"{self.query_base_url}/v7/finance/quote?symbols={quote(symbols, safe='')}"

    def summary_url(self, symbol: str, modules: str = DEFAULT_SUMMARY_MODULES) -> str:
        """Fundamentals bundle (PER, PBR, EPS, financials)."""
        return (
            f"{self.query_base_url}/v10/finance/quoteSummary/{quote(symbol, safe='')}"
            f"?modules={quote(modules, safe='')}"
        )

    def screener_url(self, filter: str, count: int = 100) -> str:
        """Predefined rankings (gainers, losers, most active)."""
        return (
            f"{self.query_base_url}/v1/finance/screener/predefined/saved"
            f"?formatted=false&lang=en-US&region=US"
            f"&scrIds={quote(filter, safe='')}&count={int(count)}"
        )

    def page_url(self, symbol: str) -> str:
        """Quote HTML page, used for auxiliary scraping."""
        return f"{self.page_base_url}/quote/{quote(symbol, safe='')}/"
