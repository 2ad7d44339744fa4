"""Market data routes: build the upstream URL and delegate to the forwarder."""

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse, Response

from stockai.infrastructure.observability import get_api_logger
from stockai.ingestion.adapters.yahoo_plugin import (
    ForwardedResponse,
    YahooDependencyContainer,
    YahooGatewayError,
)
from stockai.ingestion.adapters.yahoo_plugin.endpoints import DEFAULT_SUMMARY_MODULES

log = get_api_logger("market-routes")

router = APIRouter()


def _container(request: Request) -> YahooDependencyContainer:
    return request.app.state.container


def _passthrough(forwarded: ForwardedResponse) -> Response:
    return Response(content=forwarded.body, media_type=forwarded.content_type)


async def _forward(request: Request, route: str, subject: str, url: str) -> Response:
    try:
        forwarded = await _container(request).forwarder.forward(url)
    except YahooGatewayError as e:
        log.error(
            f"{route}_failed", subject=subject, error=str(e), error_type=type(e).__name__
        )
        return JSONResponse(status_code=500, content={"error": str(e)})
    return _passthrough(forwarded)


@router.get("/api/chart/{symbol}")
async def chart(
    request: Request,
    symbol: str,
    range: str = "6mo",
    interval: str = "1d",
    include_pre_post: str = Query("false", alias="includePrePost"),
) -> Response:
    """Price/volume time series."""
    url = _container(request).endpoints.chart_url(
        symbol, range=range, interval=interval, include_pre_post=include_pre_post
    )
    return await _forward(request, "chart", symbol, url)


@router.get("/api/quote")
async def quote(request: Request, symbols: str | None = None) -> Response:
    """Real-time quotes for several symbols at once (``symbols=AAPL,MSFT``)."""
    if not symbols:
        return JSONResponse(
            status_code=400, content={"error": "symbols parameter is required"}
        )
    url = _container(request).endpoints.quote_url(symbols)
    return await _forward(request, "quote", symbols, url)


@router.get("/api/summary/{symbol}")
async def summary(
    request: Request,
    symbol: str,
    modules: str = DEFAULT_SUMMARY_MODULES,
) -> Response:
    """Fundamentals bundle."""
    url = _container(request).endpoints.summary_url(symbol, modules=modules)
    return await _forward(request, "summary", symbol, url)


@router.get("/api/screener/{filter}")
async def screener(request: Request, filter: str, count: int = 100) -> Response:
    """Predefined rankings: day_gainers, day_losers, most_actives."""
    url = _container(request).endpoints.screener_url(filter, count=count)
    return await _forward(request, "screener", filter, url)


@router.get("/api/page/{symbol}")
async def page(request: Request, symbol: str) -> Response:
    """Raw quote HTML page; empty body on failure."""
    container = _container(request)
    try:
        forwarded = await container.forwarder.fetch_page(
            container.endpoints.page_url(symbol)
        )
    except YahooGatewayError as e:
        log.error(
            "page_failed", subject=symbol, error=str(e), error_type=type(e).__name__
        )
        return Response(status_code=500, content=b"")
    return _passthrough(forwarded)
