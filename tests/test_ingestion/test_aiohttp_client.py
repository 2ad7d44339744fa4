"""
AiohttpClient against a local aiohttp server, plus one end-to-end pass of
the credential handshake and forwarding over real HTTP.
"""

import asyncio

import pytest
from aiohttp import test_utils, web

from stockai.ingestion.adapters.yahoo_plugin import CredentialStore, UpstreamForwarder
from stockai.ingestion.config.value_objects import (
    CrumbConfig,
    ForwarderConfig,
    HttpClientConfig,
)
from stockai.ingestion.connectors.aiohttp_client import AiohttpClient
from stockai.ingestion.ports.http import HttpTimeoutError

CRUMB = "tok/1"


async def landing(request: web.Request) -> web.Response:
    request.app["landing_hits"] += 1
    response = web.Response(text="<html></html>", content_type="text/html")
    response.set_cookie("A", "1", path="/")
    response.set_cookie("B", "2", secure=True)
    return response


async def getcrumb(request: web.Request) -> web.Response:
    if "A=1" not in request.headers.get("Cookie", ""):
        return web.Response(status=401, text="missing session")
    return web.Response(text=CRUMB)


async def data(request: web.Request) -> web.Response:
    request.app["data_hits"] += 1
    if request.app["reject_first"] and request.app["data_hits"] == 1:
        return web.json_response(
            {"finance": {"error": {"code": "Unauthorized", "description": "Invalid Crumb"}}},
            status=401,
        )
    if request.query.get("crumb") != CRUMB:
        return web.Response(status=401)
    return web.json_response({"symbol": request.query.get("symbols")})


async def echo_cookie(request: web.Request) -> web.Response:
    return web.Response(text=request.headers.get("Cookie", ""))


async def slow(request: web.Request) -> web.Response:
    await asyncio.sleep(1)
    return web.Response(text="late")


def build_app(reject_first: bool = False) -> web.Application:
    app = web.Application()
    app["landing_hits"] = 0
    app["data_hits"] = 0
    app["reject_first"] = reject_first
    app.router.add_get("/", landing)
    app.router.add_get("/getcrumb", getcrumb)
    app.router.add_get("/data", data)
    app.router.add_get("/echo-cookie", echo_cookie)
    app.router.add_get("/slow", slow)
    return app


@pytest.mark.asyncio
async def test_collects_every_set_cookie_header():
    client = AiohttpClient(HttpClientConfig())
    async with test_utils.TestServer(build_app()) as server:
        try:
            response = await client.get(str(server.make_url("/")))
        finally:
            await client.close()

    assert response.status_code == 200
    assert response.ok
    assert len(response.set_cookies) == 2
    assert response.set_cookies[0].startswith("A=1")
    assert response.set_cookies[1].startswith("B=2")
    assert response.content_type.startswith("text/html")


@pytest.mark.asyncio
async def test_session_does_not_replay_cookies():
    client = AiohttpClient(HttpClientConfig())
    async with test_utils.TestServer(build_app()) as server:
        try:
            await client.get(str(server.make_url("/")))
            implicit = await client.get(str(server.make_url("/echo-cookie")))
            explicit = await client.get(
                str(server.make_url("/echo-cookie")), headers={"Cookie": "X=9"}
            )
        finally:
            await client.close()

    assert implicit.text == ""
    assert explicit.text == "X=9"


@pytest.mark.asyncio
async def test_timeout_maps_to_http_timeout_error():
    client = AiohttpClient(HttpClientConfig())
    async with test_utils.TestServer(build_app()) as server:
        try:
            with pytest.raises(HttpTimeoutError):
                await client.get(str(server.make_url("/slow")), timeout=0.1)
        finally:
            await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize("reject_first", [False, True])
async def test_handshake_and_forward_over_http(reject_first):
    app = build_app(reject_first=reject_first)
    client = AiohttpClient(HttpClientConfig())
    async with test_utils.TestServer(app) as server:
        store = CredentialStore(
            CrumbConfig(
                landing_url=str(server.make_url("/")),
                crumb_url=str(server.make_url("/getcrumb")),
            ),
            client,
        )
        forwarder = UpstreamForwarder(ForwarderConfig(), store, client)
        try:
            response = await forwarder.forward(str(server.make_url("/data?symbols=AAPL")))
        finally:
            await client.close()

    assert response.body == b'{"symbol": "AAPL"}'
    assert response.content_type.startswith("application/json")
    assert store.state.token == CRUMB
    assert store.state.cookie_header == "A=1; B=2"
    assert app["landing_hits"] == (2 if reject_first else 1)
