# File: tests/test_fetcher.py
from __future__ import annotations

import asyncio

import pytest
from aiohttp import ClientSession, web

from site_mirror.crawler.fetcher import Fetcher
from site_mirror.errors import TransportError


def build_app() -> web.Application:
    app = web.Application()

    async def page(_):
        return web.Response(text="<h1>Hello</h1>", content_type="text/html")

    async def image(_):
        return web.Response(body=b"\x89PNG\r\n", content_type="image/png")

    async def old(_):
        raise web.HTTPFound("/page")

    async def missing(_):
        return web.Response(status=404, text="not here")

    async def broken(_):
        return web.Response(status=500, text="boom")

    async def slow(_):
        await asyncio.sleep(2)
        return web.Response(text="late", content_type="text/html")

    app.router.add_get("/page", page)
    app.router.add_get("/logo.png", image)
    app.router.add_get("/old", old)
    app.router.add_get("/missing", missing)
    app.router.add_get("/broken", broken)
    app.router.add_get("/slow", slow)
    return app


@pytest.mark.asyncio()
async def test_fetch_html(serve):
    base = await serve(build_app())
    async with ClientSession() as session:
        result = await Fetcher(session, timeout=2.0).fetch(f"{base}/page")

    assert result.status == 200
    assert result.is_markup
    assert result.content == b"<h1>Hello</h1>"
    assert result.url == f"{base}/page"


@pytest.mark.asyncio()
async def test_fetch_binary(serve):
    base = await serve(build_app())
    async with ClientSession() as session:
        result = await Fetcher(session, timeout=2.0).fetch(f"{base}/logo.png")

    assert not result.is_markup
    assert result.mime_type == "image/png"
    assert result.content == b"\x89PNG\r\n"


@pytest.mark.asyncio()
async def test_fetch_follows_redirects(serve):
    base = await serve(build_app())
    async with ClientSession() as session:
        result = await Fetcher(session, timeout=2.0).fetch(f"{base}/old")

    assert result.url == f"{base}/old"
    assert result.final_url == f"{base}/page"
    assert result.content == b"<h1>Hello</h1>"


@pytest.mark.asyncio()
@pytest.mark.parametrize("path,status", [("/missing", 404), ("/broken", 500), ("/nowhere", 404)])
async def test_error_status_is_transport_error(serve, path, status):
    base = await serve(build_app())
    async with ClientSession() as session:
        with pytest.raises(TransportError) as excinfo:
            await Fetcher(session, timeout=2.0).fetch(f"{base}{path}")

    assert excinfo.value.status == status


@pytest.mark.asyncio()
async def test_timeout_is_transport_error(serve):
    base = await serve(build_app())
    async with ClientSession() as session:
        with pytest.raises(TransportError) as excinfo:
            await Fetcher(session, timeout=0.2).fetch(f"{base}/slow")

    assert excinfo.value.status is None
    assert "timed out" in excinfo.value.reason


@pytest.mark.asyncio()
async def test_connection_refused_is_transport_error(unused_tcp_port):
    async with ClientSession() as session:
        with pytest.raises(TransportError):
            await Fetcher(session, timeout=1.0).fetch(f"http://127.0.0.1:{unused_tcp_port}/")
