# File: tests/conftest.py
import asyncio
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

import pytest
import pytest_asyncio
from aiohttp import web

from site_mirror.config import MirrorConfig, build_config
from site_mirror.crawler.models import FetchResult
from site_mirror.errors import TransportError
from site_mirror.logger import LOGGER_NAME


class FakeSite:
    """
    In-memory stand-in for the Fetcher.

    Records every call and the peak number of concurrent fetches; unknown
    URLs fail like a 404.
    """

    def __init__(self, delay: float = 0.0) -> None:
        self.pages: Dict[str, Tuple[str, bytes]] = {}
        self.delay = delay
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.on_fetch: Optional[Callable[[str], None]] = None

    def add(self, url: str, body: Union[str, bytes], content_type: str = "text/html; charset=utf-8") -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.pages[url] = (content_type, body)

    async def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if self.on_fetch is not None:
                self.on_fetch(url)
            if url not in self.pages:
                raise TransportError(url, "server returned error status: 404", 404)
            content_type, body = self.pages[url]
            return FetchResult(url=url, final_url=url, status=200, content_type=content_type, content=body)
        finally:
            self.in_flight -= 1


@pytest.fixture(autouse=True)
def reset_logger():
    """CLI tests attach handlers to CliRunner streams; drop them afterwards."""
    yield
    logging.getLogger(LOGGER_NAME).handlers.clear()


@pytest.fixture()
def mirror_root(tmp_path: Path) -> Path:
    root = tmp_path / "mirror"
    root.mkdir()
    return root


@pytest.fixture()
def make_config(mirror_root: Path) -> Callable[..., MirrorConfig]:
    """Factory for a valid MirrorConfig writing into *mirror_root*."""

    def _make(seed_url: str = "http://x/", **overrides) -> MirrorConfig:
        options = {
            "seed_url": seed_url,
            "max_depth": 1,
            "max_concurrency": 4,
            "timeout": 2.0,
            "output_dir": mirror_root,
        }
        options.update(overrides)
        return build_config(**options)

    return _make


@pytest.fixture()
def fake_site() -> FakeSite:
    return FakeSite()


@pytest_asyncio.fixture
async def serve(unused_tcp_port: int):
    """Start an aiohttp app on a free port; returns its base URL."""
    runners: List[web.AppRunner] = []

    async def _serve(app: web.Application) -> str:
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", unused_tcp_port)
        await site.start()
        runners.append(runner)
        return f"http://127.0.0.1:{unused_tcp_port}"

    yield _serve
    for runner in runners:
        await runner.cleanup()
