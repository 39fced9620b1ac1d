# site_mirror/crawler/fetcher.py
"""
Fetcher module: one HTTP GET per call, bounded by a per-request timeout.
"""
from __future__ import annotations

import asyncio

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_mirror.crawler.models import FetchResult
from site_mirror.errors import TransportError


class Fetcher:
    """Performs GET requests over a shared aiohttp session; no retries."""

    def __init__(self, session: ClientSession, timeout: float) -> None:
        self.session = session
        self.timeout = ClientTimeout(total=timeout)

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch *url*, following redirects.

        Returns FetchResult for a terminal 2xx–3xx response. Connection
        failures, timeouts and status >= 400 raise TransportError; the body
        of an error response is never read.
        """
        try:
            async with self.session.get(
                url, timeout=self.timeout, allow_redirects=True, raise_for_status=False
            ) as resp:
                if resp.status >= 400:
                    raise TransportError(url, f"server returned error status: {resp.status}", resp.status)
                content = await resp.read()
                return FetchResult(
                    url=url,
                    final_url=str(resp.url),
                    status=resp.status,
                    content_type=resp.headers.get("Content-Type", ""),
                    content=content,
                )
        except asyncio.TimeoutError as exc:
            raise TransportError(url, f"timed out after {self.timeout.total}s") from exc
        except ClientError as exc:
            raise TransportError(url, f"network error: {exc}") from exc
