# File: site_mirror/engine.py
"""site_mirror.engine: runs a mirroring crawl and wires operator stop signals."""

from __future__ import annotations

import asyncio
import signal
from typing import Any

from site_mirror.aggregator import CrawlReport
from site_mirror.config import MirrorConfig
from site_mirror.crawler.crawler import MirrorCrawler
from site_mirror.logger import logger

__all__ = ["start_mirror"]

_STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def _install_stop_handlers(loop: asyncio.AbstractEventLoop, crawler: MirrorCrawler) -> list[int]:
    installed = []
    for sig in _STOP_SIGNALS:
        try:
            loop.add_signal_handler(sig, crawler.stop)
        except (NotImplementedError, RuntimeError, ValueError):
            # Windows loops and non-main threads do not support signal handlers
            logger.debug("Cannot install handler for %s", sig)
            continue
        installed.append(sig)
    return installed


async def start_mirror(config: MirrorConfig, **crawler_kwargs: Any) -> CrawlReport:
    """
    Mirror ``config.seed_url`` into ``config.output_dir`` and return the report.

    SIGINT/SIGTERM stop admission of new URLs; in-flight downloads finish.
    """
    loop = asyncio.get_running_loop()
    installed: list[int] = []
    try:
        async with MirrorCrawler(config, **crawler_kwargs) as crawler:
            installed = _install_stop_handlers(loop, crawler)
            return await crawler.crawl()
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)
