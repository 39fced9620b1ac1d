# === FILE: site_mirror/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
from typing import Iterable, Optional, Set

from aiohttp import ClientSession

from site_mirror.aggregator import CrawlReport
from site_mirror.config import MirrorConfig
from site_mirror.crawler.fetcher import Fetcher
from site_mirror.crawler.link_rewriter import DiscoveredLink, MarkupProcessor
from site_mirror.crawler.models import CrawlTarget, TargetKind, TargetState
from site_mirror.crawler.visited import VisitedSet
from site_mirror.errors import ParseError, PersistError, TransportError
from site_mirror.logger import LOGGER_NAME
from site_mirror.storage.writer import MirrorWriter
from site_mirror.utils import normalize_url

__all__ = ("MirrorCrawler",)


class MirrorCrawler:
    """
    Recursive same-site crawler that writes every fetched file to a local mirror.

    Every admitted URL becomes its own task; at most ``max_concurrency`` of
    them fetch/parse/save at any instant. ``crawl`` returns once the
    outstanding-work counter drops back to zero.
    """

    def __init__(
        self,
        config: MirrorConfig,
        *,
        fetcher: Optional[Fetcher] = None,
        writer: Optional[MirrorWriter] = None,
        processor: Optional[MarkupProcessor] = None,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.writer = writer or MirrorWriter(config.output_dir)
        self.processor = processor or MarkupProcessor()
        self.visited = VisitedSet()
        self.report = CrawlReport()
        self.session: Optional[ClientSession] = None
        self.logger = logging.getLogger(LOGGER_NAME)
        self._budget: Optional[asyncio.Semaphore] = None
        self._idle: Optional[asyncio.Event] = None
        self._outstanding = 0
        self._tasks: Set[asyncio.Task[None]] = set()
        self._stopped = False

    async def __aenter__(self) -> MirrorCrawler:
        if self.fetcher is None:
            self.session = ClientSession(headers={"User-Agent": self.config.user_agent})
            self.fetcher = Fetcher(self.session, self.config.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    @property
    def stopped(self) -> bool:
        return self._stopped

    def stop(self) -> None:
        """Stop admitting new targets; work already in flight drains normally."""
        if not self._stopped:
            self.logger.warning("Stop requested: no new URLs will be admitted")
            self._stopped = True

    async def crawl(self) -> CrawlReport:
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized; use 'async with MirrorCrawler(...)'")
        seed = normalize_url(str(self.config.seed_url))
        self.logger.info(
            "Starting mirror of %s (depth %d, concurrency %d) into %s",
            seed, self.config.max_depth, self.config.max_concurrency, self.config.output_dir,
        )
        start = time.monotonic()
        self._budget = asyncio.Semaphore(self.config.max_concurrency)
        self._idle = asyncio.Event()
        self._idle.set()
        try:
            self._admit(CrawlTarget(seed, 0, TargetKind.PAGE))
            await self._idle.wait()
        finally:
            pending = [t for t in self._tasks if not t.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
        self.report.elapsed = time.monotonic() - start
        self.logger.info("Finished: %s", self.report.summary())
        return self.report

    # ------------------------------------------------------------------ #
    # Scheduling                                                          #
    # ------------------------------------------------------------------ #

    def _admit(self, target: CrawlTarget) -> bool:
        if self._stopped:
            return False
        if target.kind is TargetKind.PAGE and target.depth > self.config.max_depth:
            return False
        if not self.visited.claim(target.url):
            return False
        self._outstanding += 1
        self._idle.clear()
        self.report.mark(target.url, TargetState.DISPATCHED)
        task = asyncio.create_task(self._visit(target))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True

    def _expand(self, parent: CrawlTarget, links: Iterable[DiscoveredLink]) -> None:
        admitted = 0
        for link in links:
            # resources are leaves and keep the depth of the page that references them
            depth = parent.depth + 1 if link.kind is TargetKind.PAGE else parent.depth
            if self._admit(CrawlTarget(link.url, depth, link.kind)):
                admitted += 1
        self.logger.debug("%s: %d new targets admitted", parent.url, admitted)

    async def _visit(self, target: CrawlTarget) -> None:
        try:
            async with self._budget:
                await self._process(target)
        except Exception as exc:
            self.logger.exception("[ERROR] unexpected failure on %s", target.url)
            self.report.record_failed(target.url, repr(exc))
        finally:
            self._outstanding -= 1
            if self._outstanding == 0:
                self._idle.set()

    # ------------------------------------------------------------------ #
    # One unit of work: fetch -> (parse) -> expand -> save                #
    # ------------------------------------------------------------------ #

    async def _process(self, target: CrawlTarget) -> None:
        url = target.url
        self.logger.info("[DOWNLOADING] %s", url)
        try:
            result = await self.fetcher.fetch(url)
        except TransportError as exc:
            self.logger.warning("[ERROR] fetching %s: %s", url, exc.reason)
            self.report.record_failed(url, str(exc))
            return
        self.report.mark(url, TargetState.FETCHED)
        if result.final_url != url:
            self.logger.debug("%s redirected to %s", url, result.final_url)

        content = result.content
        is_markup = result.is_markup and target.kind is TargetKind.PAGE
        if is_markup:
            try:
                page = self.processor.process(url, content)
            except ParseError as exc:
                self.logger.warning("[ERROR] parsing HTML %s: %s; saving original bytes", url, exc.reason)
            else:
                content = page.content
                self.report.mark(url, TargetState.PARSED)
                self._expand(target, page.targets)

        try:
            local = self.writer.save(url, content, is_markup)
        except PersistError as exc:
            self.logger.error("[ERROR] saving file %s: %s", url, exc.reason)
            self.report.record_failed(url, str(exc))
            return
        self.report.record_saved(url, local)
        self.logger.info("[SAVED] %s -> %s", url, local)
