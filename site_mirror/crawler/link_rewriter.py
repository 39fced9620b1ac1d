# site_mirror/crawler/link_rewriter.py
"""
Link rewriting for mirrored pages.

Walks a parsed document, resolves every link-bearing attribute against the
page URL, rewrites same-host links to relative mirror paths and collects the
absolute targets for further crawling. Off-site links are left as they are.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import Tag

from site_mirror.crawler.models import TargetKind
from site_mirror.errors import ParseError
from site_mirror.storage.paths import guess_is_markup, relative_link
from site_mirror.utils import HTTP_SCHEMES, is_same_host, normalize_url

__all__ = ("LINK_ATTRIBUTES", "DiscoveredLink", "ProcessedPage", "MarkupProcessor")

#: element name -> (attribute holding the link, kind of target)
LINK_ATTRIBUTES: Dict[str, Tuple[str, TargetKind]] = {
    "a": ("href", TargetKind.PAGE),
    "area": ("href", TargetKind.PAGE),
    "link": ("href", TargetKind.RESOURCE),
    "script": ("src", TargetKind.RESOURCE),
    "img": ("src", TargetKind.RESOURCE),
}


@dataclass(frozen=True, slots=True)
class DiscoveredLink:
    url: str
    kind: TargetKind


@dataclass(slots=True)
class ProcessedPage:
    """Rewritten markup and the same-host targets found in it."""

    content: bytes
    targets: List[DiscoveredLink] = field(default_factory=list)


class MarkupProcessor:
    """Parses HTML with BeautifulSoup, rewrites links in place, serializes back."""

    def __init__(self, parser: str = "html.parser", encoding: str = "utf-8") -> None:
        self.parser = parser
        self.encoding = encoding

    def process(self, page_url: str, html: Union[bytes, str]) -> ProcessedPage:
        """
        Rewrite same-host links of the page fetched from *page_url*.

        Raises ParseError when the document cannot be treated as markup.
        """
        nul = b"\x00" if isinstance(html, bytes) else "\x00"
        if nul in html:
            raise ParseError(page_url, "binary data served as markup")
        try:
            soup = BeautifulSoup(html, self.parser)
        except ParserRejectedMarkup as exc:
            raise ParseError(page_url, str(exc)) from exc

        base = self._resolution_base(soup, page_url)
        found: Dict[str, DiscoveredLink] = {}
        pending: List[Tuple[Tag, str, str, str]] = []
        for tag in soup.find_all(list(LINK_ATTRIBUTES)):
            if not isinstance(tag, Tag):
                continue
            attr, kind = LINK_ATTRIBUTES[tag.name]
            value = tag.get(attr)
            if not isinstance(value, str):
                continue
            resolved = self._resolve(page_url, base, value)
            if resolved is None:
                continue
            target, suffix = resolved
            if target is None:
                # off-site: keep it pointing where it pointed before <base> was dropped
                tag[attr] = suffix
                continue
            known = found.get(target)
            # a URL seen as both a resource and a page is crawled as a page
            if known is None or (known.kind is TargetKind.RESOURCE and kind is TargetKind.PAGE):
                found[target] = DiscoveredLink(target, kind)
            pending.append((tag, attr, target, suffix))

        # every occurrence of a URL gets the same link, decided by its final kind
        for tag, attr, target, suffix in pending:
            is_markup = found[target].kind is TargetKind.PAGE and guess_is_markup(target)
            tag[attr] = relative_link(page_url, target, is_markup) + suffix

        return ProcessedPage(content=soup.encode(self.encoding), targets=list(found.values()))

    @staticmethod
    def _resolution_base(soup: BeautifulSoup, page_url: str) -> str:
        # <base href> changes resolution; drop it so rewritten relative links
        # resolve against the mirrored file instead
        tag = soup.find("base", href=True)
        if not isinstance(tag, Tag):
            return page_url
        href = tag.get("href")
        del tag["href"]
        if not isinstance(href, str) or not href.strip():
            return page_url
        try:
            return urljoin(page_url, href.strip())
        except ValueError:
            return page_url

    @staticmethod
    def _resolve(page_url: str, base: str, value: str) -> Optional[Tuple[Optional[str], str]]:
        """
        Classify one attribute value.

        Returns None when the value stays untouched, ``(None, absolute)`` for an
        off-site relative value that must be made absolute, and
        ``(target, "#fragment" or "")`` for a same-host target.
        """
        raw = value.strip()
        if not raw or raw.startswith("#"):
            return None
        try:
            absolute = urljoin(base, raw)
            parts = urlsplit(absolute)
            given = urlsplit(raw)
        except ValueError:
            return None
        if parts.scheme.lower() not in HTTP_SCHEMES:
            return None
        if not is_same_host(absolute, page_url):
            if given.scheme or given.netloc:
                return None
            return None, absolute
        return normalize_url(absolute), f"#{parts.fragment}" if parts.fragment else ""
