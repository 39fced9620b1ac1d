# File: site_mirror/utils.py
"""site_mirror.utils: URL helpers shared by the crawler and the link rewriter."""

from __future__ import annotations

from typing import Optional, Sequence
from urllib.parse import urlsplit, urlunsplit

from site_mirror.logger import logger

__all__: Sequence[str] = (
    "HTTP_SCHEMES",
    "normalize_url",
    "hostname",
    "is_same_host",
)

HTTP_SCHEMES = ("http", "https")


def normalize_url(url: str) -> str:
    """Lower-case scheme and host, drop the fragment, map an empty path to ``/``.

    The query string is kept: two URLs differing only in query are distinct
    crawl targets.
    """
    parts = urlsplit(url)
    path = parts.path or "/"
    normalized = urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, ""))
    if normalized != url:
        logger.debug("Normalized URL: %s -> %s", url, normalized)
    return normalized


def hostname(url: str) -> Optional[str]:
    """Return the lower-cased hostname of *url* (port excluded) or ``None``."""
    try:
        return urlsplit(url).hostname
    except ValueError:
        return None


def is_same_host(url: str, other: str) -> bool:
    """True when both URLs carry the same non-empty hostname."""
    host = hostname(url)
    return host is not None and host == hostname(other)
