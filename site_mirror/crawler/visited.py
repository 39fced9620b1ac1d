# site_mirror/crawler/visited.py
"""
Set of URLs already claimed during one crawl.

The engine claims a URL before dispatching it, which is what keeps every URL
fetched at most once.
"""
from __future__ import annotations

from threading import Lock
from typing import Set


class VisitedSet:
    """
    URLs already dispatched for fetching during one crawl.

    ``claim`` is the only way in: membership test and insertion happen under
    one lock, so two concurrent discoveries of a URL cannot both proceed.
    The set never shrinks.
    """

    def __init__(self) -> None:
        self._urls: Set[str] = set()
        self._lock = Lock()

    def claim(self, url: str) -> bool:
        """Insert *url*; return True only if it was not present before."""
        with self._lock:
            if url in self._urls:
                return False
            self._urls.add(url)
            return True

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._urls

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)
