# site_mirror/crawler/models.py
"""
Data models for the SiteMirror crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

MARKUP_TYPES = ("text/html", "application/xhtml+xml")


class TargetKind(str, Enum):
    """PAGE targets recurse and count towards depth; RESOURCE targets are leaves."""

    PAGE = "page"
    RESOURCE = "resource"


class TargetState(str, Enum):
    UNSEEN = "unseen"
    DISPATCHED = "dispatched"
    FETCHED = "fetched"
    PARSED = "parsed"
    SAVED = "saved"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CrawlTarget:
    """Normalized absolute URL plus the depth it was discovered at."""

    url: str
    depth: int
    kind: TargetKind = TargetKind.PAGE


@dataclass(slots=True)
class FetchResult:
    """Body and metadata of a successful GET."""

    url: str
    final_url: str
    status: int
    content_type: str
    content: bytes

    @property
    def mime_type(self) -> str:
        return self.content_type.split(";", 1)[0].strip().lower()

    @property
    def is_markup(self) -> bool:
        return self.mime_type in MARKUP_TYPES
