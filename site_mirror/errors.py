"""
Error taxonomy for SiteMirror.

Per-target errors (transport, parse, persist) are logged by the crawler and
never abort the crawl; only :class:`ConfigError` is fatal.
"""
from __future__ import annotations

from typing import Optional

__all__ = ("MirrorError", "TransportError", "ParseError", "PersistError", "ConfigError")


class MirrorError(Exception):
    """Base class for all SiteMirror errors."""


class TransportError(MirrorError):
    """DNS/connection failure, timeout or HTTP status >= 400."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
        self.status = status


class ParseError(MirrorError):
    """Markup that could not be parsed into a tree."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class PersistError(MirrorError):
    """Filesystem failure while writing a mirrored file."""

    def __init__(self, url: str, path: str, reason: str) -> None:
        super().__init__(f"{url} -> {path}: {reason}")
        self.url = url
        self.path = path
        self.reason = reason


class ConfigError(MirrorError, ValueError):
    """Invalid run configuration; raised before the crawl starts."""
