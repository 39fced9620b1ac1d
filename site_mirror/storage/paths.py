# site_mirror/storage/paths.py
"""
Mapping of URLs to paths inside the mirror.

``local_path`` is a pure function of ``(url, is_markup)``: links rewritten in a
page and the file later written for the target are computed independently and
must agree.
"""
from __future__ import annotations

import posixpath
from typing import FrozenSet, Tuple
from urllib.parse import quote, unquote, urlsplit

__all__ = (
    "INDEX_DOCUMENT",
    "MARKUP_SUFFIX",
    "local_path",
    "relative_link",
    "guess_is_markup",
)

INDEX_DOCUMENT = "index.html"
MARKUP_SUFFIX = ".html"
EMPTY_HOST = "_"

MARKUP_EXTENSIONS: FrozenSet[str] = frozenset(
    {".html", ".htm", ".xhtml", ".shtml", ".php", ".asp", ".aspx", ".jsp", ".jspx", ".cfm"}
)


def _split(url: str) -> Tuple[str, str]:
    try:
        parts = urlsplit(url)
        host = parts.hostname or ""
        path = parts.path
    except ValueError:
        host, path = "", ""
    return host or EMPTY_HOST, path


def _extension(path: str) -> str:
    return posixpath.splitext(posixpath.basename(path))[1].lower()


def local_path(url: str, is_markup: bool) -> str:
    """Relative POSIX path of *url* inside the mirror root.

    * the hostname is the top-level directory;
    * an empty or ``/``-terminated path maps to ``index.html``;
    * a last segment with any extension is kept verbatim;
    * an extensionless path gets ``.html`` appended when the content is markup.
    """
    host, raw_path = _split(url)
    path = unquote(raw_path).replace("\x00", "")
    directory_like = not path or path.endswith("/")

    # collapse "." and ".." so nothing escapes the host directory
    rel = posixpath.normpath("/" + path.lstrip("/")).lstrip("/")

    if directory_like or not rel:
        rel = posixpath.join(rel, INDEX_DOCUMENT) if rel else INDEX_DOCUMENT
    elif is_markup and not _extension(rel):
        rel += MARKUP_SUFFIX
    return posixpath.join(host, rel)


def guess_is_markup(url: str) -> bool:
    """Link-time guess whether *url* will be served as markup.

    Extensionless paths and markup extensions count as pages. Only an
    extensionless path is mapped differently for markup, so the guess never
    moves a file away from where ``local_path(url, True)`` puts it.
    """
    _, path = _split(url)
    ext = _extension(unquote(path))
    return not ext or ext in MARKUP_EXTENSIONS


def relative_link(from_url: str, to_url: str, to_is_markup: bool) -> str:
    """Link from the page at *from_url* to *to_url*, both as mirrored files.

    Always uses forward slashes: the result goes into markup attributes.
    """
    source = local_path(from_url, True)
    target = local_path(to_url, to_is_markup)
    rel = posixpath.relpath("/" + target, "/" + posixpath.dirname(source))
    return quote(rel, safe="/")
