# File: tests/test_utils.py
from concurrent.futures import ThreadPoolExecutor

import pytest

from site_mirror.aggregator import CrawlReport
from site_mirror.crawler.models import FetchResult, TargetState
from site_mirror.crawler.visited import VisitedSet
from site_mirror.utils import is_same_host, normalize_url


@pytest.mark.parametrize(
    "url,expected",
    [
        ("http://x", "http://x/"),
        ("HTTP://Example.COM/Path", "http://example.com/Path"),
        ("http://x/a#section", "http://x/a"),
        ("http://x/a?b=1#c", "http://x/a?b=1"),
    ],
)
def test_normalize_url(url, expected):
    assert normalize_url(url) == expected


def test_is_same_host_ignores_port_and_scheme():
    assert is_same_host("http://x:8080/a", "https://X/b")
    assert not is_same_host("http://x/", "http://y/")
    assert not is_same_host("mailto:me@x", "http://x/")


def test_visited_claim_is_test_and_set():
    visited = VisitedSet()
    assert visited.claim("http://x/")
    assert not visited.claim("http://x/")
    assert "http://x/" in visited
    assert len(visited) == 1


def test_visited_claim_single_winner_across_threads():
    visited = VisitedSet()
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(visited.claim, ["http://x/same"] * 200))
    assert results.count(True) == 1


@pytest.mark.parametrize(
    "content_type,expected",
    [
        ("text/html; charset=utf-8", True),
        ("application/xhtml+xml", True),
        ("TEXT/HTML", True),
        ("text/css", False),
        ("", False),
    ],
)
def test_fetch_result_markup_detection(content_type, expected):
    result = FetchResult(url="http://x/", final_url="http://x/", status=200, content_type=content_type, content=b"")
    assert result.is_markup is expected


def test_report_summary():
    report = CrawlReport(elapsed=2.0)
    report.mark("http://x/", TargetState.DISPATCHED)
    report.record_saved("http://x/", "x/index.html")
    report.record_failed("http://x/gone", "404")

    assert report.in_state(TargetState.FAILED) == ["http://x/gone"]
    assert report.summary().startswith("2 URLs admitted, 1 saved, 1 failed")
