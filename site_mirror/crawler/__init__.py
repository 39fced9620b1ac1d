"""Crawl engine and its collaborators: fetcher, link rewriter, visited set."""
