"""Crawler package — fetch & breadth-first traversal of the docs site."""

from linkchecker.crawler.fetcher import fetch_url
from linkchecker.crawler.frontier import Crawler, crawl_site

__all__ = ["fetch_url", "Crawler", "crawl_site"]
