"""Breadth-first crawl of the documentation site.

The crawler owns the frontier (a FIFO of pending paths with no duplicates)
and the growing path → :class:`Page` map.  Each dequeued path is fetched
once, scanned for identifiers and, when onsite, for links; newly discovered
paths are queued.  Offsite pages are fetched (so their identifiers can be
checked) but their links are not followed.
"""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone
from functools import partial
from typing import Callable, Deque, Dict, Optional, Set

import httpx

from linkchecker.config import CheckerConfig
from linkchecker.crawler.fetcher import fetch_url
from linkchecker.errors import CheckError, ErrorKind
from linkchecker.models import FetchResponse, Page, Snapshot
from linkchecker.paths import (
    classify_type,
    fetch_url_for,
    is_onsite,
    is_web_target,
    resolve_candidate,
)
from linkchecker.scanner import extract_ids, extract_links

logger = logging.getLogger(__name__)

FetchFn = Callable[[str], FetchResponse]

ROOT_PATH = ""


class Crawler:
    """Single-threaded BFS crawler.

    Args:
        config: Base URL, recognised schemes and timeout.
        fetch: Callable used to fetch a URL.  Defaults to
            :func:`linkchecker.crawler.fetcher.fetch_url` with the configured
            timeout.
    """

    def __init__(self, config: CheckerConfig, fetch: Optional[FetchFn] = None) -> None:
        self.config = config
        self._fetch: FetchFn = fetch or partial(fetch_url, timeout=config.timeout)
        self.visited: Dict[str, Page] = {}
        self.pending: Deque[str] = deque()
        self._pending_set: Set[str] = set()
        self.started_at: Optional[datetime] = None
        self.finished_at: Optional[datetime] = None

    # ------------------------------------------------------------------
    # Frontier
    # ------------------------------------------------------------------
    def enqueue(self, path: str) -> bool:
        """Queue *path* unless it is already visited or pending."""
        if path in self.visited or path in self._pending_set:
            return False
        logger.info("%4.4d queued:  Queueing %s", len(self.pending), path)
        self.pending.append(path)
        self._pending_set.add(path)
        return True

    def _dequeue(self) -> str:
        path = self.pending.popleft()
        self._pending_set.discard(path)
        return path

    # ------------------------------------------------------------------
    # Page processing
    # ------------------------------------------------------------------
    def _record(self, page: Page, error: CheckError) -> None:
        logger.warning("%s: %s (%s)", error.kind.value, error.description, error.cause)
        page.exceptions.append(error)

    def visit(self, path: str) -> Page:
        """Fetch and scan one page.  Never raises for fetch or parse failures."""
        schemes = self.config.schemes
        page = Page(path=path, type=classify_type(path, schemes))
        url = fetch_url_for(path, self.config.base_url, schemes)

        try:
            target = httpx.URL(url)
        except httpx.InvalidURL as exc:
            self._record(page, CheckError.from_exception(
                ErrorKind.URI_PARSE, f"Could not build a URL for {path!r}.", "url", url, exc,
            ))
            return page
        if not target.is_absolute_url:
            self._record(page, CheckError(
                kind=ErrorKind.URI_PARSE,
                description=f"Could not build an absolute URL for {path!r}.",
                argname="url",
                argvalue=url,
            ))
            return page

        try:
            response = self._fetch(str(target))
        except httpx.UnsupportedProtocol as exc:
            # e.g. a redirect to ftp: or mailto:
            self._record(page, CheckError.from_exception(
                ErrorKind.URI_PARSE, f"No HTTP(S) URL to fetch for {path!r}.", "url", url, exc,
            ))
            return page
        except httpx.HTTPError as exc:
            self._record(page, CheckError.from_exception(
                ErrorKind.HTTP_RESPONSE, f"Fetching {url} failed.", "url", url, exc,
            ))
            return page

        page.status_code = response.status_code
        if response.is_error():
            logger.debug("HTTP %d for %s", response.status_code, url)
            return page
        page.found = True
        if not response.is_html():
            return page

        ids, errors = extract_ids(path, response.body)
        page.ids.extend(ids)
        for error in errors:
            self._record(page, error)

        if not is_onsite(path, schemes):
            return page
        links, errors = extract_links(path, response.body)
        page.links.extend(links)
        for error in errors:
            self._record(page, error)
        return page

    def _queue_links(self, page: Page) -> None:
        for link in page.links:
            candidate = resolve_candidate(link.origin_path, link.href, self.config.schemes)
            if candidate is None:
                continue
            if not is_web_target(candidate, self.config.schemes):
                logger.debug("Not checking %s", candidate)
                continue
            self.enqueue(candidate)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------
    def crawl(self) -> Snapshot:
        """Crawl from the site root until the frontier is empty."""
        self.started_at = datetime.now(timezone.utc)
        self.enqueue(ROOT_PATH)
        while self.pending:
            path = self._dequeue()
            if path in self.visited:
                continue
            logger.info("%4.4d queued:  Dequeueing %s", len(self.pending), path)
            page = self.visit(path)
            self.visited[path] = page
            self._queue_links(page)
        self.finished_at = datetime.now(timezone.utc)
        return self.snapshot()

    def snapshot(self) -> Snapshot:
        """Partition the visited map into an onsite/offsite :class:`Snapshot`."""
        onsite: Dict[str, Page] = {}
        offsite: Dict[str, Page] = {}
        for path, page in self.visited.items():
            if page.is_onsite(self.config):
                onsite[path] = page
            else:
                offsite[path] = page

        counters = {
            "base_url": self.config.base_url,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "onsite_pages": len(onsite),
            "offsite_pages": len(offsite),
            "links": sum(len(p.links) for p in onsite.values()),
            "exceptions": sum(len(p.exceptions) for p in self.visited.values()),
        }
        return Snapshot(onsite_pages=onsite, offsite_pages=offsite, counters=counters)


def crawl_site(config: CheckerConfig, fetch: Optional[FetchFn] = None) -> Snapshot:
    """Run the crawl stage and return its :class:`Snapshot`."""
    return Crawler(config, fetch=fetch).crawl()
