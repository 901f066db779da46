"""Verification stage: assigns a :class:`LinkStatus` to every onsite link.

Runs against a completed :class:`Snapshot` and never fetches anything.
Only ``Link.status`` is written; pages and their identifiers are left as-is.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Mapping

from linkchecker.config import CheckerConfig
from linkchecker.models import Link, LinkStatus, Page, Snapshot
from linkchecker.paths import is_onsite, is_web_target, resolve_candidate, split_fragment

logger = logging.getLogger(__name__)


@dataclass
class VerificationSummary:
    statuses: Counter = field(default_factory=Counter)
    onsite_links: int = 0
    offsite_links: int = 0

    @property
    def paths_not_found(self) -> int:
        return self.statuses[LinkStatus.PATH_NOT_FOUND]

    @property
    def fragments_not_found(self) -> int:
        return self.statuses[LinkStatus.FRAGMENT_NOT_FOUND]


def _known(pages: Mapping[str, Page], path: str) -> Page | None:
    page = pages.get(path)
    if page is None or not page.found:
        return None
    return page


def verify_link(
    link: Link,
    page: Page,
    pages: Mapping[str, Page],
    config: CheckerConfig,
) -> LinkStatus:
    """Resolve the status of *link*, which appears on *page*.

    Links to targets that cannot be fetched over HTTP(S) (``mailto:`` and
    the like) are not checked and stay :attr:`LinkStatus.UNKNOWN`.

    An empty fragment (a bare ``#``, or ``page.html#``) names no identifier
    and is treated as a link to the page itself, so it is ``valid`` even
    though ``""`` is never in a page's ids.
    """
    path, fragment = split_fragment(link.href)

    if path == "":
        # A bare "#" points at the top of the page.
        if not fragment or page.has_id(fragment):
            return LinkStatus.VALID
        return LinkStatus.FRAGMENT_NOT_FOUND

    target_path = resolve_candidate(link.origin_path, link.href, config.schemes)
    if target_path is None or not is_web_target(target_path, config.schemes):
        return LinkStatus.UNKNOWN

    target = _known(pages, target_path)
    if not fragment:
        return LinkStatus.VALID if target is not None else LinkStatus.PATH_NOT_FOUND

    if target is None:
        return LinkStatus.PATH_NOT_FOUND
    if target.has_id(fragment):
        return LinkStatus.VALID
    return LinkStatus.FRAGMENT_NOT_FOUND


def verify(snapshot: Snapshot, config: CheckerConfig) -> VerificationSummary:
    """Set the status of every link on every onsite page of *snapshot*."""
    pages = snapshot.all_pages()
    summary = VerificationSummary()
    for page in snapshot.onsite_pages.values():
        for link in page.links:
            link.status = verify_link(link, page, pages, config)
            summary.statuses[link.status] += 1
            if is_onsite(link.href, config.schemes):
                summary.onsite_links += 1
            else:
                summary.offsite_links += 1
            if link.status in (LinkStatus.PATH_NOT_FOUND, LinkStatus.FRAGMENT_NOT_FOUND):
                logger.debug(
                    "%s:%d %s -> %s", page.path, link.line_number, link.href, link.status.value
                )
    logger.info(
        "Verified %d links: %d paths not found, %d fragments not found",
        summary.onsite_links + summary.offsite_links,
        summary.paths_not_found,
        summary.fragments_not_found,
    )
    return summary


def severity_of(link: Link, snapshot: Snapshot, config: CheckerConfig) -> str:
    """Classify a link's status as ``good``, ``iffy``, ``bad`` or ``info``.

    Fragments missing from offsite pages are only ``iffy``: identifiers on
    pages outside the site are gathered best-effort.
    """
    if link.status is LinkStatus.VALID:
        return "good"
    if link.status is LinkStatus.PATH_NOT_FOUND:
        return "bad"
    if link.status is LinkStatus.FRAGMENT_NOT_FOUND:
        target = resolve_candidate(link.origin_path, link.href, config.schemes)
        if target is not None and target in snapshot.offsite_pages:
            return "iffy"
        return "bad"
    return "info"
