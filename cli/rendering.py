"""Utilities for rendering a verified snapshot as a plain-text report."""

from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional

from linkchecker.config import CheckerConfig
from linkchecker.models import Link, LinkStatus, Page, Snapshot
from linkchecker.paths import is_onsite, split_fragment
from linkchecker.snapshot import TIME_FORMAT
from linkchecker.verifier import severity_of

_GITHUB_LINE = re.compile(r"^L\d+")

_LABELS = {
    LinkStatus.PATH_NOT_FOUND: "Path Not Found",
    LinkStatus.FRAGMENT_NOT_FOUND: "Fragment Not Found",
}


def is_suppressed_page(path: str, report_news: bool) -> bool:
    """NEWS pages document historical links and are exempt unless asked for."""
    return path.startswith("NEWS") and not report_news


def is_github_line_link(href: str) -> bool:
    path, fragment = split_fragment(href)
    return (
        "github.com/" in path
        and "/blob/" in path
        and fragment is not None
        and bool(_GITHUB_LINE.match(fragment))
    )


def broken_links(page: Page, report_github_lines: bool = False) -> List[Link]:
    """Links on *page* that failed verification, minus suppressed ones."""
    return [
        link for link in page.links
        if link.status in _LABELS
        and (report_github_lines or not is_github_line_link(link.href))
    ]


def count_blocking(snapshot: Snapshot, report_news: bool = False) -> int:
    """Number of missing paths on pages that are not exempt from reporting."""
    return sum(
        1
        for path, page in snapshot.onsite_pages.items()
        if not is_suppressed_page(path, report_news)
        for link in page.links
        if link.status is LinkStatus.PATH_NOT_FOUND
    )


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _summary(snapshot: Snapshot, config: CheckerConfig) -> List[str]:
    started = _parse_time(snapshot.counters.get("started_at"))
    finished = _parse_time(snapshot.counters.get("finished_at"))
    if started and finished:
        minutes, seconds = divmod(int((finished - started).total_seconds()), 60)
        duration = f"{minutes}:{seconds:02d}"
    else:
        duration = "(unknown)"

    links = [link for page in snapshot.onsite_pages.values() for link in page.links]
    onsite_links = sum(1 for link in links if is_onsite(link.href, config.schemes))
    rows = [
        ("Start Time", started.strftime(TIME_FORMAT) if started else "(unknown)"),
        ("End Time", finished.strftime(TIME_FORMAT) if finished else "(unknown)"),
        ("Duration", duration),
        ("Onsite Pages", len(snapshot.onsite_pages)),
        ("Offsite Pages", len(snapshot.offsite_pages)),
        ("Onsite Links", onsite_links),
        ("Offsite Links", len(links) - onsite_links),
        ("Paths Not Found", sum(1 for link in links if link.status is LinkStatus.PATH_NOT_FOUND)),
        ("Fragments Not Found", sum(1 for link in links if link.status is LinkStatus.FRAGMENT_NOT_FOUND)),
    ]
    width = max(len(label) for label, _ in rows)
    return ["Summary"] + [f"  {label:<{width}} : {value}" for label, value in rows]


def render_report(
    snapshot: Snapshot,
    config: CheckerConfig,
    report_news: bool = False,
    report_github_lines: bool = False,
) -> str:
    """Render *snapshot* as text: a summary, then every page with problems.

    Pages are listed in path order; the site root is shown as the base URL.
    """
    lines = ["Link Checker Report", ""]
    lines.extend(_summary(snapshot, config))

    for path in sorted(snapshot.onsite_pages):
        page = snapshot.onsite_pages[path]
        if is_suppressed_page(path, report_news):
            continue
        broken = broken_links(page, report_github_lines)
        if not broken and not page.exceptions:
            continue

        lines.append("")
        lines.append(f"== {path or config.base_url} ==")
        for link in broken:
            target, fragment = split_fragment(link.href)
            lines.append(f"  {_LABELS[link.status]} [{severity_of(link, snapshot, config)}]")
            lines.append(f"    Path        : {target}")
            lines.append(f"    Fragment    : {fragment or ''}")
            lines.append(f"    Text        : {link.text}")
            lines.append(f"    Line Number : {link.line_number}")
        for error in page.exceptions:
            lines.append(f"  Error [{error.kind.value}] {error.description}")
            lines.append(f"    {error.argname}: {error.argvalue.strip()}")
            if error.cause:
                lines.append(f"    cause: {error.cause_type}: {error.cause}")
    return "\n".join(lines)
