"""Anchor extraction: turns page text into an ordered list of :class:`Link`.

The scan is line oriented.  An anchor's opening and closing tags may sit on
different lines, so lines are accumulated into a *snippet* from the line that
opens an anchor until the last anchor opened in the snippet is closed.  A
snippet can hold several anchors; it is split on the opening token and each
piece is rebuilt into a standalone ``<a ...>...</a>`` fragment.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import Iterator, List, Tuple

from linkchecker.errors import CheckError, ErrorKind
from linkchecker.models import Link
from linkchecker.paths import strip_parent_segments
from linkchecker.scanner.markup import parse_fragment, repair_anchor

logger = logging.getLogger(__name__)

OPEN_TOKEN = "<a "
CLOSE_TOKEN = "</a>"

_IMAGE_TAG = re.compile(r"<img\b", re.IGNORECASE)


def _is_closed(snippet: str) -> bool:
    return snippet.rfind(CLOSE_TOKEN) > snippet.rfind(OPEN_TOKEN)


def iter_snippets(text: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(line_number, snippet)`` for each run of lines holding anchors.

    ``line_number`` is the 1-based line on which the snippet starts.  A
    snippet left open at the end of the text is yielded as-is.
    """
    lines = text.splitlines(keepends=True)
    i = 0
    while i < len(lines):
        line = lines[i]
        i += 1
        if OPEN_TOKEN not in line:
            continue
        line_number = i
        snippet = line
        while not _is_closed(snippet) and i < len(lines):
            snippet += lines[i]
            i += 1
        yield line_number, snippet


def split_anchors(snippet: str) -> List[str]:
    """Rebuild each anchor in *snippet* as a standalone fragment.

    Text before the first opening token is discarded.
    """
    segments = snippet.split(OPEN_TOKEN)[1:]
    return [
        f"{OPEN_TOKEN}{segment.split(CLOSE_TOKEN, 1)[0]}{CLOSE_TOKEN}"
        for segment in segments
    ]


def _anchor_text(element: ET.Element) -> str:
    text = element.text or ""
    if not text.strip() and len(element) == 1:
        text = element[0].text or ""
    return text.strip()


def extract_links(origin_path: str, text: str) -> Tuple[List[Link], List[CheckError]]:
    """Return the links found in *text* and any anchors that failed to parse.

    Image wrappers and anchors without an ``href`` (named targets) produce
    no link.
    """
    links: List[Link] = []
    errors: List[CheckError] = []
    for line_number, snippet in iter_snippets(text):
        for anchor in split_anchors(snippet):
            if _IMAGE_TAG.search(anchor):
                continue
            try:
                element = parse_fragment(repair_anchor(anchor))
            except ET.ParseError as exc:
                logger.debug("Unparseable anchor at %s:%d: %r", origin_path, line_number, anchor)
                errors.append(
                    CheckError.from_exception(
                        ErrorKind.ANCHOR_PARSE,
                        f"Could not parse anchor on line {line_number} of {origin_path!r}.",
                        "anchor",
                        anchor,
                        exc,
                    )
                )
                continue

            href = element.get("href")
            if href is None:
                continue
            resolved_dir, _ = strip_parent_segments(origin_path, href)
            links.append(
                Link(
                    origin_path=origin_path,
                    line_number=line_number,
                    href=href,
                    text=_anchor_text(element),
                    resolved_dir=resolved_dir,
                )
            )
    return links, errors
