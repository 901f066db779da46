"""Identifier extraction: collects ``id``/``name`` values that fragments can target.

Identifiers are assumed never to span lines, so each line is handled on its
own: repaired by :func:`linkchecker.scanner.markup.repair_id_line`, parsed
under a synthetic root, and searched at every depth.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import List, Tuple

from linkchecker.errors import CheckError, ErrorKind
from linkchecker.scanner.markup import parse_wrapped, repair_id_line

logger = logging.getLogger(__name__)

ID_ATTRIBUTES = ("id", "name")

_ID_TOKEN = re.compile(r"\b(?:id|name)\s*=")

# Footnote rules and separators carry ids that no link ever targets.
DECORATION_PATTERNS = (
    re.compile(r"^\s*<hr\b"),
    re.compile(r'class="[^"]*\bfootnote-(?:rule|separator)\b'),
)


def is_decoration(line: str) -> bool:
    return any(pattern.search(line) for pattern in DECORATION_PATTERNS)


def extract_ids(origin_path: str, text: str) -> Tuple[List[str], List[CheckError]]:
    """Return identifiers defined in *text*, in order of first appearance."""
    ids: List[str] = []
    errors: List[CheckError] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        if "<" not in line or not _ID_TOKEN.search(line):
            continue
        if is_decoration(line):
            continue
        repaired = repair_id_line(line)
        try:
            root = parse_wrapped(repaired)
        except ET.ParseError as exc:
            logger.debug("Unparseable id line %s:%d: %r", origin_path, line_number, line)
            errors.append(
                CheckError.from_exception(
                    ErrorKind.ID_PARSE,
                    f"Could not parse identifier line {line_number} of {origin_path!r}.",
                    "line",
                    line,
                    exc,
                )
            )
            continue

        for element in root.iter():
            if element is root:
                continue
            for attr in ID_ATTRIBUTES:
                value = element.get(attr)
                if value and value not in ids:
                    ids.append(value)
    return ids, errors
