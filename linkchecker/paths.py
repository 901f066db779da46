"""Onsite/offsite classification and site-relative path handling.

Every function here is pure.  Scheme-dependent helpers take the recognised
scheme names explicitly (normally ``CheckerConfig.schemes``).
"""

from __future__ import annotations

import posixpath
import re
from functools import lru_cache
from typing import Iterable, Optional, Tuple

from linkchecker.config import DEFAULT_SCHEMES
from linkchecker.models import PageType

_LEADING_LETTER = re.compile(r"[A-Za-z]")
_LEADING_LOWER_OR_DOC = re.compile(r"([a-z]|NEWS|README|COPYING|LEGAL)")
_LEADING_UPPER = re.compile(r"[A-Z]")

_WEB_SCHEME = re.compile(r"https?:", re.IGNORECASE)


@lru_cache(maxsize=16)
def _scheme_pattern(schemes: Tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(s) for s in schemes)
    return re.compile(rf"(?:{alternatives}):", re.IGNORECASE)


def _has_scheme(path: str, schemes: Iterable[str]) -> bool:
    """A recognised scheme name followed by ``:`` (``File.html`` has none)."""
    return bool(_scheme_pattern(tuple(s.lower() for s in schemes)).match(path))


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def is_onsite(path: str, schemes: Iterable[str] = DEFAULT_SCHEMES) -> bool:
    """Return ``True`` if *path* belongs to the documentation site."""
    if path == "" or path.startswith("./") or path.startswith("#"):
        return True
    if _has_scheme(path, schemes):
        return False
    return bool(_LEADING_LETTER.match(path))


def classify_type(path: str, schemes: Iterable[str] = DEFAULT_SCHEMES) -> PageType:
    """Label *path* for display.  Rules are tried in order; first match wins."""
    if _has_scheme(path, schemes):
        return PageType.URL
    if path.startswith("./") or path.startswith("#"):
        return PageType.CLASS
    if path == "":
        return PageType.PAGE
    if path.startswith("fatal"):
        return PageType.CLASS
    if _LEADING_LOWER_OR_DOC.match(path):
        return PageType.PAGE
    if _LEADING_UPPER.match(path):
        return PageType.CLASS
    return PageType.PAGE


def is_web_target(path: str, schemes: Iterable[str] = DEFAULT_SCHEMES) -> bool:
    """Return ``True`` if *path* can be fetched over HTTP(S).

    Onsite paths always can; offsite ones only with an ``http``/``https``
    scheme (``mailto:``, ``ftp:`` and protocol-relative URLs are not checked).
    """
    if is_onsite(path, schemes):
        return True
    return bool(_WEB_SCHEME.match(path))


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------

def split_fragment(href: str) -> Tuple[str, Optional[str]]:
    """Split *href* on the first ``#``; the fragment is ``None`` when absent."""
    path, sep, fragment = href.partition("#")
    return path, (fragment if sep else None)


def normalize_path(path: str) -> str:
    """Strip leading ``./`` and trailing ``/`` segments."""
    while path.startswith("./"):
        path = path[2:]
    while path.endswith("/"):
        path = path[:-1]
    return path


def normalize_href(href: str) -> str:
    """Drop the fragment from *href*, then normalise the remaining path."""
    path, _ = split_fragment(href)
    return normalize_path(path)


def dirname(path: str) -> str:
    """Directory part of *path*, ``"."`` when there is none."""
    return posixpath.dirname(path.rstrip("/")) or "."


def strip_parent_segments(origin_path: str, href: str) -> Tuple[str, str]:
    """Consume leading ``../`` segments of *href*, walking up from *origin_path*.

    Returns ``(resolved_dir, remaining_href)``.
    """
    resolved_dir = dirname(origin_path)
    while href.startswith("../"):
        href = href[3:]
        resolved_dir = dirname(resolved_dir)
    return resolved_dir, href


def resolve_candidate(
    origin_path: str,
    href: str,
    schemes: Iterable[str] = DEFAULT_SCHEMES,
) -> Optional[str]:
    """Return the crawl-map key that *href* on *origin_path* points at.

    Fragment-only hrefs point back at their own page and yield ``None``.
    """
    if href.startswith("#"):
        return None
    resolved_dir, rest = strip_parent_segments(origin_path, href)
    candidate = normalize_href(rest)
    if is_onsite(candidate, schemes) and resolved_dir != ".":
        candidate = posixpath.join(resolved_dir, candidate).rstrip("/")
    return candidate


def fetch_url_for(path: str, base_url: str, schemes: Iterable[str] = DEFAULT_SCHEMES) -> str:
    """Return the URL to request for crawl-map key *path*."""
    if is_onsite(path, schemes):
        return f"{base_url.rstrip('/')}/{path}"
    return path
