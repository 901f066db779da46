"""Dataclass models for the crawl graph.

These are plain Python objects.  The snapshot layer serialises /
deserialises to and from these types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from linkchecker.errors import CheckError

if TYPE_CHECKING:
    from linkchecker.config import CheckerConfig


@dataclass
class FetchResponse:
    """The final HTTP response for a single URL fetch."""

    url: str
    status_code: int
    content_type: str
    body: str

    def is_html(self) -> bool:
        return "html" in self.content_type.lower()

    def is_error(self) -> bool:
        """Status ``0`` or anything from 400 up counts as a failed page."""
        return self.status_code == 0 or self.status_code >= 400


class PageType(str, Enum):
    PAGE = "page"
    CLASS = "class"
    URL = "url"
    UNKNOWN = "unknown"


class LinkStatus(str, Enum):
    UNKNOWN = "unknown"
    VALID = "valid"
    PATH_NOT_FOUND = "path_not_found"
    FRAGMENT_NOT_FOUND = "fragment_not_found"


@dataclass
class Link:
    origin_path: str
    line_number: int
    href: str
    text: str = ""
    resolved_dir: str = "."
    status: LinkStatus = LinkStatus.UNKNOWN

    def to_dict(self) -> dict[str, Any]:
        return {
            "origin_path": self.origin_path,
            "line_number": self.line_number,
            "href": self.href,
            "text": self.text,
            "resolved_dir": self.resolved_dir,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Link:
        return cls(
            origin_path=data["origin_path"],
            line_number=int(data["line_number"]),
            href=data["href"],
            text=data.get("text", ""),
            resolved_dir=data.get("resolved_dir", "."),
            status=LinkStatus(data.get("status", LinkStatus.UNKNOWN.value)),
        )


@dataclass
class Page:
    """One crawled path.  *type* is inferred from *path* when not given."""

    path: str
    type: PageType | None = None
    found: bool = False
    status_code: int | None = None
    links: list[Link] = field(default_factory=list)
    ids: list[str] = field(default_factory=list)
    exceptions: list[CheckError] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.type is None:
            from linkchecker.paths import classify_type  # noqa: PLC0415

            self.type = classify_type(self.path)

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------
    def is_onsite(self, config: CheckerConfig) -> bool:
        from linkchecker.paths import is_onsite  # noqa: PLC0415

        return is_onsite(self.path, config.schemes)

    def has_id(self, value: str) -> bool:
        return value in self.ids

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "type": self.type.value,
            "found": self.found,
            "status_code": self.status_code,
            "links": [link.to_dict() for link in self.links],
            "ids": list(self.ids),
            "exceptions": [exc.to_dict() for exc in self.exceptions],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Page:
        return cls(
            path=data["path"],
            type=PageType(data["type"]) if "type" in data else None,
            found=bool(data.get("found", False)),
            status_code=data.get("status_code"),
            links=[Link.from_dict(d) for d in data.get("links", [])],
            ids=list(data.get("ids", [])),
            exceptions=[CheckError.from_dict(d) for d in data.get("exceptions", [])],
        )


@dataclass
class Snapshot:
    """The complete crawl graph handed from the crawl stage to verification."""

    onsite_pages: dict[str, Page] = field(default_factory=dict)
    offsite_pages: dict[str, Page] = field(default_factory=dict)
    counters: dict[str, Any] = field(default_factory=dict)

    def all_pages(self) -> dict[str, Page]:
        """Onsite and offsite pages merged into one lookup map."""
        return {**self.offsite_pages, **self.onsite_pages}

    def to_dict(self) -> dict[str, Any]:
        return {
            "onsite_pages": {p: page.to_dict() for p, page in self.onsite_pages.items()},
            "offsite_pages": {p: page.to_dict() for p, page in self.offsite_pages.items()},
            "counters": dict(self.counters),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Snapshot:
        return cls(
            onsite_pages={p: Page.from_dict(d) for p, d in data["onsite_pages"].items()},
            offsite_pages={p: Page.from_dict(d) for p, d in data["offsite_pages"].items()},
            counters=dict(data.get("counters", {})),
        )
