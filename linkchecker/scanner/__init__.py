"""Scanner package — lenient anchor & identifier extraction."""

from linkchecker.scanner.anchors import extract_links
from linkchecker.scanner.ids import extract_ids

__all__ = ["extract_links", "extract_ids"]
