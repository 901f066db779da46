"""Documentation link checker — crawl a docs site and verify its links."""

__version__ = "0.1.0"
