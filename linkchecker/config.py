"""Centralised settings for the documentation link checker.

Runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

The crawl and verify stages never read :data:`settings` directly; they take
the immutable :class:`CheckerConfig` built by :meth:`Settings.checker_config`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

DEFAULT_BASE_URL = "https://docs.ruby-lang.org/en/master"

# Schemes registered by a stock URI library.
DEFAULT_SCHEMES: tuple[str, ...] = (
    "file", "ftp", "http", "https", "ldap", "ldaps", "mailto", "ws", "wss",
)

VERBOSITY_LEVELS = ("quiet", "minimal", "debug")


def _schemes_from_env() -> tuple[str, ...]:
    raw = os.environ.get("LINKCHECKER_SCHEMES")
    if not raw:
        return DEFAULT_SCHEMES
    return tuple(s.strip().lower() for s in raw.split(",") if s.strip())


@dataclass(frozen=True)
class CheckerConfig:
    """Immutable values the core needs, passed explicitly to each stage."""

    base_url: str = DEFAULT_BASE_URL
    schemes: tuple[str, ...] = DEFAULT_SCHEMES
    timeout: float = 30.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(self, "schemes", tuple(s.lower() for s in self.schemes))


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Site
    # ------------------------------------------------------------------
    base_url: str = field(
        default_factory=lambda: os.environ.get("LINKCHECKER_BASE_URL", DEFAULT_BASE_URL)
    )
    schemes: tuple[str, ...] = field(default_factory=_schemes_from_env)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("LINKCHECKER_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Stash / output
    # ------------------------------------------------------------------
    stash_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("LINKCHECKER_STASH_DIR", "ruby_link_checker")
        )
    )
    verbosity: str = field(
        default_factory=lambda: os.environ.get("LINKCHECKER_VERBOSITY", "minimal")
    )

    def checker_config(self, base_url: str | None = None) -> CheckerConfig:
        """Freeze the current settings into a :class:`CheckerConfig`."""
        return CheckerConfig(
            base_url=base_url or self.base_url,
            schemes=self.schemes,
            timeout=self.request_timeout,
        )


# Module-level singleton, read by the CLI only:
#   from linkchecker.config import settings
settings = Settings()
