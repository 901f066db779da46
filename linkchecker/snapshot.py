"""Stash files: the JSON form of a :class:`Snapshot` between crawl and verify.

Layout on disk::

    <stash_dir>/<timestamp>/stash.json      # written by the crawl stage
    <stash_dir>/<timestamp>/verified.json   # written by the verify stage
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from linkchecker.models import Snapshot

TIME_FORMAT = "%Y-%m-%d-%a-%H.%M.%S%z"
STASH_FILENAME = "stash.json"
VERIFIED_FILENAME = "verified.json"


class SnapshotError(ValueError):
    """Raised when a stash file cannot be read back into a :class:`Snapshot`."""


def snapshot_to_json(snapshot: Snapshot) -> str:
    return json.dumps(snapshot.to_dict(), indent=2)


def snapshot_from_json(data: str) -> Snapshot:
    try:
        return Snapshot.from_dict(json.loads(data))
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"Stash is not valid JSON: {exc}") from exc
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise SnapshotError(f"Stash has an unexpected shape: {exc!r}") from exc


def write_snapshot(snapshot: Snapshot, path: Path) -> Path:
    """Write *snapshot* to *path*, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(snapshot_to_json(snapshot), encoding="utf-8")
    return path


def save_snapshot(snapshot: Snapshot, directory: Path, when: datetime | None = None) -> Path:
    """Write *snapshot* to a new timestamped sub-directory of *directory*."""
    when = when or datetime.now().astimezone()
    return write_snapshot(snapshot, directory / when.strftime(TIME_FORMAT) / STASH_FILENAME)


def load_snapshot(path: Path) -> Snapshot:
    """Read a stash file written by :func:`write_snapshot`.

    Raises:
        SnapshotError: If the file is missing or does not hold a snapshot.
    """
    if not path.is_file():
        raise SnapshotError(f"No stash file at {path}")
    return snapshot_from_json(path.read_text(encoding="utf-8"))
