"""Link checker CLI — entry-point for the crawl and verify stages.

Usage:
    python cli/main.py --help

Sub-commands:
    crawl   → crawl the docs site and write a stash
    verify  → verify a stash and print the report
    check   → crawl, then verify the fresh stash
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from linkchecker.xxx
# import ...` works when the CLI is invoked as `python cli/main.py` from any
# working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import logging
from typing import Optional

import typer

from cli.rendering import count_blocking, render_report
from linkchecker.config import VERBOSITY_LEVELS, CheckerConfig, settings
from linkchecker.crawler import crawl_site
from linkchecker.models import Snapshot
from linkchecker.snapshot import (
    VERIFIED_FILENAME,
    SnapshotError,
    load_snapshot,
    save_snapshot,
    write_snapshot,
)
from linkchecker.verifier import verify

app = typer.Typer(
    name="linkchecker",
    help="Crawl a documentation site and check its links and fragments.",
    no_args_is_help=True,
)

_LOG_LEVELS = {
    "quiet": logging.WARNING,
    "minimal": logging.INFO,
    "debug": logging.DEBUG,
}


def _configure_logging(verbosity: str) -> None:
    if verbosity not in VERBOSITY_LEVELS:
        typer.echo(f"Unknown verbosity {verbosity!r}. Use: {' | '.join(VERBOSITY_LEVELS)}")
        raise typer.Exit(code=1)
    logging.basicConfig(
        level=_LOG_LEVELS[verbosity],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _run_crawl(config: CheckerConfig, stash_dir: Optional[Path]) -> tuple[Snapshot, Path]:
    typer.echo(f"[crawl] Crawling {config.base_url} …")
    snapshot = crawl_site(config)
    stash_path = save_snapshot(snapshot, stash_dir or settings.stash_dir)
    typer.echo(
        f"[crawl] {len(snapshot.onsite_pages)} onsite / "
        f"{len(snapshot.offsite_pages)} offsite pages"
    )
    typer.echo(f"[crawl] Stash file: {stash_path}")
    return snapshot, stash_path


def _run_verify(
    snapshot: Snapshot,
    config: CheckerConfig,
    output: Path,
    report_news: bool,
    report_github_lines: bool,
    fail_on_broken: bool,
) -> None:
    verify(snapshot, config)
    write_snapshot(snapshot, output)
    typer.echo(f"[verify] Verified snapshot: {output}")
    typer.echo("")
    typer.echo(render_report(snapshot, config, report_news, report_github_lines))
    if fail_on_broken and count_blocking(snapshot, report_news):
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@app.command("crawl")
def crawl(
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Root URL of the docs site."),
    stash_dir: Optional[Path] = typer.Option(None, "--stash-dir", help="Where stash files go."),
    verbosity: str = typer.Option(settings.verbosity, help="quiet | minimal | debug"),
) -> None:
    """Crawl the documentation site and write a stash file."""
    _configure_logging(verbosity)
    _run_crawl(settings.checker_config(base_url), stash_dir)


@app.command("verify")
def verify_cmd(
    stash: Path = typer.Argument(..., help="Stash file written by 'crawl'."),
    output: Optional[Path] = typer.Option(None, "--output", help="Where to write the verified snapshot."),
    report_news: bool = typer.Option(False, "--report-news", help="Report broken links on NEWS pages."),
    report_github_lines: bool = typer.Option(
        False, "--report-github-lines", help="Report GitHub line-number fragments."
    ),
    fail_on_broken: bool = typer.Option(
        False, "--fail-on-broken", help="Exit with status 1 if any path is not found."
    ),
    verbosity: str = typer.Option(settings.verbosity, help="quiet | minimal | debug"),
) -> None:
    """Verify the links recorded in a stash file and print the report."""
    _configure_logging(verbosity)
    try:
        snapshot = load_snapshot(stash)
    except SnapshotError as exc:
        typer.echo(f"[verify] {exc}")
        raise typer.Exit(code=1)

    config = settings.checker_config(snapshot.counters.get("base_url"))
    _run_verify(
        snapshot,
        config,
        output or stash.with_name(VERIFIED_FILENAME),
        report_news,
        report_github_lines,
        fail_on_broken,
    )


@app.command("check")
def check(
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Root URL of the docs site."),
    stash_dir: Optional[Path] = typer.Option(None, "--stash-dir", help="Where stash files go."),
    report_news: bool = typer.Option(False, "--report-news", help="Report broken links on NEWS pages."),
    report_github_lines: bool = typer.Option(
        False, "--report-github-lines", help="Report GitHub line-number fragments."
    ),
    fail_on_broken: bool = typer.Option(
        False, "--fail-on-broken", help="Exit with status 1 if any path is not found."
    ),
    verbosity: str = typer.Option(settings.verbosity, help="quiet | minimal | debug"),
) -> None:
    """Crawl the site, then verify the fresh stash."""
    _configure_logging(verbosity)
    config = settings.checker_config(base_url)
    _, stash_path = _run_crawl(config, stash_dir)
    # The verify stage only ever sees the persisted stash.
    snapshot = load_snapshot(stash_path)
    _run_verify(
        snapshot,
        config,
        stash_path.with_name(VERIFIED_FILENAME),
        report_news,
        report_github_lines,
        fail_on_broken,
    )


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
