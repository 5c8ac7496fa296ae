"""CLI commands for baseline synchronization and change checks"""

import json
import sys
from pathlib import Path
from typing import Optional

import click

from baselinekit.baseline import (
    ChangeReporter,
    SyncEngine,
    format_report,
    read_excerpt,
)
from baselinekit.cli.utils.logging import logger
from baselinekit.model.baseline import SyncOptions
from baselinekit.model.repo import RepoCheck, RepoListError


def make_engine(cache_root: Optional[str]) -> SyncEngine:
    """Build the engine; the only place the CLI decides on a cache root."""
    if cache_root:
        return SyncEngine(cache_root=Path(cache_root).expanduser())
    return SyncEngine.from_config()


baseline_option = click.option(
    "--baseline",
    "-b",
    "baseline",
    default=None,
    help="Baseline git URL or local path (overrides BASELINEKIT_BASELINE).",
)
cache_root_option = click.option(
    "--cache-root",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding cached baselines.",
)


@click.group(name="baseline")
@click.pass_context
def baseline(ctx):
    """Resolve, synchronize and check the document baseline."""
    ctx.ensure_object(dict)


@baseline.command("ensure")
@baseline_option
@cache_root_option
@click.option(
    "--check-only",
    is_flag=True,
    help="Only check the remote for changes, never clone or fetch.",
)
@click.option(
    "--skip-fetch-if-unchanged",
    is_flag=True,
    help="Probe the remote first and skip the fetch when nothing changed.",
)
@click.option(
    "--pin-ref",
    is_flag=True,
    help="Do not fast-forward the tracked reference after checkout.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
def ensure(
    baseline: Optional[str],
    cache_root: Optional[str],
    check_only: bool,
    skip_fetch_if_unchanged: bool,
    pin_ref: bool,
    as_json: bool,
):
    """Make the baseline available locally and print where it lives.

    Example:

      baselinekit baseline ensure --skip-fetch-if-unchanged
    """
    engine = make_engine(cache_root)
    options = SyncOptions(
        check_only=check_only,
        skip_fetch_if_unchanged=skip_fetch_if_unchanged,
        track_moving_head=not pin_ref,
    )
    result = engine.ensure(baseline, options)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif result.ok:
        logger.info(f"Baseline: {result.baseline_url} ({result.baseline_source})")
        logger.info(f"Ref:      {result.ref} ({result.ref_source})")
        logger.info(f"Root:     {result.root if result.root is not None else '-'}")
        logger.info(f"Commit:   {result.commit_sha or 'unknown'}")
        if result.skipped_fetch:
            logger.info("Fetch skipped: no remote changes")
        if result.probe_error:
            logger.warning(f"Remote check failed: {result.probe_error}")
    else:
        logger.error(click.style("[ERROR]", fg="red", bold=True) + f" {result.error}")

    if not result.ok:
        sys.exit(1)


@baseline.command("check")
@baseline_option
@cache_root_option
def check(baseline: Optional[str], cache_root: Optional[str]):
    """Check whether the remote baseline changed, without fetching content."""
    reporter = ChangeReporter(make_engine(cache_root))
    report = reporter.check_one(baseline)
    click.echo(format_report(report))
    if report.error:
        sys.exit(1)


@baseline.command("check-many")
@click.argument("repos_file", type=click.Path(exists=True, dir_okay=False))
@cache_root_option
@click.option("--json", "as_json", is_flag=True, help="Print the reports as JSON.")
def check_many(repos_file: str, cache_root: Optional[str], as_json: bool):
    """Check every repository listed in a YAML file for remote changes.

    The file holds a list of entries with ``url``, optional ``ref`` and
    optional ``cached_sha``.
    """
    try:
        repos = RepoCheck.list_from_yaml(Path(repos_file).read_text(), repos_file)
    except RepoListError as e:
        logger.error(f"Failed to load repository list: {e}")
        sys.exit(1)

    reporter = ChangeReporter(make_engine(cache_root))
    reports = reporter.check_many(repos)

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in reports], indent=2))
    else:
        for report in reports:
            click.echo(format_report(report))

    if any(r.error for r in reports):
        sys.exit(1)


@baseline.command("excerpt")
@click.argument("path")
@baseline_option
@cache_root_option
@click.option("--anchor", "-a", default=None, help="Heading to excerpt from.")
@click.option(
    "--max-words", type=click.IntRange(min=1), default=25, show_default=True
)
def excerpt(
    path: str,
    baseline: Optional[str],
    cache_root: Optional[str],
    anchor: Optional[str],
    max_words: int,
):
    """Print a short excerpt of a document in the baseline."""
    result = make_engine(cache_root).ensure(baseline)
    if result.root is None:
        logger.error(f"Baseline unavailable: {result.error}")
        sys.exit(1)

    found = read_excerpt(result.root, path, anchor=anchor, max_words=max_words)
    if found is None:
        logger.info(f"No excerpt found for {path}")
        return

    click.echo(found.excerpt)
    click.echo(f"-- {found.citation}")
