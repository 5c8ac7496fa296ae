"""CLI commands for baseline cache management"""

from pathlib import Path
from typing import Optional

import click

from baselinekit.cli.utils.logging import logger
from baselinekit.config import get_cache_root
from baselinekit.git.cache import CacheLocator


@click.group(name="cache")
def cache():
    """Inspect the baseline cache."""
    pass


@cache.command("list")
@click.option(
    "--cache-root",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding cached baselines.",
)
def list_entries(cache_root: Optional[str]):
    """List cached baseline working copies and their commits."""
    from baselinekit.git.backend import GitBackend

    root = Path(cache_root).expanduser() if cache_root else get_cache_root()
    entries = CacheLocator(root).entries(GitBackend())

    if not entries:
        logger.info(f"No cached baselines under {root}")
        return

    logger.info(f"Cache root: {root}")
    for entry in entries:
        sha = entry.commit_sha[:7] if entry.commit_sha else "unknown"
        click.echo(f"{entry.cache_name}/{entry.ref_dir}  {sha}")
