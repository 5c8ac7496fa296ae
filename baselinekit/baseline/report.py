"""Read-only change checks over the probe and sync engine."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from baselinekit.baseline.engine import SyncEngine
from baselinekit.constants import SHORT_SHA_LENGTH
from baselinekit.git.probe import RemoteProbe
from baselinekit.model.baseline import ChangeReport, SyncOptions
from baselinekit.model.repo import RepoCheck

logger = logging.getLogger(__name__)

MAX_WORKERS = 8


def _short(sha: Optional[str]) -> str:
    return sha[:SHORT_SHA_LENGTH] if sha else "unknown"


class ChangeReporter:
    """Checks one baseline, or many repositories, for remote changes."""

    def __init__(self, engine: SyncEngine, probe: Optional[RemoteProbe] = None):
        self.engine = engine
        self.probe = probe or engine.probe

    def check_one(self, explicit_override: Optional[str] = None) -> ChangeReport:
        """
        Check the resolved baseline for changes without fetching content.

        Local-path baselines have no remote and always report unchanged.
        """
        result = self.engine.ensure(explicit_override, SyncOptions(check_only=True))
        if not result.ok:
            return ChangeReport(
                url=result.baseline_url,
                ref=result.ref,
                changed=True,
                error=result.error,
            )
        return ChangeReport(
            url=result.baseline_url,
            ref=result.ref,
            changed=bool(result.changed),
            current_sha=result.current_sha,
            cached_sha=result.commit_sha if result.root is not None else None,
            error=result.probe_error,
        )

    def check_many(self, repos: Sequence[RepoCheck]) -> List[ChangeReport]:
        """
        Probe several repositories concurrently.

        Each entry is independent; the i-th report belongs to the i-th input.
        """
        if not repos:
            return []

        def _check(repo: RepoCheck) -> ChangeReport:
            probe = self.probe.probe(repo.url, repo.ref, repo.cached_sha)
            return ChangeReport(
                url=repo.url,
                ref=repo.ref,
                changed=probe.changed,
                current_sha=probe.current_sha,
                cached_sha=repo.cached_sha,
                error=probe.error,
            )

        workers = min(MAX_WORKERS, len(repos))
        logger.debug(f"Checking {len(repos)} repositories with {workers} workers")
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(_check, repos))


def format_report(report: ChangeReport) -> str:
    """Render a change report as one of three fixed shapes."""
    if report.error:
        return f"[WARN] Could not check {report.url}: {report.error}"

    if report.changed:
        if report.cached_sha and report.current_sha:
            return (
                f"[CHANGED] Changes detected in {report.url}\n"
                f"   Local:  {_short(report.cached_sha)}\n"
                f"   Remote: {_short(report.current_sha)}"
            )
        return f"[CHANGED] Changes detected in {report.url} (no local cache)"

    return f"[OK] No changes in {report.url} ({_short(report.current_sha)})"
