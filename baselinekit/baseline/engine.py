"""
Baseline synchronization state machine.

``SyncEngine.ensure`` resolves the baseline source, derives its cache
directory, optionally probes the remote, and performs the smallest action
that yields a trustworthy local root:

    local path       -> serve the path as-is (no cache, no network)
    invalid location -> SyncFailure
    git missing      -> SyncFailure
    existing cache   -> probe / fetch+checkout / skip, soft-failing to the stale copy
    no cache         -> shallow single-branch clone, hard-failing

Failure asymmetry:
    A failed fetch on an existing cache is logged and the previous working
    copy is served. A failed first clone has nothing to fall back to and is
    returned as a SyncFailure.

Usage:
    engine = SyncEngine(cache_root=Path("~/.cache/baselinekit").expanduser())
    result = engine.ensure(None, SyncOptions(skip_fetch_if_unchanged=True))
    if result.ok and result.root is not None:
        print(result.root, result.commit_sha)

No inter-process locking is done. Two processes syncing the same cache path
race at the filesystem level; a fetch that fails because of that is treated
like any other soft failure.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional

from baselinekit.baseline.resolver import SourceResolver
from baselinekit.config import ConfigAccessor, get_cache_root
from baselinekit.constants import LOCAL_REF
from baselinekit.git.cache import (
    CacheLocator,
    is_local_path,
    is_remote_url,
    resolve_local_path,
)
from baselinekit.git.interfaces import VersionControl, VersionControlError
from baselinekit.git.probe import RemoteProbe
from baselinekit.model.baseline import (
    BaselineSource,
    ErrorKind,
    ProbeResult,
    RefPrecedence,
    SyncFailure,
    SyncOptions,
    SyncResult,
    SyncSuccess,
)

logger = logging.getLogger(__name__)


class SyncEngine:
    """
    Ensures a baseline is available locally.

    Args:
        cache_root: Directory that holds all cache entries
        backend: Version-control capability (defaults to ``GitBackend``)
        resolver: Source resolver (defaults to one reading ``os.environ``)
        probe: Remote probe (defaults to one over ``backend``)
    """

    def __init__(
        self,
        cache_root: Path,
        backend: Optional[VersionControl] = None,
        resolver: Optional[SourceResolver] = None,
        probe: Optional[RemoteProbe] = None,
    ):
        if backend is None:
            from baselinekit.git.backend import GitBackend

            backend = GitBackend()
        self.backend = backend
        self.locator = CacheLocator(cache_root)
        self.resolver = resolver or SourceResolver()
        self.probe = probe or RemoteProbe(backend)

    @classmethod
    def from_config(
        cls, config: Optional[ConfigAccessor] = None, **kwargs
    ) -> "SyncEngine":
        """Build an engine whose cache root comes from the user configuration."""
        return cls(cache_root=get_cache_root(config), **kwargs)

    def ensure(
        self,
        explicit_override: Optional[str] = None,
        options: Optional[SyncOptions] = None,
    ) -> SyncResult:
        """
        Make the baseline available and report what was done.

        Args:
            explicit_override: Location that beats configuration and default
            options: check_only / skip_fetch_if_unchanged / track_moving_head

        Returns:
            SyncSuccess or SyncFailure. Never raises for sync problems.
        """
        options = options or SyncOptions()
        source = self.resolver.resolve(explicit_override)
        location = source.location

        if is_local_path(location):
            return self._ensure_local(source)

        if not is_remote_url(location):
            return self._failure(
                source,
                ErrorKind.invalid_location,
                f"Invalid baseline: {location} (expected git URL or local path)",
            )

        if not self.backend.is_available():
            return self._failure(source, ErrorKind.tool_missing, "git not installed")

        cache_dir = self.locator.locate(location, source.reference)
        if self.backend.is_working_copy(cache_dir):
            return self._ensure_existing(source, cache_dir, options)
        return self._ensure_fresh(source, cache_dir, options)

    def _ensure_local(self, source: BaselineSource) -> SyncResult:
        local_path = resolve_local_path(source.location)
        if not local_path.exists():
            return self._failure(
                source,
                ErrorKind.local_path_missing,
                f"Local baseline path does not exist: {local_path}",
                ref=LOCAL_REF,
                ref_source=RefPrecedence.local.value,
            )

        commit_sha = None
        if self.backend.is_working_copy(local_path):
            commit_sha = self.backend.read_checked_out_commit(local_path)

        logger.debug(f"Using local baseline at {local_path}")
        return SyncSuccess(
            root=local_path,
            ref=LOCAL_REF,
            ref_source=RefPrecedence.local.value,
            baseline_url=source.location,
            baseline_source=source.precedence.value,
            commit_sha=commit_sha,
            changed=None,
        )

    def _ensure_existing(
        self, source: BaselineSource, cache_dir: Path, options: SyncOptions
    ) -> SyncResult:
        location, ref = source.location, source.reference
        cached_sha = self.backend.read_checked_out_commit(cache_dir)

        if options.check_only:
            checked = self.probe.probe(location, ref, cached_sha)
            return self._success(
                source,
                cache_dir,
                commit_sha=cached_sha,
                changed=checked.changed,
                current_sha=checked.current_sha,
                probe_error=checked.error,
            )

        probe: Optional[ProbeResult] = None
        if options.skip_fetch_if_unchanged:
            probe = self.probe.probe(location, ref, cached_sha)

        skipped_fetch = (
            options.skip_fetch_if_unchanged and probe is not None and not probe.changed
        )
        if skipped_fetch:
            logger.info(f"No changes in {location}@{ref}, skipping fetch")
        else:
            try:
                logger.info(f"Updating cached baseline at {cache_dir}")
                self.backend.fetch_and_checkout(
                    cache_dir, ref, fast_forward=options.track_moving_head
                )
            except VersionControlError as e:
                logger.warning(
                    f"Failed to update {cache_dir}: {e}. Using cached copy as-is."
                )

        commit_sha = self.backend.read_checked_out_commit(cache_dir) or cached_sha
        if probe is not None:
            changed = probe.changed
        else:
            changed = cached_sha is None or commit_sha != cached_sha

        return self._success(
            source,
            cache_dir,
            commit_sha=commit_sha,
            changed=changed,
            skipped_fetch=skipped_fetch,
            current_sha=probe.current_sha if probe else None,
            probe_error=probe.error if probe else None,
        )

    def _ensure_fresh(
        self, source: BaselineSource, cache_dir: Path, options: SyncOptions
    ) -> SyncResult:
        location, ref = source.location, source.reference

        if options.check_only:
            probe = self.probe.probe(location, ref, None)
            return self._success(
                source,
                None,
                changed=True,
                current_sha=probe.current_sha,
                probe_error=probe.error,
            )

        if cache_dir.exists():
            logger.warning(f"Cache directory {cache_dir} is not a working copy. Re-cloning.")
            shutil.rmtree(cache_dir, ignore_errors=True)
        cache_dir.parent.mkdir(parents=True, exist_ok=True)

        try:
            self.backend.clone_shallow(location, ref, cache_dir)
        except VersionControlError as e:
            logger.error(f"Failed to clone baseline: {e}")
            if cache_dir.exists():
                shutil.rmtree(cache_dir, ignore_errors=True)
            return self._failure(source, ErrorKind.clone_failed, e.message)

        return self._success(
            source,
            cache_dir,
            commit_sha=self.backend.read_checked_out_commit(cache_dir),
            changed=True,
        )

    @staticmethod
    def _success(source: BaselineSource, root: Optional[Path], **kwargs) -> SyncSuccess:
        return SyncSuccess(
            root=root,
            ref=source.reference,
            ref_source=source.ref_precedence.value,
            baseline_url=source.location,
            baseline_source=source.precedence.value,
            **kwargs,
        )

    @staticmethod
    def _failure(
        source: BaselineSource,
        kind: ErrorKind,
        message: str,
        ref: Optional[str] = None,
        ref_source: Optional[str] = None,
    ) -> SyncFailure:
        return SyncFailure(
            ref=ref or source.reference,
            ref_source=ref_source or source.ref_precedence.value,
            baseline_url=source.location,
            baseline_source=source.precedence.value,
            kind=kind,
            error=message,
        )
