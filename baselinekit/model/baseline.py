"""
Records exchanged between the baseline resolver, probe, sync engine and
their consumers.

Design Principles:
- Immutable: results are frozen once produced
- Boundary-safe: every public operation returns one of these records,
  failures included, instead of raising
- Serializable: ``to_dict()`` gives the camelCase shape printed by the CLI
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union


class Precedence(str, Enum):
    """Which configuration level supplied the baseline location."""

    explicit_override = "explicit-override"
    configured = "configured"
    default = "default"


class RefPrecedence(str, Enum):
    """Which level supplied the tracked reference."""

    environment = "environment"
    defaulted = "defaulted"
    local = "local"


class ErrorKind(str, Enum):
    invalid_location = "invalid-location"
    local_path_missing = "local-path-missing"
    tool_missing = "tool-missing"
    clone_failed = "clone-failed"


@dataclass(frozen=True)
class BaselineSource:
    """Resolved input to synchronization.

    Attributes:
        location: Remote URL or local filesystem path
        reference: Branch or tag to track
        precedence: Level that supplied ``location`` (diagnostics only)
        ref_precedence: Level that supplied ``reference`` (diagnostics only)
    """

    location: str
    reference: str
    precedence: Precedence
    ref_precedence: RefPrecedence


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a metadata-only remote query.

    A probe that failed never claims freshness: constructing one with an
    ``error`` and ``changed=False`` raises ``ValueError``.
    """

    changed: bool
    current_sha: Optional[str] = None
    cached_sha: Optional[str] = None
    error: Optional[str] = None

    def __post_init__(self):
        if self.error is not None and not self.changed:
            raise ValueError(
                f"ProbeResult with error {self.error!r} must report changed=True"
            )

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SyncOptions:
    """Per-call switches for ``SyncEngine.ensure``.

    Attributes:
        check_only: Probe the remote and report, never mutate the cache
        skip_fetch_if_unchanged: Probe first and skip the fetch when the
            remote commit equals the cached one
        track_moving_head: Fast-forward the tracked reference after
            checkout. Disable when the reference is pinned for reproducibility.
    """

    check_only: bool = False
    skip_fetch_if_unchanged: bool = False
    track_moving_head: bool = True


@dataclass(frozen=True)
class SyncSuccess:
    """A usable (or, under ``check_only``, inspected) baseline.

    ``root`` is None only for a ``check_only`` call that found no cache
    entry. ``changed`` is None when staleness is unknown (local paths).
    """

    ref: str
    ref_source: str
    baseline_url: str
    baseline_source: str
    root: Optional[Path]
    commit_sha: Optional[str] = None
    changed: Optional[bool] = None
    skipped_fetch: bool = False
    current_sha: Optional[str] = None
    probe_error: Optional[str] = None

    ok = True
    error = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": str(self.root) if self.root is not None else None,
            "ref": self.ref,
            "refSource": self.ref_source,
            "baselineUrl": self.baseline_url,
            "baselineSource": self.baseline_source,
            "commitSha": self.commit_sha,
            "changed": self.changed,
            "skippedFetch": self.skipped_fetch,
            "currentSha": self.current_sha,
            "probeError": self.probe_error,
            "error": None,
        }


@dataclass(frozen=True)
class SyncFailure:
    """An unrecoverable failure; there is no root to serve."""

    ref: str
    ref_source: str
    baseline_url: str
    baseline_source: str
    kind: ErrorKind
    error: str

    ok = False
    root = None
    commit_sha = None
    changed = None
    skipped_fetch = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": None,
            "ref": self.ref,
            "refSource": self.ref_source,
            "baselineUrl": self.baseline_url,
            "baselineSource": self.baseline_source,
            "errorKind": self.kind.value,
            "error": self.error,
        }


SyncResult = Union[SyncSuccess, SyncFailure]


@dataclass(frozen=True)
class ChangeReport:
    """Read-only summary of a change check for one repository."""

    url: str
    ref: str
    changed: bool
    current_sha: Optional[str] = None
    cached_sha: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "ref": self.ref,
            "changed": self.changed,
            "currentSha": self.current_sha,
            "cachedSha": self.cached_sha,
            "error": self.error,
        }


@dataclass(frozen=True)
class CacheEntryInfo:
    """One working copy found under the cache root."""

    path: Path
    cache_name: str
    ref_dir: str
    commit_sha: Optional[str] = None
