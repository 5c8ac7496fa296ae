"""
Baseline cache layout and location classification.

Cache Structure:
    <cache_root>/
    ├── klappy.dev-3f2a9c41d0e7/      # cache name: trailing segment + location hash
    │   ├── main/                     # one working copy per tracked reference
    │   │   ├── .git/
    │   │   └── ...
    │   └── release_v2-1c9e04ab/      # sanitized ref + ref hash when sanitizing changed it
    └── docs-8b51e0f2c7aa/
        └── main/

The cache root is always passed in explicitly. Only the outermost entry point
decides where it lives (see ``baselinekit.config.get_cache_root``).

Path derivation is pure: ``CacheLocator.locate`` performs no I/O, so it is
safe to call for diagnostics and in ``check_only`` mode.
"""

import hashlib
import logging
import re
from pathlib import Path
from typing import List, Optional

from baselinekit.git.interfaces import VersionControl
from baselinekit.model.baseline import CacheEntryInfo

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_-]")
_TRAILING_SEGMENT = re.compile(r"[/:]([^/:]+?)(\.git)?$")
_SCP_LIKE = re.compile(r"^[\w.-]+@[\w.-]+:.+$")

REMOTE_SCHEMES = ("https://", "http://", "git://", "ssh://")
FALLBACK_NAME_LENGTH = 50


def is_local_path(location: str) -> bool:
    """
    Check if a baseline location is a local filesystem path rather than a remote URL.

    Local paths include ".", "..", absolute, relative and home-relative paths,
    and file:// URLs. These bypass the cache entirely.
    """
    location = location.strip()
    if location in (".", ".."):
        return True
    if location.startswith(("/", "./", "../", "~")):
        return True
    if location.startswith("file://"):
        return True
    return False


def is_remote_url(location: str) -> bool:
    """Check if a location is a recognized network address (URL or scp-style)."""
    location = location.strip()
    if location.startswith(REMOTE_SCHEMES):
        return True
    return bool(_SCP_LIKE.match(location))


def resolve_local_path(location: str, base_dir: Optional[Path] = None) -> Path:
    """
    Resolve a local baseline location to an absolute filesystem path.

    Args:
        location: Local path (e.g., ".", "~/notes", "/srv/baseline", "file:///srv/baseline")
        base_dir: Directory that relative paths are resolved against. Defaults to cwd.

    Returns:
        Resolved absolute Path
    """
    location = location.strip()
    if location.startswith("file://"):
        location = location[len("file://") :]
    p = Path(location).expanduser()
    if not p.is_absolute():
        base = base_dir or Path.cwd()
        p = base / p
    return p.resolve()


def _short_hash(value: str, length: int) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:length]


def cache_name(location: str) -> str:
    """
    Derive a short, filesystem-safe directory name for a location.

    Examples:
        https://github.com/klappy/klappy.dev.git -> klappy.dev-<hash12>
        git@github.com:org/docs.git             -> docs-<hash12>

    The hash of the full location keeps two repositories that share a
    trailing segment (forks, mirrors) apart on disk.
    """
    stripped = location.strip().rstrip("/")
    match = _TRAILING_SEGMENT.search(stripped)
    segment = match.group(1) if match else ""
    # dots are kept so "klappy.dev" stays readable
    name = re.sub(r"[^a-zA-Z0-9_.-]", "_", segment).strip(".")
    if not name:
        name = _UNSAFE_CHARS.sub("_", stripped)[:FALLBACK_NAME_LENGTH] or "baseline"
    return f"{name}-{_short_hash(location, 12)}"


def ref_dir_name(reference: str) -> str:
    """
    Sanitize a reference into a single directory name.

    When sanitizing alters the reference, a hash of the raw reference is
    appended so that e.g. "feature/x" and "feature_x" stay distinct.
    """
    sanitized = _UNSAFE_CHARS.sub("_", reference)
    if sanitized != reference or not sanitized:
        return f"{sanitized}-{_short_hash(reference, 8)}"
    return sanitized


class CacheLocator:
    """Maps (location, reference) onto a directory under a fixed cache root."""

    def __init__(self, cache_root: Path):
        self.cache_root = Path(cache_root)

    def locate(self, location: str, reference: str) -> Path:
        """
        Get the cache directory for a baseline location and reference.

        Pure and idempotent: same inputs, same path, and nothing touches disk.
        """
        return self.cache_root / cache_name(location) / ref_dir_name(reference)

    def entries(self, backend: VersionControl) -> List[CacheEntryInfo]:
        """
        List the working copies currently held under the cache root.

        Read-only. Directories that are not working copies are skipped.
        """
        if not self.cache_root.is_dir():
            return []

        results = []
        for name_dir in sorted(self.cache_root.iterdir()):
            if not name_dir.is_dir():
                continue
            for ref_dir in sorted(name_dir.iterdir()):
                if not ref_dir.is_dir() or not backend.is_working_copy(ref_dir):
                    continue
                results.append(
                    CacheEntryInfo(
                        path=ref_dir,
                        cache_name=name_dir.name,
                        ref_dir=ref_dir.name,
                        commit_sha=backend.read_checked_out_commit(ref_dir),
                    )
                )
        logger.debug(f"Found {len(results)} cache entries under {self.cache_root}")
        return results
