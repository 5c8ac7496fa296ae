"""
Git-facing layer of baselinekit.

- ``cache``: cache directory derivation and location classification (pure)
- ``interfaces``: the ``VersionControl`` capability the engine depends on
- ``probe``: metadata-only staleness probe
- ``backend``: the git implementation (GitPython + dulwich), imported on demand
"""

from .cache import (
    CacheLocator,
    cache_name,
    is_local_path,
    is_remote_url,
    ref_dir_name,
    resolve_local_path,
)
from .interfaces import VersionControl, VersionControlError
from .probe import RemoteProbe, degrade_to_refresh_on_uncertainty, parse_remote_commit

__all__ = [
    "CacheLocator",
    "RemoteProbe",
    "VersionControl",
    "VersionControlError",
    "cache_name",
    "degrade_to_refresh_on_uncertainty",
    "is_local_path",
    "is_remote_url",
    "parse_remote_commit",
    "ref_dir_name",
    "resolve_local_path",
]
