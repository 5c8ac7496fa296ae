from .baseline import (
    BaselineSource,
    CacheEntryInfo,
    ChangeReport,
    ErrorKind,
    Precedence,
    ProbeResult,
    RefPrecedence,
    SyncFailure,
    SyncOptions,
    SyncResult,
    SyncSuccess,
)
from .repo import RepoCheck, RepoListError

__all__ = [
    "BaselineSource",
    "CacheEntryInfo",
    "ChangeReport",
    "ErrorKind",
    "Precedence",
    "ProbeResult",
    "RefPrecedence",
    "RepoCheck",
    "RepoListError",
    "SyncFailure",
    "SyncOptions",
    "SyncResult",
    "SyncSuccess",
]
