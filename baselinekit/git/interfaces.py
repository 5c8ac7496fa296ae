"""Protocol interface for the version-control capability.

The sync engine and the remote probe only talk to this narrow surface, so
their decisions can be exercised against a fake without running git.
"""

from pathlib import Path
from typing import Optional, Protocol


class VersionControlError(Exception):
    """Raised when a version-control operation fails or times out."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} failed: {message}")


class VersionControl(Protocol):
    """Minimal set of operations the baseline cache needs."""

    def is_available(self) -> bool:
        """Whether the underlying tool is installed on this host."""
        ...

    def is_working_copy(self, path: Path) -> bool:
        """Whether *path* holds a version-controlled working copy."""
        ...

    def list_remote_refs(self, location: str, reference: str, timeout: float) -> str:
        """Raw ref listing for *reference* on the remote, one ``<sha>\\t<ref>`` per line."""
        ...

    def clone_shallow(self, location: str, reference: str, target: Path) -> None:
        """Clone exactly *reference*, single branch, depth 1, into *target*."""
        ...

    def fetch_and_checkout(self, path: Path, reference: str, fast_forward: bool) -> None:
        """Fetch *reference* into the working copy at *path* and check it out."""
        ...

    def read_checked_out_commit(self, path: Path) -> Optional[str]:
        """Commit id currently checked out at *path*, or None if unreadable."""
        ...
