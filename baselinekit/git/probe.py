"""
Lightweight staleness probe.

Uses ``git ls-remote``, which transfers only refs (~100 bytes), to learn the
remote commit for a reference without downloading repository content.
"""

import logging
import re
from typing import Optional

from baselinekit.constants import PROBE_TIMEOUT_SECONDS
from baselinekit.git.interfaces import VersionControl, VersionControlError
from baselinekit.model.baseline import ProbeResult

logger = logging.getLogger(__name__)

PARSE_ERROR = "could not parse remote identifier"

_COMMIT_ID = re.compile(r"^(?:[0-9a-f]{40}|[0-9a-f]{64})$")


def degrade_to_refresh_on_uncertainty(
    error: str, cached_sha: Optional[str] = None
) -> ProbeResult:
    """
    Build the result for a probe that could not establish the remote state.

    An uncertain probe always reports ``changed=True`` so callers attempt a
    refresh instead of trusting a cache that may be stale.
    """
    return ProbeResult(changed=True, current_sha=None, cached_sha=cached_sha, error=error)


def is_commit_id(value: str) -> bool:
    """True for a full 40 or 64 character lowercase hex commit id."""
    return bool(_COMMIT_ID.match(value))


def parse_remote_commit(output: str) -> Optional[str]:
    """
    Extract the commit id from ``<commit>\\t<refname>`` ls-remote output.

    Returns None for empty or malformed output.
    """
    lines = output.strip().splitlines()
    if not lines:
        return None
    sha = lines[0].split("\t", 1)[0].strip().lower()
    if not is_commit_id(sha):
        return None
    return sha


class RemoteProbe:
    """Compares a cached commit id against the remote's current one."""

    def __init__(self, backend: VersionControl, timeout: float = PROBE_TIMEOUT_SECONDS):
        self.backend = backend
        self.timeout = timeout

    def probe(
        self, location: str, reference: str, cached_sha: Optional[str] = None
    ) -> ProbeResult:
        """
        Query the remote for *reference* and compare with *cached_sha*.

        Never raises: timeouts, tool errors and unparsable output all degrade
        to ``changed=True`` with ``error`` set.
        """
        try:
            output = self.backend.list_remote_refs(location, reference, self.timeout)
        except VersionControlError as e:
            logger.warning(f"Could not probe {location}@{reference}: {e.message}")
            return degrade_to_refresh_on_uncertainty(e.message, cached_sha)

        current_sha = parse_remote_commit(output)
        if current_sha is None:
            logger.warning(f"Unexpected ls-remote output for {location}@{reference}")
            return degrade_to_refresh_on_uncertainty(PARSE_ERROR, cached_sha)

        if not cached_sha:
            # first-ever check, nothing to compare against
            return ProbeResult(changed=True, current_sha=current_sha)

        changed = current_sha != cached_sha.lower()
        logger.debug(
            f"Probe {location}@{reference}: remote {current_sha[:7]}, "
            f"cached {cached_sha[:7]}, changed={changed}"
        )
        return ProbeResult(changed=changed, current_sha=current_sha, cached_sha=cached_sha)
