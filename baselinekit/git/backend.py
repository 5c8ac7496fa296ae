"""
Git implementation of the ``VersionControl`` capability.

Network and mutating operations shell out to the git executable through
GitPython. Reading the checked-out commit uses dulwich, which opens the
repository in-process and needs no subprocess.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional

from dulwich import porcelain
from dulwich.errors import NotGitRepository
from git import Git, Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from baselinekit.git.interfaces import VersionControlError
from baselinekit.git.probe import is_commit_id

logger = logging.getLogger(__name__)


def _head_to_hex(head_bytes: bytes) -> Optional[str]:
    if len(head_bytes) == 20:
        return head_bytes.hex()
    sha = head_bytes.decode("ascii", errors="replace").strip().lower()
    return sha if is_commit_id(sha) else None


def _describe(error: GitCommandError) -> str:
    stderr = (error.stderr or "").strip()
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:") :].strip()
    return stderr.strip("'").strip() or str(error)


class GitBackend:
    """Runs git operations for the baseline cache."""

    def __init__(self, executable: str = "git"):
        self.executable = executable

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    def is_working_copy(self, path: Path) -> bool:
        return (Path(path) / ".git").exists()

    def list_remote_refs(self, location: str, reference: str, timeout: float) -> str:
        """
        Run ``git ls-remote`` for a single branch.

        Only ref metadata crosses the wire, so the cost does not depend on the
        repository size. The subprocess is killed once *timeout* expires.

        Raises:
            VersionControlError: On a non-zero exit or a timeout
        """
        try:
            return Git().ls_remote(
                location, f"refs/heads/{reference}", kill_after_timeout=timeout
            )
        except GitCommandError as e:
            raise VersionControlError("ls-remote", _describe(e)) from e

    def clone_shallow(self, location: str, reference: str, target: Path) -> None:
        logger.info(f"Cloning {location}@{reference} to {target}")
        try:
            Repo.clone_from(
                location,
                str(target),
                branch=reference,
                single_branch=True,
                depth=1,
            )
        except GitCommandError as e:
            raise VersionControlError("clone", _describe(e)) from e

    def fetch_and_checkout(self, path: Path, reference: str, fast_forward: bool) -> None:
        """
        Fetch *reference* from origin and check it out.

        With *fast_forward*, the local branch is also advanced to the fetched
        commit; anything other than a fast-forward is refused.
        """
        try:
            repo = Repo(str(path))
            logger.debug(f"Fetching origin {reference} in {path}")
            repo.git.fetch("origin", reference)
            repo.git.checkout(reference)
            if fast_forward:
                logger.debug(f"Fast-forwarding {reference} in {path}")
                repo.git.pull("--ff-only", "origin", reference)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise VersionControlError("fetch", f"not a git working copy: {e}") from e
        except GitCommandError as e:
            raise VersionControlError("fetch-and-checkout", _describe(e)) from e

    def read_checked_out_commit(self, path: Path) -> Optional[str]:
        try:
            repo = porcelain.open_repo(str(path))
        except (NotGitRepository, ValueError, OSError) as e:
            logger.debug(f"Cannot read commit at {path}: {e}")
            return None
        try:
            return _head_to_hex(repo.head())
        except (KeyError, ValueError):
            # unborn or unreadable HEAD
            return None
        finally:
            repo.close()
