import io
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from baselinekit.baseline.engine import SyncEngine
from baselinekit.baseline.resolver import SourceResolver
from baselinekit.git.interfaces import VersionControlError


class FakeVersionControl:
    """In-memory stand-in for GitBackend that records every call.

    ``remote_shas`` maps (location, ref) to the remote commit; a missing key
    makes ls-remote return empty output. ``working_copies`` maps a path to
    the commit checked out there.
    """

    def __init__(self):
        self.available = True
        self.remote_shas: Dict[Tuple[str, str], str] = {}
        self.working_copies: Dict[Path, Optional[str]] = {}
        self.calls: List[tuple] = []
        self.ls_remote_error: Optional[str] = None
        self.ls_remote_output: Optional[str] = None
        self.clone_error: Optional[str] = None
        self.fetch_error: Optional[str] = None

    def call_names(self) -> List[str]:
        return [c[0] for c in self.calls]

    def is_available(self) -> bool:
        return self.available

    def is_working_copy(self, path: Path) -> bool:
        return Path(path) in self.working_copies

    def list_remote_refs(self, location: str, reference: str, timeout: float) -> str:
        self.calls.append(("list_remote_refs", location, reference, timeout))
        if self.ls_remote_error:
            raise VersionControlError("ls-remote", self.ls_remote_error)
        if self.ls_remote_output is not None:
            return self.ls_remote_output
        sha = self.remote_shas.get((location, reference))
        return f"{sha}\trefs/heads/{reference}\n" if sha else ""

    def clone_shallow(self, location: str, reference: str, target: Path) -> None:
        self.calls.append(("clone_shallow", location, reference, Path(target)))
        if self.clone_error:
            # git leaves a partial directory behind on some failures
            Path(target).mkdir(parents=True, exist_ok=True)
            raise VersionControlError("clone", self.clone_error)
        Path(target).mkdir(parents=True, exist_ok=True)
        self.working_copies[Path(target)] = self.remote_shas.get((location, reference))

    def fetch_and_checkout(self, path: Path, reference: str, fast_forward: bool) -> None:
        self.calls.append(("fetch_and_checkout", Path(path), reference, fast_forward))
        if self.fetch_error:
            raise VersionControlError("fetch-and-checkout", self.fetch_error)
        for (location, ref), sha in self.remote_shas.items():
            if ref == reference:
                self.working_copies[Path(path)] = sha

    def read_checked_out_commit(self, path: Path) -> Optional[str]:
        self.calls.append(("read_checked_out_commit", Path(path)))
        return self.working_copies.get(Path(path))


@pytest.fixture
def fake_vcs() -> FakeVersionControl:
    return FakeVersionControl()


@pytest.fixture
def cache_root(tmp_path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def make_engine(fake_vcs, cache_root):
    """Factory for engines over the fake backend with a controlled environment."""

    def _make(environ=None) -> SyncEngine:
        return SyncEngine(
            cache_root=cache_root,
            backend=fake_vcs,
            resolver=SourceResolver(environ=environ or {}),
        )

    return _make


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("baselinekit")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream

    logger.removeHandler(handler)
    log_stream.close()


# git fixtures


class LocalRemoteManager:
    """Creates bare repositories on disk to act as git remotes in tests."""

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir.resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _git(self, *args, cwd: Optional[Path] = None) -> str:
        result = subprocess.run(
            ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com", *args],
            cwd=cwd,
            check=True,
            capture_output=True,
            text=True,
        )
        return result.stdout.strip()

    def create(self, name: str, files: Dict[str, str], branch: str = "main") -> Path:
        """Create a bare remote named *name* with one commit holding *files*."""
        work = self.base_dir / f"{name}-work"
        bare = self.base_dir / f"{name}.git"
        for p in (work, bare):
            if p.exists():
                shutil.rmtree(p)

        work.mkdir()
        self._git("init", cwd=work)
        self._git("symbolic-ref", "HEAD", f"refs/heads/{branch}", cwd=work)
        self.commit(work, files, "initial")
        self._git("clone", "--bare", str(work), str(bare))
        self._git("remote", "add", "origin", str(bare), cwd=work)
        return bare

    def commit(self, work: Path, files: Dict[str, str], message: str) -> str:
        for rel, content in files.items():
            target = work / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        self._git("add", "-A", cwd=work)
        self._git("commit", "-m", message, cwd=work)
        return self._git("rev-parse", "HEAD", cwd=work)

    def push_change(self, name: str, files: Dict[str, str], branch: str = "main") -> str:
        """Commit *files* in the work tree of *name* and push to its bare remote."""
        work = self.base_dir / f"{name}-work"
        sha = self.commit(work, files, "update")
        self._git("push", "origin", branch, cwd=work)
        return sha


@pytest.fixture
def local_remotes(tmp_path) -> LocalRemoteManager:
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    return LocalRemoteManager(tmp_path / "remotes")
