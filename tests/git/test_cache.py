"""Tests for cache directory derivation and location classification."""

from pathlib import Path

import pytest

from baselinekit.git.cache import (
    CacheLocator,
    cache_name,
    is_local_path,
    is_remote_url,
    ref_dir_name,
    resolve_local_path,
)


class TestLocationClassification:
    @pytest.mark.short
    @pytest.mark.parametrize(
        "location",
        [".", "..", "/srv/baseline", "./docs", "../docs", "~/baseline", "file:///srv/b"],
    )
    def test_local_paths(self, location):
        assert is_local_path(location)
        assert not is_remote_url(location)

    @pytest.mark.short
    @pytest.mark.parametrize(
        "location",
        [
            "https://github.com/klappy/klappy.dev.git",
            "http://git.example.org/docs",
            "git://example.org/docs.git",
            "ssh://git@example.org/org/docs.git",
            "git@github.com:org/docs.git",
        ],
    )
    def test_remote_urls(self, location):
        assert is_remote_url(location)
        assert not is_local_path(location)

    @pytest.mark.short
    @pytest.mark.parametrize("location", ["docs", "ftp://example.org/docs", "C-drive"])
    def test_neither(self, location):
        assert not is_local_path(location)
        assert not is_remote_url(location)

    @pytest.mark.short
    def test_resolve_home_relative(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert resolve_local_path("~/baseline") == (tmp_path / "baseline").resolve()

    @pytest.mark.short
    def test_resolve_relative_against_base(self, tmp_path):
        assert resolve_local_path("./docs", tmp_path) == (tmp_path / "docs").resolve()

    @pytest.mark.short
    def test_resolve_file_url(self, tmp_path):
        assert resolve_local_path(f"file://{tmp_path}") == tmp_path.resolve()


class TestCacheName:
    @pytest.mark.short
    def test_https_strips_git_suffix(self):
        name = cache_name("https://github.com/klappy/klappy.dev.git")
        assert name.startswith("klappy.dev-")

    @pytest.mark.short
    def test_scp_style(self):
        assert cache_name("git@github.com:org/docs.git").startswith("docs-")

    @pytest.mark.short
    def test_trailing_slash(self):
        assert cache_name("https://github.com/user/repo/").startswith("repo-")

    @pytest.mark.short
    def test_fallback_is_sanitized_and_capped(self):
        name = cache_name("weird location " + "x" * 100)
        prefix, _, digest = name.rpartition("-")
        assert len(prefix) <= 50
        assert all(c.isalnum() or c in "_-" for c in prefix)
        assert len(digest) == 12

    @pytest.mark.short
    def test_same_trailing_segment_does_not_collide(self):
        assert cache_name("https://github.com/a/docs.git") != cache_name(
            "https://github.com/b/docs.git"
        )


class TestRefDirName:
    @pytest.mark.short
    def test_plain_ref_unchanged(self):
        assert ref_dir_name("main") == "main"

    @pytest.mark.short
    def test_slash_ref_sanitized_with_hash(self):
        name = ref_dir_name("feature/x")
        assert name.startswith("feature_x-")
        assert "/" not in name

    @pytest.mark.short
    def test_sanitized_lookalikes_stay_distinct(self):
        assert ref_dir_name("feature/x") != ref_dir_name("feature_x")


class TestCacheLocator:
    LOCATIONS = [
        "https://github.com/klappy/klappy.dev.git",
        "https://github.com/klappy/klappy.dev",
        "https://github.com/fork/klappy.dev.git",
        "git@github.com:klappy/klappy.dev.git",
        "https://example.org",
        "weird location without segments",
        "weird location without segments!",
    ]

    @pytest.mark.short
    def test_locate_layout(self, tmp_path):
        locator = CacheLocator(tmp_path)
        path = locator.locate("https://github.com/klappy/klappy.dev.git", "main")
        assert path.parent.parent == tmp_path
        assert path.name == "main"

    @pytest.mark.short
    def test_locate_is_deterministic_and_does_no_io(self, tmp_path):
        root = tmp_path / "not-created"
        locator = CacheLocator(root)
        first = locator.locate(self.LOCATIONS[0], "main")
        second = locator.locate(self.LOCATIONS[0], "main")
        assert first == second
        assert not root.exists()

    @pytest.mark.short
    def test_distinct_locations_never_collide(self, tmp_path):
        locator = CacheLocator(tmp_path)
        paths = {locator.locate(loc, "main") for loc in self.LOCATIONS}
        assert len(paths) == len(self.LOCATIONS)

    @pytest.mark.short
    def test_distinct_refs_never_collide(self, tmp_path):
        locator = CacheLocator(tmp_path)
        refs = ["main", "v1.0", "v1_0", "feature/x", "feature_x", "release"]
        for loc in self.LOCATIONS:
            paths = {locator.locate(loc, ref) for ref in refs}
            assert len(paths) == len(refs)

    @pytest.mark.short
    def test_entries_empty_when_root_missing(self, tmp_path, fake_vcs):
        assert CacheLocator(tmp_path / "missing").entries(fake_vcs) == []

    @pytest.mark.short
    def test_entries_lists_working_copies_only(self, tmp_path, fake_vcs):
        locator = CacheLocator(tmp_path)
        good = locator.locate("https://github.com/klappy/klappy.dev.git", "main")
        stray = locator.locate("https://github.com/klappy/klappy.dev.git", "old")
        good.mkdir(parents=True)
        stray.mkdir(parents=True)
        fake_vcs.working_copies[good] = "f" * 40

        entries = locator.entries(fake_vcs)

        assert [e.path for e in entries] == [good]
        assert entries[0].ref_dir == "main"
        assert entries[0].commit_sha == "f" * 40
        assert entries[0].cache_name == good.parent.name
        assert isinstance(entries[0].path, Path)
