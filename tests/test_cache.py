"""Tests for CachePolicy over an in-memory filesystem."""

from __future__ import annotations

from pathlib import Path

from jrekit.cache import MIN_ARCHIVE_SIZE, CachePolicy
from jrekit.fs import LocalFileSystem, directory_size, format_size
from jrekit.platforms import get_platform


class TestArchiveCache:
    def test_missing(self, memfs):
        assert not CachePolicy(memfs).archive_is_cached(Path("/d/jdk.zip"))

    def test_too_small(self, memfs):
        memfs.add("/d/jdk.zip", "x" * (MIN_ARCHIVE_SIZE - 1))
        assert not CachePolicy(memfs).archive_is_cached(Path("/d/jdk.zip"))

    def test_large_enough(self, memfs):
        memfs.add("/d/jdk.zip", "x" * MIN_ARCHIVE_SIZE)
        assert CachePolicy(memfs).archive_is_cached(Path("/d/jdk.zip"))


class TestDirectoryCache:
    def test_jdk_valid_uses_platform_suffix(self, memfs):
        memfs.add("/d/jdk-21-windows-x64/bin/jlink.exe")
        memfs.add("/d/jdk-21-linux-x64/bin/jlink")
        policy = CachePolicy(memfs)
        assert policy.jdk_is_valid(Path("/d/jdk-21-windows-x64"), get_platform("windows-x64"))
        assert policy.jdk_is_valid(Path("/d/jdk-21-linux-x64"), get_platform("linux-x64"))
        assert not policy.jdk_is_valid(Path("/d/jdk-21-linux-x64"), get_platform("windows-x64"))

    def test_reuse_valid_image(self, memfs):
        memfs.add("/b/jre-linux-x64/bin/java")
        policy = CachePolicy(memfs)
        assert policy.reuse_image(Path("/b/jre-linux-x64"), get_platform("linux-x64"))
        assert memfs.removed == []

    def test_invalid_image_is_evicted(self, memfs):
        memfs.add("/b/jre-linux-x64/lib/modules")
        policy = CachePolicy(memfs)
        assert not policy.reuse_image(Path("/b/jre-linux-x64"), get_platform("linux-x64"))
        assert memfs.removed == [Path("/b/jre-linux-x64")]
        assert not memfs.exists(Path("/b/jre-linux-x64"))

    def test_missing_dir_is_not_evicted(self, memfs):
        policy = CachePolicy(memfs)
        assert not policy.reuse_jdk(Path("/d/jdk-21-linux-x64"), get_platform("linux-x64"))
        assert memfs.removed == []


class TestLocalFileSystem:
    def test_glob_is_flat_and_sorted(self, tmp_path: Path):
        (tmp_path / "b-modules.txt").write_text("x")
        (tmp_path / "a-modules.txt").write_text("x")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "c-modules.txt").write_text("x")
        found = LocalFileSystem().glob(tmp_path, "*-modules.txt")
        assert [p.name for p in found] == ["a-modules.txt", "b-modules.txt"]

    def test_remove_tree(self, tmp_path: Path):
        d = tmp_path / "img"
        (d / "bin").mkdir(parents=True)
        (d / "bin" / "java").write_text("x")
        LocalFileSystem().remove_tree(d)
        assert not d.exists()
        LocalFileSystem().remove_tree(d)  # missing is fine

    def test_directory_size(self, tmp_path: Path):
        (tmp_path / "a").write_bytes(b"x" * 100)
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "b").write_bytes(b"x" * 50)
        assert directory_size(tmp_path) == 150
        assert directory_size(tmp_path / "missing") == 0

    def test_format_size(self):
        assert format_size(512) == "512.0 B"
        assert format_size(2048) == "2.0 KB"
        assert format_size(42.3 * 1024 * 1024) == "42.3 MB"
