"""Shared pytest fixtures for jrekit tests (no JDK or network needed)."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path, PurePosixPath

import pytest

from jrekit.config import Settings
from jrekit.fs import FileSystem
from jrekit.platforms import PlatformTarget


class FakeRunner:
    """Stand-in for subprocess execution; records every command it receives."""

    def __init__(self, handler: Callable[[list[str]], tuple[int, str, str]]):
        self.handler = handler
        self.calls: list[list[str]] = []

    def __call__(self, cmd: Sequence[str]) -> subprocess.CompletedProcess:
        cmd = list(cmd)
        self.calls.append(cmd)
        returncode, stdout, stderr = self.handler(cmd)
        return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(work_dir=tmp_path)


@pytest.fixture
def fake_runner():
    """Factory: ``fake_runner(handler)`` where handler(cmd) -> (rc, stdout, stderr)."""
    return FakeRunner


@pytest.fixture
def make_jar():
    def _make(path: Path, size: int = 128) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"PK" + b"\0" * (size - 2))
        return path

    return _make


@pytest.fixture
def make_jdk():
    """Factory creating a JDK home with jlink/jdeps stubs for a target."""

    def _make(home: Path, target: PlatformTarget) -> Path:
        bin_dir = home / "bin"
        bin_dir.mkdir(parents=True, exist_ok=True)
        for tool in ("jlink", "jdeps", "java"):
            (bin_dir / f"{tool}{target.executable_suffix}").write_text("#!/bin/sh\n")
        (home / "release").write_text('JAVA_VERSION="21.0.5"\n')
        return home

    return _make


@pytest.fixture
def make_image():
    """Factory creating a runtime image directory with its entry point."""

    def _make(image: Path, target: PlatformTarget) -> Path:
        (image / "bin").mkdir(parents=True, exist_ok=True)
        (image / target.java_binary).write_bytes(b"\x7fELF" + b"\0" * 60)
        (image / "lib").mkdir(exist_ok=True)
        (image / "lib" / "modules").write_bytes(b"\0" * 2048)
        return image

    return _make


class MemoryFileSystem(FileSystem):
    """Files are ``{path: (content, mtime)}``; directories are implied by their files."""

    def __init__(self):
        self.files: dict[Path, tuple[str, float]] = {}
        self.removed: list[Path] = []

    def add(self, path, content: str = "", mtime: float = 0.0):
        self.files[Path(path)] = (content, mtime)

    def exists(self, path):
        return self.is_file(path) or self.is_dir(path)

    def is_file(self, path):
        return Path(path) in self.files

    def is_dir(self, path):
        return any(Path(path) in f.parents for f in self.files)

    def size(self, path):
        return len(self.files[Path(path)][0])

    def mtime(self, path):
        return self.files[Path(path)][1]

    def read_text(self, path):
        try:
            return self.files[Path(path)][0]
        except KeyError:
            raise FileNotFoundError(path) from None

    def glob(self, directory, pattern):
        return sorted(
            f
            for f in self.files
            if f.parent == Path(directory) and PurePosixPath(f.name).match(pattern)
        )

    def remove_tree(self, path):
        path = Path(path)
        self.removed.append(path)
        for f in list(self.files):
            if f == path or path in f.parents:
                del self.files[f]


@pytest.fixture
def memfs():
    return MemoryFileSystem()


