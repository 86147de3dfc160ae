"""Filesystem abstraction for cache and configuration lookups."""

from __future__ import annotations

import shutil
from abc import ABC, abstractmethod
from pathlib import Path


class FileSystem(ABC):
    """Read-mostly view of the filesystem used by cache and config checks."""

    @abstractmethod
    def exists(self, path: Path) -> bool: ...

    @abstractmethod
    def is_file(self, path: Path) -> bool: ...

    @abstractmethod
    def is_dir(self, path: Path) -> bool: ...

    @abstractmethod
    def size(self, path: Path) -> int:
        """Size in bytes of a regular file."""
        ...

    @abstractmethod
    def mtime(self, path: Path) -> float:
        """Modification time (seconds since the epoch)."""
        ...

    @abstractmethod
    def read_text(self, path: Path) -> str:
        """UTF-8 file content; a leading byte-order mark is dropped."""
        ...

    @abstractmethod
    def glob(self, directory: Path, pattern: str) -> list[Path]:
        """Regular files in *directory* (non-recursive) matching *pattern*."""
        ...

    @abstractmethod
    def remove_tree(self, path: Path) -> None:
        """Delete a directory tree; missing paths are ignored."""
        ...


class LocalFileSystem(FileSystem):
    """The real, local filesystem."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def size(self, path: Path) -> int:
        return path.stat().st_size

    def mtime(self, path: Path) -> float:
        return path.stat().st_mtime

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8-sig")

    def glob(self, directory: Path, pattern: str) -> list[Path]:
        if not directory.is_dir():
            return []
        return sorted(p for p in directory.glob(pattern) if p.is_file())

    def remove_tree(self, path: Path) -> None:
        if path.is_dir():
            shutil.rmtree(path)
        elif path.exists():
            path.unlink()


def directory_size(path: Path) -> int:
    """Total size in bytes of all regular files below *path*."""
    total = 0
    if not path.is_dir():
        return total
    for entry in path.rglob("*"):
        if entry.is_file() and not entry.is_symlink():
            total += entry.stat().st_size
    return total


def format_size(num_bytes: float) -> str:
    """Human-readable size, e.g. ``42.3 MB``."""
    units = ["B", "KB", "MB", "GB"]
    size = float(num_bytes)
    idx = 0
    while size >= 1024 and idx < len(units) - 1:
        size /= 1024
        idx += 1
    return f"{size:.1f} {units[idx]}"
