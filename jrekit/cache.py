"""Cache validity checks for downloaded archives, JDKs and runtime images.

Validity is inferred from the presence of files on disk. All checks go
through a :class:`~jrekit.fs.FileSystem` so the policy can be exercised
without touching real files.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from jrekit.fs import FileSystem, LocalFileSystem
from jrekit.platforms import PlatformTarget

log = structlog.get_logger("jrekit.cache")

# Anything smaller is an interrupted or error-page download.
MIN_ARCHIVE_SIZE = 1024 * 1024


class CachePolicy:
    """Answers "is this cache entry valid for this key?" for each pipeline stage."""

    def __init__(self, fs: FileSystem | None = None) -> None:
        self.fs = fs or LocalFileSystem()

    def archive_is_cached(self, archive_path: Path) -> bool:
        return self.fs.is_file(archive_path) and self.fs.size(archive_path) >= MIN_ARCHIVE_SIZE

    def jdk_is_valid(self, jdk_dir: Path, target: PlatformTarget) -> bool:
        return self.fs.is_file(jdk_dir / target.jlink_binary)

    def image_is_valid(self, image_dir: Path, target: PlatformTarget) -> bool:
        return self.fs.is_file(image_dir / target.java_binary)

    def reuse_or_evict(self, path: Path, valid: bool) -> bool:
        """Return True when *path* can be reused; remove it when present but invalid."""
        if valid:
            return True
        if self.fs.exists(path):
            log.info("cache.evicted", path=str(path))
            self.fs.remove_tree(path)
        return False

    def reuse_jdk(self, jdk_dir: Path, target: PlatformTarget) -> bool:
        return self.reuse_or_evict(jdk_dir, self.jdk_is_valid(jdk_dir, target))

    def reuse_image(self, image_dir: Path, target: PlatformTarget) -> bool:
        return self.reuse_or_evict(image_dir, self.image_is_valid(image_dir, target))
