"""Per-platform JDK installation into the downloads cache."""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path, PurePosixPath

import httpx
import structlog

from jrekit.cache import CachePolicy
from jrekit.config import Settings
from jrekit.exceptions import ExtractionError, ToolNotFoundError
from jrekit.extract import extract_archive, locate_runtime_root
from jrekit.fetch.http import ArchiveFetcher
from jrekit.platforms import PlatformTarget, get_release

log = structlog.get_logger("jrekit.jdk")


class JdkInstaller:
    """Download, extract and verify the JDK for each platform target.

    Layout under ``settings.downloads_dir``:
        <archive file>                 raw download, reused when large enough
        jdk-<V>-<platform>-temp/       scratch extraction dir, always removed
        jdk-<V>-<platform>/            finalized JDK home (contains bin/jlink)
    """

    def __init__(
        self,
        settings: Settings,
        fetcher: ArchiveFetcher | None = None,
        cache: CachePolicy | None = None,
    ) -> None:
        self.settings = settings
        self.cache = cache or CachePolicy()
        self.fetcher = fetcher or ArchiveFetcher(cache=self.cache)
        self.release = get_release(settings.jdk_version)

    def jdk_dir(self, target: PlatformTarget) -> Path:
        return self.settings.downloads_dir / target.jdk_dir_name(self.settings.jdk_version)

    def archive_path(self, target: PlatformTarget) -> Path:
        url = target.archive_url(self.release)
        return self.settings.downloads_dir / PurePosixPath(httpx.URL(url).path).name

    async def install(self, target: PlatformTarget) -> Path:
        """Make a verified JDK home available for *target* and return its path."""
        final_dir = self.jdk_dir(target)
        if self.cache.reuse_jdk(final_dir, target):
            log.info("jdk.cached", platform=target.key, path=str(final_dir))
            return final_dir

        archive = self.archive_path(target)
        await self.fetcher.fetch(target.archive_url(self.release), archive)

        temp_dir = final_dir.with_name(f"{final_dir.name}-temp")
        if temp_dir.exists():
            shutil.rmtree(temp_dir)
        try:
            try:
                extract_archive(archive, temp_dir, target.archive_format)
            except ExtractionError:
                # A corrupt download must not be reused on the next run.
                log.warning("jdk.archive_evicted", platform=target.key, archive=archive.name)
                archive.unlink(missing_ok=True)
                raise
            entries = sorted(p.name for p in temp_dir.iterdir())
            log.debug("jdk.extracted", platform=target.key, entries=entries)

            root = locate_runtime_root(temp_dir, target)
            if not (root / target.jlink_binary).is_file():
                raise ExtractionError(
                    f"jlink not found in extracted JDK (looking for {target.jlink_binary})"
                )
            log.info("jdk.verified", platform=target.key, root=root.name)

            shutil.move(str(root), str(final_dir))
        finally:
            if temp_dir.exists():
                shutil.rmtree(temp_dir, ignore_errors=True)

        log.info("jdk.ready", platform=target.key, path=str(final_dir))
        return final_dir

    def install_sync(self, target: PlatformTarget) -> Path:
        return asyncio.run(self.install(target))


def find_jdk_home(settings: Settings, target: PlatformTarget) -> Path:
    """Locate an installed JDK home for *target* that contains jlink.

    Accepts the canonical ``jdk-<V>-<platform>`` directory, legacy aliases
    (``linux-aarch64``), and a nested macOS ``Contents/Home`` layout.

    Raises:
        ToolNotFoundError: no installed JDK with jlink for this platform.
    """
    version = settings.jdk_version
    names = [target.key, *target.aliases]
    checked: list[Path] = []
    for name in names:
        base = settings.downloads_dir / f"jdk-{version}-{name}"
        for home in (base, base / "Contents" / "Home"):
            checked.append(home / target.jlink_binary)
            if (home / target.jlink_binary).is_file():
                return home

    available: list[str] = []
    if settings.downloads_dir.is_dir():
        available = sorted(p.name for p in settings.downloads_dir.iterdir() if p.is_dir())
    raise ToolNotFoundError(
        f"jlink not found for {target.display_name}; run 'jrekit download' first. "
        f"Checked: {', '.join(str(p) for p in checked)}. "
        f"Available JDK directories: {', '.join(available) or 'none'}"
    )
