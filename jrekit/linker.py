"""Runtime image linking with jlink."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

import structlog

from jrekit.cache import CachePolicy
from jrekit.exceptions import LinkError, ToolNotFoundError
from jrekit.fs import directory_size, format_size
from jrekit.modules.resolve import ModuleSelection
from jrekit.platforms import PlatformTarget
from jrekit.process import CommandRunner, run_command

log = structlog.get_logger("jrekit.linker")

JLINK_FLAGS: tuple[str, ...] = (
    "--strip-debug",
    "--compress=2",
    "--no-header-files",
    "--no-man-pages",
    "--strip-native-commands",
)

_JLINK_CANDIDATES: tuple[tuple[str, ...], ...] = (
    ("bin", "jlink"),
    ("bin", "jlink.exe"),
    ("Contents", "Home", "bin", "jlink"),
)


@dataclass
class LinkResult:
    platform: str
    image_dir: Path
    cached: bool
    size: int = 0


def find_jlink(jdk_home: Path) -> Path | None:
    for parts in _JLINK_CANDIDATES:
        candidate = jdk_home.joinpath(*parts)
        if candidate.is_file():
            return candidate
    return None


class RuntimeLinker:
    """Produce a minimal runtime image for one platform target.

    A destination that already holds a usable image (entry-point binary
    present) is kept as is; a destination without one is removed and
    rebuilt. An image missing its entry point after jlink exits 0 is
    reported as a failure.
    """

    def __init__(
        self,
        runner: CommandRunner = run_command,
        cache: CachePolicy | None = None,
    ) -> None:
        self._runner = runner
        self.cache = cache or CachePolicy()

    def build_command(self, jlink: Path, selection: ModuleSelection, dest: Path) -> list[str]:
        return [
            str(jlink),
            "--add-modules",
            selection.argument,
            "--output",
            str(dest),
            *JLINK_FLAGS,
        ]

    def link(
        self,
        jdk_home: Path,
        selection: ModuleSelection,
        dest: Path,
        target: PlatformTarget,
    ) -> LinkResult:
        if self.cache.reuse_image(dest, target):
            log.info("linker.cached", platform=target.key, path=str(dest))
            return LinkResult(target.key, dest, cached=True, size=directory_size(dest))

        jlink = find_jlink(jdk_home)
        if jlink is None:
            raise ToolNotFoundError(f"jlink not found in JDK at {jdk_home}")

        dest.parent.mkdir(parents=True, exist_ok=True)
        cmd = self.build_command(jlink, selection, dest)
        log.info(
            "linker.start",
            platform=target.key,
            modules=selection.argument,
            source=selection.describe(),
        )

        try:
            proc = self._runner(cmd)
        except OSError as e:
            raise LinkError(f"jlink could not be started for {target.display_name}: {e}") from e

        if proc.returncode != 0:
            if dest.exists():
                shutil.rmtree(dest, ignore_errors=True)
            stderr = (proc.stderr or "").strip()
            raise LinkError(f"jlink failed for {target.display_name} (exit {proc.returncode}): {stderr}")

        if not self.cache.image_is_valid(dest, target):
            raise LinkError(
                f"jlink reported success but {target.java_binary} is missing in {dest}"
            )

        size = directory_size(dest)
        log.info("linker.done", platform=target.key, size=format_size(size))
        return LinkResult(target.key, dest, cached=False, size=size)
