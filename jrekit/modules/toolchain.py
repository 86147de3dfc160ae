"""Locate a JDK that ships the jdeps analysis tool."""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

from jrekit.config import Settings
from jrekit.platforms import host_platform

log = structlog.get_logger("jrekit.modules")

COMMON_JDK_PATHS: tuple[str, ...] = (
    r"C:\Program Files\Eclipse Adoptium\jdk-21.0.5.11-hotspot",
    r"C:\Program Files\Eclipse Adoptium\jdk-17.0.13.11-hotspot",
    r"C:\Program Files\Java\jdk-21",
    r"C:\Program Files\Java\jdk-17",
    "/usr/lib/jvm/java-21-openjdk-amd64",
    "/usr/lib/jvm/java-17-openjdk-amd64",
    "/Library/Java/JavaVirtualMachines/temurin-21.jdk/Contents/Home",
    "/Library/Java/JavaVirtualMachines/temurin-17.jdk/Contents/Home",
)


def host_tool(home: Path, tool: str) -> Path:
    """Path of *tool* inside a JDK home, using the host's executable suffix."""
    suffix = ".exe" if os.name == "nt" else ""
    return home / "bin" / f"{tool}{suffix}"


def locate_tool_home(
    settings: Settings,
    *,
    common_paths: Sequence[str] = COMMON_JDK_PATHS,
    which: Callable[[str], str | None] = shutil.which,
) -> Path | None:
    """Find a JDK home containing ``bin/jdeps``.

    Search order:
      1. JDK downloaded for the host platform (``jdk-<V>-<host>`` in the downloads dir)
      2. ``JAVA_HOME``
      3. well-known installation paths
      4. the ``javac`` on ``PATH``
    """
    candidates: list[tuple[str, Path]] = []

    host = host_platform()
    if host is not None:
        candidates.append(
            ("downloaded", settings.downloads_dir / host.jdk_dir_name(settings.jdk_version))
        )
    if settings.java_home is not None:
        candidates.append(("java_home", settings.java_home))
    candidates.extend(("common", Path(p)) for p in common_paths)

    for origin, home in candidates:
        if host_tool(home, "jdeps").is_file():
            log.info("toolchain.found", origin=origin, home=str(home))
            return home

    javac = which("javac")
    if javac:
        home = Path(javac).resolve().parent.parent
        if host_tool(home, "jdeps").is_file():
            log.info("toolchain.found", origin="path", home=str(home))
            return home

    log.warning("toolchain.not_found", tool="jdeps")
    return None
