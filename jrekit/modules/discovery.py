"""Locate the JAR files to analyze and package."""

from __future__ import annotations

from pathlib import Path

import structlog

from jrekit.exceptions import NoArtifactsError
from jrekit.modules.models import ArtifactDescriptor

log = structlog.get_logger("jrekit.modules")

USAGE_HINT = (
    "Usage: jrekit analyze [jar-file|folder]\n"
    "       Place JAR files in ./jars/ or pass a path"
)


def _jars_in(directory: Path) -> list[Path]:
    return sorted(p for p in directory.glob("*.jar") if p.is_file())


def discover_artifacts(input_path: str | None, work_dir: Path) -> list[ArtifactDescriptor]:
    """Resolve *input_path* to a list of JAR artifacts.

    Search order when no input is given:
      1. ``<work_dir>/jars/*.jar``
      2. ``<work_dir>/*.jar``

    Raises:
        NoArtifactsError: nothing found, or the given path does not exist.
    """
    if input_path is None:
        jars_dir = work_dir / "jars"
        jars = _jars_in(jars_dir) if jars_dir.is_dir() else []
        if not jars:
            jars = _jars_in(work_dir)
        if not jars:
            raise NoArtifactsError(f"No JAR files found.\n{USAGE_HINT}")
        return [ArtifactDescriptor.from_path(j) for j in jars]

    path = Path(input_path)
    if not path.is_absolute():
        path = work_dir / path

    if path.is_file() and path.suffix == ".jar":
        return [ArtifactDescriptor.from_path(path)]

    if path.is_dir():
        jars = _jars_in(path)
        if not jars:
            raise NoArtifactsError(f"No JAR files found in directory: {input_path}\n{USAGE_HINT}")
        return [ArtifactDescriptor.from_path(j) for j in jars]

    raise NoArtifactsError(f"Path not found: {input_path}\n{USAGE_HINT}")


def find_package_artifacts(jars_dir: Path) -> list[ArtifactDescriptor]:
    """JARs to bundle into portable packages (empty list when the folder is missing)."""
    if not jars_dir.is_dir():
        return []
    return [ArtifactDescriptor.from_path(j) for j in _jars_in(jars_dir)]
