"""Archive extraction and JDK layout normalization."""

from __future__ import annotations

import os
import tarfile
import zipfile
from pathlib import Path, PurePosixPath

import structlog

from jrekit.exceptions import ExtractionError
from jrekit.platforms import PlatformTarget

log = structlog.get_logger("jrekit.extract")

_LARGE_ENTRY = 10 * 1024 * 1024
_JDK_DIR_PREFIX = "jdk-"


def _host_supports_links() -> bool:
    return os.name != "nt"


def _is_safe_member(name: str) -> bool:
    """Reject absolute names and names escaping the destination directory."""
    path = PurePosixPath(name.replace("\\", "/"))
    return not path.is_absolute() and ".." not in path.parts


def extract_archive(archive: Path, dest: Path, archive_format: str) -> None:
    """Unpack *archive* into *dest* (``zip`` or ``tar.gz``).

    Entries the host cannot represent (links on Windows) and entries that
    would land outside *dest* are skipped; per-entry I/O failures are logged
    and skipped rather than aborting the whole extraction.
    """
    dest.mkdir(parents=True, exist_ok=True)
    log.info("extract.start", archive=archive.name, format=archive_format)
    if archive_format == "zip":
        skipped = _extract_zip(archive, dest)
    elif archive_format == "tar.gz":
        skipped = _extract_tar(archive, dest)
    else:
        raise ExtractionError(f"Unsupported archive format: {archive_format}")
    log.info("extract.done", archive=archive.name, skipped=skipped)


def _extract_zip(archive: Path, dest: Path) -> int:
    skipped = 0
    try:
        with zipfile.ZipFile(archive) as zf:
            for info in zf.infolist():
                if not _is_safe_member(info.filename):
                    log.warning("extract.unsafe_entry", entry=info.filename)
                    skipped += 1
                    continue
                if info.file_size > _LARGE_ENTRY:
                    log.info("extract.large_entry", entry=info.filename)
                try:
                    target = Path(zf.extract(info, dest))
                except OSError as e:
                    log.warning("extract.entry_skipped", entry=info.filename, error=str(e))
                    skipped += 1
                    continue
                mode = (info.external_attr >> 16) & 0o777
                if mode and not info.is_dir():
                    target.chmod(mode)
    except zipfile.BadZipFile as e:
        raise ExtractionError(f"Invalid ZIP archive {archive.name}: {e}") from e
    return skipped


def _extract_tar(archive: Path, dest: Path) -> int:
    skipped = 0
    links_ok = _host_supports_links()
    try:
        with tarfile.open(archive, "r:gz") as tf:
            for member in tf:
                if (member.issym() or member.islnk()) and not links_ok:
                    skipped += 1
                    continue
                if not _is_safe_member(member.name):
                    log.warning("extract.unsafe_entry", entry=member.name)
                    skipped += 1
                    continue
                if member.size > _LARGE_ENTRY:
                    log.info("extract.large_entry", entry=member.name)
                try:
                    tf.extract(member, dest, filter="tar")
                except (OSError, tarfile.TarError) as e:
                    log.warning("extract.entry_skipped", entry=member.name, error=str(e))
                    skipped += 1
    except (tarfile.ReadError, EOFError) as e:
        raise ExtractionError(f"Invalid TAR.GZ archive {archive.name}: {e}") from e
    return skipped


def _describe_tree(extract_dir: Path) -> str:
    parts = []
    for entry in sorted(extract_dir.iterdir()):
        if entry.is_dir():
            children = sorted(c.name for c in entry.iterdir())[:5]
            parts.append(f"{entry.name}/ [{', '.join(children)}]")
        else:
            parts.append(entry.name)
    return ", ".join(parts) or "<empty>"


def locate_runtime_root(extract_dir: Path, target: PlatformTarget) -> Path:
    """Find the JDK home inside a freshly extracted archive.

    The archive's top-level ``jdk-*`` directory is the home, except on macOS
    where the home is nested under ``Contents/Home``.

    Raises:
        ExtractionError: no matching directory; the message lists what was found.
    """
    jdk_dirs = sorted(
        e for e in extract_dir.iterdir() if e.is_dir() and e.name.startswith(_JDK_DIR_PREFIX)
    )
    if not jdk_dirs:
        raise ExtractionError(
            f"JDK directory not found after extraction in {extract_dir.name}; "
            f"found: {_describe_tree(extract_dir)}"
        )

    root = jdk_dirs[0].joinpath(*target.nested_home)
    if not root.is_dir():
        raise ExtractionError(
            f"Expected {'/'.join(target.nested_home)} inside {jdk_dirs[0].name} "
            f"for {target.display_name}; found: {_describe_tree(jdk_dirs[0])}"
        )
    return root
