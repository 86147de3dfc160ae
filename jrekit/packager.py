"""Portable package assembly: runtime + JARs + launcher + README, compressed."""

from __future__ import annotations

import shutil
import tarfile
import zipfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import structlog

from jrekit.config import Settings
from jrekit.exceptions import PackageError
from jrekit.fs import directory_size, format_size
from jrekit.modules.models import ArtifactDescriptor
from jrekit.platforms import PlatformTarget

log = structlog.get_logger("jrekit.packager")

JRE_SUBDIR = "jre"
README_NAME = "README.txt"


@dataclass
class PackageResult:
    platform: str
    package_dir: Path
    archive: Path
    package_size: int
    archive_size: int


def windows_launcher(main_jar: str) -> str:
    return (
        "@echo off\r\n"
        "setlocal\r\n"
        "\r\n"
        'set "APP_DIR=%~dp0"\r\n'
        f'set "JRE_DIR=%APP_DIR%{JRE_SUBDIR}"\r\n'
        'set "JAVA_EXE=%JRE_DIR%\\bin\\java.exe"\r\n'
        "\r\n"
        'if not exist "%JAVA_EXE%" (\r\n'
        "    echo ERROR: Java Runtime not found!\r\n"
        "    echo Expected location: %JAVA_EXE%\r\n"
        "    pause\r\n"
        "    exit /b 1\r\n"
        ")\r\n"
        "\r\n"
        f'set "JAR_FILE=%APP_DIR%{main_jar}"\r\n'
        '"%JAVA_EXE%" -jar "%JAR_FILE%" %*\r\n'
    )


def unix_launcher(main_jar: str) -> str:
    return (
        "#!/bin/bash\n"
        "\n"
        'APP_DIR="$(cd "$(dirname "$0")" && pwd)"\n'
        f'JRE_DIR="$APP_DIR/{JRE_SUBDIR}"\n'
        'JAVA_BIN="$JRE_DIR/bin/java"\n'
        f'JAR_FILE="$APP_DIR/{main_jar}"\n'
        "\n"
        'if [ ! -f "$JAVA_BIN" ]; then\n'
        '    echo "ERROR: Java Runtime not found!"\n'
        '    echo "Expected location: $JAVA_BIN"\n'
        "    exit 1\n"
        "fi\n"
        "\n"
        'exec "$JAVA_BIN" -jar "$JAR_FILE" "$@"\n'
    )


def render_readme(
    app_name: str,
    target: PlatformTarget,
    launcher: str,
    jar_names: Sequence[str],
) -> str:
    rule = "=" * 40
    run_cmd = launcher if target.is_windows else f"./{launcher}"
    java_path = f"{JRE_SUBDIR}/bin/java{target.executable_suffix}"
    lines = [
        rule,
        f"{app_name} Portable Edition ({target.display_name})",
        rule,
        "",
        "HOW TO RUN:",
    ]
    if target.is_windows:
        lines += [f"1. Double-click {launcher}", f"2. Or from a command prompt: {launcher} [args]"]
    else:
        lines += [f"1. Make executable: chmod +x {launcher}", f"2. Run: {run_cmd} [args]"]
    lines += [
        "",
        "FOLDER STRUCTURE:",
        f"- {launcher:<24}: Launcher script",
        f"- {JRE_SUBDIR + '/':<24}: Embedded Java Runtime",
    ]
    lines += [f"- {name:<24}: Application archive" for name in jar_names]
    lines += [
        "",
        "NOTES:",
        "- No installation or admin rights required",
        "- Everything the application needs is inside this folder",
        "",
        "TROUBLESHOOTING:",
        "- Check that all files were extracted",
        f"- Verify the runtime exists: {java_path}",
    ]
    if target.os == "macos":
        lines.append("- If Gatekeeper blocks the runtime: xattr -cr .")
    elif not target.is_windows:
        lines.append(f"- If permission is denied: chmod +x {launcher}")
    return "\n".join(lines) + "\n"


class PackageAssembler:
    """Assemble and compress one portable package per platform."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def package_name(self, target: PlatformTarget) -> str:
        s = self.settings
        return f"{s.app_name}-{s.app_version}-{target.os}-{target.arch}-portable"

    @staticmethod
    def check_preconditions(
        image_dir: Path, artifacts: Sequence[ArtifactDescriptor]
    ) -> list[str]:
        """Blocking problems that prevent assembly (empty list when ready)."""
        problems = []
        if not image_dir.is_dir():
            problems.append(f"Runtime image not found: {image_dir} (run 'jrekit build-jre' first)")
        if not artifacts:
            problems.append("No JAR files to package (add them to the jars/ directory)")
        return problems

    def assemble(
        self,
        target: PlatformTarget,
        image_dir: Path,
        artifacts: Sequence[ArtifactDescriptor],
    ) -> PackageResult:
        problems = self.check_preconditions(image_dir, artifacts)
        if problems:
            raise PackageError("; ".join(problems))

        name = self.package_name(target)
        pkg_dir = self.settings.releases_dir / name
        if pkg_dir.exists():
            shutil.rmtree(pkg_dir)
        pkg_dir.mkdir(parents=True)

        log.info("packager.copy_runtime", platform=target.key, source=str(image_dir))
        shutil.copytree(image_dir, pkg_dir / JRE_SUBDIR, symlinks=True)

        log.info("packager.copy_jars", platform=target.key, count=len(artifacts))
        for artifact in artifacts:
            shutil.copy2(artifact.path, pkg_dir / artifact.name)

        launcher = self._write_launcher(pkg_dir, target, artifacts[0].name)
        readme = render_readme(
            self.settings.app_name, target, launcher, [a.name for a in artifacts]
        )
        (pkg_dir / README_NAME).write_text(readme, encoding="utf-8")

        package_size = directory_size(pkg_dir)
        log.info("packager.assembled", platform=target.key, size=format_size(package_size))

        if target.is_windows:
            archive = create_zip(pkg_dir)
        else:
            archive = create_tar_gz(pkg_dir)
        archive_size = archive.stat().st_size
        log.info("packager.archived", archive=archive.name, size=format_size(archive_size))

        return PackageResult(target.key, pkg_dir, archive, package_size, archive_size)

    @staticmethod
    def _write_launcher(pkg_dir: Path, target: PlatformTarget, main_jar: str) -> str:
        if target.is_windows:
            path = pkg_dir / "launch.bat"
            path.write_bytes(windows_launcher(main_jar).encode("utf-8"))
        else:
            path = pkg_dir / "launch.sh"
            path.write_text(unix_launcher(main_jar), encoding="utf-8")
            path.chmod(0o755)
        return path.name


def create_zip(pkg_dir: Path) -> Path:
    archive = pkg_dir.with_name(f"{pkg_dir.name}.zip")
    with zipfile.ZipFile(archive, "w", zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
        for path in sorted(pkg_dir.rglob("*")):
            arcname = Path(pkg_dir.name) / path.relative_to(pkg_dir)
            zf.write(path, arcname.as_posix())
    return archive


def create_tar_gz(pkg_dir: Path) -> Path:
    archive = pkg_dir.with_name(f"{pkg_dir.name}.tar.gz")
    with tarfile.open(archive, "w:gz", compresslevel=9) as tf:
        tf.add(pkg_dir, arcname=pkg_dir.name)
    return archive
