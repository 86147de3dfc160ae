"""Supported platform targets and JDK release metadata (Adoptium/Temurin)."""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass

from jrekit.exceptions import UnknownPlatformError, UnsupportedVersionError

_RELEASE_BASE = "https://github.com/adoptium/temurin{version}-binaries/releases/download"


@dataclass(frozen=True)
class JdkRelease:
    """A pinned Temurin release for one JDK feature version."""

    version: str  # "21"
    release: str  # URL-encoded release tag, e.g. "jdk-21.0.5%2B11"
    build: str  # "21.0.5_11"
    prefix: str  # "OpenJDK21U"

    @property
    def base_url(self) -> str:
        return f"{_RELEASE_BASE.format(version=self.version)}/{self.release}"


JDK_RELEASES: dict[str, JdkRelease] = {
    "11": JdkRelease("11", "jdk-11.0.25%2B9", "11.0.25_9", "OpenJDK11U"),
    "16": JdkRelease("16", "jdk-16.0.2%2B7", "16.0.2_7", "OpenJDK16U"),
    "17": JdkRelease("17", "jdk-17.0.13%2B11", "17.0.13_11", "OpenJDK17U"),
    "18": JdkRelease("18", "jdk-18.0.2.1%2B1", "18.0.2.1_1", "OpenJDK18U"),
    "19": JdkRelease("19", "jdk-19.0.2%2B7", "19.0.2_7", "OpenJDK19U"),
    "20": JdkRelease("20", "jdk-20.0.2%2B9", "20.0.2_9", "OpenJDK20U"),
    "21": JdkRelease("21", "jdk-21.0.5%2B11", "21.0.5_11", "OpenJDK21U"),
}

DEFAULT_JDK_VERSION = "21"


@dataclass(frozen=True)
class PlatformTarget:
    """One operating system / architecture pair the pipeline builds for."""

    key: str  # "linux-x64"
    display_name: str  # "Linux x64"
    os: str  # "windows" | "macos" | "linux"
    arch: str  # "x64" | "arm64"
    jre_name: str  # output directory under the builds dir
    aliases: tuple[str, ...] = ()  # legacy directory suffixes, e.g. "linux-aarch64"

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def archive_format(self) -> str:
        return "zip" if self.is_windows else "tar.gz"

    @property
    def nested_home(self) -> tuple[str, ...]:
        """Subpath below the extracted ``jdk-*`` directory holding the runtime root."""
        return ("Contents", "Home") if self.os == "macos" else ()

    @property
    def executable_suffix(self) -> str:
        return ".exe" if self.is_windows else ""

    @property
    def java_binary(self) -> str:
        """Entry-point binary of a runtime image, relative to its root."""
        return f"bin/java{self.executable_suffix}"

    @property
    def jlink_binary(self) -> str:
        return f"bin/jlink{self.executable_suffix}"

    def archive_url(self, release: JdkRelease) -> str:
        arch = "aarch64" if self.arch == "arm64" else "x64"
        os_name = "mac" if self.os == "macos" else self.os
        return (
            f"{release.base_url}/{release.prefix}-jdk_{arch}_{os_name}_hotspot_"
            f"{release.build}.{self.archive_format}"
        )

    def jdk_dir_name(self, version: str) -> str:
        return f"jdk-{version}-{self.key}"


_TARGETS = [
    PlatformTarget("windows-x64", "Windows x64", "windows", "x64", "jre-win-x64"),
    PlatformTarget("windows-arm64", "Windows ARM64", "windows", "arm64", "jre-win-arm64"),
    PlatformTarget("macos-x64", "macOS x64", "macos", "x64", "jre-mac-x64"),
    PlatformTarget(
        "macos-arm64", "macOS ARM64", "macos", "arm64", "jre-mac-arm64", ("macos-aarch64",)
    ),
    PlatformTarget("linux-x64", "Linux x64", "linux", "x64", "jre-linux-x64"),
    PlatformTarget(
        "linux-arm64", "Linux ARM64", "linux", "arm64", "jre-linux-arm64", ("linux-aarch64",)
    ),
]

PLATFORMS: dict[str, PlatformTarget] = {t.key: t for t in _TARGETS}


def get_release(version: str) -> JdkRelease:
    release = JDK_RELEASES.get(version)
    if release is None:
        raise UnsupportedVersionError(
            f"Unsupported JDK version: {version} "
            f"(supported: {', '.join(JDK_RELEASES)})"
        )
    return release


def get_platform(key: str) -> PlatformTarget:
    target = PLATFORMS.get(key)
    if target is None:
        raise UnknownPlatformError(key, list(PLATFORMS))
    return target


def select_platforms(key: str | None) -> list[PlatformTarget]:
    """One target for *key*, or every target in fixed order when *key* is None."""
    if key is None:
        return list(PLATFORMS.values())
    return [get_platform(key)]


def host_platform() -> PlatformTarget | None:
    """The target matching the machine we are running on, if any."""
    if sys.platform.startswith("win"):
        os_name = "windows"
    elif sys.platform == "darwin":
        os_name = "macos"
    elif sys.platform.startswith("linux"):
        os_name = "linux"
    else:
        return None
    machine = platform.machine().lower()
    arch = "arm64" if machine in ("arm64", "aarch64") else "x64"
    return PLATFORMS.get(f"{os_name}-{arch}")
