"""Run configuration, built once from the environment and passed explicitly."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from jrekit.platforms import DEFAULT_JDK_VERSION

_JDK_DIR_RE = re.compile(r"^jdk-(\d+)-")

DOWNLOADS_DIRNAME = "jdk-downloads"
BUILDS_DIRNAME = "jre-builds"
RELEASES_DIRNAME = "portable-releases"
JARS_DIRNAME = "jars"


@dataclass(frozen=True)
class Settings:
    """Process-level configuration.

    Environment variables:
        JDK_VERSION         JDK feature version (default: highest downloaded, else 21)
        MODULES             explicit comma-separated module list, overrides analysis
        JAVA_HOME           extra location searched for jdeps
        JREKIT_APP_NAME     package name prefix (default: app)
        JREKIT_APP_VERSION  package version (default: 1.0.0)
    """

    work_dir: Path
    jdk_version: str = DEFAULT_JDK_VERSION
    modules_override: str | None = None
    java_home: Path | None = None
    app_name: str = "app"
    app_version: str = "1.0.0"

    @property
    def downloads_dir(self) -> Path:
        return self.work_dir / DOWNLOADS_DIRNAME

    @property
    def builds_dir(self) -> Path:
        return self.work_dir / BUILDS_DIRNAME

    @property
    def releases_dir(self) -> Path:
        return self.work_dir / RELEASES_DIRNAME

    @property
    def jars_dir(self) -> Path:
        return self.work_dir / JARS_DIRNAME

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        work_dir: Path | None = None,
    ) -> Settings:
        env = os.environ if environ is None else environ
        root = (work_dir or Path.cwd()).resolve()

        version = env.get("JDK_VERSION") or detect_jdk_version(root / DOWNLOADS_DIRNAME)
        modules = env.get("MODULES")
        java_home = env.get("JAVA_HOME")

        return cls(
            work_dir=root,
            jdk_version=version or DEFAULT_JDK_VERSION,
            modules_override=modules if modules and modules.strip() else None,
            java_home=Path(java_home) if java_home else None,
            app_name=env.get("JREKIT_APP_NAME", "app"),
            app_version=env.get("JREKIT_APP_VERSION", "1.0.0"),
        )


def detect_jdk_version(downloads_dir: Path) -> str | None:
    """Highest JDK feature version among ``jdk-<N>-*`` directories, if any."""
    if not downloads_dir.is_dir():
        return None
    versions = set()
    for entry in downloads_dir.iterdir():
        if not entry.is_dir():
            continue
        m = _JDK_DIR_RE.match(entry.name)
        if m:
            versions.add(int(m.group(1)))
    if not versions:
        return None
    return str(max(versions))
