"""Batch execution of pipeline stages across platform targets.

Each platform is processed in turn; a failure on one platform is recorded
and the batch moves on to the next. The caller decides the exit status
from the returned results.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from jrekit.cache import CachePolicy
from jrekit.config import Settings
from jrekit.exceptions import JrekitError
from jrekit.fs import FileSystem, LocalFileSystem, format_size
from jrekit.jdk import JdkInstaller, find_jdk_home
from jrekit.linker import LinkResult, RuntimeLinker
from jrekit.modules.discovery import find_package_artifacts
from jrekit.modules.resolve import ModuleSelection, resolve_modules
from jrekit.packager import PackageAssembler, PackageResult
from jrekit.platforms import PlatformTarget
from jrekit.progress import ProgressTracker

log = structlog.get_logger("jrekit.pipeline")


@dataclass(frozen=True)
class Reused:
    """Stage result for a platform whose existing output was kept as is."""

    detail: str


Stage = Callable[[PlatformTarget], str | Reused]


@dataclass
class BatchOutcome:
    """Per-platform results of one batch, in processing order."""

    tracker: ProgressTracker
    results: dict[str, bool] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(self.results.values())

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


def run_batch(
    targets: Sequence[PlatformTarget],
    stage: Stage,
    tracker: ProgressTracker | None = None,
) -> BatchOutcome:
    """Run *stage* for every target; exceptions become a failed result.

    A stage returning :class:`Reused` is recorded as skipped, which still
    counts as success.
    """
    tracker = tracker or ProgressTracker()
    for target in targets:
        tracker.start(target.key)
        try:
            detail = stage(target)
        except JrekitError as e:
            log.error("pipeline.platform_failed", platform=target.key, error=str(e))
            tracker.fail(target.key, str(e))
        except Exception as e:
            log.exception("pipeline.platform_crashed", platform=target.key)
            tracker.fail(target.key, f"{type(e).__name__}: {e}")
        else:
            if isinstance(detail, Reused):
                tracker.skip(target.key, detail.detail)
            else:
                tracker.complete(target.key, detail)
    return BatchOutcome(tracker=tracker, results=tracker.results())


class BuildPipeline:
    """The download, build-jre and package stages bound to one ``Settings``.

    Unless one is given, the module selection is resolved once per pipeline
    on first use, so every platform in a batch links the same module list.
    """

    def __init__(
        self,
        settings: Settings,
        installer: JdkInstaller | None = None,
        linker: RuntimeLinker | None = None,
        assembler: PackageAssembler | None = None,
        fs: FileSystem | None = None,
        selection: ModuleSelection | None = None,
    ) -> None:
        self.settings = settings
        self.fs = fs or LocalFileSystem()
        self._cache = CachePolicy(self.fs)
        self._installer = installer
        self.linker = linker or RuntimeLinker(cache=self._cache)
        self.assembler = assembler or PackageAssembler(settings)
        self._selection = selection
        self.link_results: dict[str, LinkResult] = {}
        self.package_results: dict[str, PackageResult] = {}

    @property
    def installer(self) -> JdkInstaller:
        # Built lazily: an unsupported JDK version only matters to the download stage.
        if self._installer is None:
            self._installer = JdkInstaller(self.settings, cache=self._cache)
        return self._installer

    @property
    def selection(self) -> ModuleSelection:
        if self._selection is None:
            self._selection = resolve_modules(self.settings, self.fs)
        return self._selection

    def image_dir(self, target: PlatformTarget) -> Path:
        return self.settings.builds_dir / target.jre_name

    def download(self, target: PlatformTarget) -> str:
        home = self.installer.install_sync(target)
        return home.name

    def build_jre(self, target: PlatformTarget) -> str | Reused:
        jdk_home = find_jdk_home(self.settings, target)
        result = self.linker.link(jdk_home, self.selection, self.image_dir(target), target)
        self.link_results[target.key] = result
        if result.cached:
            return Reused(format_size(result.size))
        return format_size(result.size)

    def package(self, target: PlatformTarget) -> str:
        artifacts = find_package_artifacts(self.settings.jars_dir)
        result = self.assembler.assemble(target, self.image_dir(target), artifacts)
        self.package_results[target.key] = result
        return f"{result.archive.name} ({format_size(result.archive_size)})"

    def build(self, target: PlatformTarget) -> str:
        self.download(target)
        self.build_jre(target)
        return self.package(target)
