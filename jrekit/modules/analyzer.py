"""Dependency analysis: derive the runtime module set of JARs with jdeps."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import structlog

from jrekit.modules.models import (
    DEFAULT_MODULES,
    AnalysisReport,
    AnalysisResult,
    ArtifactDescriptor,
    canonical_modules,
    serialize_modules,
)
from jrekit.modules.toolchain import host_tool
from jrekit.process import CommandRunner, run_command

log = structlog.get_logger("jrekit.modules")

COMBINED_OUTPUT_NAME = "combined-modules.txt"
MODULE_FILE_SUFFIX = "-modules.txt"

# Output containing any of these is a diagnostic, not a module list.
_ERROR_MARKERS = ("Error", "not found")
_MODULE_NAME_RE = re.compile(r"[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*")


@dataclass(frozen=True)
class InvocationStrategy:
    """One way of asking jdeps for an artifact's module dependencies."""

    name: str
    flags: tuple[str, ...]

    def command(self, jdeps: Path, jar: Path) -> list[str]:
        return [str(jdeps), *self.flags, "--print-module-deps", str(jar)]


def default_strategies(multi_release: str) -> list[InvocationStrategy]:
    """Versioned invocation first (multi-release JARs), then a plain one."""
    return [
        InvocationStrategy("multi-release", ("--multi-release", multi_release)),
        InvocationStrategy("plain", ()),
    ]


def parse_module_output(output: str) -> frozenset[str] | None:
    """Parse ``--print-module-deps`` output; None when it is not a usable module list.

    Only the last non-empty line is considered: jdeps may print warnings
    on stdout ahead of the module list.
    """
    lines = [line.strip() for line in output.splitlines() if line.strip()]
    text = lines[-1] if lines else ""
    if not text or any(marker in text for marker in _ERROR_MARKERS):
        return None
    modules = frozenset(
        m
        for m in (token.strip() for token in text.split(","))
        if _MODULE_NAME_RE.fullmatch(m) and "Error" not in m
    )
    return modules or None


def module_list_filename(artifacts: Sequence[ArtifactDescriptor]) -> str:
    if len(artifacts) == 1:
        return f"{artifacts[0].stem}{MODULE_FILE_SUFFIX}"
    return COMBINED_OUTPUT_NAME


class DependencyAnalyzer:
    """Run jdeps over one or more JARs and merge the results.

    Each artifact is analyzed independently by trying *strategies* in order;
    the first invocation that exits 0 with a well-formed module list wins.
    Successful module sets are unioned; failures are recorded in the report
    and excluded from the union. With no tool, or no successful artifact,
    the default module set is used.
    """

    def __init__(
        self,
        tool_home: Path | None,
        strategies: Sequence[InvocationStrategy] | None = None,
        runner: CommandRunner = run_command,
        multi_release: str = "17",
    ) -> None:
        self.tool_home = tool_home
        self.strategies = list(strategies) if strategies is not None else default_strategies(
            multi_release
        )
        self._runner = runner

    @property
    def jdeps(self) -> Path | None:
        if self.tool_home is None:
            return None
        return host_tool(self.tool_home, "jdeps")

    def analyze_artifact(self, artifact: ArtifactDescriptor) -> AnalysisResult:
        jdeps = self.jdeps
        if jdeps is None:
            return AnalysisResult(artifact=artifact.name)

        for strategy in self.strategies:
            cmd = strategy.command(jdeps, artifact.path)
            try:
                proc = self._runner(cmd)
            except OSError as e:
                log.warning(
                    "analyzer.invoke_error",
                    artifact=artifact.name,
                    strategy=strategy.name,
                    error=str(e),
                )
                continue

            if proc.returncode != 0:
                log.debug(
                    "analyzer.strategy_failed",
                    artifact=artifact.name,
                    strategy=strategy.name,
                    returncode=proc.returncode,
                    stderr=(proc.stderr or "").strip()[:500],
                )
                continue

            modules = parse_module_output(proc.stdout or "")
            if modules is None:
                log.debug(
                    "analyzer.unusable_output",
                    artifact=artifact.name,
                    strategy=strategy.name,
                )
                continue

            log.info(
                "analyzer.artifact_done",
                artifact=artifact.name,
                strategy=strategy.name,
                modules=len(modules),
            )
            return AnalysisResult(artifact=artifact.name, modules=modules, success=True)

        log.warning("analyzer.artifact_failed", artifact=artifact.name)
        return AnalysisResult(artifact=artifact.name)

    def analyze(self, artifacts: Sequence[ArtifactDescriptor]) -> AnalysisReport:
        """Analyze every artifact and compute the combined module list (no file I/O)."""
        report = AnalysisReport(tool_home=self.tool_home)

        if self.tool_home is None:
            log.warning("analyzer.no_tool", fallback="default")
        else:
            for artifact in artifacts:
                report.results.append(self.analyze_artifact(artifact))

        combined: set[str] = set()
        for result in report.succeeded:
            combined.update(result.modules)

        if combined:
            report.modules = canonical_modules(combined)
            report.source = "jdeps"
        else:
            if self.tool_home is not None:
                log.warning("analyzer.all_failed", fallback="default")
            report.modules = DEFAULT_MODULES
            report.source = "default"
        return report

    def run(
        self,
        artifacts: Sequence[ArtifactDescriptor],
        output_dir: Path,
    ) -> AnalysisReport:
        """Analyze *artifacts* and persist the module list for the link stage."""
        report = self.analyze(artifacts)
        report.output_file = write_module_list(
            output_dir / module_list_filename(artifacts), report.modules
        )
        return report


def write_module_list(path: Path, modules: Sequence[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_modules(modules), encoding="utf-8")
    log.info("analyzer.saved", path=str(path), modules=len(modules))
    return path
