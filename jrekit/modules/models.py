"""Data models for JAR dependency analysis."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

# Baseline used when jdeps is unavailable or every artifact fails analysis.
DEFAULT_MODULES: tuple[str, ...] = (
    "java.base",
    "java.desktop",
    "java.xml",
    "java.logging",
    "java.naming",
    "java.sql",
    "java.management",
    "jdk.unsupported",
)

MODULE_SEPARATOR = ","

# Image size heuristic, in MB.
_BASE_SIZE_MB = 25
_GUI_BASE_SIZE_MB = 45
_CORE_MODULE_COUNT = 4
_PER_MODULE_MB = 2
_ESTIMATE_SPREAD_MB = 10


@dataclass(frozen=True)
class ArtifactDescriptor:
    """A JAR file found while scanning the input."""

    name: str  # file name, e.g. "app.jar"
    path: Path
    size: int  # bytes

    @classmethod
    def from_path(cls, path: Path) -> ArtifactDescriptor:
        return cls(name=path.name, path=path, size=path.stat().st_size)

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def size_mb(self) -> float:
        return self.size / 1024 / 1024


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of running jdeps against one artifact."""

    artifact: str
    modules: frozenset[str] = frozenset()
    success: bool = False


@dataclass
class AnalysisReport:
    """Run-level aggregate of all per-artifact results."""

    results: list[AnalysisResult] = field(default_factory=list)
    modules: tuple[str, ...] = ()  # final list, in persisted order
    source: str = "default"  # "jdeps" | "default"
    tool_home: Path | None = None
    output_file: Path | None = None

    @property
    def succeeded(self) -> list[AnalysisResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[AnalysisResult]:
        return [r for r in self.results if not r.success]

    @property
    def module_string(self) -> str:
        return MODULE_SEPARATOR.join(self.modules)

    def estimated_size_mb(self) -> tuple[int, int]:
        return estimate_image_size(self.modules)


def canonical_modules(modules: Iterable[str]) -> tuple[str, ...]:
    """Deduplicated, sorted module names."""
    return tuple(sorted(set(modules)))


def serialize_modules(modules: Iterable[str]) -> str:
    return MODULE_SEPARATOR.join(modules)


def parse_module_list(text: str) -> tuple[str, ...]:
    """Parse a comma-separated module list, dropping blanks and duplicates (order kept)."""
    seen: dict[str, None] = {}
    for token in text.split(MODULE_SEPARATOR):
        token = token.strip()
        if token:
            seen.setdefault(token, None)
    return tuple(seen)


def estimate_image_size(modules: Iterable[str]) -> tuple[int, int]:
    """Rough (low, high) runtime image size in MB for a module list."""
    module_list = list(modules)
    base = _GUI_BASE_SIZE_MB if "java.desktop" in module_list else _BASE_SIZE_MB
    estimate = base + (len(module_list) - _CORE_MODULE_COUNT) * _PER_MODULE_MB
    return estimate, estimate + _ESTIMATE_SPREAD_MB
