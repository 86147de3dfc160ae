"""JAR module analysis: jdeps invocation, merging, and module list resolution."""

from jrekit.modules.analyzer import DependencyAnalyzer, InvocationStrategy
from jrekit.modules.discovery import discover_artifacts
from jrekit.modules.models import (
    DEFAULT_MODULES,
    AnalysisReport,
    AnalysisResult,
    ArtifactDescriptor,
)
from jrekit.modules.resolve import ModuleSelection, resolve_modules

__all__ = [
    "DEFAULT_MODULES",
    "AnalysisReport",
    "AnalysisResult",
    "ArtifactDescriptor",
    "DependencyAnalyzer",
    "InvocationStrategy",
    "ModuleSelection",
    "discover_artifacts",
    "resolve_modules",
]
