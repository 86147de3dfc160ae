"""jrekit: minimal per-platform Java runtimes and portable application bundles."""

__version__ = "0.1.0"

from jrekit.config import Settings
from jrekit.modules.analyzer import DependencyAnalyzer
from jrekit.modules.models import AnalysisReport, AnalysisResult, ArtifactDescriptor
from jrekit.modules.resolve import ModuleSelection, resolve_modules
from jrekit.platforms import PLATFORMS, PlatformTarget

__all__ = [
    "AnalysisReport",
    "AnalysisResult",
    "ArtifactDescriptor",
    "DependencyAnalyzer",
    "ModuleSelection",
    "PLATFORMS",
    "PlatformTarget",
    "Settings",
    "resolve_modules",
]
